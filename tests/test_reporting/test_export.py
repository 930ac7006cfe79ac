"""Tests for mandi_forecaster.reporting.export."""

from __future__ import annotations

import csv
import json
from datetime import date

import pytest

from mandi_forecaster.forecasting.synthesizer import generate_forecast
from mandi_forecaster.reporting.export import (
    export_rows,
    export_to_csv,
    forecast_rows,
    models_to_rows,
)
from mandi_forecaster.seasonality.patterns import analyze_seasonal_patterns


def test_models_to_rows_iso_dates(flat_year) -> None:
    """Dates are dumped as ISO strings."""
    rows = models_to_rows(flat_year[:1])
    assert rows == [{"timestamp": "2024-01-01", "price": 100.0}]


def test_forecast_rows_include_band(flat_year) -> None:
    forecasts = generate_forecast(flat_year, 2, start_date=date(2025, 1, 1), noise_amplitude=0)
    rows = forecast_rows(forecasts)
    assert rows[1]["confidence_lower"] == pytest.approx(98.5)
    assert rows[1]["confidence_upper"] == pytest.approx(101.5)
    assert rows[0]["date"] == "2025-01-01"


def test_export_csv_roundtrip_header(tmp_path, rising_year) -> None:
    """CSV has one header row plus one line per pattern."""
    path = export_rows(models_to_rows(analyze_seasonal_patterns(rising_year)), tmp_path / "out" / "p.csv")
    with path.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 12
    assert rows[0]["month"] == "January"


def test_export_json(tmp_path, flat_year) -> None:
    path = export_rows(models_to_rows(flat_year), tmp_path / "points.json")
    assert len(json.loads(path.read_text(encoding="utf-8"))) == 12


def test_export_csv_empty(tmp_path) -> None:
    path = export_to_csv([], tmp_path / "empty.csv")
    assert path.read_text(encoding="utf-8") == ""


def test_export_unsupported_extension(tmp_path) -> None:
    with pytest.raises(ValueError, match="Unsupported export format"):
        export_rows([], tmp_path / "out.xlsx")
