"""
File export of analysis outputs.

All functions write to disk and return the written ``Path``.  Rows are flat
dicts so the CSV opens directly in Excel or pandas; ``models_to_rows``
converts any sequence of pydantic models into such rows.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel

from mandi_forecaster.models.forecast import Forecast


def models_to_rows(models: Sequence[BaseModel]) -> list[dict]:
    """Dump pydantic models to JSON-compatible dicts (dates as ISO strings)."""
    return [m.model_dump(mode="json") for m in models]


def forecast_rows(forecasts: Sequence[Forecast]) -> list[dict]:
    """Forecast rows with the display confidence band appended."""
    return [
        {
            **fc.model_dump(mode="json"),
            "confidence_lower": round(fc.confidence_lower, 2),
            "confidence_upper": round(fc.confidence_upper, 2),
        }
        for fc in forecasts
    ]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file (parent dirs created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_rows(rows: list[dict], path: Path) -> Path:
    """Write ``rows`` as CSV or JSON depending on ``path``'s extension.

    Raises:
        ValueError: For an extension other than ``.csv`` or ``.json``.
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return export_to_csv(rows, path)
    if suffix == ".json":
        return export_to_json(rows, path)
    raise ValueError(f"Unsupported export format '{suffix}'. Use .csv or .json.")
