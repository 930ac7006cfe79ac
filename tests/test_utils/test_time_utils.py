"""
Tests for mandi_forecaster/utils/time_utils.py and utils/logging.py.

What we test
------------
  - sunday_weekday(): Sunday = 0 … Saturday = 6.
  - day_of_year() / week_of_year().
  - add_months(): year rollover, negative shifts, month-end clamping.
  - round_half_up(): halves go up, unlike round().
  - _JsonFormatter: one JSON object per record, extra fields included.
  - configure_logging(): level filter and JSON lines in the optional log file.
"""

from __future__ import annotations

import json
import logging
from datetime import date

import pytest

from mandi_forecaster.config import LoggingConfig
from mandi_forecaster.utils.logging import _JsonFormatter, configure_logging
from mandi_forecaster.utils.time_utils import (
    add_months,
    day_of_year,
    month_index,
    round_half_up,
    sunday_weekday,
    week_of_year,
)


class TestCalendarHelpers:
    def test_sunday_weekday(self):
        assert sunday_weekday(date(2024, 1, 7)) == 0   # Sunday
        assert sunday_weekday(date(2024, 1, 8)) == 1   # Monday
        assert sunday_weekday(date(2024, 1, 13)) == 6  # Saturday

    def test_month_index(self):
        assert month_index(date(2024, 1, 15)) == 0
        assert month_index(date(2024, 12, 15)) == 11

    def test_day_of_year(self):
        assert day_of_year(date(2024, 1, 1)) == 1
        assert day_of_year(date(2024, 12, 31)) == 366

    def test_week_of_year(self):
        assert week_of_year(date(2024, 1, 7)) == 0
        assert week_of_year(date(2024, 1, 8)) == 1
        assert week_of_year(date(2024, 12, 31)) == 52


class TestAddMonths:
    @pytest.mark.parametrize(
        "start, months, expected",
        [
            (date(2025, 1, 15), 0, date(2025, 1, 15)),
            (date(2025, 11, 15), 3, date(2026, 2, 15)),
            (date(2025, 3, 15), -4, date(2024, 11, 15)),
            (date(2025, 1, 31), 1, date(2025, 2, 28)),
            (date(2024, 1, 31), 1, date(2024, 2, 29)),
            (date(2025, 8, 31), 1, date(2025, 9, 30)),
        ],
    )
    def test_add_months(self, start, months, expected):
        assert add_months(start, months) == expected


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [(2.5, 3.0), (3.5, 4.0), (2.4999, 2.0), (-2.5, -2.0), (-2.6, -3.0), (0.0, 0.0)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestJsonFormatter:
    def test_emits_json_with_extras(self):
        record = logging.LogRecord(
            "mandi_forecaster.test", logging.INFO, __file__, 1, "loaded %d", (3,), None
        )
        record.variety = "Onion"
        payload = json.loads(_JsonFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "mandi_forecaster.test"
        assert payload["msg"] == "loaded 3"
        assert payload["variety"] == "Onion"


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_lines_written_to_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "forecaster.log"
        configure_logging(LoggingConfig(level="warning", log_file=str(log_file), json_format=True))
        logging.getLogger("mandi_forecaster.ingestion.records").warning(
            "Skipped %d unusable row(s)", 2, extra={"variety": "Onion"}
        )
        logging.getLogger("mandi_forecaster.analysis").info("not written")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        payload = json.loads(lines[0])
        assert payload["msg"] == "Skipped 2 unusable row(s)"
        assert payload["variety"] == "Onion"
