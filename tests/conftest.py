"""
Shared pytest fixtures for the Mandi Price Forecaster test suite.

Provides:
  - Price-history factories (``make_points``) and ready-made histories.
  - ``make_record``: a ``MarketRecord`` factory with sensible defaults.
  - ``sample_records``: a small multi-market, multi-variety dataset.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Sequence

import pytest

from mandi_forecaster.models.market import MarketRecord
from mandi_forecaster.models.price import PricePoint


# ── Price histories ───────────────────────────────────────────────────────────

def _points(values: Sequence[tuple[date, float]]) -> list[PricePoint]:
    return [PricePoint(timestamp=d, price=p) for d, p in values]


@pytest.fixture
def make_points() -> Callable[[Sequence[tuple[date, float]]], list[PricePoint]]:
    """Factory turning ``(date, price)`` pairs into ``PricePoint`` objects."""
    return _points


@pytest.fixture
def flat_year() -> list[PricePoint]:
    """One observation of 100 on the 1st of every month of 2024."""
    return _points([(date(2024, m, 1), 100.0) for m in range(1, 13)])


@pytest.fixture
def rising_year() -> list[PricePoint]:
    """Monthly prices rising 100, 110, … 210 through 2024."""
    return _points([(date(2024, m, 1), 100.0 + 10 * (m - 1)) for m in range(1, 13)])


# ── Market records ────────────────────────────────────────────────────────────

def _record(**overrides) -> MarketRecord:
    fields = {
        "state": "Maharashtra",
        "district": "Pune",
        "market": "Pune APMC",
        "variety": "Onion",
        "group": "Vegetables",
        "arrivals": 20.0,
        "min_price": 1800.0,
        "max_price": 2200.0,
        "modal_price": 2000.0,
        "date": date(2024, 6, 1),
    }
    fields.update(overrides)
    return MarketRecord(**fields)


@pytest.fixture
def make_record() -> Callable[..., MarketRecord]:
    """Factory for ``MarketRecord`` with keyword overrides."""
    return _record


@pytest.fixture
def sample_records() -> list[MarketRecord]:
    """Four Onion markets across two states plus one Tomato record."""
    return [
        _record(market="Pune APMC", modal_price=2000.0, date=date(2024, 6, 1)),
        _record(market="Pune APMC", modal_price=2200.0, date=date(2024, 6, 8)),
        _record(district="Nashik", market="Lasalgaon", modal_price=2500.0, arrivals=80.0),
        _record(state="Karnataka", district="Bangalore", market="Yeshwanthpur",
                modal_price=3000.0),
        _record(state="Gujarat", district="Rajkot", market="Gondal", modal_price=1500.0),
        _record(variety="Tomato", market="Pune APMC", modal_price=900.0),
    ]
