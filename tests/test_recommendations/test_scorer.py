"""
Tests for mandi_forecaster/recommendations/scorer.py.

What we test
------------
classify_distance_band():
  - same district → near; same state → mid; other state → far.
  - No reference → None; reference without district → mid in-state.

transport_cost():
  - price * 0.02 * {near 1, mid 2, far 4, unknown 3}.
  - Rounded to 2 decimal places.

compute_market_score():
  - Component values and rounded mean.
  - Score clamped to [0, 5] while raw_score keeps the unclamped value.
  - Arrival score capped at 5.
  - Near market never scores below an equal-priced far market.
"""

from __future__ import annotations

import pytest

from mandi_forecaster.config import RankingConfig
from mandi_forecaster.models.market import ReferenceLocation
from mandi_forecaster.recommendations.scorer import (
    classify_distance_band,
    compute_market_score,
    transport_cost,
)

PUNE = ReferenceLocation(state="Maharashtra", district="Pune")


class TestClassifyDistanceBand:
    def test_same_district_near(self):
        assert classify_distance_band("Maharashtra", "Pune", PUNE) == "near"

    def test_same_state_mid(self):
        assert classify_distance_band("Maharashtra", "Nashik", PUNE) == "mid"

    def test_other_state_far(self):
        assert classify_distance_band("Karnataka", "Bangalore", PUNE) == "far"

    def test_no_reference_unknown(self):
        assert classify_distance_band("Maharashtra", "Pune", None) is None

    def test_state_only_reference(self):
        ref = ReferenceLocation(state="Maharashtra")
        assert classify_distance_band("Maharashtra", "Pune", ref) == "mid"


class TestTransportCost:
    @pytest.mark.parametrize(
        "band, expected",
        [("near", 40.0), ("mid", 80.0), ("far", 160.0), (None, 120.0)],
    )
    def test_band_multipliers(self, band, expected):
        assert transport_cost(2000.0, band) == expected

    def test_rounded_to_cents(self):
        assert transport_cost(1234.567, "near") == 24.69

    def test_custom_config(self):
        cfg = RankingConfig(transport_base_pct=0.05)
        assert transport_cost(1000.0, "far", cfg) == 200.0


class TestComputeMarketScore:
    def test_components(self):
        s = compute_market_score(100.0, "near", 30.0)
        assert s.price_score == 1.0
        assert s.distance_score == 10.0
        assert s.arrival_score == 3.0
        # (1 + 10 + 3) / 3 = 4.67 → 5
        assert s.raw_score == 5.0
        assert s.score == 5.0

    @pytest.mark.parametrize(
        "band, expected",
        [("near", 4.0), ("mid", 3.0), ("far", 2.0), (None, 2.0)],
    )
    def test_distance_bands_low_price(self, band, expected):
        assert compute_market_score(100.0, band, 0.0).score == expected

    def test_high_price_clamped(self):
        s = compute_market_score(3000.0, "near", 100.0)
        # (30 + 10 + 5) / 3 = 15
        assert s.raw_score == 15.0
        assert s.score == 5.0

    def test_arrival_score_capped(self):
        assert compute_market_score(100.0, "near", 1000.0).arrival_score == 5.0

    def test_near_not_below_far_equal_price(self):
        near = compute_market_score(2000.0, "near", 20.0)
        far = compute_market_score(2000.0, "far", 20.0)
        assert near.score >= far.score
        assert near.raw_score > far.raw_score
