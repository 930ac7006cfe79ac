"""
Tests for mandi_forecaster/recommendations/ranker.py.

What we test
------------
aggregate_markets():
  - One aggregate per (state, district, market), first-seen order.
  - Averages of modal price and arrivals; latest record by date.
  - Equal dates keep the first record as latest.

rank_markets():
  - Reference state markets first, then by descending average price.
  - Without a reference, pure price order and unknown band.
  - Near market ranks above an equal-priced far market.
  - Transport cost, net price and score per market.
  - top_n truncation; top_n <= 0 → [].
  - Custom score ceiling and zero transport weights rank without errors.
  - Variety filter; equal prices keep input order.
"""

from __future__ import annotations

from datetime import date

from mandi_forecaster.config import RankingConfig
from mandi_forecaster.models.market import ReferenceLocation
from mandi_forecaster.recommendations.ranker import aggregate_markets, rank_markets

PUNE = ReferenceLocation(state="Maharashtra", district="Pune")


class TestAggregateMarkets:
    def test_groups_by_market(self, sample_records):
        onion = [r for r in sample_records if r.variety == "Onion"]
        aggregates = aggregate_markets(onion)
        assert [a.latest.market for a in aggregates] == [
            "Pune APMC", "Lasalgaon", "Yeshwanthpur", "Gondal",
        ]

    def test_averages_and_latest(self, sample_records):
        onion = [r for r in sample_records if r.variety == "Onion"]
        pune = aggregate_markets(onion)[0]
        assert pune.average_price == 2100.0
        assert pune.average_arrivals == 20.0
        assert pune.latest.date == date(2024, 6, 8)
        assert len(pune.records) == 2

    def test_equal_dates_keep_first(self, make_record):
        records = [
            make_record(modal_price=100.0, min_price=1.0),
            make_record(modal_price=300.0, min_price=2.0),
        ]
        assert aggregate_markets(records)[0].latest.min_price == 1.0


class TestRankMarkets:
    def test_home_state_first_then_price(self, sample_records):
        ranked = rank_markets(sample_records, PUNE, top_n=10, variety="Onion")
        assert [m.market for m in ranked] == [
            "Lasalgaon", "Pune APMC", "Yeshwanthpur", "Gondal",
        ]
        assert [m.distance_band for m in ranked] == ["mid", "near", "far", "far"]

    def test_no_reference_price_order(self, sample_records):
        ranked = rank_markets(sample_records, top_n=10, variety="Onion")
        assert [m.market for m in ranked] == [
            "Yeshwanthpur", "Lasalgaon", "Pune APMC", "Gondal",
        ]
        assert all(m.distance_band is None for m in ranked)
        assert ranked[0].transport_cost == 180.0

    def test_market_fields(self, sample_records):
        ranked = rank_markets(sample_records, PUNE, top_n=10, variety="Onion")
        pune = next(m for m in ranked if m.market == "Pune APMC")
        assert pune.average_modal_price == 2100.0
        assert pune.transport_cost == 42.0
        assert pune.net_price == 2058.0
        assert pune.record_count == 2
        assert pune.date == date(2024, 6, 8)
        assert 0.0 <= pune.score <= 5.0

    def test_near_above_far_equal_price(self, make_record):
        records = [
            make_record(state="Karnataka", district="Mysore", market="Far Mandi"),
            make_record(market="Near Mandi"),
        ]
        ranked = rank_markets(records, PUNE)
        assert [m.market for m in ranked] == ["Near Mandi", "Far Mandi"]
        near, far = ranked
        assert near.transport_cost == 40.0
        assert far.transport_cost == 160.0
        assert near.score >= far.score

    def test_top_n_truncates(self, sample_records):
        assert len(rank_markets(sample_records, PUNE, top_n=2, variety="Onion")) == 2

    def test_top_n_defaults_to_config(self, sample_records):
        cfg = RankingConfig(top_n=3)
        assert len(rank_markets(sample_records, PUNE, variety="Onion", config=cfg)) == 3

    def test_custom_score_ceiling_and_free_transport(self, sample_records):
        cfg = RankingConfig(
            max_score=3.0,
            transport_base_pct=0.0,
            band_multipliers={"near": 0.0, "mid": 0.0, "far": 0.0},
            unknown_band_multiplier=0.0,
        )
        ranked = rank_markets(sample_records, PUNE, top_n=10, variety="Onion", config=cfg)
        assert len(ranked) == 4
        assert all(m.score == 3.0 for m in ranked)
        assert all(m.transport_cost == 0.0 for m in ranked)
        assert all(m.net_price == m.average_modal_price for m in ranked)

    def test_non_positive_top_n(self, sample_records):
        assert rank_markets(sample_records, PUNE, top_n=0) == []
        assert rank_markets(sample_records, PUNE, top_n=-1) == []

    def test_variety_filter(self, sample_records):
        ranked = rank_markets(sample_records, PUNE, variety="Tomato")
        assert len(ranked) == 1
        assert ranked[0].variety == "Tomato"
        assert ranked[0].average_modal_price == 900.0

    def test_empty_records(self):
        assert rank_markets([], PUNE) == []

    def test_equal_prices_keep_input_order(self, make_record):
        records = [
            make_record(state="Goa", district="North Goa", market="Mapusa"),
            make_record(state="Goa", district="South Goa", market="Margao"),
            make_record(state="Kerala", district="Kochi", market="Ernakulam"),
        ]
        ranked = rank_markets(records)
        assert [m.market for m in ranked] == ["Mapusa", "Margao", "Ernakulam"]
