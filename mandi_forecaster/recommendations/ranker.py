"""
Market ranker: aggregates raw records per market and ranks them for a seller.

Usage flow
----------
1. aggregate_markets(records)
   -> list[MarketAggregate]  (one per (state, district, market), first-seen order)

2. score_markets(aggregates, reference)
   -> list[RankedMarket]     (band, transport cost, net price, score)

3. rank_markets(records, reference, top_n=5)
   -> list[RankedMarket]     (1 + 2, sorted, truncated)

Ordering
--------
When a reference location is supplied, markets in the reference state come
before all others.  Within each partition markets are ordered by descending
average modal price.  Python's sort is stable, so equal keys keep the order in
which their market first appeared in the input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from mandi_forecaster.config import RankingConfig
from mandi_forecaster.models.market import MarketRecord, RankedMarket, ReferenceLocation
from mandi_forecaster.recommendations.scorer import (
    classify_distance_band,
    compute_market_score,
    transport_cost,
)

logger = logging.getLogger(__name__)


@dataclass
class MarketAggregate:
    """All records of one market plus their averages.

    Attributes:
        latest:           Most recent record (ties keep the first seen).
        average_price:    Mean modal price across ``records``.
        average_arrivals: Mean arrivals across ``records``.
        records:          Every record of the market, input order.
    """

    latest:           MarketRecord
    average_price:    float
    average_arrivals: float
    records:          list[MarketRecord] = field(default_factory=list)


def aggregate_markets(records: Sequence[MarketRecord]) -> list[MarketAggregate]:
    """Group ``records`` by ``(state, district, market)`` and average each group."""
    groups: dict[tuple[str, str, str], list[MarketRecord]] = {}
    for rec in records:
        groups.setdefault(rec.market_key, []).append(rec)

    aggregates: list[MarketAggregate] = []
    for group in groups.values():
        latest = group[0]
        for rec in group[1:]:
            if rec.date > latest.date:
                latest = rec
        aggregates.append(
            MarketAggregate(
                latest=latest,
                average_price=sum(r.modal_price for r in group) / len(group),
                average_arrivals=sum(r.arrivals for r in group) / len(group),
                records=group,
            )
        )
    return aggregates


def score_markets(
    aggregates: Sequence[MarketAggregate],
    reference: Optional[ReferenceLocation] = None,
    config: Optional[RankingConfig] = None,
) -> list[RankedMarket]:
    """Attach distance band, transport cost and score to each aggregate."""
    ranked: list[RankedMarket] = []
    for agg in aggregates:
        latest = agg.latest
        band = classify_distance_band(latest.state, latest.district, reference)
        cost = transport_cost(agg.average_price, band, config)
        components = compute_market_score(
            agg.average_price, band, agg.average_arrivals, config
        )
        ranked.append(
            RankedMarket(
                state=latest.state,
                district=latest.district,
                market=latest.market,
                variety=latest.variety,
                date=latest.date,
                average_modal_price=round(agg.average_price, 2),
                average_arrivals=round(agg.average_arrivals, 2),
                distance_band=band,
                transport_cost=cost,
                net_price=round(agg.average_price - cost, 2),
                score=components.score,
                raw_score=components.raw_score,
                record_count=len(agg.records),
            )
        )
    return ranked


def rank_markets(
    records: Sequence[MarketRecord],
    reference: Optional[ReferenceLocation] = None,
    top_n: Optional[int] = None,
    variety: Optional[str] = None,
    config: Optional[RankingConfig] = None,
) -> list[RankedMarket]:
    """Rank markets for a seller and return the top ``top_n``.

    Args:
        records:   Cleaned market records.
        reference: Seller's location; ``None`` leaves every band unknown.
        top_n:     Number of markets to return; defaults to ``config.top_n``.
                   ``0`` or less returns an empty list.
        variety:   Optional filter — only records of this variety are used.
        config:    Ranking weights; defaults to ``RankingConfig()``.

    Returns:
        Up to ``top_n`` ranked markets, best first.
    """
    cfg = config or RankingConfig()
    limit = cfg.top_n if top_n is None else top_n
    if limit <= 0:
        return []

    if variety is not None:
        records = [r for r in records if r.variety == variety]

    scored = score_markets(aggregate_markets(records), reference, cfg)
    ordered = sorted(scored, key=lambda m: _sort_key(m, reference))

    logger.debug(
        "Ranked %d markets from %d records (reference=%s)",
        len(ordered), len(records), reference,
    )
    return ordered[:limit]


def _sort_key(
    market: RankedMarket,
    reference: Optional[ReferenceLocation],
) -> tuple[int, float]:
    in_home_state = reference is not None and market.state == reference.state
    return (0 if in_home_state else 1, -market.average_modal_price)
