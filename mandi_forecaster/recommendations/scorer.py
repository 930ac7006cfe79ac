"""
Market scoring: distance band, transport cost, and recommendation score.

Distance band (administrative adjacency, no coordinates)
--------------------------------------------------------
    same state, same district   → "near"
    same state, other district  → "mid"
    other state                 → "far"
    no reference location       → None  (unknown)

Transport cost
--------------
    base = price * 0.02
    cost = base * {near: 1, mid: 2, far: 4, unknown: 3}

Score formula
-------------
    price_score    = average_price / 100
    distance_score = {near: 10, mid: 7, far: 4, unknown: 4}
    arrival_score  = min(average_arrivals / 10, 5)

    raw_score = round((price_score + distance_score + arrival_score) / 3)
    score     = clamp(raw_score, 0, 5)

All weights come from ``RankingConfig``; the values above are its defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mandi_forecaster.config import RankingConfig
from mandi_forecaster.models.market import DistanceBand, ReferenceLocation
from mandi_forecaster.utils.time_utils import round_half_up


@dataclass
class ScoreComponents:
    """Breakdown of a market's recommendation score.

    Attributes:
        price_score:    ``average_price / 100``.
        distance_score: Fixed constant for the distance band.
        arrival_score:  Market activity, capped at ``max_arrival_score``.
        raw_score:      Rounded mean of the three components (unclamped).
        score:          ``raw_score`` clamped to ``[0, max_score]``.
    """

    price_score:    float
    distance_score: float
    arrival_score:  float
    raw_score:      float
    score:          float


def classify_distance_band(
    state: str,
    district: str,
    reference: Optional[ReferenceLocation],
) -> Optional[DistanceBand]:
    """Return the distance band of a market relative to ``reference``."""
    if reference is None:
        return None
    if state == reference.state:
        if reference.district is not None and district == reference.district:
            return "near"
        return "mid"
    return "far"


def transport_cost(
    price: float,
    band: Optional[DistanceBand],
    config: Optional[RankingConfig] = None,
) -> float:
    """Estimated transport cost per quintal for a market in ``band``."""
    cfg = config or RankingConfig()
    base = price * cfg.transport_base_pct
    multiplier = (
        cfg.band_multipliers[band] if band is not None else cfg.unknown_band_multiplier
    )
    return round(base * multiplier, 2)


def compute_market_score(
    average_price: float,
    band: Optional[DistanceBand],
    average_arrivals: float,
    config: Optional[RankingConfig] = None,
) -> ScoreComponents:
    """Compute all score components for one aggregated market."""
    cfg = config or RankingConfig()

    price_score = average_price / 100.0
    distance_score = cfg.band_scores[band] if band is not None else cfg.unknown_band_score
    arrival_score = min(average_arrivals / 10.0, cfg.max_arrival_score)

    raw = round_half_up((price_score + distance_score + arrival_score) / 3.0)

    return ScoreComponents(
        price_score=round(price_score, 4),
        distance_score=distance_score,
        arrival_score=round(arrival_score, 4),
        raw_score=raw,
        score=_clamp(raw, 0.0, cfg.max_score),
    )


# ── Helper ────────────────────────────────────────────────────────────────────

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
