"""
Market record models — cleaned ingestion records and ranked market output.

``MarketRecord`` is one day's quote for a variety at one market (mandi), as
delivered by the ingestion layer.  ``RankedMarket`` is the per-market summary
produced by ``recommendations.ranker.rank_markets()``: the most recent record's
identity fields plus averages, distance band, transport cost and score.

Both models are frozen.  A ranking is recomputed per request and owned by the
caller.
"""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DistanceBand = Literal["near", "mid", "far"]
VALID_DISTANCE_BANDS: frozenset[str] = frozenset({"near", "mid", "far"})

# Upper bound of the recommendation score scale; RankingConfig.max_score may not exceed it.
MAX_MARKET_SCORE = 5.0


class MarketRecord(BaseModel):
    """A single cleaned market quote.

    Attributes:
        state: State name, e.g. ``"Maharashtra"``.
        district: District name within ``state``.
        market: Market (mandi) name within ``district``.
        variety: Commodity variety, e.g. ``"Onion"``.
        group: Commodity group (``"Vegetables"``, ``"Pulses"`` …); may be empty.
        arrivals: Arrivals in tonnes; non-negative.
        min_price: Minimum quoted price per quintal.
        max_price: Maximum quoted price per quintal.
        modal_price: Most frequently quoted price per quintal; strictly positive.
        date: Reported date.
    """

    model_config = ConfigDict(frozen=True)

    state: str
    district: str
    market: str
    variety: str
    group: str = ""
    arrivals: float = 0.0
    min_price: float = 0.0
    max_price: float = 0.0
    modal_price: float
    date: date

    @field_validator("state", "district", "market", "variety")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Location and variety fields must not be empty.")
        return v.strip()

    @field_validator("arrivals", "min_price", "max_price")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Arrivals and price bounds must be non-negative.")
        return v

    @field_validator("modal_price")
    @classmethod
    def validate_modal_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"modal_price must be positive, got {v}.")
        return v

    @property
    def market_key(self) -> tuple[str, str, str]:
        """Grouping key used by the ranker."""
        return (self.state, self.district, self.market)


class ReferenceLocation(BaseModel):
    """The seller's administrative location used for distance banding.

    Attributes:
        state: Seller's state.
        district: Seller's district, or ``None`` if only the state is known.
    """

    model_config = ConfigDict(frozen=True)

    state: str
    district: Optional[str] = None


class RankedMarket(BaseModel):
    """A market aggregated over all its records and scored for a seller.

    Attributes:
        state, district, market, variety, date: Taken from the market's most
            recent record.
        average_modal_price: Mean modal price across all the market's records.
        average_arrivals: Mean arrivals across all the market's records.
        distance_band: ``"near"``, ``"mid"``, ``"far"``, or ``None`` when no
            reference location was supplied.
        transport_cost: Estimated transport cost per quintal.
        net_price: ``average_modal_price - transport_cost``.
        score: Recommendation score, clamped to ``[0, RankingConfig.max_score]``.
        raw_score: Score before clamping.
        record_count: Number of records aggregated into this market.
    """

    model_config = ConfigDict(frozen=True)

    state: str
    district: str
    market: str
    variety: str
    date: date
    average_modal_price: float
    average_arrivals: float
    distance_band: Optional[DistanceBand] = None
    transport_cost: float
    net_price: float
    score: float
    raw_score: float
    record_count: int = 1

    @model_validator(mode="after")
    def validate_ranking_fields(self) -> "RankedMarket":
        if not 0.0 <= self.score <= MAX_MARKET_SCORE:
            raise ValueError(
                f"score must be in [0, {MAX_MARKET_SCORE:g}], got {self.score}."
            )
        if self.transport_cost < 0:
            raise ValueError("transport_cost must be non-negative.")
        if self.record_count < 1:
            raise ValueError("record_count must be >= 1.")
        return self
