"""
Seam to the external market-insight summarizer.

The summarizer (an LLM service in production) is an opaque collaborator:
given a variety, its seasonal patterns and its forecast, it returns a
``SummaryResult``.  This module defines only the contract and the fallback
used when no collaborator is configured or the collaborator fails:

  - ``Summarizer``             abstract base every collaborator implements.
  - ``FallbackSummarizer``     deterministic canned insight built from the
                               seasonal highlights.
  - ``summarize_with_fallback`` calls a collaborator, logging and falling back
                               on any error so forecasts and rankings are
                               never blocked by it.
  - ``seasonal_highlights``    structured context a collaborator can embed in
                               its prompt: best / worst months and price range.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence

from mandi_forecaster.models.forecast import Forecast, SeasonalPattern
from mandi_forecaster.models.insight import SummaryResult

logger = logging.getLogger(__name__)


@dataclass
class SeasonalHighlights:
    """Best and worst selling months plus the monthly price range.

    Attributes:
        best_months:  Months bucketed ``excellent`` or ``good``, calendar order.
        worst_months: Months bucketed ``poor``, calendar order.
        price_min:    Lowest monthly average price, or ``None`` with no patterns.
        price_max:    Highest monthly average price, or ``None`` with no patterns.
    """

    best_months:  list[str] = field(default_factory=list)
    worst_months: list[str] = field(default_factory=list)
    price_min:    Optional[float] = None
    price_max:    Optional[float] = None


def seasonal_highlights(patterns: Sequence[SeasonalPattern]) -> SeasonalHighlights:
    """Extract best / worst months and the price range from ``patterns``."""
    if not patterns:
        return SeasonalHighlights()
    prices = [p.average_price for p in patterns]
    return SeasonalHighlights(
        best_months=[p.month for p in patterns if p.recommendation in ("excellent", "good")],
        worst_months=[p.month for p in patterns if p.recommendation == "poor"],
        price_min=min(prices),
        price_max=max(prices),
    )


class Summarizer(ABC):
    """Contract for a market-insight summarizer."""

    @abstractmethod
    def summarize(
        self,
        variety: str,
        patterns: Sequence[SeasonalPattern],
        forecasts: Sequence[Forecast],
    ) -> SummaryResult:
        """Return a structured insight for ``variety``."""


class FallbackSummarizer(Summarizer):
    """Deterministic summarizer used when no external collaborator is available."""

    def summarize(
        self,
        variety: str,
        patterns: Sequence[SeasonalPattern],
        forecasts: Sequence[Forecast],
    ) -> SummaryResult:
        highlights = seasonal_highlights(patterns)
        subject = variety or "This crop"

        if highlights.best_months:
            recommendation = (
                f"Focus sales on {', '.join(highlights.best_months)} when prices peak, "
                "and explore value addition to maximize returns."
            )
        else:
            recommendation = (
                "Focus on selling during peak price months and explore "
                "value-addition opportunities to maximize returns."
            )

        return SummaryResult(
            summary=(
                f"{subject} shows seasonal price variations with distinct patterns "
                "throughout the year. Strategic timing of sales can significantly "
                "impact farmer profits."
            ),
            key_points=[
                "Monitor monthly price trends for optimal selling timing",
                "Consider post-harvest storage during low-price periods",
                "Plan cultivation cycles based on seasonal demand",
                "Diversify marketing channels to reduce price risks",
            ],
            recommendation=recommendation,
            confidence=0.5,
            risk_factors=[
                "Weather-dependent price volatility",
                "Storage and transportation costs",
                "Market demand fluctuations",
            ],
            opportunities=[
                "Direct farmer-to-consumer sales",
                "Value-added product development",
                "Cooperative marketing initiatives",
            ],
        )


def summarize_with_fallback(
    summarizer: Optional[Summarizer],
    variety: str,
    patterns: Sequence[SeasonalPattern],
    forecasts: Sequence[Forecast],
) -> SummaryResult:
    """Ask ``summarizer`` for an insight, falling back on absence or failure.

    Any exception from the collaborator is logged and replaced by the
    ``FallbackSummarizer`` result.
    """
    fallback = FallbackSummarizer()
    if summarizer is None:
        return fallback.summarize(variety, patterns, forecasts)

    try:
        return summarizer.summarize(variety, patterns, forecasts)
    except Exception:
        logger.warning(
            "Summarizer %s failed for variety '%s'; using fallback insight.",
            type(summarizer).__name__, variety, exc_info=True,
        )
        return fallback.summarize(variety, patterns, forecasts)
