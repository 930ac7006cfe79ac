"""
Dataset facade: queries and per-variety analysis over loaded market records.

``MarketDataset`` wraps an in-memory list of ``MarketRecord`` objects and
exposes the lookups a front end needs (states, districts, varieties) plus
one method per analytical output.  It holds no state besides the records
and the ``AppConfig``; instances are cheap and independent, so callers
create one per dataset instead of sharing a process-wide instance.

``analyze()`` runs every analysis for one variety and bundles the results in
a ``VarietyAnalysis``.  The summarizer is optional; when it is missing or
fails, the fallback insight is used and the rest of the analysis is
unaffected.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from mandi_forecaster.config import AppConfig
from mandi_forecaster.forecasting.summary import summarize_forecast
from mandi_forecaster.forecasting.synthesizer import generate_forecast
from mandi_forecaster.ingestion.records import to_price_points
from mandi_forecaster.insights.summarizer import Summarizer, summarize_with_fallback
from mandi_forecaster.models.forecast import Forecast, SeasonalityActionRow, SeasonalPattern
from mandi_forecaster.models.insight import ForecastSummary, SummaryResult
from mandi_forecaster.models.market import MarketRecord, RankedMarket, ReferenceLocation
from mandi_forecaster.models.price import PricePoint
from mandi_forecaster.recommendations.ranker import rank_markets
from mandi_forecaster.seasonality.actions import seasonality_action_table
from mandi_forecaster.seasonality.patterns import analyze_seasonal_patterns

logger = logging.getLogger(__name__)

_EXCLUDED_VARIETIES = frozenset({"", "Other"})


@dataclass
class VarietyAnalysis:
    """Every analytical output for one variety.

    Attributes:
        variety:          Variety analysed.
        forecasts:        Month-by-month forecast.
        forecast_summary: Headline forecast statistics (``None`` if no forecast).
        patterns:         Twelve seasonal patterns (empty without history).
        actions:          Twelve Sell / Store / Monitor rows.
        markets:          Top ranked markets.
        insight:          Summarizer output (fallback when unavailable).
    """

    variety:          str
    forecasts:        list[Forecast]
    forecast_summary: Optional[ForecastSummary]
    patterns:         list[SeasonalPattern]
    actions:          list[SeasonalityActionRow]
    markets:          list[RankedMarket]
    insight:          SummaryResult


class MarketDataset:
    """Read-only view over a list of market records."""

    def __init__(
        self,
        records: Sequence[MarketRecord],
        config: Optional[AppConfig] = None,
    ) -> None:
        self.records: list[MarketRecord] = list(records)
        self.config = config or AppConfig()

    def __len__(self) -> int:
        return len(self.records)

    # ── Lookups ──────────────────────────────────────────────────────────────

    def states(self) -> list[str]:
        """Distinct states, sorted."""
        return sorted({r.state for r in self.records})

    def districts(self, state: str) -> list[str]:
        """Distinct districts of ``state``, sorted."""
        return sorted({r.district for r in self.records if r.state == state})

    def varieties(self) -> list[str]:
        """Distinct varieties, sorted, excluding the catch-all ``Other``."""
        return sorted(
            {r.variety for r in self.records if r.variety.strip() not in _EXCLUDED_VARIETIES}
        )

    def filter(
        self,
        state: Optional[str] = None,
        district: Optional[str] = None,
        variety: Optional[str] = None,
    ) -> list[MarketRecord]:
        """Records matching every filter that is set."""
        return [
            r for r in self.records
            if (state is None or r.state == state)
            and (district is None or r.district == district)
            and (variety is None or r.variety == variety)
        ]

    def price_points(self, variety: str) -> list[PricePoint]:
        """Modal-price history of ``variety``."""
        return to_price_points(self.records, variety)

    # ── Analyses ─────────────────────────────────────────────────────────────

    def forecast(
        self,
        variety: str,
        horizon: Optional[int] = None,
        *,
        start_date: Optional[date] = None,
        rng: Optional[random.Random] = None,
        noise_amplitude: Optional[float] = None,
    ) -> list[Forecast]:
        """Forecast ``variety`` for ``horizon`` months (config default if ``None``)."""
        return generate_forecast(
            self.price_points(variety),
            horizon,
            start_date=start_date,
            rng=rng,
            noise_amplitude=noise_amplitude,
            config=self.config.forecast,
        )

    def seasonal_patterns(self, variety: str) -> list[SeasonalPattern]:
        """Monthly seasonal patterns of ``variety``."""
        return analyze_seasonal_patterns(self.price_points(variety), self.config.seasonal)

    def action_table(self, variety: str) -> list[SeasonalityActionRow]:
        """Sell / Store / Monitor table of ``variety``."""
        return seasonality_action_table(self.price_points(variety), self.config.seasonal)

    def best_markets(
        self,
        variety: str,
        reference: Optional[ReferenceLocation] = None,
        top_n: Optional[int] = None,
    ) -> list[RankedMarket]:
        """Top markets for selling ``variety`` from ``reference``."""
        return rank_markets(
            self.records,
            reference,
            top_n=top_n,
            variety=variety,
            config=self.config.ranking,
        )

    def analyze(
        self,
        variety: str,
        reference: Optional[ReferenceLocation] = None,
        *,
        summarizer: Optional[Summarizer] = None,
        horizon: Optional[int] = None,
        top_n: Optional[int] = None,
        start_date: Optional[date] = None,
        rng: Optional[random.Random] = None,
        noise_amplitude: Optional[float] = None,
    ) -> VarietyAnalysis:
        """Run every analysis for ``variety`` and bundle the results."""
        forecasts = self.forecast(
            variety,
            horizon,
            start_date=start_date,
            rng=rng,
            noise_amplitude=noise_amplitude,
        )
        patterns = self.seasonal_patterns(variety)
        markets = self.best_markets(variety, reference, top_n)
        insight = summarize_with_fallback(summarizer, variety, patterns, forecasts)

        logger.info(
            "Analysed '%s': %d forecast months, %d markets ranked",
            variety, len(forecasts), len(markets),
        )
        return VarietyAnalysis(
            variety=variety,
            forecasts=forecasts,
            forecast_summary=summarize_forecast(forecasts),
            patterns=patterns,
            actions=self.action_table(variety),
            markets=markets,
            insight=insight,
        )
