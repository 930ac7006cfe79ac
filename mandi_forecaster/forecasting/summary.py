"""
Headline statistics over a forecast sequence.

Used by reporting and by the summarizer context: where the forecast starts
and ends, how much it moves, how confident it is on average, and which
months look best and worst for selling.
"""

from __future__ import annotations

from typing import Optional, Sequence

from mandi_forecaster.models.forecast import Forecast
from mandi_forecaster.models.insight import ForecastSummary


def summarize_forecast(forecasts: Sequence[Forecast]) -> Optional[ForecastSummary]:
    """Summarize ``forecasts``; returns ``None`` for an empty sequence.

    Best and worst months keep the earliest forecast on ties.
    """
    if not forecasts:
        return None

    start = forecasts[0].predicted_price
    end = forecasts[-1].predicted_price
    change_pct = (end - start) / start * 100.0 if start > 0 else 0.0

    best = forecasts[0]
    worst = forecasts[0]
    for fc in forecasts[1:]:
        if fc.predicted_price > best.predicted_price:
            best = fc
        if fc.predicted_price < worst.predicted_price:
            worst = fc

    return ForecastSummary(
        start_price=start,
        end_price=end,
        price_change_pct=round(change_pct, 2),
        average_confidence=round(sum(f.confidence for f in forecasts) / len(forecasts), 4),
        best_month=best,
        worst_month=worst,
    )
