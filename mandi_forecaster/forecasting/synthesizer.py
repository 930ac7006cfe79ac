"""
Forecast synthesis: trend + seasonal + weekly + bounded noise.

How a forecast month is built
-----------------------------
For step ``i`` in ``0 .. horizon-1`` (``i = 0`` is the start month itself):

1.  Target date = ``start_date`` shifted by ``i`` calendar months.
2.  Trend    = fitted trend continued ``i`` steps past the last observation
    (``extrapolate_trend``).
3.  Seasonal = monthly profile slot ``floor((day_of_year - 1) / 30.44)``,
    clamped to ``[0, 11]``.  30.44 is the mean month length, so this is a
    coarse day-of-year → month mapping that can disagree with the calendar
    month near month boundaries.
4.  Weekly   = weekly profile slot ``week_of_year % 7``.  This indexes the
    day-of-week profile by week number, not by the target's weekday.
5.  Noise    = uniform in ``[-noise_amplitude, +noise_amplitude]`` drawn from
    the injected ``random.Random``.  Pass ``noise_amplitude=0`` (or pin the
    seed) for deterministic output.

``predicted = max(0, trend + seasonal + weekly + noise)``; the price and the
three components are rounded half-up to whole currency units.

Confidence depends on the horizon index only::

    confidence(i) = max(floor, 1 - decay * i)      # 1.0, 0.97, 0.94 … 0.5

Direction compares the unrounded predicted price with the previous
forecast's price (the last observed price for ``i = 0``): above
``prev * (1 + band)`` is ``"up"``, below ``prev * (1 - band)`` is ``"down"``,
anything else ``"stable"``.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import date
from typing import Optional, Sequence

from mandi_forecaster.config import ForecastConfig
from mandi_forecaster.decomposition.seasonal import (
    extract_seasonality,
    extract_weekly_pattern,
)
from mandi_forecaster.decomposition.trend import (
    extract_trend,
    extrapolate_trend,
    sort_points,
)
from mandi_forecaster.models.forecast import Forecast, TrendDirection
from mandi_forecaster.models.price import PricePoint
from mandi_forecaster.utils.time_utils import (
    add_months,
    day_of_year,
    round_half_up,
    week_of_year,
)

logger = logging.getLogger(__name__)

AVERAGE_DAYS_PER_MONTH = 30.44


def forecast_confidence(
    step: int,
    decay: float = 0.03,
    floor: float = 0.5,
) -> float:
    """Return the confidence for horizon index ``step``.

    ``max(floor, 1 - decay * step)`` — governed by horizon distance alone,
    never by fit quality.
    """
    return max(floor, 1.0 - decay * step)


def classify_direction(
    predicted: float,
    previous: float,
    band: float = 0.05,
) -> TrendDirection:
    """Classify movement from ``previous`` to ``predicted`` with a ±``band`` dead zone."""
    if predicted > previous * (1.0 + band):
        return "up"
    if predicted < previous * (1.0 - band):
        return "down"
    return "stable"


def seasonal_slot(target: date) -> int:
    """Approximate 0-based month slot from the day of year."""
    month = math.floor((day_of_year(target) - 1) / AVERAGE_DAYS_PER_MONTH)
    return min(11, max(0, month))


def weekly_slot(target: date) -> int:
    """Weekly profile slot for ``target`` (week number modulo 7)."""
    return week_of_year(target) % 7


def generate_forecast(
    points: Sequence[PricePoint],
    horizon: Optional[int] = None,
    *,
    start_date: Optional[date] = None,
    rng: Optional[random.Random] = None,
    noise_amplitude: Optional[float] = None,
    config: Optional[ForecastConfig] = None,
) -> list[Forecast]:
    """Synthesize a month-by-month price forecast from a price history.

    Args:
        points:          Historical observations (any order).
        horizon:         Number of forecast months; defaults to
                         ``config.horizon_months``.
        start_date:      Date of the first forecast month; defaults to today.
        rng:             Random source for the noise term.  Defaults to a new
                         ``random.Random(config.seed)``.
        noise_amplitude: Half-width of the uniform noise; defaults to
                         ``config.noise_amplitude``.  ``0`` disables noise.
        config:          Forecast parameters; defaults to ``ForecastConfig()``.

    Returns:
        ``horizon`` forecasts in ascending date order.  Empty when the history
        is empty or ``horizon <= 0``.
    """
    cfg = config or ForecastConfig()
    months = cfg.horizon_months if horizon is None else horizon
    amplitude = cfg.noise_amplitude if noise_amplitude is None else noise_amplitude

    if not points or months <= 0:
        return []

    ordered = sort_points(points)
    trend = extract_trend(ordered)
    seasonal = extract_seasonality(ordered)
    weekly = extract_weekly_pattern(ordered)

    source = rng if rng is not None else random.Random(cfg.seed)
    origin = start_date or date.today()

    forecasts: list[Forecast] = []
    previous_price = ordered[-1].price

    for i in range(months):
        target = add_months(origin, i)

        trend_value = extrapolate_trend(trend, i)
        seasonal_value = seasonal[seasonal_slot(target)]
        weekly_value = weekly[weekly_slot(target)]
        noise = source.uniform(-amplitude, amplitude) if amplitude > 0 else 0.0

        predicted = max(0.0, trend_value + seasonal_value + weekly_value + noise)
        direction = classify_direction(predicted, previous_price, cfg.direction_band)

        forecast = Forecast(
            date=target,
            predicted_price=round_half_up(predicted),
            confidence=forecast_confidence(i, cfg.confidence_decay, cfg.confidence_floor),
            direction=direction,
            trend_component=round_half_up(trend_value),
            seasonal_component=round_half_up(seasonal_value),
            weekly_component=round_half_up(weekly_value),
        )
        forecasts.append(forecast)
        previous_price = forecast.predicted_price

    logger.debug(
        "Generated %d forecast months from %d observations (start %s)",
        len(forecasts), len(ordered), origin,
    )
    return forecasts
