"""
Seasonal price patterns: how each calendar month compares with the year.

For every month (January … December):

  - ``average_price``   mean modal price of the month's observations; a month
                        without data takes the overall mean of all
                        observations.
  - ``price_index``     ``average_price / yearly_average`` where
                        ``yearly_average`` is the mean of the 12 monthly
                        averages.
  - ``recommendation``  bucket of ``price_index``:

        >= 1.15  excellent
        >= 1.05  good
        >= 0.95  average
        else     poor

  - ``volatility``      sample standard deviation (n - 1) of the month's
                        prices; 0 with one sample or fewer.
  - ``historical_high`` / ``historical_low``
                        max / min observed price, or ``average_price`` when
                        the month has no observations.

Prices, volatility and extremes are rounded half-up to whole units;
``price_index`` is reported unrounded.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Optional, Sequence

from mandi_forecaster.config import SeasonalConfig
from mandi_forecaster.models.forecast import MonthRecommendation, SeasonalPattern
from mandi_forecaster.models.price import PricePoint
from mandi_forecaster.utils.time_utils import MONTH_NAMES, month_index, round_half_up


def classify_price_index(
    price_index: float,
    config: Optional[SeasonalConfig] = None,
) -> MonthRecommendation:
    """Map a month's price index onto a recommendation bucket."""
    cfg = config or SeasonalConfig()
    if price_index >= cfg.excellent_index:
        return "excellent"
    if price_index >= cfg.good_index:
        return "good"
    if price_index >= cfg.average_index:
        return "average"
    return "poor"


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation; ``0.0`` for fewer than two values."""
    n = len(values)
    if n < 2:
        return 0.0
    mean = sum(values) / n
    variance = sum((v - mean) ** 2 for v in values) / (n - 1)
    return math.sqrt(max(0.0, variance))


def monthly_averages(points: Sequence[PricePoint]) -> list[float]:
    """Return 12 monthly mean prices, filling empty months with the overall mean.

    An empty input yields twelve zeros.
    """
    if not points:
        return [0.0] * 12

    buckets = _group_by_month(points)
    overall = sum(p.price for p in points) / len(points)
    return [
        sum(buckets[m]) / len(buckets[m]) if buckets.get(m) else overall
        for m in range(12)
    ]


def analyze_seasonal_patterns(
    points: Sequence[PricePoint],
    config: Optional[SeasonalConfig] = None,
) -> list[SeasonalPattern]:
    """Compute the 12 monthly ``SeasonalPattern`` rows for a price history.

    Args:
        points: Observations for a single variety (modal prices).
        config: Bucket thresholds; defaults to ``SeasonalConfig()``.

    Returns:
        Twelve patterns, January first.  Empty when ``points`` is empty.
    """
    if not points:
        return []

    buckets = _group_by_month(points)
    averages = monthly_averages(points)
    yearly = sum(averages) / len(averages)

    patterns: list[SeasonalPattern] = []
    for m, name in enumerate(MONTH_NAMES):
        average = averages[m]
        price_index = average / yearly if yearly > 0 else 1.0
        prices = buckets.get(m, [])

        high = max(prices) if prices else average
        low = min(prices) if prices else average

        patterns.append(
            SeasonalPattern(
                month=name,
                average_price=round_half_up(average),
                price_index=price_index,
                recommendation=classify_price_index(price_index, config),
                volatility=round_half_up(sample_std(prices)),
                historical_high=round_half_up(high),
                historical_low=round_half_up(low),
            )
        )
    return patterns


def _group_by_month(points: Sequence[PricePoint]) -> dict[int, list[float]]:
    buckets: dict[int, list[float]] = defaultdict(list)
    for p in points:
        buckets[month_index(p.timestamp)].append(p.price)
    return buckets
