"""
Seasonal and weekly deviation profiles.

Both profiles share one algorithm: bucket observations by a calendar key,
then record ``bucket_mean - overall_mean`` for every bucket.  Buckets with
no observations are 0 (neither dropped nor interpolated), so the profile
always has a fixed length:

  - seasonal: 12 slots, 0 = January.
  - weekly:    7 slots, 0 = Sunday.

The profiles are additive offsets on top of the trend.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Callable, Sequence

from mandi_forecaster.models.price import PricePoint
from mandi_forecaster.utils.time_utils import month_index, sunday_weekday

MONTHS_PER_YEAR = 12
DAYS_PER_WEEK = 7


def extract_seasonality(points: Sequence[PricePoint]) -> list[float]:
    """Return the 12-slot monthly deviation-from-mean profile."""
    return _deviation_profile(points, MONTHS_PER_YEAR, month_index)


def extract_weekly_pattern(points: Sequence[PricePoint]) -> list[float]:
    """Return the 7-slot day-of-week deviation-from-mean profile."""
    return _deviation_profile(points, DAYS_PER_WEEK, sunday_weekday)


def _deviation_profile(
    points: Sequence[PricePoint],
    size: int,
    key: Callable[[date], int],
) -> list[float]:
    if not points:
        return [0.0] * size

    buckets: dict[int, list[float]] = defaultdict(list)
    for p in points:
        buckets[key(p.timestamp)].append(p.price)

    overall = sum(p.price for p in points) / len(points)

    profile: list[float] = []
    for slot in range(size):
        prices = buckets.get(slot)
        if prices:
            profile.append(sum(prices) / len(prices) - overall)
        else:
            profile.append(0.0)
    return profile
