"""
Linear trend extraction.

The trend is an ordinary least squares line fitted to ``(index, price)`` where
``index`` is the 0-based position of each observation in time order.  Calendar
gaps are ignored on purpose: every sample counts as one step, so irregularly
spaced histories still produce a usable baseline.

Extrapolation does not reuse the regression slope.  ``extrapolate_trend``
continues the fitted series by the difference between its last two values,
so the fitting method can change without touching the forecasting step.
"""

from __future__ import annotations

from typing import Sequence

from mandi_forecaster.models.price import PricePoint


def sort_points(points: Sequence[PricePoint]) -> list[PricePoint]:
    """Return ``points`` ordered by timestamp (stable for equal dates)."""
    return sorted(points, key=lambda p: p.timestamp)


def extract_trend(points: Sequence[PricePoint]) -> list[float]:
    """Fit a linear trend and return the fitted value at each input position.

    Args:
        points: Price observations in any order; sorted by timestamp here.

    Returns:
        One fitted value per point, aligned with the sorted input.
        With fewer than two points there is no slope to fit: returns
        ``[price]`` for a single point and ``[0.0]`` for an empty input.
    """
    prices = [p.price for p in sort_points(points)]
    n = len(prices)

    if n < 2:
        return [prices[0] if prices else 0.0]

    # Closed-form sums over x = 0..n-1.
    x_sum = n * (n - 1) / 2
    x2_sum = n * (n - 1) * (2 * n - 1) / 6
    y_sum = sum(prices)
    xy_sum = sum(i * price for i, price in enumerate(prices))

    denominator = n * x2_sum - x_sum * x_sum
    if denominator == 0:
        return [y_sum / n] * n

    slope = (n * xy_sum - x_sum * y_sum) / denominator
    intercept = (y_sum - slope * x_sum) / n

    return [intercept + slope * i for i in range(n)]


def extrapolate_trend(trend: Sequence[float], step: int) -> float:
    """Continue a fitted trend ``step`` positions past its last value.

    Uses the finite difference of the last two fitted values as the slope.
    A single-value trend continues flat; an empty trend yields ``0.0``.
    """
    if not trend:
        return 0.0
    last = trend[-1]
    second_last = trend[-2] if len(trend) > 1 else last
    return last + (last - second_last) * step
