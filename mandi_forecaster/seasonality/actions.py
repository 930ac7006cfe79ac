"""
Seasonality action classifier: month-over-month Sell / Store / Monitor.

Works on the 12-slot seasonal profile from ``extract_seasonality`` (the
monthly deviation from the overall mean), not on raw prices.  Each month is
compared with the previous one, wrapping December → January::

    threshold = |mean(profile)| * 0.02
    delta     = profile[m] - profile[(m - 1) % 12]

    delta >  threshold   → arrow "up",   action "Sell"
    delta < -threshold   → arrow "down", action "Store"
    otherwise            → arrow "flat", action "Monitor"

A rising seasonal level means prices are climbing into that month, so the
month is a selling window; a falling level favours storing the crop.
"""

from __future__ import annotations

from typing import Optional, Sequence

from mandi_forecaster.config import SeasonalConfig
from mandi_forecaster.decomposition.seasonal import extract_seasonality
from mandi_forecaster.models.forecast import SeasonalityActionRow
from mandi_forecaster.models.price import PricePoint
from mandi_forecaster.utils.time_utils import MONTH_NAMES


def classify_seasonality_actions(
    profile: Sequence[float],
    config: Optional[SeasonalConfig] = None,
) -> list[SeasonalityActionRow]:
    """Classify each month of a seasonal profile.

    Args:
        profile: Exactly 12 monthly values, January first.
        config:  Supplies ``action_threshold_ratio`` (default 0.02).

    Returns:
        Twelve ``SeasonalityActionRow`` objects, January first.

    Raises:
        ValueError: If ``profile`` does not have 12 entries.
    """
    if len(profile) != 12:
        raise ValueError(f"Seasonal profile must have 12 entries, got {len(profile)}.")

    cfg = config or SeasonalConfig()
    mean = sum(profile) / 12
    threshold = abs(mean) * cfg.action_threshold_ratio

    rows: list[SeasonalityActionRow] = []
    for m, name in enumerate(MONTH_NAMES):
        delta = profile[m] - profile[(m - 1) % 12]
        if delta > threshold:
            rows.append(SeasonalityActionRow(month=name, trend_arrow="up", action="Sell"))
        elif -delta > threshold:
            rows.append(SeasonalityActionRow(month=name, trend_arrow="down", action="Store"))
        else:
            rows.append(SeasonalityActionRow(month=name, trend_arrow="flat", action="Monitor"))
    return rows


def seasonality_action_table(
    points: Sequence[PricePoint],
    config: Optional[SeasonalConfig] = None,
) -> list[SeasonalityActionRow]:
    """Extract the seasonal profile of ``points`` and classify it."""
    return classify_seasonality_actions(extract_seasonality(points), config)
