"""
Calendar helpers shared by the decomposition and forecasting modules.

Conventions:
  - Month indices are 0-based (0 = January … 11 = December).
  - Day-of-week indices are 0-based starting on **Sunday**
    (0 = Sunday … 6 = Saturday), the convention the weekly profile uses.
  - Day of year is 1-based (1 January → 1).
  - Week of year is 0-based whole weeks elapsed since 1 January.
"""

from __future__ import annotations

import calendar
import math
from datetime import date

MONTH_NAMES: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def month_index(d: date) -> int:
    """Return the 0-based calendar month of ``d``."""
    return d.month - 1


def sunday_weekday(d: date) -> int:
    """Return the day of week with Sunday = 0 … Saturday = 6."""
    return (d.weekday() + 1) % 7


def day_of_year(d: date) -> int:
    """Return the 1-based ordinal day within the year."""
    return d.timetuple().tm_yday


def week_of_year(d: date) -> int:
    """Return the number of whole weeks elapsed since 1 January of ``d.year``."""
    return (d - date(d.year, 1, 1)).days // 7


def add_months(d: date, months: int) -> date:
    """Shift ``d`` by ``months`` calendar months.

    The day is clamped to the last day of the target month, so
    ``add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)``.
    """
    total = d.year * 12 + (d.month - 1) + months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def round_half_up(value: float) -> float:
    """Round to the nearest whole unit, halves toward positive infinity.

    ``round()`` uses banker's rounding (``round(2.5) == 2``); prices are
    reported with the conventional half-up rule instead.
    """
    return float(math.floor(value + 0.5))
