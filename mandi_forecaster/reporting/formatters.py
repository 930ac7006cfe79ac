"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept model lists and return plain multi-line strings
suitable for ``typer.echo()``.  Prices are per quintal, shown as ``Rs``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from typing import Optional, Sequence

from mandi_forecaster.models.forecast import Forecast, SeasonalityActionRow, SeasonalPattern
from mandi_forecaster.models.insight import ForecastSummary, SummaryResult
from mandi_forecaster.models.market import RankedMarket
from mandi_forecaster.recommendations.trip import TripEstimate

_ARROWS = {"up": "^", "down": "v", "flat": "-", "stable": "-"}


def _rs(value: float) -> str:
    return f"Rs {value:,.0f}"


# ── Forecast ──────────────────────────────────────────────────────────────────


def format_forecast_table(
    forecasts: Sequence[Forecast],
    variety: str,
    summary: Optional[ForecastSummary] = None,
) -> str:
    """Format a forecast as one row per month.

    Example::

        Month       Predicted  Conf  Dir     Trend  Seasonal  Weekly
        ------------------------------------------------------------
        2025-01      Rs 2,010   100%   -  Rs 2,000       +10      +0
    """
    lines: list[str] = ["", f"=== Price Forecast: {variety} ==="]

    if not forecasts:
        lines.append("  (no price history available for this variety)")
        return "\n".join(lines)

    header = (
        f"  {'Month':<8}  {'Predicted':>11}  {'Conf':>5}  {'Dir':>3}  "
        f"{'Trend':>10}  {'Seasonal':>8}  {'Weekly':>7}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for fc in forecasts:
        lines.append(
            f"  {fc.date.strftime('%Y-%m'):<8}  {_rs(fc.predicted_price):>11}  "
            f"{fc.confidence:>5.0%}  {_ARROWS[fc.direction]:>3}  "
            f"{_rs(fc.trend_component):>10}  {fc.seasonal_component:>+8.0f}  "
            f"{fc.weekly_component:>+7.0f}"
        )

    if summary is not None:
        lines.append("")
        lines.append(
            f"  Change over horizon: {summary.price_change_pct:+.1f}%   "
            f"Avg confidence: {summary.average_confidence:.0%}"
        )
        lines.append(
            f"  Best month:  {summary.best_month.date.strftime('%B %Y')} "
            f"({_rs(summary.best_month.predicted_price)})"
        )
        lines.append(
            f"  Lowest month: {summary.worst_month.date.strftime('%B %Y')} "
            f"({_rs(summary.worst_month.predicted_price)})"
        )
    return "\n".join(lines)


# ── Seasonality ───────────────────────────────────────────────────────────────


def format_seasonal_table(patterns: Sequence[SeasonalPattern], variety: str) -> str:
    """Format the 12 seasonal patterns of a variety."""
    lines: list[str] = ["", f"=== Seasonal Patterns: {variety} ==="]

    if not patterns:
        lines.append("  (no price history available for this variety)")
        return "\n".join(lines)

    header = (
        f"  {'Month':<10}  {'Average':>10}  {'Index':>6}  {'Rating':<9}  "
        f"{'Volatility':>10}  {'Low':>10}  {'High':>10}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for p in patterns:
        lines.append(
            f"  {p.month:<10}  {_rs(p.average_price):>10}  {p.price_index:>6.2f}  "
            f"{p.recommendation:<9}  {p.volatility:>10.0f}  "
            f"{_rs(p.historical_low):>10}  {_rs(p.historical_high):>10}"
        )
    return "\n".join(lines)


def format_action_table(rows: Sequence[SeasonalityActionRow], variety: str) -> str:
    """Format the month-by-month Sell / Store / Monitor table."""
    lines: list[str] = ["", f"=== Seasonality Actions: {variety} ==="]
    header = f"  {'Month':<10}  {'Trend':>5}  {'Action':<7}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for row in rows:
        lines.append(
            f"  {row.month:<10}  {_ARROWS[row.trend_arrow]:>5}  {row.action:<7}"
        )
    return "\n".join(lines)


# ── Markets ───────────────────────────────────────────────────────────────────


def format_market_table(markets: Sequence[RankedMarket], variety: str) -> str:
    """Format ranked markets, best first."""
    lines: list[str] = ["", f"=== Best Markets: {variety} ==="]

    if not markets:
        lines.append("  (no market data available for this variety)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Market':<30}  {'Avg Price':>10}  {'Band':<7}  "
        f"{'Transport':>9}  {'Net':>10}  {'Arrivals':>8}  {'Score':>5}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, m in enumerate(markets, start=1):
        location = f"{m.market}, {m.district}, {m.state}"[:30]
        lines.append(
            f"  {rank:>4}  {location:<30}  {_rs(m.average_modal_price):>10}  "
            f"{m.distance_band or 'unknown':<7}  {_rs(m.transport_cost):>9}  "
            f"{_rs(m.net_price):>10}  {m.average_arrivals:>8.1f}  {m.score:>5.0f}"
        )
    return "\n".join(lines)


def format_trip_estimate(trip: TripEstimate) -> str:
    """One-line trip summary printed under the market table."""
    hours, minutes = divmod(int(trip.duration_minutes), 60)
    return (
        f"\n  Trip: {trip.distance_km:g} km, about {hours}h {minutes:02d}m, "
        f"fuel Rs {trip.fuel_cost:,.2f}"
    )


# ── Insight ───────────────────────────────────────────────────────────────────


def format_insight(insight: SummaryResult) -> str:
    """Format a summarizer result as labelled bullet lists."""
    lines: list[str] = ["", "=== Market Insight ===", f"  {insight.summary}", ""]
    lines.append(f"  Recommendation: {insight.recommendation}")
    for title, items in (
        ("Key points", insight.key_points),
        ("Risk factors", insight.risk_factors),
        ("Opportunities", insight.opportunities),
    ):
        if items:
            lines.append(f"  {title}:")
            lines.extend(f"    - {item}" for item in items)
    return "\n".join(lines)
