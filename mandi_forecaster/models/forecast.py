"""
Forecast and seasonality output models.

``Forecast`` is one month of a synthesized forecast with its decomposed
components.  ``SeasonalPattern`` describes a calendar month's historical price
level relative to the year; ``SeasonalityActionRow`` is the month-over-month
sell/store/monitor advice derived from the seasonal profile.

All models are frozen and recomputed on every request.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from mandi_forecaster.utils.time_utils import MONTH_NAMES

TrendDirection = Literal["up", "down", "stable"]
MonthRecommendation = Literal["excellent", "good", "average", "poor"]
TrendArrow = Literal["up", "down", "flat"]
SeasonalAction = Literal["Sell", "Store", "Monitor"]


class Forecast(BaseModel):
    """Predicted price for one future month.

    Attributes:
        date: Target calendar date.
        predicted_price: Sum of components plus noise, floored at 0.
        confidence: Horizon-decayed confidence in ``[0.5, 1.0]``.
        direction: Movement vs. the previous forecast (or last observation).
        trend_component: Extrapolated linear trend value.
        seasonal_component: Monthly seasonal deviation applied.
        weekly_component: Weekly deviation applied.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    predicted_price: float
    confidence: float
    direction: TrendDirection
    trend_component: float
    seasonal_component: float
    weekly_component: float

    @model_validator(mode="after")
    def validate_forecast(self) -> "Forecast":
        if self.predicted_price < 0:
            raise ValueError("predicted_price must be non-negative.")
        if not 0.5 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence must be in [0.5, 1.0], got {self.confidence}."
            )
        return self

    @property
    def confidence_lower(self) -> float:
        """Lower edge of the display band: price shrunk by half the uncertainty."""
        return self.predicted_price * (1.0 - (1.0 - self.confidence) * 0.5)

    @property
    def confidence_upper(self) -> float:
        """Upper edge of the display band."""
        return self.predicted_price * (1.0 + (1.0 - self.confidence) * 0.5)


class SeasonalPattern(BaseModel):
    """Historical price profile of one calendar month.

    Attributes:
        month: English month name.
        average_price: Mean modal price for the month (overall mean if no data).
        price_index: ``average_price / yearly_average``.
        recommendation: Bucket derived from ``price_index``.
        volatility: Sample standard deviation of the month's prices.
        historical_high: Highest observed price (average if no data).
        historical_low: Lowest observed price (average if no data).
    """

    model_config = ConfigDict(frozen=True)

    month: str
    average_price: float
    price_index: float
    recommendation: MonthRecommendation
    volatility: float = 0.0
    historical_high: float
    historical_low: float

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        if v not in MONTH_NAMES:
            raise ValueError(f"Unknown month '{v}'.")
        return v

    @model_validator(mode="after")
    def validate_range(self) -> "SeasonalPattern":
        if self.historical_low > self.historical_high:
            raise ValueError(
                f"historical_low ({self.historical_low}) must be <= "
                f"historical_high ({self.historical_high})."
            )
        if self.volatility < 0:
            raise ValueError("volatility must be non-negative.")
        return self


class SeasonalityActionRow(BaseModel):
    """Sell / store / monitor advice for one calendar month."""

    model_config = ConfigDict(frozen=True)

    month: str
    trend_arrow: TrendArrow
    action: SeasonalAction

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        if v not in MONTH_NAMES:
            raise ValueError(f"Unknown month '{v}'.")
        return v
