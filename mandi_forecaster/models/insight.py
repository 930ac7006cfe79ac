"""
Summary models exchanged with the summarization collaborator and reporting.

``SummaryResult`` is what an external summarizer returns for a variety.
``ForecastSummary`` holds headline statistics computed locally from a
forecast sequence.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from mandi_forecaster.models.forecast import Forecast


class SummaryResult(BaseModel):
    """Structured market insight for one variety.

    Attributes:
        summary: Short narrative of the seasonal picture.
        key_points: Actionable bullet points.
        recommendation: Main selling-strategy recommendation.
        confidence: Collaborator's self-reported confidence in ``[0, 1]``.
        risk_factors: Risks to consider.
        opportunities: Market opportunities.
    """

    model_config = ConfigDict(frozen=True)

    summary: str
    key_points: list[str] = []
    recommendation: str
    confidence: float = 0.5
    risk_factors: list[str] = []
    opportunities: list[str] = []

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("summary", "recommendation")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("summary and recommendation must not be empty.")
        return v.strip()


class ForecastSummary(BaseModel):
    """Headline statistics over a forecast sequence.

    Attributes:
        start_price: Predicted price of the first forecast month.
        end_price: Predicted price of the last forecast month.
        price_change_pct: ``(end - start) / start * 100``; 0 when start is 0.
        average_confidence: Mean confidence across the horizon.
        best_month: Forecast with the highest predicted price (earliest on ties).
        worst_month: Forecast with the lowest predicted price (earliest on ties).
    """

    model_config = ConfigDict(frozen=True)

    start_price: float
    end_price: float
    price_change_pct: float
    average_confidence: float
    best_month: Forecast
    worst_month: Forecast
