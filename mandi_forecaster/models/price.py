"""
Price observation model — the single input shape of the forecasting path.

``PricePoint`` is produced at the ingestion boundary (one per market record,
carrying the modal price) and consumed read-only by every extractor.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, field_validator


class PricePoint(BaseModel):
    """A single dated price observation.

    Attributes:
        timestamp: Calendar date of the observation.
        price: Observed price per quintal; strictly positive.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: date
    price: float

    @field_validator("price")
    @classmethod
    def validate_price_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"price must be positive, got {v}.")
        return v
