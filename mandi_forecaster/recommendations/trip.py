"""
Trip cost estimate for hauling produce to a chosen market.

Route distances come from an external routing collaborator; this module only
turns a distance and a vehicle profile into fuel cost and travel time.
``mandi-forecaster rank-markets --distance KM --vehicle PRESET`` prints the
estimate under the ranked markets::

    fuel_cost        = distance_km / mileage_km_per_litre * fuel_price_per_litre
    duration_minutes = distance_km / 30 km/h * 60
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

AVERAGE_SPEED_KMH = 30.0

# Typical mileage (km per litre) of vehicles used to haul produce.
VEHICLE_PRESETS: dict[str, float] = {
    "motorcycle":   45.0,
    "small_car":    18.0,
    "pickup_truck": 12.0,
    "tractor":       8.0,
    "mini_truck":   10.0,
}


class VehicleInfo(BaseModel):
    """Vehicle fuel profile."""

    model_config = ConfigDict(frozen=True)

    mileage_km_per_litre: float = 15.0
    fuel_price_per_litre: float = 100.0

    @field_validator("mileage_km_per_litre")
    @classmethod
    def validate_mileage(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"mileage_km_per_litre must be positive, got {v}.")
        return v

    @field_validator("fuel_price_per_litre")
    @classmethod
    def validate_fuel_price(cls, v: float) -> float:
        if v < 0:
            raise ValueError("fuel_price_per_litre must be non-negative.")
        return v

    @classmethod
    def from_preset(cls, name: str, fuel_price_per_litre: float = 100.0) -> "VehicleInfo":
        """Build a profile from ``VEHICLE_PRESETS``; raises ``KeyError`` for unknown names."""
        return cls(
            mileage_km_per_litre=VEHICLE_PRESETS[name],
            fuel_price_per_litre=fuel_price_per_litre,
        )


class TripEstimate(BaseModel):
    """Estimated cost and duration of one trip."""

    model_config = ConfigDict(frozen=True)

    distance_km: float
    duration_minutes: float
    fuel_cost: float


def estimate_trip(distance_km: float, vehicle: VehicleInfo) -> TripEstimate:
    """Estimate fuel cost and travel time for ``distance_km``.

    Raises:
        ValueError: If ``distance_km`` is negative.
    """
    if distance_km < 0:
        raise ValueError(f"distance_km must be non-negative, got {distance_km}.")

    litres = distance_km / vehicle.mileage_km_per_litre
    return TripEstimate(
        distance_km=round(distance_km, 1),
        duration_minutes=round(distance_km / AVERAGE_SPEED_KMH * 60.0),
        fuel_cost=round(litres * vehicle.fuel_price_per_litre, 2),
    )
