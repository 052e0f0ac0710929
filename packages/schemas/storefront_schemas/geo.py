"""Geo schemas - coordinates and route estimates from the maps provider."""

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """A geocoded point."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class RouteEstimate(BaseModel):
    """Distance and travel time between a pickup and a dropoff address."""

    distance_km: float = Field(..., ge=0)
    duration_minutes: int = Field(..., ge=0)
    source: str = Field(
        default="haversine",
        description="'haversine' (geocoded great-circle) or 'distance_matrix'",
    )
