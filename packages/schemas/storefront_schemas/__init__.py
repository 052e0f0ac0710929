"""Storefront Schemas - Pydantic models for provider data contracts."""

from storefront_schemas.delivery import (
    Business,
    Delivery,
    DeliveryRequest,
    DoorDashCredentials,
    Store,
)
from storefront_schemas.geo import Coordinates, RouteEstimate

__all__ = [
    # Delivery
    "Business",
    "Delivery",
    "DeliveryRequest",
    "DoorDashCredentials",
    "Store",
    # Geo
    "Coordinates",
    "RouteEstimate",
]
