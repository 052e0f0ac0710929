"""
Pydantic schemas for the delivery API.

Request bodies use snake_case; amounts are dollars unless the field name
says cents.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# =============================================================================
# Distance-based quote
# =============================================================================


class DeliveryQuoteRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/delivery/quote."""

    delivery_address: str = Field(..., min_length=1, max_length=500)
    customer_phone: str = Field(..., min_length=1, max_length=30)
    pickup_address: str = Field(default="", max_length=500)


class DeliveryQuoteResponse(BaseModel):
    """Distance, fee and ETA, or the reason delivery is unavailable."""

    available: bool
    message: str
    distance_km: float | None = None
    estimated_duration_minutes: int | None = None
    delivery_fee: Decimal | None = None
    delivery_fee_cents: int | None = None
    max_distance_km: Decimal | None = None
    estimated_delivery_time: datetime | None = None


# =============================================================================
# DoorDash quote and dispatch
# =============================================================================


class ProviderQuoteRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/delivery/provider-quote."""

    delivery_address: str = Field(..., min_length=1, max_length=500)
    customer_phone: str = Field(..., min_length=1, max_length=30)
    pickup_address: str = Field(default="", max_length=500)
    pickup_time: datetime | None = None


class ProviderQuoteResponse(BaseModel):
    """DoorDash quote, or the fallback quote when DoorDash is unavailable."""

    delivery_id: str
    fee: Decimal
    status: str
    estimated_pickup_time: datetime | None = None
    estimated_delivery_time: datetime | None = None
    is_fallback: bool = False
    message: str = ""


class DeliveryCreateRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/delivery/deliveries."""

    pickup_address: str = Field(..., min_length=1, max_length=500)
    pickup_phone: str = Field(..., min_length=1, max_length=30)
    dropoff_address: str = Field(..., min_length=1, max_length=500)
    dropoff_phone: str = Field(..., min_length=1, max_length=30)
    pickup_business_name: str = Field(default="", max_length=200)
    dropoff_business_name: str = Field(default="", max_length=200)
    external_delivery_id: str = Field(default="", max_length=100)
    order_value_cents: int = Field(default=0, ge=0)


class DeliveryResponse(BaseModel):
    """A created or tracked delivery."""

    delivery_id: str
    status: str | None = None
    fee_cents: int | None = None
    tracking_url: str | None = None
    pickup_time_estimated: datetime | None = None
    dropoff_time_estimated: datetime | None = None
    support_reference: str | None = None


# =============================================================================
# Business and store management (staff only)
# =============================================================================


class BusinessCreateRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/delivery/business."""

    description: str = Field(default="", max_length=500)


class StoreCreateRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/delivery/stores."""

    business_id: str = Field(default="", max_length=100)
    store_id: str = Field(default="", max_length=100)
    name: str = Field(default="", max_length=200)
    phone: str = Field(default="", max_length=30)
    address: str = Field(default="", max_length=500)
