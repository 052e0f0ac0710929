"""Delivery schemas - data contracts for the DoorDash Drive API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Authentication
# =============================================================================


class DoorDashCredentials(BaseModel):
    """Developer credentials used to sign DoorDash JWTs."""

    developer_id: str = Field(..., min_length=1)
    key_id: str = Field(..., min_length=1)
    signing_secret: str = Field(..., min_length=1)


# =============================================================================
# Deliveries
# =============================================================================


class DeliveryRequest(BaseModel):
    """Body for POST /drive/v2/quotes and POST /drive/v2/deliveries."""

    external_delivery_id: str
    pickup_address: str
    pickup_phone_number: str | None = None
    pickup_business_name: str | None = None
    pickup_time: str | None = None  # YYYY-MM-DDTHH:MM:SSZ
    dropoff_address: str
    dropoff_phone_number: str
    dropoff_business_name: str | None = None
    dropoff_contact_send_notifications: bool | None = None
    order_value: int | None = Field(default=None, ge=0)  # cents


class Delivery(BaseModel):
    """A delivery (or quote) returned by DoorDash."""

    model_config = ConfigDict(extra="allow")

    external_delivery_id: str
    delivery_status: str | None = None
    fee: int | None = None  # cents
    currency: str | None = None
    pickup_time_estimated: datetime | None = None
    dropoff_time_estimated: datetime | None = None
    tracking_url: str | None = None
    support_reference: str | None = None


# =============================================================================
# Businesses and stores
# =============================================================================


class Business(BaseModel):
    """A DoorDash business (the merchant account)."""

    model_config = ConfigDict(extra="allow")

    external_business_id: str
    name: str
    description: str | None = None
    activation_status: str | None = None


class Store(BaseModel):
    """A DoorDash store (a pickup location under a business)."""

    model_config = ConfigDict(extra="allow")

    external_store_id: str
    name: str
    phone_number: str | None = None
    address: str | None = None
    status: str | None = None
