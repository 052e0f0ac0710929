"""
Pydantic schemas for the storefront API.

These schemas define the public API contract for menu, cart and order data.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Menu
# =============================================================================


class MenuItemSchema(BaseModel):
    """A menu item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Decimal
    image_url: str
    is_available: bool


class MenuCategorySchema(BaseModel):
    """A category with its available items."""

    id: int
    name: str
    description: str
    items: list[MenuItemSchema] = Field(default_factory=list)


class MenuResponse(BaseModel):
    """Response for GET /api/restaurants/{slug}/menu."""

    restaurant: str
    currency: str
    ordering_enabled: bool
    pickup_enabled: bool
    delivery_enabled: bool
    categories: list[MenuCategorySchema]


# =============================================================================
# Cart
# =============================================================================


class CartItemAddRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/cart/items."""

    menu_item_id: int
    quantity: int = Field(default=1, ge=1, le=99)


class CartItemUpdateRequest(BaseModel):
    """Request body for PATCH /api/restaurants/{slug}/cart/items/{id}."""

    quantity: int = Field(..., le=99)


class CartLineSchema(BaseModel):
    """A line of the cart."""

    menu_item_id: int
    name: str
    image_url: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    """Cart contents with subtotal."""

    items: list[CartLineSchema]
    item_count: int
    subtotal: Decimal


# =============================================================================
# Orders
# =============================================================================


class CustomerSchema(BaseModel):
    """Customer information for an order."""

    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1, max_length=30)
    email: str = Field(default="", pattern=r"^$|^[^@]+@[^@]+\.[^@]+$")


class OrderItemCreateSchema(BaseModel):
    """A single item in an order creation request."""

    menu_item_id: int
    quantity: int = Field(..., ge=1, le=99)


class OrderCreateRequest(BaseModel):
    """
    Request body for POST /api/restaurants/{slug}/orders.

    items defaults to the session cart when omitted.
    """

    customer: CustomerSchema
    order_type: Literal["pickup", "delivery"]
    items: list[OrderItemCreateSchema] | None = None
    special_instructions: str = Field(default="", max_length=1000)
    tip: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    delivery_address: str = Field(default="", max_length=500)


class OrderItemResponseSchema(BaseModel):
    """A line item in an order response."""

    id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderCreateResponse(BaseModel):
    """Response for POST /api/restaurants/{slug}/orders."""

    order_id: int
    confirmation_code: str
    status: str
    order_type: str
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal
    delivery_distance_km: Decimal | None = None
    stripe_client_secret: str | None = None
    stripe_payment_intent_id: str
    created_at: datetime


class OrderDetailResponse(BaseModel):
    """Response for GET /api/restaurants/{slug}/orders/{order_id}."""

    order_id: int
    confirmation_code: str
    status: str
    payment_status: str
    customer: CustomerSchema
    items: list[OrderItemResponseSchema]
    order_type: str
    special_instructions: str
    delivery_address: str
    delivery_distance_km: Decimal | None
    delivery_id: str
    delivery_status: str
    delivery_tracking_url: str
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal
    created_at: datetime
    confirmed_at: datetime | None
    estimated_ready_time: datetime | None


class OrderConfirmRequest(BaseModel):
    """Request body for POST /api/restaurants/{slug}/orders/{order_id}/confirm."""

    payment_intent_id: str = Field(..., min_length=1)


class OrderConfirmResponse(BaseModel):
    """Response for POST /api/restaurants/{slug}/orders/{order_id}/confirm."""

    order_id: int
    confirmation_code: str
    status: str
    estimated_ready_time: datetime | None
    delivery_id: str = ""
    delivery_tracking_url: str = ""
    delivery_warning: str | None = None


class OrderStatusResponse(BaseModel):
    """Response for GET /api/restaurants/{slug}/orders/{order_id}/status."""

    status: str
    payment_status: str
    delivery_status: str
    delivery_tracking_url: str
    updated_at: datetime
    estimated_ready_time: datetime | None
