"""Pydantic schemas for the payment-intent API."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    """
    Request body for POST /api/restaurants/{slug}/payments/intent.

    Amounts are in dollars as already computed by the checkout page.
    """

    subtotal: Decimal
    delivery_fee: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    customer_name: str = Field(default="", max_length=200)
    customer_phone: str = Field(default="", max_length=30)
    customer_email: str = Field(default="", max_length=254)
    delivery_method: Literal["pickup", "delivery"] = "pickup"
    delivery_address: str = Field(default="", max_length=500)


class PaymentIntentResponse(BaseModel):
    """Client secret for Stripe Elements plus the charged amount in cents."""

    client_secret: str
    payment_intent_id: str
    amount: int
