"""
Payment services - Stripe integration.

Creates and verifies the PaymentIntents that back storefront checkout.
Amounts are passed around in dollars and converted to cents only here.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.conf import settings

import stripe

# Configure Stripe API key
stripe.api_key = settings.STRIPE_SECRET_KEY


class PaymentError(Exception):
    """Error during payment processing."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def amount_to_cents(amount: Decimal) -> int:
    """
    Convert a dollar amount to Stripe's integer cents, rounding half-up.

    >>> amount_to_cents(Decimal("12.995"))
    1300
    """
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _payment_error(e: stripe.StripeError) -> PaymentError:
    return PaymentError(
        message=str(e.user_message or e),
        code=getattr(e, "code", None),
    )


def create_payment_intent(
    amount: Decimal,
    currency: str = "usd",
    metadata: dict[str, Any] | None = None,
    description: str = "",
    receipt_email: str = "",
    statement_descriptor_suffix: str = "",
) -> stripe.PaymentIntent:
    """
    Create a Stripe PaymentIntent for an order.

    Args:
        amount: Amount in dollars (converted to cents, rounded half-up)
        currency: Currency code (default: USD)
        metadata: Additional metadata to attach to the payment (e.g., order_id)
        description: Shown in the Stripe dashboard
        receipt_email: Stripe emails a receipt here when set
        statement_descriptor_suffix: Appended to the card statement descriptor

    Returns:
        stripe.PaymentIntent with client_secret for frontend

    Raises:
        PaymentError: If Stripe API call fails
    """
    params: dict[str, Any] = {
        "amount": amount_to_cents(amount),
        "currency": currency,
        "automatic_payment_methods": {"enabled": True},
        "metadata": metadata or {},
    }
    if description:
        params["description"] = description
    if receipt_email:
        params["receipt_email"] = receipt_email
    if statement_descriptor_suffix:
        params["statement_descriptor_suffix"] = statement_descriptor_suffix

    try:
        return stripe.PaymentIntent.create(**params)
    except stripe.StripeError as e:
        raise _payment_error(e) from e


def retrieve_payment_intent(payment_intent_id: str) -> stripe.PaymentIntent:
    """
    Retrieve a PaymentIntent from Stripe.

    Args:
        payment_intent_id: The Stripe PaymentIntent ID (pi_xxx)

    Returns:
        stripe.PaymentIntent with current status

    Raises:
        PaymentError: If PaymentIntent not found or API call fails
    """
    try:
        return stripe.PaymentIntent.retrieve(payment_intent_id)
    except stripe.StripeError as e:
        raise _payment_error(e) from e


def verify_payment_intent(payment_intent_id: str) -> bool:
    """True if the PaymentIntent exists and has succeeded."""
    try:
        intent = retrieve_payment_intent(payment_intent_id)
        return bool(intent.status == "succeeded")
    except PaymentError:
        return False
