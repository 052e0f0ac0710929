"""Payments module - Stripe integration for storefront checkout."""

from apps.web.payments.services import (
    PaymentError,
    amount_to_cents,
    create_payment_intent,
    retrieve_payment_intent,
    verify_payment_intent,
)

__all__ = [
    "PaymentError",
    "amount_to_cents",
    "create_payment_intent",
    "retrieve_payment_intent",
    "verify_payment_intent",
]
