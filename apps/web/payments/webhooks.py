"""
Stripe webhook handlers.

Handles payment events from Stripe:
- payment_intent.succeeded: confirm the order and dispatch its courier
- payment_intent.payment_failed: record the failed attempt

The webhook is the backstop for customers who close the browser before the
confirm endpoint runs; both paths share storefront.services.confirm_paid_order.
"""

import logging
from typing import Any

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

import stripe

from apps.web.storefront.models import Order
from apps.web.storefront.services import confirm_paid_order, mark_payment_failed

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Stripe webhook events.

    POST /payments/webhooks/stripe
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature", "")

    # Verify webhook signature
    try:
        event = stripe.Webhook.construct_event(
            payload,
            sig_header,
            settings.STRIPE_WEBHOOK_SECRET,
        )
    except ValueError as e:
        logger.warning("Invalid Stripe webhook payload: %s", e)
        return HttpResponse("Invalid payload", status=400)
    except stripe.SignatureVerificationError as e:
        logger.warning("Invalid Stripe webhook signature: %s", e)
        return HttpResponse("Invalid signature", status=400)

    logger.info("Received Stripe event: %s", event.type)

    match event.type:
        case "payment_intent.succeeded":
            _handle_payment_succeeded(event.data.object.to_dict())
        case "payment_intent.payment_failed":
            _handle_payment_failed(event.data.object.to_dict())
        case _:
            logger.debug("Ignoring unhandled Stripe event: %s", event.type)

    return HttpResponse(status=200)


def _order_for_intent(payment_intent: dict[str, Any]) -> Order | None:
    """
    Find the order a PaymentIntent was created for.

    Uses metadata.order_id, falling back to the stored PaymentIntent id.
    Intents created by the standalone intent endpoint have no order.
    """
    pi_id = payment_intent.get("id")
    metadata = payment_intent.get("metadata") or {}
    order_id = metadata.get("order_id") if isinstance(metadata, dict) else None

    if order_id:
        try:
            order = Order.objects.get(pk=int(order_id))
        except Order.DoesNotExist:
            logger.error("Order not found for payment_intent: order_id=%s", order_id)
            return None
        except (ValueError, TypeError):
            logger.error("Invalid order_id in metadata: %s", order_id)
            return None
    else:
        order = None
        if pi_id:
            order = Order.objects.filter(stripe_payment_intent_id=pi_id).first()
        if order is None:
            logger.info("No order for payment_intent %s, ignoring", pi_id)
            return None

    if order.stripe_payment_intent_id and order.stripe_payment_intent_id != pi_id:
        logger.error(
            "PaymentIntent mismatch: order_id=%s expected=%s got=%s",
            order.pk,
            order.stripe_payment_intent_id,
            pi_id,
        )
        return None

    return order


def _handle_payment_succeeded(payment_intent: dict[str, Any]) -> None:
    """Confirm the order; repeated deliveries of the event are no-ops."""
    order = _order_for_intent(payment_intent)
    if order is None:
        return

    result = confirm_paid_order(order)
    if result.already_confirmed:
        return

    logger.info(
        "Order confirmed via webhook: order_id=%s confirmation_code=%s",
        order.pk,
        order.confirmation_code,
    )
    if result.delivery_warning:
        logger.warning(
            "Order %s confirmed without courier: %s", order.pk, result.delivery_warning
        )


def _handle_payment_failed(payment_intent: dict[str, Any]) -> None:
    """Record the failure reason on the order."""
    order = _order_for_intent(payment_intent)
    if order is None:
        return

    reason = ""
    last_error = payment_intent.get("last_payment_error")
    if isinstance(last_error, dict):
        reason = last_error.get("message", "Unknown error")

    mark_payment_failed(order, reason)
