"""
Payment API views.

A standalone PaymentIntent endpoint for checkout pages that compute the
order total client-side. Checkout through the orders API creates its own
PaymentIntent and doesn't use this endpoint.
"""

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.web.core.http import (
    BadRequest,
    allow_cors_preflight,
    error_response,
    get_restaurant_or_404,
    json_response,
    parse_body,
)
from apps.web.payments.serializers import PaymentIntentRequest, PaymentIntentResponse
from apps.web.payments.services import (
    PaymentError,
    amount_to_cents,
    create_payment_intent,
)
from apps.web.storefront.models import StorefrontSettings

logger = logging.getLogger(__name__)


@csrf_exempt
@allow_cors_preflight
@require_POST
def create_intent(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/payments/intent

    Request body: PaymentIntentRequest schema
    Response: PaymentIntentResponse schema (200), 400 on invalid input,
    500 when Stripe rejects the request
    """
    restaurant = get_restaurant_or_404(slug)
    storefront = StorefrontSettings.load(restaurant)

    try:
        body = parse_body(request, PaymentIntentRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    if body.subtotal <= 0 or not body.customer_name or not body.customer_phone:
        return error_response(
            "Missing required fields: subtotal, customer_name, customer_phone"
        )

    total = body.subtotal + body.delivery_fee + body.tax_amount
    if amount_to_cents(total) <= 0:
        return error_response("Invalid amount")

    method = "Delivery" if body.delivery_method == "delivery" else "Pickup"

    try:
        intent = create_payment_intent(
            amount=total,
            currency=storefront.currency,
            description=f"{restaurant.name} Order - {method}",
            receipt_email=body.customer_email,
            statement_descriptor_suffix=storefront.statement_descriptor_suffix,
            metadata={
                "restaurant_slug": restaurant.slug,
                "customer_name": body.customer_name,
                "customer_phone": body.customer_phone,
                "delivery_method": body.delivery_method,
                "delivery_address": body.delivery_address or "N/A",
                "subtotal": f"{body.subtotal:.2f}",
                "delivery_fee": f"{body.delivery_fee:.2f}",
                "tax_amount": f"{body.tax_amount:.2f}",
            },
        )
    except PaymentError as e:
        logger.error("PaymentIntent creation failed for %s: %s", slug, e.message)
        return error_response(
            "Failed to create payment intent", status=500, details=e.message
        )

    logger.info(
        "PaymentIntent created: id=%s amount=%s customer=%s",
        intent.id,
        intent.amount,
        body.customer_name,
    )

    response = PaymentIntentResponse(
        client_secret=intent.client_secret,
        payment_intent_id=intent.id,
        amount=amount_to_cents(total),
    )
    return json_response(response.model_dump(mode="json"))
