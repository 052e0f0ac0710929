"""
Delivery API views - distance quotes, DoorDash quotes, dispatch and tracking.

Public endpoints are consumed by the checkout page. Business and store
management endpoints require a staff user who can manage the restaurant.
"""

import logging
from typing import Any

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from storefront_schemas import Delivery

from apps.web.core.http import (
    BadRequest,
    allow_cors_preflight,
    error_response,
    get_restaurant_or_404,
    json_response,
    parse_body,
)
from apps.web.core.models import Restaurant
from apps.web.delivery import services
from apps.web.delivery.exceptions import (
    DeliveryAPIError,
    DeliveryAuthError,
    DeliveryError,
    DeliveryValidationError,
    InvalidPhoneNumber,
)
from apps.web.delivery.serializers import (
    BusinessCreateRequest,
    DeliveryCreateRequest,
    DeliveryQuoteRequest,
    DeliveryQuoteResponse,
    DeliveryResponse,
    ProviderQuoteRequest,
    ProviderQuoteResponse,
    StoreCreateRequest,
)
from apps.web.storefront.models import StorefrontSettings

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_ID = "default"


def _delivery_payload(delivery: Delivery) -> dict[str, Any]:
    return DeliveryResponse(
        delivery_id=delivery.external_delivery_id,
        status=delivery.delivery_status,
        fee_cents=delivery.fee,
        tracking_url=delivery.tracking_url,
        pickup_time_estimated=delivery.pickup_time_estimated,
        dropoff_time_estimated=delivery.dropoff_time_estimated,
        support_reference=delivery.support_reference,
    ).model_dump(mode="json")


def _provider_error(error: DeliveryError, fallback: str) -> JsonResponse:
    """Translate a DoorDash failure into a JSON error response."""
    if isinstance(error, DeliveryValidationError):
        return error_response(
            "Delivery parameters invalid",
            status=422,
            details=error.message,
            field_errors=error.field_errors,
        )
    if isinstance(error, DeliveryAuthError):
        return error_response(error.message, status=500)
    return error_response(fallback, status=500, details=error.message)


def _require_manager(request: HttpRequest, restaurant: Restaurant) -> None:
    if not request.user.can_manage(restaurant):
        raise PermissionDenied("You don't have permission to manage this restaurant")


# =============================================================================
# Public endpoints
# =============================================================================


@csrf_exempt
@allow_cors_preflight
@require_POST
def delivery_quote(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/delivery/quote

    Distance-based fee and ETA. Delivery farther than the restaurant's
    radius, or to an address that cannot be located, is reported as
    unavailable rather than as an error.
    """
    restaurant = get_restaurant_or_404(slug)
    storefront = StorefrontSettings.load(restaurant)

    try:
        body = parse_body(request, DeliveryQuoteRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    if not storefront.delivery_enabled:
        return error_response("Delivery is not available for this restaurant")

    pickup_address = body.pickup_address or restaurant.address
    if not pickup_address:
        return error_response("Restaurant pickup address is not configured")

    estimate = services.estimate_delivery(
        pickup_address, body.delivery_address, storefront.fee_schedule
    )

    response = DeliveryQuoteResponse(
        available=estimate.available,
        message=estimate.message,
        distance_km=estimate.distance_km,
        estimated_duration_minutes=estimate.duration_minutes,
        delivery_fee=estimate.fee,
        delivery_fee_cents=estimate.fee_in_cents,
        max_distance_km=estimate.max_distance_km,
        estimated_delivery_time=estimate.estimated_delivery_time,
    )
    return json_response(response.model_dump(mode="json"))


@csrf_exempt
@allow_cors_preflight
@require_POST
def provider_quote(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/delivery/provider-quote

    DoorDash courier quote. Always answers 200 with a quote: when DoorDash
    cannot be reached the restaurant's fallback fee is returned instead.
    """
    restaurant = get_restaurant_or_404(slug)
    storefront = StorefrontSettings.load(restaurant)

    try:
        body = parse_body(request, ProviderQuoteRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    try:
        quote = services.request_provider_quote(
            pickup_address=body.pickup_address or restaurant.address,
            dropoff_address=body.delivery_address,
            customer_phone=body.customer_phone,
            schedule=storefront.fee_schedule,
            pickup_time=body.pickup_time,
        )
    except InvalidPhoneNumber as e:
        return error_response(
            "validation_error",
            details=[{"field": "customer_phone", "message": e.message}],
        )

    response = ProviderQuoteResponse(
        delivery_id=quote.delivery_id,
        fee=quote.fee,
        status=quote.status,
        estimated_pickup_time=quote.estimated_pickup_time,
        estimated_delivery_time=quote.estimated_delivery_time,
        is_fallback=quote.is_fallback,
        message=quote.message,
    )
    return json_response(response.model_dump(mode="json"))


@csrf_exempt
@allow_cors_preflight
@require_POST
def create_delivery(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/delivery/deliveries

    Dispatch a DoorDash courier.

    Response: DeliveryResponse (201), 422 when DoorDash rejects the
    parameters, 500 on other provider failures
    """
    restaurant = get_restaurant_or_404(slug)

    try:
        body = parse_body(request, DeliveryCreateRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    try:
        delivery = services.create_delivery(
            pickup_address=body.pickup_address,
            pickup_phone=body.pickup_phone,
            pickup_business_name=body.pickup_business_name or restaurant.name,
            dropoff_address=body.dropoff_address,
            dropoff_phone=body.dropoff_phone,
            dropoff_business_name=(
                body.dropoff_business_name or services.DEFAULT_DROPOFF_BUSINESS_NAME
            ),
            external_delivery_id=body.external_delivery_id or None,
            order_value_cents=body.order_value_cents,
        )
    except InvalidPhoneNumber as e:
        return error_response(
            "validation_error",
            details=[{"field": "phone", "message": e.message}],
        )
    except DeliveryError as e:
        logger.error("Delivery creation failed for %s: %s", slug, e.message)
        return _provider_error(e, "Failed to create delivery")

    return json_response(_delivery_payload(delivery), status=201)


@allow_cors_preflight
@require_GET
def delivery_status(
    _request: HttpRequest, slug: str, delivery_id: str
) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/delivery/deliveries/{delivery_id}

    Current courier status and tracking URL.
    """
    get_restaurant_or_404(slug)

    try:
        delivery = services.get_delivery(delivery_id)
    except DeliveryAPIError as e:
        if e.status_code == 404:
            return error_response("Delivery not found", status=404)
        return _provider_error(e, "Failed to get delivery status")
    except DeliveryError as e:
        return _provider_error(e, "Failed to get delivery status")

    return json_response(_delivery_payload(delivery))


# =============================================================================
# Business and store management
# =============================================================================


@csrf_exempt
@require_POST
@login_required
def create_business(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/delivery/business

    Register the restaurant as a DoorDash business (id = restaurant slug)
    and remember the id in the storefront settings.
    """
    restaurant = get_restaurant_or_404(slug)
    _require_manager(request, restaurant)

    try:
        body = parse_body(request, BusinessCreateRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    try:
        business = services.create_business(restaurant, body.description)
    except DeliveryError as e:
        return _provider_error(e, "Failed to create business")

    storefront = StorefrontSettings.load(restaurant)
    storefront.doordash_business_id = business.external_business_id
    storefront.save()

    logger.info(
        "DoorDash business created for %s: %s", slug, business.external_business_id
    )
    return json_response(
        {
            "business_id": business.external_business_id,
            "business": business.model_dump(mode="json"),
        },
        status=201,
    )


@csrf_exempt
@require_http_methods(["GET", "POST"])
@login_required
def stores(request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET  /api/restaurants/{slug}/delivery/stores?business_id=...
    POST /api/restaurants/{slug}/delivery/stores

    List or create DoorDash pickup stores. The business id defaults to the
    one saved in the storefront settings.
    """
    restaurant = get_restaurant_or_404(slug)
    _require_manager(request, restaurant)
    storefront = StorefrontSettings.load(restaurant)

    if request.method == "GET":
        business_id = (
            request.GET.get("business_id") or storefront.doordash_business_id
        )
        if not business_id:
            return error_response("business_id is required")
        try:
            results = services.list_stores(business_id)
        except DeliveryError as e:
            return _provider_error(e, "Failed to list stores")
        return json_response(
            {
                "business_id": business_id,
                "stores": [s.model_dump(mode="json") for s in results],
            }
        )

    try:
        body = parse_body(request, StoreCreateRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    business_id = body.business_id or storefront.doordash_business_id
    if not business_id:
        return error_response("business_id is required")

    try:
        store = services.create_store(
            restaurant,
            business_id,
            body.store_id or f"{restaurant.slug}-main",
            name=body.name or None,
            phone=body.phone or None,
            address=body.address or None,
        )
    except InvalidPhoneNumber as e:
        return error_response(
            "validation_error",
            details=[{"field": "phone", "message": e.message}],
        )
    except DeliveryError as e:
        return _provider_error(e, "Failed to create store")

    storefront.doordash_business_id = business_id
    storefront.doordash_store_id = store.external_store_id
    storefront.save()

    return json_response(
        {
            "store_id": store.external_store_id,
            "store": store.model_dump(mode="json"),
        },
        status=201,
    )


@require_GET
@login_required
def list_defaults(request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/delivery/defaults

    Every DoorDash developer account has a "default" business and store;
    list them so they can be used before a dedicated store is created.
    """
    restaurant = get_restaurant_or_404(slug)
    _require_manager(request, restaurant)

    try:
        businesses = services.list_businesses()
        default_stores = services.list_stores(DEFAULT_BUSINESS_ID)
    except DeliveryError as e:
        return _provider_error(e, "Failed to list defaults")

    return json_response(
        {
            "businesses": [b.model_dump(mode="json") for b in businesses],
            "stores": [s.model_dump(mode="json") for s in default_stores],
            "message": (
                f'Use business_id "{DEFAULT_BUSINESS_ID}" and store_id '
                f'"{DEFAULT_BUSINESS_ID}" until a store is registered'
            ),
        }
    )
