"""
Delivery services - synchronous entry points for views and the order flow.

Wraps the async Google Maps and DoorDash clients with asyncio.run and owns
the fallback rules:
- distance estimate unavailable -> delivery refused (never guessed)
- DoorDash quote unavailable -> restaurant's fallback fee
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, TypeVar

from django.conf import settings

from storefront_schemas import Business, Delivery, DeliveryRequest, Store

from apps.web.delivery.auth import get_credentials
from apps.web.delivery.doordash import DoorDashClient
from apps.web.delivery.exceptions import DeliveryError
from apps.web.delivery.geo import GoogleMapsClient
from apps.web.delivery.phone import format_phone_e164
from apps.web.delivery.pricing import DeliveryEstimate, FeeSchedule, quote_delivery

if TYPE_CHECKING:
    from apps.web.core.models import Restaurant
    from apps.web.storefront.models import Order

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

DEFAULT_PICKUP_LEAD = timedelta(minutes=30)
FALLBACK_DELIVERY_LEAD = timedelta(minutes=60)
DEFAULT_DROPOFF_BUSINESS_NAME = "Customer"


@dataclass(frozen=True)
class ProviderQuote:
    """Courier quote from DoorDash, or the fallback used when it is unreachable."""

    delivery_id: str
    fee: Decimal
    status: str
    estimated_pickup_time: datetime | None
    estimated_delivery_time: datetime | None
    is_fallback: bool = False
    message: str = ""


def new_external_delivery_id() -> str:
    """Delivery id for ad-hoc requests: order_<epoch millis>."""
    return f"order_{int(time.time() * 1000)}"


def format_pickup_time(value: datetime) -> str:
    """DoorDash timestamp format: YYYY-MM-DDTHH:MM:SSZ (UTC, no fraction)."""
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# Distance-based estimate
# =============================================================================


def estimate_delivery(
    pickup_address: str,
    dropoff_address: str,
    schedule: FeeSchedule,
) -> DeliveryEstimate:
    """
    Estimate distance, fee and ETA for delivering between two addresses.

    Returns:
        DeliveryEstimate; available=False when the route cannot be computed
        or is outside the delivery radius
    """

    async def _estimate() -> DeliveryEstimate:
        maps = GoogleMapsClient(settings.GOOGLE_MAPS_API_KEY)
        try:
            route = await maps.estimate_route(
                pickup_address,
                dropoff_address,
                average_speed_kmh=float(schedule.average_speed_kmh),
            )
        finally:
            await maps.close()
        return quote_delivery(route, schedule)

    estimate = asyncio.run(_estimate())

    if estimate.available:
        logger.info(
            "Delivery quote available: distance_km=%s minutes=%s fee=%s",
            estimate.distance_km,
            estimate.duration_minutes,
            estimate.fee,
        )
    else:
        logger.warning("Delivery unavailable: %s", estimate.message)

    return estimate


# =============================================================================
# DoorDash
# =============================================================================


def _run_doordash(operation: Callable[[DoorDashClient], Awaitable[_T]]) -> _T:
    """
    Run one DoorDash operation on a short-lived client.

    Raises:
        DeliveryAuthError: If credentials are not configured
    """
    client = DoorDashClient(
        get_credentials(), base_url=settings.DOORDASH_API_BASE_URL
    )

    async def _call() -> _T:
        try:
            return await operation(client)
        finally:
            await client.close()

    return asyncio.run(_call())


def request_provider_quote(
    *,
    pickup_address: str,
    dropoff_address: str,
    customer_phone: str,
    schedule: FeeSchedule,
    pickup_time: datetime | None = None,
) -> ProviderQuote:
    """
    Get a courier quote from DoorDash, falling back to the default fee.

    Raises:
        InvalidPhoneNumber: If the customer phone cannot be formatted
    """
    now = datetime.now(UTC)
    request = DeliveryRequest(
        external_delivery_id=new_external_delivery_id(),
        pickup_address=pickup_address,
        dropoff_address=dropoff_address,
        dropoff_phone_number=format_phone_e164(customer_phone),
        pickup_time=format_pickup_time(pickup_time or now + DEFAULT_PICKUP_LEAD),
    )

    try:
        quote = _run_doordash(lambda client: client.create_quote(request))
    except DeliveryError as e:
        logger.warning("DoorDash quote unavailable, using default fee: %s", e.message)
        return ProviderQuote(
            delivery_id=f"fallback_{int(now.timestamp() * 1000)}",
            fee=schedule.fallback_fee,
            status="fallback",
            estimated_pickup_time=now + DEFAULT_PICKUP_LEAD,
            estimated_delivery_time=now + FALLBACK_DELIVERY_LEAD,
            is_fallback=True,
            message="Using default fee - DoorDash API temporarily unavailable",
        )

    fee = Decimal(quote.fee) / 100 if quote.fee else schedule.fallback_fee
    return ProviderQuote(
        delivery_id=quote.external_delivery_id,
        fee=fee.quantize(Decimal("0.01")),
        status=quote.delivery_status or "quote",
        estimated_pickup_time=quote.pickup_time_estimated,
        estimated_delivery_time=quote.dropoff_time_estimated,
    )


def create_delivery(
    *,
    pickup_address: str,
    pickup_phone: str,
    dropoff_address: str,
    dropoff_phone: str,
    pickup_business_name: str,
    dropoff_business_name: str = DEFAULT_DROPOFF_BUSINESS_NAME,
    external_delivery_id: str | None = None,
    order_value_cents: int = 0,
) -> Delivery:
    """
    Dispatch a DoorDash courier.

    Raises:
        InvalidPhoneNumber: If either phone cannot be formatted
        DeliveryValidationError: If DoorDash rejects the parameters
        DeliveryError: For any other provider failure
    """
    request = DeliveryRequest(
        external_delivery_id=external_delivery_id or new_external_delivery_id(),
        pickup_address=pickup_address,
        pickup_phone_number=format_phone_e164(pickup_phone),
        pickup_business_name=pickup_business_name,
        dropoff_address=dropoff_address,
        dropoff_phone_number=format_phone_e164(dropoff_phone),
        dropoff_business_name=dropoff_business_name,
        order_value=order_value_cents,
        dropoff_contact_send_notifications=True,
    )
    logger.info(
        "Creating DoorDash delivery: id=%s pickup=%r dropoff=%r",
        request.external_delivery_id,
        request.pickup_address,
        request.dropoff_address,
    )
    return _run_doordash(lambda client: client.create_delivery(request))


def dispatch_order_delivery(order: "Order") -> Delivery:
    """
    Dispatch a courier for a paid delivery order and record it on the order.

    The order's payment intent id makes the external delivery id stable, so a
    repeated dispatch for the same order is rejected by DoorDash as a duplicate
    instead of sending a second courier.
    """
    restaurant = order.restaurant
    reference = order.stripe_payment_intent_id or order.confirmation_code

    delivery = create_delivery(
        pickup_address=restaurant.address,
        pickup_phone=restaurant.phone,
        pickup_business_name=restaurant.name,
        dropoff_address=order.delivery_address,
        dropoff_phone=order.customer_phone,
        external_delivery_id=f"order_{reference}",
        order_value_cents=int(order.subtotal * 100),
    )

    order.delivery_id = delivery.external_delivery_id
    order.delivery_status = delivery.delivery_status or ""
    order.delivery_tracking_url = delivery.tracking_url or ""
    order.save(
        update_fields=[
            "delivery_id",
            "delivery_status",
            "delivery_tracking_url",
            "updated_at",
        ]
    )
    return delivery


def get_delivery(external_delivery_id: str) -> Delivery:
    """Current DoorDash state of a delivery."""
    return _run_doordash(lambda client: client.get_delivery(external_delivery_id))


def create_business(restaurant: "Restaurant", description: str = "") -> Business:
    """Register the restaurant as a DoorDash business (id = restaurant slug)."""
    return _run_doordash(
        lambda client: client.create_business(
            restaurant.slug, restaurant.name, description
        )
    )


def list_businesses() -> list[Business]:
    return _run_doordash(lambda client: client.list_businesses())


def create_store(
    restaurant: "Restaurant",
    business_id: str,
    store_id: str,
    name: str | None = None,
    phone: str | None = None,
    address: str | None = None,
) -> Store:
    """Register a pickup store, defaulting to the restaurant's own details."""
    return _run_doordash(
        lambda client: client.create_store(
            business_id,
            store_id,
            name or restaurant.name,
            format_phone_e164(phone or restaurant.phone),
            address or restaurant.address,
        )
    )


def list_stores(business_id: str) -> list[Store]:
    return _run_doordash(lambda client: client.list_stores(business_id))
