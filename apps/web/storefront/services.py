"""
Checkout services - pricing, order creation and payment confirmation.

Totals are always computed server-side from the menu and the delivery
estimate; amounts sent by the browser are never trusted.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

import stripe

from apps.web.core.models import Restaurant
from apps.web.delivery.exceptions import DeliveryError
from apps.web.delivery.pricing import CENTS, DeliveryEstimate
from apps.web.delivery.services import dispatch_order_delivery, estimate_delivery
from apps.web.payments.services import create_payment_intent
from apps.web.storefront.models import (
    MenuItem,
    Order,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentStatus,
    StorefrontSettings,
)
from apps.web.storefront.serializers import OrderCreateRequest

logger = logging.getLogger(__name__)

DEFAULT_PREP_TIME = timedelta(minutes=30)


class CheckoutError(Exception):
    """Order cannot be placed; carries a ready-to-send error body."""

    def __init__(
        self,
        error: str,
        details: list[dict[str, str]] | None = None,
        status: int = 400,
    ) -> None:
        super().__init__(error)
        self.error = error
        self.details = details
        self.status = status

    @property
    def payload(self) -> dict[str, object]:
        if self.details is None:
            return {"error": self.error}
        return {"error": self.error, "details": self.details}


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal


@dataclass(frozen=True)
class ConfirmationResult:
    order: Order
    already_confirmed: bool = False
    delivery_warning: str | None = None


def generate_confirmation_code() -> str:
    """Generate a unique customer-facing confirmation code (ORD-XXXXXX)."""
    while True:
        code = f"ORD-{secrets.token_hex(3).upper()}"
        if not Order.objects.filter(confirmation_code=code).exists():
            return code


def resolve_order_items(
    restaurant: Restaurant, requested: list[tuple[int, int]]
) -> list[tuple[MenuItem, int]]:
    """
    Look up (menu_item_id, quantity) pairs on the restaurant's menu.

    Raises:
        CheckoutError: validation_error listing every missing or
            unavailable item, or an empty-cart error
    """
    if not requested:
        raise CheckoutError("Your cart is empty")

    items = MenuItem.objects.for_restaurant(restaurant).in_bulk(
        [item_id for item_id, _quantity in requested]
    )

    errors: list[dict[str, str]] = []
    resolved: list[tuple[MenuItem, int]] = []

    for i, (item_id, quantity) in enumerate(requested):
        field = f"items[{i}].menu_item_id"
        menu_item = items.get(item_id)
        if menu_item is None:
            errors.append({"field": field, "message": "Item not found"})
        elif not menu_item.is_available:
            errors.append(
                {
                    "field": field,
                    "message": f"'{menu_item.name}' is currently unavailable",
                }
            )
        else:
            resolved.append((menu_item, quantity))

    if errors:
        raise CheckoutError("validation_error", details=errors)

    return resolved


def calculate_totals(
    items: list[tuple[MenuItem, int]],
    tax_rate: Decimal,
    delivery_fee: Decimal = Decimal("0"),
    tip: Decimal = Decimal("0"),
) -> OrderTotals:
    """
    Order totals; tax applies to the subtotal plus the delivery fee.

    >>> calculate_totals([], Decimal("0.13"), Decimal("5.00")).tax
    Decimal('0.65')
    """
    subtotal = sum((item.price * quantity for item, quantity in items), Decimal("0"))
    tax = ((subtotal + delivery_fee) * tax_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    total = subtotal + delivery_fee + tax + tip
    return OrderTotals(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        tax=tax,
        tip=tip,
        total=total,
    )


def estimate_order_delivery(
    restaurant: Restaurant, storefront: StorefrontSettings, delivery_address: str
) -> DeliveryEstimate:
    """
    Price delivery to the customer's address.

    Raises:
        CheckoutError: If the address is outside the delivery radius or
            cannot be located
    """
    estimate = estimate_delivery(
        restaurant.address, delivery_address, storefront.fee_schedule
    )
    if not estimate.available:
        raise CheckoutError(
            "validation_error",
            details=[{"field": "delivery_address", "message": estimate.message}],
        )
    return estimate


def validate_order_request(
    storefront: StorefrontSettings, order_request: OrderCreateRequest
) -> None:
    """
    Check that the restaurant accepts this kind of order.

    Raises:
        CheckoutError: If ordering or the requested order type is disabled
    """
    if not storefront.ordering_enabled:
        raise CheckoutError("Online ordering is not enabled for this restaurant")

    if order_request.order_type == OrderType.PICKUP and not storefront.pickup_enabled:
        raise CheckoutError("Pickup is not available for this restaurant")

    if order_request.order_type == OrderType.DELIVERY:
        if not storefront.delivery_enabled:
            raise CheckoutError("Delivery is not available for this restaurant")
        if not order_request.delivery_address.strip():
            raise CheckoutError(
                "validation_error",
                details=[
                    {
                        "field": "delivery_address",
                        "message": "Delivery address is required for delivery orders",
                    }
                ],
            )


def create_order(
    restaurant: Restaurant,
    storefront: StorefrontSettings,
    order_request: OrderCreateRequest,
    items: list[tuple[MenuItem, int]],
    delivery: DeliveryEstimate | None = None,
) -> tuple[Order, stripe.PaymentIntent]:
    """
    Create a pending order with its line items and Stripe PaymentIntent.

    The order and the PaymentIntent are created in one transaction: if
    Stripe fails the order is rolled back.

    Raises:
        PaymentError: If the PaymentIntent cannot be created
    """
    delivery_fee = Decimal("0")
    if delivery is not None and delivery.fee is not None:
        delivery_fee = delivery.fee
    totals = calculate_totals(
        items,
        storefront.tax_rate,
        delivery_fee=delivery_fee,
        tip=order_request.tip,
    )
    is_delivery = order_request.order_type == OrderType.DELIVERY
    customer = order_request.customer

    with transaction.atomic():
        order = Order.objects.create(
            restaurant=restaurant,
            confirmation_code=generate_confirmation_code(),
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            order_type=order_request.order_type,
            special_instructions=order_request.special_instructions,
            delivery_address=order_request.delivery_address if is_delivery else "",
            delivery_distance_km=(
                Decimal(str(delivery.distance_km))
                if delivery and delivery.distance_km is not None
                else None
            ),
            subtotal=totals.subtotal,
            delivery_fee=totals.delivery_fee,
            tax=totals.tax,
            tip=totals.tip,
            total=totals.total,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
        )

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    restaurant=restaurant,
                    order=order,
                    menu_item=menu_item,
                    item_name=menu_item.name,
                    quantity=quantity,
                    unit_price=menu_item.price,
                    line_total=menu_item.price * quantity,
                )
                for menu_item, quantity in items
            ]
        )

        payment_intent = create_payment_intent(
            amount=totals.total,
            currency=storefront.currency,
            description=(
                f"{restaurant.name} Order - {'Delivery' if is_delivery else 'Pickup'}"
            ),
            receipt_email=customer.email,
            statement_descriptor_suffix=storefront.statement_descriptor_suffix,
            metadata={
                "order_id": str(order.pk),
                "restaurant_slug": restaurant.slug,
                "confirmation_code": order.confirmation_code,
                "customer_name": customer.name,
                "customer_phone": customer.phone,
                "delivery_method": order.order_type,
                "delivery_address": order.delivery_address or "N/A",
                "subtotal": f"{totals.subtotal:.2f}",
                "delivery_fee": f"{totals.delivery_fee:.2f}",
                "tax_amount": f"{totals.tax:.2f}",
            },
        )

        order.stripe_payment_intent_id = payment_intent.id
        order.save(update_fields=["stripe_payment_intent_id"])

    logger.info(
        "Order created: order_id=%s confirmation_code=%s total=%s type=%s",
        order.pk,
        order.confirmation_code,
        order.total,
        order.order_type,
    )
    return order, payment_intent


def confirm_paid_order(order: Order) -> ConfirmationResult:
    """
    Mark an order as paid and dispatch its courier.

    Safe to call from both the confirm endpoint and the Stripe webhook:
    an order that is no longer pending is left untouched. A failed
    courier dispatch doesn't fail the confirmation; it is returned as a
    warning for staff to follow up.
    """
    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        if locked.status != OrderStatus.PENDING:
            logger.info(
                "Order already processed, skipping: order_id=%s status=%s",
                locked.pk,
                locked.status,
            )
            return ConfirmationResult(order=locked, already_confirmed=True)

        now = datetime.now(UTC)
        locked.status = OrderStatus.CONFIRMED
        locked.payment_status = PaymentStatus.CAPTURED
        locked.confirmed_at = now
        locked.estimated_ready_time = now + DEFAULT_PREP_TIME
        locked.save(
            update_fields=[
                "status",
                "payment_status",
                "confirmed_at",
                "estimated_ready_time",
                "updated_at",
            ]
        )

    logger.info(
        "Order confirmed: order_id=%s confirmation_code=%s",
        locked.pk,
        locked.confirmation_code,
    )

    warning = None
    if locked.is_delivery and not locked.delivery_id:
        try:
            dispatch_order_delivery(locked)
        except DeliveryError as e:
            logger.error(
                "Delivery dispatch failed for order %s: %s", locked.pk, e.message
            )
            warning = f"Order confirmed but courier dispatch failed: {e.message}"

    return ConfirmationResult(order=locked, delivery_warning=warning)


def mark_payment_failed(order: Order, reason: str = "") -> None:
    """Record a failed payment attempt; the order stays pending for a retry."""
    if order.payment_status == PaymentStatus.CAPTURED:
        return
    order.payment_status = PaymentStatus.FAILED
    order.save(update_fields=["payment_status", "updated_at"])
    logger.info(
        "Payment failed for order: order_id=%s confirmation_code=%s reason=%s",
        order.pk,
        order.confirmation_code,
        reason or "unknown",
    )
