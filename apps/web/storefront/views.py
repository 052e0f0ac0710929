"""
Storefront API views - public endpoints for the ordering frontend.

- Menu: categories with available items
- Cart: session-backed cart per restaurant
- Orders: checkout, payment confirmation and status tracking
"""

import logging
from decimal import Decimal

from django.db.models import Prefetch
from django.http import Http404, HttpRequest, JsonResponse
from django.views.decorators.cache import cache_control, never_cache
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from apps.web.core.decorators import idempotency_key_required
from apps.web.core.http import (
    BadRequest,
    allow_cors_preflight,
    error_response,
    get_restaurant_or_404,
    json_response,
    parse_body,
)
from apps.web.core.models import Restaurant
from apps.web.payments.services import PaymentError, retrieve_payment_intent
from apps.web.storefront import services
from apps.web.storefront.cart import Cart
from apps.web.storefront.models import (
    MenuCategory,
    MenuItem,
    Order,
    OrderStatus,
    OrderType,
    PaymentStatus,
    StorefrontSettings,
)
from apps.web.storefront.serializers import (
    CartItemAddRequest,
    CartItemUpdateRequest,
    CartLineSchema,
    CartResponse,
    CustomerSchema,
    MenuCategorySchema,
    MenuItemSchema,
    MenuResponse,
    OrderConfirmRequest,
    OrderConfirmResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDetailResponse,
    OrderItemResponseSchema,
    OrderStatusResponse,
)

logger = logging.getLogger(__name__)


def _get_order_or_404(restaurant: Restaurant, order_id: int) -> Order:
    try:
        return Order.objects.for_restaurant(restaurant).get(pk=order_id)
    except Order.DoesNotExist as exc:
        raise Http404(f"Order {order_id} not found") from exc


# =============================================================================
# Menu
# =============================================================================


@allow_cors_preflight
@require_GET
@cache_control(max_age=300, public=True)  # 5 minutes
def menu(_request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/menu

    Categories in display order, each with its available items.

    Cache: 5 minutes
    """
    restaurant = get_restaurant_or_404(slug)
    storefront = StorefrontSettings.load(restaurant)

    categories = MenuCategory.objects.for_restaurant(restaurant).prefetch_related(
        Prefetch("items", queryset=MenuItem.objects.filter(is_available=True))
    )

    response = MenuResponse(
        restaurant=restaurant.name,
        currency=storefront.currency,
        ordering_enabled=storefront.ordering_enabled,
        pickup_enabled=storefront.pickup_enabled,
        delivery_enabled=storefront.delivery_enabled,
        categories=[
            MenuCategorySchema(
                id=category.pk,
                name=category.name,
                description=category.description,
                items=[MenuItemSchema.model_validate(i) for i in category.items.all()],
            )
            for category in categories
        ],
    )
    return json_response(response.model_dump(mode="json"))


# =============================================================================
# Cart
# =============================================================================


def _cart_response(cart: Cart, status: int = 200) -> JsonResponse:
    lines = cart.lines()
    response = CartResponse(
        items=[
            CartLineSchema(
                menu_item_id=line.menu_item.pk,
                name=line.menu_item.name,
                image_url=line.menu_item.image_url,
                unit_price=line.menu_item.price,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in lines
        ],
        item_count=sum(line.quantity for line in lines),
        subtotal=sum((line.line_total for line in lines), Decimal("0")),
    )
    return json_response(response.model_dump(mode="json"), status=status)


@csrf_exempt
@allow_cors_preflight
@never_cache
@require_http_methods(["GET", "DELETE"])
def cart(request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET    /api/restaurants/{slug}/cart - cart contents and subtotal
    DELETE /api/restaurants/{slug}/cart - empty the cart
    """
    restaurant = get_restaurant_or_404(slug)
    session_cart = Cart(request.session, restaurant)

    if request.method == "DELETE":
        session_cart.clear()

    return _cart_response(session_cart)


@csrf_exempt
@allow_cors_preflight
@require_POST
def cart_add_item(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/cart/items

    Add an item; an item already in the cart has its quantity increased.
    """
    restaurant = get_restaurant_or_404(slug)

    try:
        body = parse_body(request, CartItemAddRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    menu_item = (
        MenuItem.objects.for_restaurant(restaurant)
        .filter(pk=body.menu_item_id)
        .first()
    )
    if menu_item is None or not menu_item.is_available:
        message = (
            "Item not found"
            if menu_item is None
            else f"'{menu_item.name}' is currently unavailable"
        )
        return error_response(
            "validation_error",
            details=[{"field": "menu_item_id", "message": message}],
        )

    session_cart = Cart(request.session, restaurant)
    session_cart.add(menu_item, body.quantity)
    return _cart_response(session_cart, status=201)


@csrf_exempt
@allow_cors_preflight
@require_http_methods(["PATCH", "DELETE"])
def cart_item(request: HttpRequest, slug: str, item_id: int) -> JsonResponse:
    """
    PATCH  /api/restaurants/{slug}/cart/items/{item_id} - set quantity (0 removes)
    DELETE /api/restaurants/{slug}/cart/items/{item_id} - remove the line
    """
    restaurant = get_restaurant_or_404(slug)
    session_cart = Cart(request.session, restaurant)

    if item_id not in session_cart:
        return error_response("Item is not in the cart", status=404)

    if request.method == "DELETE":
        session_cart.remove(item_id)
        return _cart_response(session_cart)

    try:
        body = parse_body(request, CartItemUpdateRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    session_cart.update_quantity(item_id, body.quantity)
    return _cart_response(session_cart)


# =============================================================================
# Orders
# =============================================================================


@csrf_exempt
@allow_cors_preflight
@require_POST
@idempotency_key_required
def create_order(request: HttpRequest, slug: str) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/orders

    Create a pending order and return the Stripe client secret for payment.
    Items default to the session cart. Delivery orders are priced from the
    distance to the delivery address.

    Request body: OrderCreateRequest schema
    Response: OrderCreateResponse schema (201) or error (400/500)
    """
    restaurant = get_restaurant_or_404(slug)
    storefront = StorefrontSettings.load(restaurant)

    try:
        order_request = parse_body(request, OrderCreateRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    if order_request.items is not None:
        requested = [(i.menu_item_id, i.quantity) for i in order_request.items]
    else:
        requested = [
            (line.menu_item.pk, line.quantity)
            for line in Cart(request.session, restaurant).lines()
        ]

    try:
        services.validate_order_request(storefront, order_request)
        items = services.resolve_order_items(restaurant, requested)
        delivery = None
        if order_request.order_type == OrderType.DELIVERY:
            delivery = services.estimate_order_delivery(
                restaurant, storefront, order_request.delivery_address
            )
        order, payment_intent = services.create_order(
            restaurant, storefront, order_request, items, delivery
        )
    except services.CheckoutError as e:
        return json_response(e.payload, status=e.status)
    except PaymentError as e:
        return error_response(
            "Payment processing failed", status=500, details=e.message
        )

    response = OrderCreateResponse(
        order_id=order.pk,
        confirmation_code=order.confirmation_code,
        status=order.status,
        order_type=order.order_type,
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        tax=order.tax,
        tip=order.tip,
        total=order.total,
        delivery_distance_km=order.delivery_distance_km,
        stripe_client_secret=payment_intent.client_secret,
        stripe_payment_intent_id=payment_intent.id,
        created_at=order.created_at,
    )
    return json_response(response.model_dump(mode="json"), status=201)


@allow_cors_preflight
@require_GET
def get_order(_request: HttpRequest, slug: str, order_id: int) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/orders/{order_id}

    Response: OrderDetailResponse schema (200) or 404
    """
    restaurant = get_restaurant_or_404(slug)
    order = _get_order_or_404(restaurant, order_id)

    response = OrderDetailResponse(
        order_id=order.pk,
        confirmation_code=order.confirmation_code,
        status=order.status,
        payment_status=order.payment_status,
        customer=CustomerSchema(
            name=order.customer_name,
            phone=order.customer_phone,
            email=order.customer_email,
        ),
        items=[
            OrderItemResponseSchema(
                id=item.pk,
                item_name=item.item_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in order.items.all()
        ],
        order_type=order.order_type,
        special_instructions=order.special_instructions,
        delivery_address=order.delivery_address,
        delivery_distance_km=order.delivery_distance_km,
        delivery_id=order.delivery_id,
        delivery_status=order.delivery_status,
        delivery_tracking_url=order.delivery_tracking_url,
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        tax=order.tax,
        tip=order.tip,
        total=order.total,
        created_at=order.created_at,
        confirmed_at=order.confirmed_at,
        estimated_ready_time=order.estimated_ready_time,
    )
    return json_response(response.model_dump(mode="json"))


@csrf_exempt
@allow_cors_preflight
@require_POST
def confirm_order(request: HttpRequest, slug: str, order_id: int) -> JsonResponse:
    """
    POST /api/restaurants/{slug}/orders/{order_id}/confirm

    Confirm the order after the browser completes payment, dispatch the
    courier for delivery orders and empty the cart. Repeating the call (or
    calling it after the Stripe webhook already confirmed the order) returns
    the confirmed order again.

    Request body: OrderConfirmRequest schema
    Response: OrderConfirmResponse schema (200) or error
    """
    restaurant = get_restaurant_or_404(slug)
    order = _get_order_or_404(restaurant, order_id)

    try:
        confirm_request = parse_body(request, OrderConfirmRequest)
    except BadRequest as e:
        return json_response(e.payload, status=400)

    if order.stripe_payment_intent_id != confirm_request.payment_intent_id:
        return error_response("Payment intent does not match order")

    if order.payment_status != PaymentStatus.CAPTURED:
        if order.status != OrderStatus.PENDING:
            return error_response(f"Order is already {order.status}")

        try:
            intent = retrieve_payment_intent(confirm_request.payment_intent_id)
        except PaymentError as e:
            logger.warning(
                "Payment lookup failed for order %s: %s", order.pk, e.message
            )
            return error_response("Payment verification failed")

        if intent.status != "succeeded":
            return error_response(
                "Payment verification failed", details=f"status={intent.status}"
            )

    result = services.confirm_paid_order(order)
    Cart(request.session, restaurant).clear()

    confirmed = result.order
    response = OrderConfirmResponse(
        order_id=confirmed.pk,
        confirmation_code=confirmed.confirmation_code,
        status=confirmed.status,
        estimated_ready_time=confirmed.estimated_ready_time,
        delivery_id=confirmed.delivery_id,
        delivery_tracking_url=confirmed.delivery_tracking_url,
        delivery_warning=result.delivery_warning,
    )
    return json_response(response.model_dump(mode="json"))


@allow_cors_preflight
@require_GET
@cache_control(max_age=5, public=True)  # 5 seconds
def order_status(_request: HttpRequest, slug: str, order_id: int) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/orders/{order_id}/status

    Lightweight status for polling.
    """
    restaurant = get_restaurant_or_404(slug)
    order = _get_order_or_404(restaurant, order_id)

    response = OrderStatusResponse(
        status=order.status,
        payment_status=order.payment_status,
        delivery_status=order.delivery_status,
        delivery_tracking_url=order.delivery_tracking_url,
        updated_at=order.updated_at,
        estimated_ready_time=order.estimated_ready_time,
    )
    return json_response(response.model_dump(mode="json"))
