"""Tests for checkout services."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from apps.web.delivery.exceptions import DeliveryAPIError
from apps.web.delivery.pricing import DeliveryEstimate
from apps.web.payments.services import PaymentError
from apps.web.storefront import services
from apps.web.storefront.models import (
    Order,
    OrderStatus,
    OrderType,
    PaymentStatus,
    StorefrontSettings,
)
from apps.web.storefront.serializers import OrderCreateRequest

from .factories import MenuItemFactory, OrderFactory, StorefrontSettingsFactory


def _order_request(**overrides) -> OrderCreateRequest:
    data = {
        "customer": {
            "name": "Jane Doe",
            "phone": "416-555-0123",
            "email": "jane@example.com",
        },
        "order_type": "pickup",
        **overrides,
    }
    return OrderCreateRequest.model_validate(data)


class TestCalculateTotals:
    """Tests for calculate_totals."""

    def test_pickup(self):
        item = MagicMock(price=Decimal("12.99"))

        totals = services.calculate_totals([(item, 2)], Decimal("0.13"))

        assert totals.subtotal == Decimal("25.98")
        assert totals.delivery_fee == Decimal("0")
        assert totals.tax == Decimal("3.38")
        assert totals.total == Decimal("29.36")

    def test_tax_includes_delivery_fee(self):
        item = MagicMock(price=Decimal("20.00"))

        totals = services.calculate_totals(
            [(item, 1)],
            Decimal("0.13"),
            delivery_fee=Decimal("10.25"),
            tip=Decimal("3.00"),
        )

        # (20.00 + 10.25) * 0.13 = 3.9325
        assert totals.tax == Decimal("3.93")
        assert totals.total == Decimal("37.18")

    def test_tax_rounds_half_up(self):
        item = MagicMock(price=Decimal("0.50"))

        totals = services.calculate_totals([(item, 1)], Decimal("0.13"))

        # 0.065 -> 0.07
        assert totals.tax == Decimal("0.07")


@pytest.mark.django_db
class TestResolveOrderItems:
    """Tests for resolve_order_items."""

    def test_resolves_items(self, restaurant):
        item = MenuItemFactory(restaurant=restaurant)

        resolved = services.resolve_order_items(restaurant, [(item.pk, 2)])

        assert resolved == [(item, 2)]

    def test_empty_cart(self, restaurant):
        with pytest.raises(services.CheckoutError) as exc_info:
            services.resolve_order_items(restaurant, [])

        assert exc_info.value.payload == {"error": "Your cart is empty"}

    def test_reports_every_bad_item(self, restaurant):
        ok = MenuItemFactory(restaurant=restaurant)
        sold_out = MenuItemFactory(
            restaurant=restaurant, name="Calzone", is_available=False
        )
        foreign = MenuItemFactory()

        with pytest.raises(services.CheckoutError) as exc_info:
            services.resolve_order_items(
                restaurant, [(ok.pk, 1), (sold_out.pk, 1), (foreign.pk, 1)]
            )

        assert exc_info.value.error == "validation_error"
        assert exc_info.value.details == [
            {
                "field": "items[1].menu_item_id",
                "message": "'Calzone' is currently unavailable",
            },
            {"field": "items[2].menu_item_id", "message": "Item not found"},
        ]


@pytest.mark.django_db
class TestValidateOrderRequest:
    """Tests for validate_order_request."""

    def test_ordering_disabled(self, restaurant):
        storefront = StorefrontSettingsFactory(
            restaurant=restaurant, ordering_enabled=False
        )

        with pytest.raises(services.CheckoutError, match="not enabled"):
            services.validate_order_request(storefront, _order_request())

    def test_pickup_disabled(self, restaurant):
        storefront = StorefrontSettingsFactory(
            restaurant=restaurant, pickup_enabled=False
        )

        with pytest.raises(services.CheckoutError, match="Pickup"):
            services.validate_order_request(storefront, _order_request())

    def test_delivery_needs_address(self, restaurant):
        storefront = StorefrontSettings.load(restaurant)

        with pytest.raises(services.CheckoutError) as exc_info:
            services.validate_order_request(
                storefront, _order_request(order_type="delivery")
            )

        assert exc_info.value.details[0]["field"] == "delivery_address"

    def test_valid_delivery(self, restaurant):
        storefront = StorefrontSettings.load(restaurant)

        services.validate_order_request(
            storefront,
            _order_request(order_type="delivery", delivery_address="100 Queen St W"),
        )


@pytest.mark.django_db
class TestEstimateOrderDelivery:
    """Tests for estimate_order_delivery."""

    @patch("apps.web.storefront.services.estimate_delivery")
    def test_outside_radius(self, mock_estimate, restaurant):
        mock_estimate.return_value = DeliveryEstimate(
            available=False,
            message="Delivery not available: 120.4km requested (max 100km)",
        )

        with pytest.raises(services.CheckoutError) as exc_info:
            services.estimate_order_delivery(
                restaurant, StorefrontSettings.load(restaurant), "Ottawa, ON"
            )

        assert exc_info.value.details == [
            {
                "field": "delivery_address",
                "message": "Delivery not available: 120.4km requested (max 100km)",
            }
        ]
        assert mock_estimate.call_args.args[0] == restaurant.address


@pytest.mark.django_db
class TestCreateOrder:
    """Tests for create_order."""

    @patch("apps.web.storefront.services.create_payment_intent")
    def test_creates_order_items_and_intent(self, mock_intent, restaurant):
        mock_intent.return_value = MagicMock(
            id="pi_test123", client_secret="pi_test123_secret_abc"
        )
        storefront = StorefrontSettingsFactory(
            restaurant=restaurant, statement_descriptor_suffix="JOES"
        )
        item = MenuItemFactory(restaurant=restaurant, price=Decimal("12.99"))
        delivery = DeliveryEstimate(
            available=True,
            message="Delivery available",
            distance_km=7.25,
            duration_minutes=11,
            fee=Decimal("10.25"),
        )

        order, intent = services.create_order(
            restaurant,
            storefront,
            _order_request(order_type="delivery", delivery_address="100 Queen St W"),
            [(item, 2)],
            delivery,
        )

        assert intent.id == "pi_test123"
        assert order.stripe_payment_intent_id == "pi_test123"
        assert order.confirmation_code.startswith("ORD-")
        assert order.subtotal == Decimal("25.98")
        assert order.delivery_fee == Decimal("10.25")
        # (25.98 + 10.25) * 0.13 = 4.7099
        assert order.tax == Decimal("4.71")
        assert order.total == Decimal("40.94")
        assert order.delivery_distance_km == Decimal("7.25")

        line = order.items.get()
        assert line.item_name == item.name
        assert line.line_total == Decimal("25.98")

        kwargs = mock_intent.call_args.kwargs
        assert kwargs["amount"] == Decimal("40.94")
        assert kwargs["description"] == "Joe's Pizza Order - Delivery"
        assert kwargs["receipt_email"] == "jane@example.com"
        assert kwargs["statement_descriptor_suffix"] == "JOES"
        assert kwargs["metadata"]["order_id"] == str(order.pk)
        assert kwargs["metadata"]["delivery_fee"] == "10.25"
        assert kwargs["metadata"]["tax_amount"] == "4.71"

    @patch("apps.web.storefront.services.create_payment_intent")
    def test_payment_failure_rolls_back(self, mock_intent, restaurant):
        mock_intent.side_effect = PaymentError("Card processing unavailable")
        item = MenuItemFactory(restaurant=restaurant)

        with pytest.raises(PaymentError):
            services.create_order(
                restaurant,
                StorefrontSettings.load(restaurant),
                _order_request(),
                [(item, 1)],
            )

        assert not Order.objects.exists()


@pytest.mark.django_db
class TestConfirmPaidOrder:
    """Tests for confirm_paid_order."""

    def test_confirms_pickup_order(self, restaurant):
        order = OrderFactory(restaurant=restaurant)

        with patch(
            "apps.web.storefront.services.dispatch_order_delivery"
        ) as mock_dispatch:
            result = services.confirm_paid_order(order)

        assert not result.already_confirmed
        assert result.delivery_warning is None
        assert result.order.status == OrderStatus.CONFIRMED
        assert result.order.payment_status == PaymentStatus.CAPTURED
        assert (
            result.order.estimated_ready_time - result.order.confirmed_at
            == services.DEFAULT_PREP_TIME
        )
        mock_dispatch.assert_not_called()

    def test_already_confirmed_is_untouched(self, restaurant):
        order = OrderFactory(
            restaurant=restaurant,
            status=OrderStatus.PREPARING,
            payment_status=PaymentStatus.CAPTURED,
        )

        result = services.confirm_paid_order(order)

        assert result.already_confirmed
        assert result.order.status == OrderStatus.PREPARING

    def test_dispatches_delivery(self, restaurant):
        order = OrderFactory(
            restaurant=restaurant,
            order_type=OrderType.DELIVERY,
            delivery_address="100 Queen St W",
        )

        with patch(
            "apps.web.storefront.services.dispatch_order_delivery"
        ) as mock_dispatch:
            services.confirm_paid_order(order)
            services.confirm_paid_order(order)

        mock_dispatch.assert_called_once()

    def test_dispatch_failure_is_a_warning(self, restaurant):
        order = OrderFactory(
            restaurant=restaurant,
            order_type=OrderType.DELIVERY,
            delivery_address="100 Queen St W",
        )

        with patch(
            "apps.web.storefront.services.dispatch_order_delivery",
            side_effect=DeliveryAPIError("DoorDash API error: 503"),
        ):
            result = services.confirm_paid_order(order)

        assert result.order.status == OrderStatus.CONFIRMED
        assert result.delivery_warning == (
            "Order confirmed but courier dispatch failed: DoorDash API error: 503"
        )


@pytest.mark.django_db
class TestMarkPaymentFailed:
    """Tests for mark_payment_failed."""

    def test_marks_failed(self, restaurant):
        order = OrderFactory(restaurant=restaurant)

        services.mark_payment_failed(order, "card_declined")

        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.FAILED
        assert order.status == OrderStatus.PENDING

    def test_captured_payment_is_kept(self, restaurant):
        order = OrderFactory(
            restaurant=restaurant,
            status=OrderStatus.CONFIRMED,
            payment_status=PaymentStatus.CAPTURED,
        )

        services.mark_payment_failed(order)

        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.CAPTURED
