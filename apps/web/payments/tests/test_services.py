"""Tests for payment services."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import stripe

from apps.web.payments.services import (
    PaymentError,
    amount_to_cents,
    create_payment_intent,
    retrieve_payment_intent,
    verify_payment_intent,
)


class TestAmountToCents:
    """Tests for amount_to_cents."""

    @pytest.mark.parametrize(
        "amount, cents",
        [
            (Decimal("25.00"), 2500),
            (Decimal("12.995"), 1300),
            (Decimal("12.994"), 1299),
            (Decimal("0.005"), 1),
            (Decimal("0"), 0),
        ],
    )
    def test_rounds_half_up(self, amount, cents):
        assert amount_to_cents(amount) == cents


class TestCreatePaymentIntent:
    """Tests for create_payment_intent."""

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_success(self, mock_create):
        """Test successful PaymentIntent creation."""
        mock_create.return_value = MagicMock(
            id="pi_test123",
            client_secret="pi_test123_secret_abc",
            amount=2500,
            currency="usd",
            status="requires_payment_method",
        )

        result = create_payment_intent(
            amount=Decimal("25.00"),
            metadata={"order_id": "123"},
        )

        mock_create.assert_called_once_with(
            amount=2500,
            currency="usd",
            automatic_payment_methods={"enabled": True},
            metadata={"order_id": "123"},
        )
        assert result.id == "pi_test123"
        assert result.client_secret == "pi_test123_secret_abc"

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_with_custom_currency(self, mock_create):
        """Test PaymentIntent creation with custom currency."""
        mock_create.return_value = MagicMock(id="pi_test123")

        create_payment_intent(
            amount=Decimal("50.00"),
            currency="cad",
        )

        mock_create.assert_called_once()
        call_args = mock_create.call_args
        assert call_args[1]["currency"] == "cad"
        assert call_args[1]["amount"] == 5000

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_optional_fields(self, mock_create):
        """Description, receipt email and descriptor suffix are sent when set."""
        mock_create.return_value = MagicMock(id="pi_test123")

        create_payment_intent(
            amount=Decimal("28.25"),
            description="Joe's Pizza Order - Pickup",
            receipt_email="jane@example.com",
            statement_descriptor_suffix="JOES PIZZA",
        )

        call_args = mock_create.call_args
        assert call_args[1]["description"] == "Joe's Pizza Order - Pickup"
        assert call_args[1]["receipt_email"] == "jane@example.com"
        assert call_args[1]["statement_descriptor_suffix"] == "JOES PIZZA"
        assert call_args[1]["metadata"] == {}

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_omits_empty_fields(self, mock_create):
        """Empty optional fields are not sent to Stripe."""
        mock_create.return_value = MagicMock(id="pi_test123")

        create_payment_intent(amount=Decimal("10.00"), receipt_email="")

        assert "receipt_email" not in mock_create.call_args[1]
        assert "description" not in mock_create.call_args[1]

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_rounds_amount(self, mock_create):
        """Test that amount is rounded half-up to cents."""
        mock_create.return_value = MagicMock(id="pi_test123")

        create_payment_intent(amount=Decimal("12.995"))

        call_args = mock_create.call_args
        assert call_args[1]["amount"] == 1300

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_stripe_error(self, mock_create):
        """Test handling of Stripe API errors."""
        mock_create.side_effect = stripe.StripeError("Card declined")

        with pytest.raises(PaymentError) as exc_info:
            create_payment_intent(amount=Decimal("25.00"))

        assert "Card declined" in str(exc_info.value)

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_payment_intent_card_error_code(self, mock_create):
        """Card errors keep Stripe's error code."""
        mock_create.side_effect = stripe.CardError(
            "Your card was declined.", param=None, code="card_declined"
        )

        with pytest.raises(PaymentError) as exc_info:
            create_payment_intent(amount=Decimal("25.00"))

        assert exc_info.value.code == "card_declined"


class TestRetrievePaymentIntent:
    """Tests for retrieve_payment_intent."""

    @patch("apps.web.payments.services.stripe.PaymentIntent.retrieve")
    def test_retrieve_payment_intent_success(self, mock_retrieve):
        """Test successful PaymentIntent retrieval."""
        mock_retrieve.return_value = MagicMock(
            id="pi_test123",
            status="succeeded",
        )

        result = retrieve_payment_intent("pi_test123")

        mock_retrieve.assert_called_once_with("pi_test123")
        assert result.status == "succeeded"

    @patch("apps.web.payments.services.stripe.PaymentIntent.retrieve")
    def test_retrieve_payment_intent_not_found(self, mock_retrieve):
        """Test handling of non-existent PaymentIntent."""
        mock_retrieve.side_effect = stripe.StripeError("No such payment_intent")

        with pytest.raises(PaymentError) as exc_info:
            retrieve_payment_intent("pi_invalid")

        assert "payment_intent" in str(exc_info.value)


class TestVerifyPaymentIntent:
    """Tests for verify_payment_intent."""

    @patch("apps.web.payments.services.retrieve_payment_intent")
    def test_verify_payment_intent_succeeded(self, mock_retrieve):
        """Test verification of succeeded payment."""
        mock_retrieve.return_value = MagicMock(status="succeeded")

        result = verify_payment_intent("pi_test123")

        assert result is True

    @patch("apps.web.payments.services.retrieve_payment_intent")
    def test_verify_payment_intent_not_succeeded(self, mock_retrieve):
        """Test verification of non-succeeded payment."""
        mock_retrieve.return_value = MagicMock(status="requires_payment_method")

        result = verify_payment_intent("pi_test123")

        assert result is False

    @patch("apps.web.payments.services.retrieve_payment_intent")
    def test_verify_payment_intent_error_returns_false(self, mock_retrieve):
        """Test that errors return False instead of raising."""
        mock_retrieve.side_effect = PaymentError("Not found")

        result = verify_payment_intent("pi_invalid")

        assert result is False
