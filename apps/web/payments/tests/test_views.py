"""Tests for the standalone payment-intent endpoint."""

from unittest.mock import MagicMock, patch

from django.test import Client as DjangoClient

import pytest
import stripe

from apps.web.storefront.tests.factories import StorefrontSettingsFactory

URL = "/api/restaurants/joes-pizza/payments/intent"


def _payload(**overrides) -> dict:
    return {
        "subtotal": "25.98",
        "delivery_fee": "5.50",
        "tax_amount": "4.09",
        "customer_name": "Jane Doe",
        "customer_phone": "416-555-0123",
        "customer_email": "jane@example.com",
        "delivery_method": "delivery",
        "delivery_address": "100 Queen St W, Toronto, ON",
        **overrides,
    }


@pytest.mark.django_db
class TestCreateIntentView:
    """Tests for POST /api/restaurants/{slug}/payments/intent."""

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_create_intent(self, mock_create, api_client: DjangoClient, restaurant):
        StorefrontSettingsFactory(
            restaurant=restaurant, currency="cad", statement_descriptor_suffix="JOES"
        )
        mock_create.return_value = MagicMock(
            id="pi_test123", client_secret="pi_test123_secret_abc", amount=3557
        )

        response = api_client.post(
            URL, data=_payload(), content_type="application/json"
        )

        assert response.status_code == 200
        assert response.json() == {
            "client_secret": "pi_test123_secret_abc",
            "payment_intent_id": "pi_test123",
            "amount": 3557,
        }

        kwargs = mock_create.call_args.kwargs
        assert kwargs["amount"] == 3557
        assert kwargs["currency"] == "cad"
        assert kwargs["description"] == "Joe's Pizza Order - Delivery"
        assert kwargs["statement_descriptor_suffix"] == "JOES"
        assert kwargs["metadata"] == {
            "restaurant_slug": "joes-pizza",
            "customer_name": "Jane Doe",
            "customer_phone": "416-555-0123",
            "delivery_method": "delivery",
            "delivery_address": "100 Queen St W, Toronto, ON",
            "subtotal": "25.98",
            "delivery_fee": "5.50",
            "tax_amount": "4.09",
        }

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_pickup_defaults(self, mock_create, api_client: DjangoClient, restaurant):
        mock_create.return_value = MagicMock(
            id="pi_test123", client_secret="pi_test123_secret_abc", amount=2598
        )

        response = api_client.post(
            URL,
            data={
                "subtotal": "25.98",
                "customer_name": "Jane Doe",
                "customer_phone": "4165550123",
            },
            content_type="application/json",
        )

        assert response.status_code == 200
        kwargs = mock_create.call_args.kwargs
        assert kwargs["description"] == "Joe's Pizza Order - Pickup"
        assert kwargs["metadata"]["delivery_address"] == "N/A"
        assert "receipt_email" not in kwargs

    @pytest.mark.parametrize(
        "overrides",
        [{"subtotal": "0"}, {"customer_name": ""}, {"customer_phone": ""}],
    )
    def test_missing_required_fields(
        self, api_client: DjangoClient, restaurant, overrides
    ):
        response = api_client.post(
            URL, data=_payload(**overrides), content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Missing required fields: subtotal, customer_name, customer_phone"
        )

    def test_invalid_amount(self, api_client: DjangoClient, restaurant):
        response = api_client.post(
            URL,
            data=_payload(subtotal="0.001", delivery_fee="0", tax_amount="0"),
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount"

    @patch("apps.web.payments.services.stripe.PaymentIntent.create")
    def test_stripe_error(self, mock_create, api_client: DjangoClient, restaurant):
        mock_create.side_effect = stripe.StripeError("Invalid API Key provided")

        response = api_client.post(
            URL, data=_payload(), content_type="application/json"
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to create payment intent",
            "details": "Invalid API Key provided",
        }

    def test_unknown_restaurant(self, api_client: DjangoClient):
        response = api_client.post(
            "/api/restaurants/nope/payments/intent",
            data=_payload(),
            content_type="application/json",
        )

        assert response.status_code == 404
