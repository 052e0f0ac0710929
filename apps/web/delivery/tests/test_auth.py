"""Tests for DoorDash JWT authentication."""

import base64

from django.test import override_settings

import jwt
import pytest
from storefront_schemas import DoorDashCredentials

from apps.web.delivery.auth import (
    TOKEN_TTL_SECONDS,
    create_jwt,
    decode_signing_secret,
    get_credentials,
)
from apps.web.delivery.exceptions import DeliveryAuthError

SECRET = b"storefront-signing-secret-0123456789"


@pytest.fixture
def credentials() -> DoorDashCredentials:
    return DoorDashCredentials(
        developer_id="dev-123",
        key_id="key-456",
        signing_secret=base64.urlsafe_b64encode(SECRET).decode().rstrip("="),
    )


class TestCreateJwt:
    """Tests for create_jwt."""

    def test_claims(self, credentials):
        token = create_jwt(credentials, now=1_700_000_000)

        claims = jwt.decode(
            token,
            SECRET,
            algorithms=["HS256"],
            audience="doordash",
            options={"verify_exp": False},
        )

        assert claims == {
            "aud": "doordash",
            "iss": "dev-123",
            "kid": "key-456",
            "iat": 1_700_000_000,
            "exp": 1_700_000_000 + TOKEN_TTL_SECONDS,
        }

    def test_header_carries_doordash_version(self, credentials):
        header = jwt.get_unverified_header(create_jwt(credentials))

        assert header["alg"] == "HS256"
        assert header["dd-ver"] == "DD-JWT-V1"

    def test_token_is_currently_valid(self, credentials):
        token = create_jwt(credentials)

        claims = jwt.decode(token, SECRET, algorithms=["HS256"], audience="doordash")

        assert claims["exp"] - claims["iat"] == 300


class TestDecodeSigningSecret:
    """Tests for decode_signing_secret."""

    def test_tolerates_missing_padding(self):
        encoded = base64.urlsafe_b64encode(b"abcd1").decode().rstrip("=")

        assert decode_signing_secret(encoded) == b"abcd1"

    def test_invalid_secret(self):
        with pytest.raises(DeliveryAuthError):
            decode_signing_secret("abcde")


class TestGetCredentials:
    """Tests for get_credentials."""

    def test_from_settings(self):
        credentials = get_credentials()

        assert credentials.developer_id == "dev-123"
        assert credentials.key_id == "key-456"

    @override_settings(DOORDASH_SIGNING_SECRET="")
    def test_missing_credentials(self):
        with pytest.raises(DeliveryAuthError) as exc_info:
            get_credentials()

        assert exc_info.value.message == "DoorDash credentials not configured"
