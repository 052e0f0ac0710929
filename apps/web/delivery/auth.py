"""
DoorDash Drive authentication.

DoorDash authenticates API calls with short-lived HS256 JWTs signed by the
developer's own signing secret. A fresh token is minted for every request.
"""

import base64
import time

from django.conf import settings

import jwt
from storefront_schemas import DoorDashCredentials

from apps.web.delivery.exceptions import DeliveryAuthError

TOKEN_TTL_SECONDS = 300
DOORDASH_JWT_VERSION = "DD-JWT-V1"


def get_credentials() -> DoorDashCredentials:
    """
    Load DoorDash credentials from settings.

    Raises:
        DeliveryAuthError: If any credential is missing
    """
    developer_id = getattr(settings, "DOORDASH_DEVELOPER_ID", "")
    key_id = getattr(settings, "DOORDASH_KEY_ID", "")
    signing_secret = getattr(settings, "DOORDASH_SIGNING_SECRET", "")

    if not developer_id or not key_id or not signing_secret:
        raise DeliveryAuthError(
            "DoorDash credentials not configured", provider="doordash"
        )

    return DoorDashCredentials(
        developer_id=developer_id,
        key_id=key_id,
        signing_secret=signing_secret,
    )


def decode_signing_secret(signing_secret: str) -> bytes:
    """Decode the base64url signing secret, tolerating missing padding."""
    padded = signing_secret + "=" * (-len(signing_secret) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except ValueError as e:
        raise DeliveryAuthError(
            "DoorDash signing secret is not valid base64", provider="doordash"
        ) from e


def create_jwt(credentials: DoorDashCredentials, now: int | None = None) -> str:
    """
    Mint a DoorDash JWT valid for five minutes.

    Args:
        credentials: Developer id, key id and signing secret
        now: Issue time as a unix timestamp (defaults to the current time)

    Returns:
        Encoded token for the Authorization: Bearer header
    """
    issued_at = int(time.time()) if now is None else now
    payload = {
        "aud": "doordash",
        "iss": credentials.developer_id,
        "kid": credentials.key_id,
        "exp": issued_at + TOKEN_TTL_SECONDS,
        "iat": issued_at,
    }
    return jwt.encode(
        payload,
        decode_signing_secret(credentials.signing_secret),
        algorithm="HS256",
        headers={"dd-ver": DOORDASH_JWT_VERSION},
    )
