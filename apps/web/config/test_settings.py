"""
Settings for the test suite.

Supplies safe defaults for the secrets the base settings read from the
environment, then uses SQLite so tests run without a Postgres server.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")

from apps.web.config.settings import *  # noqa: E402, F403

STRIPE_SECRET_KEY = "sk_test_storefront"
STRIPE_WEBHOOK_SECRET = "whsec_test_storefront"

DOORDASH_API_BASE_URL = "https://openapi.doordash.com"
DOORDASH_DEVELOPER_ID = "dev-123"
DOORDASH_KEY_ID = "key-456"
# base64url-encoded, as issued by the DoorDash developer portal
DOORDASH_SIGNING_SECRET = "c3RvcmVmcm9udC1zaWduaW5nLXNlY3JldC0wMTIzNDU2Nzg5"

GOOGLE_MAPS_API_KEY = "AIzaTestKey"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
}
