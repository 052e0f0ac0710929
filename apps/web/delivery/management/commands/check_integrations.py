"""
Check that the Google Maps, DoorDash and Stripe integrations are configured.

Usage:
    python apps/web/manage.py check_integrations
    python apps/web/manage.py check_integrations --offline
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand

import httpx

from apps.web.delivery import services
from apps.web.delivery.auth import get_credentials
from apps.web.delivery.exceptions import DeliveryError
from apps.web.delivery.geo import GoogleMapsClient

logger = logging.getLogger(__name__)

GEOCODE_PROBE_ADDRESS = "Toronto, ON"
AUTOCOMPLETE_PROBE_INPUT = "1600 Amphitheatre Parkway"


@dataclass
class CheckResult:
    name: str
    ok: bool
    message: str
    next_step: str = ""


def _mask(secret: str) -> str:
    if len(secret) <= 15:
        return "***"
    return f"{secret[:10]}...{secret[-5:]}"


async def _probe_google(
    api_key: str, endpoint: str, params: dict[str, str]
) -> dict[str, Any]:
    maps = GoogleMapsClient(api_key)
    try:
        return await maps.get_json(endpoint, params)
    finally:
        await maps.close()


class Command(BaseCommand):
    help = "Check Google Maps, DoorDash and Stripe configuration"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--offline",
            action="store_true",
            help="Only check configuration, don't call the provider APIs",
        )

    def handle(self, *_args: Any, **options: Any) -> None:
        offline = options["offline"]

        results = [
            *self.check_google_maps(offline),
            *self.check_doordash(offline),
            self.check_stripe(),
        ]

        for result in results:
            style = self.style.SUCCESS if result.ok else self.style.ERROR
            mark = "OK" if result.ok else "FAIL"
            self.stdout.write(style(f"[{mark}] {result.name}: {result.message}"))

        next_steps = [r.next_step for r in results if not r.ok and r.next_step]
        if next_steps:
            self.stdout.write("\nNext steps:")
            for step in next_steps:
                self.stdout.write(f"  - {step}")
        else:
            self.stdout.write(self.style.SUCCESS("\nAll integration checks passed."))

    # =========================================================================
    # Google Maps
    # =========================================================================

    def check_google_maps(self, offline: bool) -> list[CheckResult]:
        api_key = settings.GOOGLE_MAPS_API_KEY

        if not api_key:
            return [
                CheckResult(
                    "Google Maps API key",
                    False,
                    "not set",
                    "Set GOOGLE_MAPS_API_KEY in the environment",
                )
            ]

        results = [
            CheckResult("Google Maps API key", True, f"configured ({_mask(api_key)})"),
            CheckResult(
                "Google Maps key format",
                api_key.startswith("AIza"),
                "starts with AIza"
                if api_key.startswith("AIza")
                else "unexpected prefix",
                'API key format is invalid - it should start with "AIza"',
            ),
        ]

        if offline:
            return results

        results.append(
            self._probe_google_api(
                "Geocoding API",
                api_key,
                "geocode",
                {"address": GEOCODE_PROBE_ADDRESS},
                "results",
            )
        )
        results.append(
            self._probe_google_api(
                "Places API",
                api_key,
                "place/autocomplete",
                {"input": AUTOCOMPLETE_PROBE_INPUT},
                "predictions",
            )
        )
        return results

    def _probe_google_api(
        self,
        name: str,
        api_key: str,
        endpoint: str,
        params: dict[str, str],
        result_key: str,
    ) -> CheckResult:
        try:
            data = asyncio.run(_probe_google(api_key, endpoint, params))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("%s probe failed: %s", name, e)
            return CheckResult(name, False, f"request failed: {e}")

        error_message = data.get("error_message", "")
        if error_message:
            if "not enabled" in error_message or "not authorized" in error_message:
                step = f"Enable the {name} in Google Cloud Console"
            else:
                step = "Check the API key restrictions in Google Cloud Console"
            return CheckResult(name, False, error_message, step)

        found = len(data.get(result_key) or [])
        return CheckResult(name, True, f"works ({found} {result_key})")

    # =========================================================================
    # DoorDash
    # =========================================================================

    def check_doordash(self, offline: bool) -> list[CheckResult]:
        try:
            credentials = get_credentials()
        except DeliveryError as e:
            return [
                CheckResult(
                    "DoorDash credentials",
                    False,
                    e.message,
                    "Set DOORDASH_DEVELOPER_ID, DOORDASH_KEY_ID and "
                    "DOORDASH_SIGNING_SECRET",
                )
            ]

        results = [
            CheckResult(
                "DoorDash credentials",
                True,
                f"developer {credentials.developer_id}, key {credentials.key_id}",
            )
        ]

        if offline:
            return results

        try:
            businesses = services.list_businesses()
        except DeliveryError as e:
            results.append(
                CheckResult(
                    "DoorDash API",
                    False,
                    e.message,
                    "Verify the DoorDash signing secret and key id",
                )
            )
        else:
            results.append(
                CheckResult("DoorDash API", True, f"{len(businesses)} business(es)")
            )
        return results

    # =========================================================================
    # Stripe
    # =========================================================================

    def check_stripe(self) -> CheckResult:
        if not settings.STRIPE_SECRET_KEY:
            return CheckResult(
                "Stripe secret key", False, "not set", "Set STRIPE_SECRET_KEY"
            )
        mode = "test" if settings.STRIPE_SECRET_KEY.startswith("sk_test_") else "live"
        return CheckResult("Stripe secret key", True, f"configured ({mode} mode)")
