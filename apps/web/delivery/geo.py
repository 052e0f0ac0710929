"""
Route estimation - Google Maps geocoding plus great-circle distance.

Both addresses are geocoded concurrently and the haversine distance between
them is used as the delivery distance. When geocoding fails the Distance
Matrix API is asked for the driving distance instead.
"""

import asyncio
import logging
import math
from typing import Any

import httpx
from storefront_schemas import Coordinates, RouteEstimate

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVERAGE_SPEED_KMH = 40.0


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(destination.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(destination.lng - origin.lng)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_duration_minutes(distance_km: float, average_speed_kmh: float) -> int:
    """Urban travel time, rounded up to the whole minute."""
    return math.ceil(distance_km / average_speed_kmh * 60)


class GoogleMapsClient:
    """
    Minimal async client for the Google Maps web services used for delivery.

    API Reference: https://developers.google.com/maps/documentation/geocoding
    """

    BASE_URL = "https://maps.googleapis.com/maps/api"

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: Google Maps API key (empty disables all lookups).
            http_client: Optional HTTP client for dependency injection (testing).
        """
        self._api_key = api_key
        self._client = http_client or httpx.AsyncClient(timeout=10.0)
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    async def get_json(self, endpoint: str, params: dict[str, str]) -> dict[str, Any]:
        """GET {BASE_URL}/{endpoint}/json with the API key; raises on HTTP errors."""
        response = await self._client.get(
            f"{self.BASE_URL}/{endpoint}/json",
            params={**params, "key": self._api_key},
        )
        response.raise_for_status()
        data: dict[str, Any] = response.json()
        return data

    async def geocode(self, address: str) -> Coordinates | None:
        """
        Geocode an address.

        Returns None (never raises) when the key is missing, the API answers
        with a non-OK status, or the request fails.
        """
        if not self._api_key:
            logger.warning("Google Maps API key not configured")
            return None

        try:
            data = await self.get_json("geocode", {"address": address})
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Geocoding request failed for %r: %s", address, e)
            return None

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            logger.warning("Geocoding failed for %r: %s", address, data.get("status"))
            return None

        location = results[0]["geometry"]["location"]
        return Coordinates(lat=location["lat"], lng=location["lng"])

    async def distance_matrix(
        self, origin: str, destination: str
    ) -> RouteEstimate | None:
        """Driving distance and duration from the Distance Matrix API."""
        if not self._api_key:
            return None

        try:
            data = await self.get_json(
                "distancematrix",
                {
                    "origins": origin,
                    "destinations": destination,
                    "units": "metric",
                },
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Distance Matrix request failed: %s", e)
            return None

        try:
            element = data["rows"][0]["elements"][0]
        except (KeyError, IndexError, TypeError):
            element = {}

        if data.get("status") != "OK" or element.get("status") != "OK":
            logger.warning(
                "Distance Matrix failed: status=%s element=%s",
                data.get("status"),
                element.get("status"),
            )
            return None

        return RouteEstimate(
            distance_km=round(element["distance"]["value"] / 1000, 2),
            duration_minutes=math.ceil(element["duration"]["value"] / 60),
            source="distance_matrix",
        )

    async def estimate_route(
        self,
        origin: str,
        destination: str,
        average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
    ) -> RouteEstimate | None:
        """
        Estimate the delivery route between two addresses.

        Returns:
            RouteEstimate, or None when neither geocoding nor the
            Distance Matrix API could produce a distance
        """
        origin_coords, destination_coords = await asyncio.gather(
            self.geocode(origin),
            self.geocode(destination),
        )

        if origin_coords and destination_coords:
            distance_km = haversine_km(origin_coords, destination_coords)
            route = RouteEstimate(
                distance_km=round(distance_km, 2),
                duration_minutes=estimate_duration_minutes(
                    distance_km, average_speed_kmh
                ),
                source="haversine",
            )
            logger.info(
                "Distance calculated: from=%r to=%r distance_km=%.2f minutes=%d",
                origin,
                destination,
                route.distance_km,
                route.duration_minutes,
            )
            return route

        logger.info("Geocoding unavailable, trying Distance Matrix API")
        route = await self.distance_matrix(origin, destination)
        if route is None:
            logger.error("Both distance methods failed: %r -> %r", origin, destination)
        return route
