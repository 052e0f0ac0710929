"""Tests for route estimation - haversine and the Google Maps client."""

import httpx
import pytest
import respx
from storefront_schemas import Coordinates

from apps.web.delivery.geo import (
    GoogleMapsClient,
    estimate_duration_minutes,
    haversine_km,
)

GEOCODE_URL = f"{GoogleMapsClient.BASE_URL}/geocode/json"
DISTANCE_MATRIX_URL = f"{GoogleMapsClient.BASE_URL}/distancematrix/json"

RESTAURANT = "2180 Credit Valley Rd, Mississauga, ON"
CUSTOMER = "100 Queen St W, Toronto, ON"


def _geocode_response(lat: float, lng: float) -> dict:
    return {
        "status": "OK",
        "results": [{"geometry": {"location": {"lat": lat, "lng": lng}}}],
    }


# =============================================================================
# Haversine
# =============================================================================


class TestHaversine:
    """Tests for haversine_km."""

    def test_same_point(self):
        point = Coordinates(lat=43.6532, lng=-79.3832)

        assert haversine_km(point, point) == 0

    def test_one_degree_of_latitude(self):
        distance = haversine_km(
            Coordinates(lat=0, lng=0), Coordinates(lat=1, lng=0)
        )

        assert distance == pytest.approx(111.19, abs=0.01)

    def test_symmetric(self):
        a = Coordinates(lat=43.5561, lng=-79.7110)
        b = Coordinates(lat=43.6532, lng=-79.3832)

        assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))
        assert haversine_km(a, b) == pytest.approx(28.5, abs=0.5)


class TestEstimateDuration:
    """Tests for estimate_duration_minutes."""

    def test_rounds_up(self):
        assert estimate_duration_minutes(10, 40) == 15
        assert estimate_duration_minutes(10.1, 40) == 16


# =============================================================================
# Google Maps client
# =============================================================================


class TestGeocode:
    """Tests for GoogleMapsClient.geocode."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self):
        route = respx.get(GEOCODE_URL).mock(
            return_value=httpx.Response(200, json=_geocode_response(43.65, -79.38))
        )
        client = GoogleMapsClient("AIzaTestKey")

        coords = await client.geocode(CUSTOMER)

        assert coords == Coordinates(lat=43.65, lng=-79.38)
        request = route.calls.last.request
        assert request.url.params["address"] == CUSTOMER
        assert request.url.params["key"] == "AIzaTestKey"

    @pytest.mark.asyncio
    @respx.mock
    async def test_zero_results(self):
        respx.get(GEOCODE_URL).mock(
            return_value=httpx.Response(
                200, json={"status": "ZERO_RESULTS", "results": []}
            )
        )

        assert await GoogleMapsClient("AIzaTestKey").geocode("nowhere") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error(self):
        respx.get(GEOCODE_URL).mock(return_value=httpx.Response(500))

        assert await GoogleMapsClient("AIzaTestKey").geocode(CUSTOMER) is None

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_missing_key_skips_request(self, respx_mock):
        route = respx_mock.get(GEOCODE_URL)

        assert await GoogleMapsClient("").geocode(CUSTOMER) is None
        assert not route.called


class TestDistanceMatrix:
    """Tests for GoogleMapsClient.distance_matrix."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self):
        respx.get(DISTANCE_MATRIX_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "status": "OK",
                    "rows": [
                        {
                            "elements": [
                                {
                                    "status": "OK",
                                    "distance": {"value": 31450},
                                    "duration": {"value": 1930},
                                }
                            ]
                        }
                    ],
                },
            )
        )

        route = await GoogleMapsClient("AIzaTestKey").distance_matrix(
            RESTAURANT, CUSTOMER
        )

        assert route is not None
        assert route.distance_km == 31.45
        assert route.duration_minutes == 33
        assert route.source == "distance_matrix"

    @pytest.mark.asyncio
    @respx.mock
    async def test_element_not_found(self):
        respx.get(DISTANCE_MATRIX_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "status": "OK",
                    "rows": [{"elements": [{"status": "NOT_FOUND"}]}],
                },
            )
        )

        route = await GoogleMapsClient("AIzaTestKey").distance_matrix(
            RESTAURANT, "???"
        )

        assert route is None


class TestEstimateRoute:
    """Tests for GoogleMapsClient.estimate_route."""

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_haversine_when_both_addresses_geocode(self, respx_mock):
        respx_mock.get(
            GEOCODE_URL, params={"address": RESTAURANT, "key": "AIzaTestKey"}
        ).mock(
            return_value=httpx.Response(200, json=_geocode_response(0, 0))
        )
        respx_mock.get(
            GEOCODE_URL, params={"address": CUSTOMER, "key": "AIzaTestKey"}
        ).mock(
            return_value=httpx.Response(200, json=_geocode_response(0.1, 0))
        )
        matrix = respx_mock.get(DISTANCE_MATRIX_URL)

        route = await GoogleMapsClient("AIzaTestKey").estimate_route(
            RESTAURANT, CUSTOMER
        )

        assert route is not None
        assert route.source == "haversine"
        assert route.distance_km == 11.12
        assert route.duration_minutes == 17  # 11.12 km at 40 km/h
        assert not matrix.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_falls_back_to_distance_matrix(self):
        respx.get(GEOCODE_URL).mock(
            return_value=httpx.Response(200, json={"status": "OVER_QUERY_LIMIT"})
        )
        respx.get(DISTANCE_MATRIX_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "status": "OK",
                    "rows": [
                        {
                            "elements": [
                                {
                                    "status": "OK",
                                    "distance": {"value": 5000},
                                    "duration": {"value": 600},
                                }
                            ]
                        }
                    ],
                },
            )
        )

        route = await GoogleMapsClient("AIzaTestKey").estimate_route(
            RESTAURANT, CUSTOMER
        )

        assert route is not None
        assert route.source == "distance_matrix"
        assert route.distance_km == 5.0
        assert route.duration_minutes == 10

    @pytest.mark.asyncio
    @respx.mock
    async def test_both_methods_fail(self):
        respx.get(GEOCODE_URL).mock(return_value=httpx.Response(503))
        respx.get(DISTANCE_MATRIX_URL).mock(return_value=httpx.Response(503))

        route = await GoogleMapsClient("AIzaTestKey").estimate_route(
            RESTAURANT, CUSTOMER
        )

        assert route is None
