"""DoorDash Drive client - courier quotes, dispatch and store management."""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from storefront_schemas import (
    Business,
    Delivery,
    DeliveryRequest,
    DoorDashCredentials,
    Store,
)

from apps.web.delivery.auth import create_jwt
from apps.web.delivery.exceptions import (
    DeliveryAPIError,
    DeliveryAuthError,
    DeliveryValidationError,
)

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

PROVIDER = "doordash"


class DoorDashClient:
    """
    Async client for the DoorDash Drive v2 and Developer v1 APIs.

    Every request carries a freshly minted JWT (see apps.web.delivery.auth).
    Errors are mapped to DeliveryError subclasses:
    - 401/403 -> DeliveryAuthError
    - 422 -> DeliveryValidationError (field_errors in the body)
    - other 4xx/5xx and transport failures -> DeliveryAPIError

    API Reference: https://developer.doordash.com/en-US/api/drive
    """

    DEFAULT_BASE_URL = "https://openapi.doordash.com"

    def __init__(
        self,
        credentials: DoorDashCredentials,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the DoorDash client.

        Args:
            credentials: Developer credentials for JWT signing.
            base_url: API host (override for sandboxes or tests).
            http_client: Optional HTTP client for dependency injection (testing).
        """
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=30.0)
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # Deliveries (Drive v2)
    # =========================================================================

    async def create_quote(self, request: DeliveryRequest) -> Delivery:
        """
        Ask DoorDash for a fee and ETA without dispatching a courier.

        Raises:
            DeliveryValidationError: If addresses or phone numbers are rejected.
            DeliveryAPIError: If the API request fails.
        """
        data = await self._request(
            "POST", "/drive/v2/quotes", json=request.model_dump(exclude_none=True)
        )
        return self._parse(Delivery, data)

    async def create_delivery(self, request: DeliveryRequest) -> Delivery:
        """
        Dispatch a courier for an order.

        Raises:
            DeliveryValidationError: If addresses or phone numbers are rejected.
            DeliveryAPIError: If the API request fails.
        """
        data = await self._request(
            "POST", "/drive/v2/deliveries", json=request.model_dump(exclude_none=True)
        )
        delivery = self._parse(Delivery, data)
        logger.info(
            "DoorDash delivery created: id=%s fee=%s status=%s",
            delivery.external_delivery_id,
            delivery.fee,
            delivery.delivery_status,
        )
        return delivery

    async def get_delivery(self, external_delivery_id: str) -> Delivery:
        """Get the current state of a delivery."""
        data = await self._request(
            "GET", f"/drive/v2/deliveries/{external_delivery_id}"
        )
        return self._parse(Delivery, data)

    # =========================================================================
    # Businesses and stores (Developer v1)
    # =========================================================================

    async def create_business(
        self, external_business_id: str, name: str, description: str = ""
    ) -> Business:
        """Create the DoorDash business record for a restaurant."""
        payload: dict[str, Any] = {
            "external_business_id": external_business_id,
            "name": name,
        }
        if description:
            payload["description"] = description
        data = await self._request("POST", "/developer/v1/businesses", json=payload)
        return self._parse(Business, data)

    async def list_businesses(self) -> list[Business]:
        """List all businesses of the developer account."""
        data = await self._request("GET", "/developer/v1/businesses")
        return [self._parse(Business, b) for b in self._results(data)]

    async def create_store(
        self,
        external_business_id: str,
        external_store_id: str,
        name: str,
        phone_number: str,
        address: str,
    ) -> Store:
        """
        Create a pickup store under a business.

        Registering the store with its real phone number and address lets
        DoorDash validate pickups against it.
        """
        data = await self._request(
            "POST",
            f"/developer/v1/businesses/{external_business_id}/stores",
            json={
                "external_store_id": external_store_id,
                "name": name,
                "phone_number": phone_number,
                "address": address,
            },
        )
        return self._parse(Store, data)

    async def list_stores(self, external_business_id: str) -> list[Store]:
        """List the stores of a business."""
        data = await self._request(
            "GET", f"/developer/v1/businesses/{external_business_id}/stores"
        )
        return [self._parse(Store, s) for s in self._results(data)]

    # =========================================================================
    # Internals
    # =========================================================================

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {create_jwt(self._credentials)}",
            "Accept-Language": "en-US",
        }

        try:
            response = await self._client.request(
                method, f"{self._base_url}{path}", json=json, headers=headers
            )
        except httpx.RequestError as e:
            raise DeliveryAPIError(
                f"DoorDash request failed: {e}", provider=PROVIDER
            ) from e

        try:
            data: Any = response.json()
        except ValueError:
            data = response.text

        if response.is_success:
            return data

        message = (
            data.get("message") if isinstance(data, dict) else None
        ) or f"DoorDash API error: {response.status_code}"

        logger.error(
            "DoorDash API error: %s %s status=%s body=%s",
            method,
            path,
            response.status_code,
            data,
        )

        if response.status_code in (401, 403):
            raise DeliveryAuthError(message, provider=PROVIDER)
        if response.status_code == 422:
            raise DeliveryValidationError(
                message,
                provider=PROVIDER,
                status_code=response.status_code,
                response_body=data,
            )
        raise DeliveryAPIError(
            message,
            provider=PROVIDER,
            status_code=response.status_code,
            response_body=data,
        )

    @staticmethod
    def _parse(model: type[_M], data: Any) -> _M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise DeliveryAPIError(
                f"Invalid {model.__name__} response from DoorDash",
                provider=PROVIDER,
                response_body=data,
            ) from e

    @staticmethod
    def _results(data: Any) -> list[Any]:
        if not isinstance(data, dict):
            return []
        results = data.get("result") or data.get("results") or []
        return results if isinstance(results, list) else []
