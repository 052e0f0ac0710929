"""
JSON API helpers shared by the storefront, payments and delivery views.
"""

import json
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from django.conf import settings
from django.http import Http404, HttpRequest, JsonResponse

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .models import Restaurant

_S = TypeVar("_S", bound=BaseModel)


class BadRequest(Exception):
    """Request body could not be parsed or validated."""

    def __init__(self, payload: dict[str, Any]) -> None:
        super().__init__(payload.get("error", "Bad request"))
        self.payload = payload


def cors_headers() -> dict[str, str]:
    """
    CORS headers for the storefront frontend.

    Credentials (the session cart cookie) are only allowed for a concrete
    origin; browsers reject them alongside a wildcard.
    """
    headers = {
        "Access-Control-Allow-Origin": settings.CORS_ALLOWED_ORIGIN,
        "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Idempotency-Key",
    }
    if settings.CORS_ALLOWED_ORIGIN != "*":
        headers["Access-Control-Allow-Credentials"] = "true"
    return headers


def json_response(
    data: dict[str, Any] | list[Any], status: int = 200
) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status, safe=False)
    for key, value in cors_headers().items():
        response[key] = value
    return response


def error_response(error: str, status: int = 400, **extra: Any) -> JsonResponse:
    """JSON error body: {"error": ..., **extra}."""
    return json_response({"error": error, **extra}, status=status)


def parse_body(request: HttpRequest, schema: type[_S]) -> _S:
    """
    Parse the JSON request body into a pydantic schema.

    Raises:
        BadRequest: With a ready-to-send error payload
    """
    try:
        body = json.loads(request.body or b"{}")
    except json.JSONDecodeError as exc:
        raise BadRequest({"error": "Invalid JSON in request body"}) from exc

    try:
        return schema.model_validate(body)
    except PydanticValidationError as exc:
        details = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        raise BadRequest({"error": "validation_error", "details": details}) from exc


def get_restaurant_or_404(slug: str) -> Restaurant:
    """Get an active restaurant by slug or raise Http404."""
    try:
        return Restaurant.objects.get(slug=slug, is_active=True)
    except Restaurant.DoesNotExist as exc:
        raise Http404(f"Restaurant '{slug}' not found") from exc


def allow_cors_preflight(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Answer CORS preflight (OPTIONS) requests before the view runs.

    Apply outside require_GET / require_POST so OPTIONS is not rejected.
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if request.method == "OPTIONS":
            return json_response({})
        return view_func(request, *args, **kwargs)

    return wrapper
