"""
Decorators for request handling and validation.
"""

import json
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.core.cache import cache
from django.http import HttpRequest, JsonResponse

from .http import error_response

IDEMPOTENCY_TTL_SECONDS = 86400  # 24 hours


def idempotency_key_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires an Idempotency-Key header for POST requests.

    If the same key is reused on the same path, the cached response from the
    first request is returned instead of running the view again. This keeps a
    double-submitted checkout from creating two orders and two PaymentIntents.

    Usage:
        @idempotency_key_required
        def create_order(request, slug):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        key = request.headers.get("Idempotency-Key")

        if not key:
            return error_response("Idempotency-Key header is required")

        cache_key = f"idempotency:{request.path}:{key}"
        cached = cache.get(cache_key)

        if cached:
            response = JsonResponse(cached["data"], status=cached["status"])
            for header, value in cached["headers"].items():
                response[header] = value
            response["Idempotent-Replayed"] = "true"
            return response

        response = view_func(request, *args, **kwargs)

        # Only successful responses are replayable; errors may be retried
        if response.status_code < 400:
            cache.set(
                cache_key,
                {
                    "data": json.loads(response.content),
                    "status": response.status_code,
                    "headers": {
                        header: value
                        for header, value in response.items()
                        if header.lower().startswith("access-control-")
                    },
                },
                timeout=IDEMPOTENCY_TTL_SECONDS,
            )

        return response

    return wrapper
