"""JSON responses shared by the public endpoints."""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from apps.core.posthog import capture_exception
from apps.core.services import (
    RateLimitResult,
    get_client_identifier,
    rate_limit_headers,
    retry_after_seconds,
)

logger = logging.getLogger(__name__)


def throttled_response(result: RateLimitResult, message: str) -> Response:
    retry_after = retry_after_seconds(result)
    headers = rate_limit_headers(result)
    headers["Retry-After"] = str(retry_after)
    return Response(
        {"error": message, "retryAfter": retry_after},
        status=status.HTTP_429_TOO_MANY_REQUESTS,
        headers=headers,
    )


def validation_error_response(errors: list[str]) -> Response:
    return Response(
        {"error": "Validation failed", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def server_error_response() -> Response:
    return Response(
        {"error": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def flatten_serializer_errors(errors: Any, prefix: str = "") -> list[str]:
    """Turn DRF's nested error mapping into a flat list of readable strings."""

    if isinstance(errors, dict):
        flat: list[str] = []
        for key, value in errors.items():
            label = key if key != "non_field_errors" else ""
            flat.extend(flatten_serializer_errors(value, prefix=label))
        return flat
    if isinstance(errors, (list, tuple)):
        flat = []
        for item in errors:
            flat.extend(flatten_serializer_errors(item, prefix=prefix))
        return flat
    return [f"{prefix}: {errors}" if prefix else str(errors)]


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """DRF exception handler that keeps every error in the JSON error shape.

    Malformed request bodies become a 400 in the validation shape, other API
    exceptions keep their status with ``{error}``, and anything unexpected is
    logged, reported to PostHog and answered with a 500.
    """

    if isinstance(exc, exceptions.ParseError):
        return validation_error_response([str(exc.detail)])

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        response.data = {"error": str(detail) if detail is not None else "Request failed"}
        return response

    request = context.get("request")
    view = context.get("view")
    client_id = get_client_identifier(request) if request is not None else None
    logger.exception(
        "Unhandled error in %s for client %s",
        type(view).__name__ if view is not None else "view",
        client_id,
    )
    capture_exception(
        exc,
        distinct_id=client_id,
        properties={"path": getattr(request, "path", None)},
    )
    set_rollback()
    return server_error_response()
