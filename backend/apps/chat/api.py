"""REST API endpoint for the portfolio chat assistant."""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.urls import path
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.chat.services import ChatValidationError, run_chat_turn
from apps.core.posthog import capture_exception
from apps.core.responses import (
    flatten_serializer_errors,
    server_error_response,
    throttled_response,
    validation_error_response,
)
from apps.core.services import (
    RateLimitConfig,
    get_client_identifier,
    get_rate_limiter,
    rate_bucket,
    rate_limit_headers,
)

app_name = "chat"

logger = logging.getLogger(__name__)

_rate_limiter = get_rate_limiter()


class ChatMessageSerializer(serializers.Serializer):
    message = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
        default="",
    )
    sessionId = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ChatView(APIView):
    """Answer one chat message, creating the session on first contact."""

    def post(self, request, *args, **kwargs):
        client_id = get_client_identifier(request)
        limit = _rate_limiter.check(
            rate_bucket("chat", client_id),
            RateLimitConfig.from_settings("chat"),
        )
        if not limit.allowed:
            logger.info("Chat rate limit exceeded for %s", client_id)
            return throttled_response(limit, "Too many requests. Please slow down.")

        serializer = ChatMessageSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(flatten_serializer_errors(serializer.errors))

        try:
            result = run_chat_turn(
                message=serializer.validated_data.get("message"),
                session_id=serializer.validated_data.get("sessionId") or None,
                ip_address=client_id,
            )
        except ChatValidationError as exc:
            return validation_error_response(exc.errors)
        except DatabaseError as exc:
            logger.exception("Chat persistence failed for client %s", client_id)
            capture_exception(exc, distinct_id=client_id, properties={"endpoint": "chat"})
            return server_error_response()

        headers = rate_limit_headers(limit)
        headers["X-Session-Id"] = result.session_id
        return Response(
            {"response": result.response, "sessionId": result.session_id},
            headers=headers,
        )


urlpatterns = [
    path("chat", ChatView.as_view(), name="chat"),
]
