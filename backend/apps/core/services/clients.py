"""Client identification for rate limiting and audit fields."""

from __future__ import annotations

UNKNOWN_CLIENT = "unknown"
# Matches the ``ip_address`` columns the identifier is stored in.
MAX_CLIENT_ID_LENGTH = 64


def get_client_identifier(request) -> str:
    """Best-effort client address, preferring proxy-supplied headers."""

    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        # First hop is the originating client
        first = forwarded.split(",")[0].strip()
        if first:
            return first[:MAX_CLIENT_ID_LENGTH]

    real_ip = request.META.get("HTTP_X_REAL_IP", "").strip()
    if real_ip:
        return real_ip[:MAX_CLIENT_ID_LENGTH]

    return (request.META.get("REMOTE_ADDR") or UNKNOWN_CLIENT)[:MAX_CLIENT_ID_LENGTH]


def rate_bucket(endpoint: str, client_id: str) -> str:
    """Compose a bucket key so each endpoint keeps its own budget per client."""

    return f"{endpoint}-{client_id}"
