"""PostHog configuration helpers."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Optional

from django.conf import settings
from posthog import Posthog

logger = logging.getLogger(__name__)

_client: Optional[Posthog] = None
_configured = False
_lock = Lock()


def configure_posthog(*, force: bool = False) -> Optional[Posthog]:
    """Initialize the shared PostHog client when a project key is configured."""

    global _client, _configured

    with _lock:
        if _configured and not force:
            return _client

        api_key = getattr(settings, "POSTHOG_PROJECT_API_KEY", None)
        if not api_key:
            _client = None
            _configured = True
            return None

        host = getattr(settings, "POSTHOG_HOST", "https://us.i.posthog.com")
        client = Posthog(api_key, host=host)

        if getattr(settings, "POSTHOG_DEBUG", False):
            client.debug = True

        if getattr(settings, "POSTHOG_DISABLED", False):
            client.disabled = True

        _client = client
        _configured = True
        return _client


def get_posthog_client() -> Optional[Posthog]:
    """Return the shared PostHog client if configured."""

    return configure_posthog()


def capture_exception(
    exc: BaseException,
    *,
    distinct_id: Optional[str] = None,
    properties: Optional[dict[str, Any]] = None,
) -> None:
    """Forward an exception to PostHog; reporting problems are only logged."""

    client = get_posthog_client()
    if client is None:
        return
    try:
        client.capture_exception(exc, distinct_id=distinct_id, properties=properties)
    except Exception as report_exc:  # pragma: no cover
        logger.warning("Failed to report exception to PostHog: %s", report_exc)


__all__ = [
    "capture_exception",
    "configure_posthog",
    "get_posthog_client",
]
