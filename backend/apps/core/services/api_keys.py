"""Bearer-token checks for admin-only endpoints."""

from __future__ import annotations

import hmac
from typing import Optional

from django.conf import settings

BEARER_PREFIX = "Bearer "


def _configured_admin_key() -> str:
    return getattr(settings, "ADMIN_API_KEY", None) or ""


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an ``Authorization: Bearer <token>`` header."""

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


def verify_admin_key(raw_key: Optional[str]) -> bool:
    """Compare a presented key against ``ADMIN_API_KEY`` in constant time.

    Always ``False`` when no admin key is configured, so an unset key never
    opens the admin endpoints.
    """

    expected = _configured_admin_key()
    if not expected or not raw_key:
        return False
    return hmac.compare_digest(raw_key.encode("utf-8"), expected.encode("utf-8"))


def is_admin_request(request) -> bool:
    token = extract_bearer_token(request.headers.get("Authorization"))
    return verify_admin_key(token)
