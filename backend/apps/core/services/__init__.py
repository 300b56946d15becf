"""Service layer helpers for the core app."""

from .api_keys import extract_bearer_token, is_admin_request, verify_admin_key
from .clients import get_client_identifier, rate_bucket
from .rate_limits import (
    InMemoryRateLimiter,
    RateLimitConfig,
    RateLimitResult,
    get_rate_limiter,
    rate_limit_headers,
    retry_after_seconds,
)
from .validation import (
    ValidationResult,
    sanitize_input,
    validate_chat_message,
    validate_contact_form,
    validate_email,
)

__all__ = [
    "extract_bearer_token",
    "is_admin_request",
    "verify_admin_key",
    "get_client_identifier",
    "rate_bucket",
    "InMemoryRateLimiter",
    "RateLimitConfig",
    "RateLimitResult",
    "get_rate_limiter",
    "rate_limit_headers",
    "retry_after_seconds",
    "ValidationResult",
    "sanitize_input",
    "validate_chat_message",
    "validate_contact_form",
    "validate_email",
]
