"""Sanitization and validation for user-submitted text.

Sanitizing is defense-in-depth only: it removes angle brackets and caps the
length, it does not HTML-escape. Validation collects every violated rule so
callers can report all problems in one response.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

MAX_INPUT_LENGTH = 2000

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_MESSAGE_LENGTH = 10
MAX_MESSAGE_LENGTH = 2000
MAX_CHAT_MESSAGE_LENGTH = 500
MAX_EMAIL_LENGTH = 254

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MARKUP_CHARS = re.compile(r"[<>]")


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def sanitize_input(raw: str | None) -> str:
    """Trim, strip ``<``/``>`` and truncate to ``MAX_INPUT_LENGTH`` characters."""

    if not raw:
        return ""
    cleaned = _MARKUP_CHARS.sub("", str(raw).strip())
    return cleaned[:MAX_INPUT_LENGTH]


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_contact_form(*, name: str, email: str, message: str) -> ValidationResult:
    errors: list[str] = []

    name = name or ""
    if len(name.strip()) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters long")
    if len(name.strip()) > MAX_NAME_LENGTH:
        errors.append(f"Name must be less than {MAX_NAME_LENGTH} characters")

    email = email or ""
    if not validate_email(email):
        errors.append("Please provide a valid email address")
    elif len(email) > MAX_EMAIL_LENGTH:
        errors.append(f"Email must be at most {MAX_EMAIL_LENGTH} characters")

    message = message or ""
    if len(message.strip()) < MIN_MESSAGE_LENGTH:
        errors.append(f"Message must be at least {MIN_MESSAGE_LENGTH} characters long")
    if len(message.strip()) > MAX_MESSAGE_LENGTH:
        errors.append(f"Message must be less than {MAX_MESSAGE_LENGTH} characters")

    return ValidationResult(valid=not errors, errors=errors)


def validate_chat_message(message: str) -> ValidationResult:
    errors: list[str] = []

    message = message or ""
    if not message.strip():
        errors.append("Message cannot be empty")
    if len(message.strip()) > MAX_CHAT_MESSAGE_LENGTH:
        errors.append(f"Message must be less than {MAX_CHAT_MESSAGE_LENGTH} characters")

    return ValidationResult(valid=not errors, errors=errors)


__all__ = [
    "MAX_CHAT_MESSAGE_LENGTH",
    "MAX_EMAIL_LENGTH",
    "MAX_INPUT_LENGTH",
    "ValidationResult",
    "sanitize_input",
    "validate_chat_message",
    "validate_contact_form",
    "validate_email",
]
