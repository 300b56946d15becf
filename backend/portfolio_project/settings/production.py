"""Production settings."""

from __future__ import annotations

import os

from .base import *  # noqa: F401,F403

DEBUG = False

# Security hardening defaults; values should be overridden via environment variables.
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = int(os.getenv("DJANGO_SECURE_HSTS_SECONDS", 3600))
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Handle wildcard patterns for CORS (for preview environments)
# Convert '.vercel.app' to a regex pattern
CORS_ALLOWED_ORIGIN_REGEXES = []
_explicit_origins = []

for origin in CORS_ALLOWED_ORIGINS:  # noqa: F405
    if origin.startswith("."):
        escaped_domain = origin[1:].replace(".", r"\.")
        CORS_ALLOWED_ORIGIN_REGEXES.append(rf"https://[a-zA-Z0-9\-]+\.{escaped_domain}")
    else:
        _explicit_origins.append(origin)

CORS_ALLOWED_ORIGINS = _explicit_origins
CORS_ALLOW_ALL_ORIGINS = False

EMAIL_BACKEND = os.getenv("DJANGO_EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend")

if not SECRET_KEY or SECRET_KEY == "development-secret-key":  # noqa: F405
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production environment")

if not ALLOWED_HOSTS:  # noqa: F405
    raise RuntimeError("DJANGO_ALLOWED_HOSTS must be configured for production")
