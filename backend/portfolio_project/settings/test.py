"""Settings used by the pytest suite."""

from .base import *  # noqa: F401,F403

DEBUG = False
SECRET_KEY = "test-secret-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Keep tests hermetic regardless of the developer's environment.
OPENAI_API_KEY = None
ADMIN_API_KEY = None
SENDGRID_API_KEY = None
RESEND_API_KEY = None
POSTHOG_PROJECT_API_KEY = None
