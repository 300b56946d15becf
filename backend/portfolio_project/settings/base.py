"""Base Django settings for the portfolio backend."""

from __future__ import annotations

import os

import dj_database_url

from .config import BASE_DIR, get_settings

settings = get_settings()

SECRET_KEY = settings.secret_key
DEBUG = settings.debug
ALLOWED_HOSTS: list[str] = settings.allowed_hosts

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party
    "rest_framework",
    "corsheaders",
    # Project apps
    "apps.core",
    "apps.chat",
    "apps.contact",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "portfolio_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "portfolio_project.wsgi.application"
ASGI_APPLICATION = "portfolio_project.asgi.application"

if settings.database_url:
    DATABASES = {
        "default": dj_database_url.parse(
            settings.database_url,
            conn_max_age=settings.db_conn_max_age,
        )
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "EXCEPTION_HANDLER": "apps.core.responses.api_exception_handler",
}

CORS_ALLOWED_ORIGINS: list[str] = settings.cors_allowed_origins
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_HEADERS = [
    "accept",
    "accept-encoding",
    "authorization",
    "content-type",
    "dnt",
    "origin",
    "user-agent",
    "x-csrftoken",
    "x-requested-with",
    "x-session-id",  # Custom header for chat sessions
]
CORS_EXPOSE_HEADERS = [
    "retry-after",
    "x-ratelimit-limit",
    "x-ratelimit-remaining",
    "x-ratelimit-reset",
    "x-session-id",
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} {funcName}:{lineno} - {message}",
            "style": "{",
        },
        "simple": {
            "format": "[{levelname}] {name} - {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.core": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.chat": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.contact": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
}

# Debug mode logging - enabled via DJANGO_DEBUG_STARTUP env var
if os.getenv("DJANGO_DEBUG_STARTUP") == "true":
    LOGGING["handlers"]["console"]["formatter"] = "verbose"
    LOGGING["loggers"]["django"]["level"] = "DEBUG"
    LOGGING["loggers"]["apps.core"]["level"] = "DEBUG"
    LOGGING["loggers"]["apps.chat"]["level"] = "DEBUG"
    LOGGING["loggers"]["apps.contact"]["level"] = "DEBUG"
    LOGGING["root"]["level"] = "DEBUG"

# Per-endpoint rate limits: window length in seconds and requests per window.
RATE_LIMITS = {
    "contact": {
        "window_seconds": settings.contact_rate_limit_window_seconds,
        "limit": settings.contact_rate_limit_max_requests,
    },
    "chat": {
        "window_seconds": settings.chat_rate_limit_window_seconds,
        "limit": settings.chat_rate_limit_max_requests,
    },
}
RATE_LIMIT_MAX_BUCKETS = settings.rate_limit_max_buckets

OPENAI_API_KEY = settings.openai_api_key
OPENAI_MODEL = settings.openai_model
OPENAI_BASE_URL = settings.openai_base_url
CHAT_MODEL_TIMEOUT_SECONDS = settings.chat_model_timeout_seconds
CHAT_HISTORY_LIMIT = settings.chat_history_limit
CHATBOT_SYSTEM_PROMPT = settings.chatbot_system_prompt

SITE_URL = settings.site_url
SITE_OWNER = {
    "name": settings.site_owner_name,
    "title": settings.site_owner_title,
    "email": settings.site_owner_email,
    "location": settings.site_owner_location,
    "bio": settings.site_owner_bio,
    "skills": settings.site_owner_skills,
}

ADMIN_API_KEY = settings.admin_api_key

SENDGRID_API_KEY = settings.sendgrid_api_key
RESEND_API_KEY = settings.resend_api_key
CONTACT_EMAIL_FROM = settings.email_from
EMAIL_TIMEOUT_SECONDS = settings.email_timeout_seconds

POSTHOG_PROJECT_API_KEY = settings.posthog_project_api_key
POSTHOG_HOST = settings.posthog_host
POSTHOG_DEBUG = settings.posthog_debug
POSTHOG_DISABLED = settings.posthog_disabled
