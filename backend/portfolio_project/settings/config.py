"""Pydantic-backed configuration for Django settings."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_ENV_FILE = BASE_DIR / ".env"


class AppSettings(BaseSettings):
    """Environment-driven configuration for the Django project."""

    debug: bool = False
    secret_key: str = "development-secret-key"
    allowed_hosts: Annotated[list[str], NoDecode] = Field(default_factory=list)
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(default_factory=list)
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DJANGO_DATABASE_URL", "DATABASE_URL"),
    )
    db_conn_max_age: int = 60

    # Remote chat model (tier 1 of the chat responder chain)
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "DJANGO_OPENAI_API_KEY"),
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices("OPENAI_MODEL", "DJANGO_OPENAI_MODEL"),
    )
    openai_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "DJANGO_OPENAI_BASE_URL"),
    )
    chat_model_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "CHAT_MODEL_TIMEOUT_SECONDS",
            "DJANGO_CHAT_MODEL_TIMEOUT_SECONDS",
        ),
    )
    chat_history_limit: int = Field(
        default=20,
        validation_alias=AliasChoices("CHAT_HISTORY_LIMIT", "DJANGO_CHAT_HISTORY_LIMIT"),
    )
    chatbot_system_prompt: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CHATBOT_SYSTEM_PROMPT", "DJANGO_CHATBOT_SYSTEM_PROMPT"),
    )

    # Rate limits
    contact_rate_limit_window_seconds: int = 15 * 60
    contact_rate_limit_max_requests: int = 5
    chat_rate_limit_window_seconds: int = 60
    chat_rate_limit_max_requests: int = 20
    rate_limit_max_buckets: int = 10_000

    # Admin access and notifications
    admin_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ADMIN_API_KEY", "DJANGO_ADMIN_API_KEY"),
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SENDGRID_API_KEY", "DJANGO_SENDGRID_API_KEY"),
    )
    resend_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RESEND_API_KEY", "DJANGO_RESEND_API_KEY"),
    )
    email_from: str | None = Field(
        default=None,
        validation_alias=AliasChoices("EMAIL_FROM", "DJANGO_EMAIL_FROM"),
    )
    email_timeout_seconds: float = 10.0
    site_url: str = Field(
        default="https://portfolio.com",
        validation_alias=AliasChoices("SITE_URL", "NEXT_PUBLIC_SITE_URL", "DJANGO_SITE_URL"),
    )

    # Site owner facts used by the chat assistant and notifications
    site_owner_name: str = "Anwar Hussen"
    site_owner_title: str = "Software Engineer"
    site_owner_email: str = "anwarhussen3683@gmail.com"
    site_owner_location: str = "Addis Ababa, Ethiopia"
    site_owner_bio: str = (
        "Junior Software Engineer focused on backend systems and AI, building scalable "
        "solutions that solve real-world problems."
    )
    site_owner_skills: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "Python",
            "Django",
            "TypeScript",
            "React",
            "Next.js",
            "PostgreSQL",
            "Machine Learning",
        ]
    )

    posthog_project_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("POSTHOG_PROJECT_API_KEY", "DJANGO_POSTHOG_PROJECT_API_KEY"),
    )
    posthog_host: str | None = Field(
        default="https://us.i.posthog.com",
        validation_alias=AliasChoices("POSTHOG_HOST", "DJANGO_POSTHOG_HOST"),
    )
    posthog_debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("POSTHOG_DEBUG", "DJANGO_POSTHOG_DEBUG"),
    )
    posthog_disabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("POSTHOG_DISABLED", "DJANGO_POSTHOG_DISABLED"),
    )

    model_config = SettingsConfigDict(
        env_prefix="DJANGO_",
        case_sensitive=False,
        extra="allow",
    )

    @field_validator("allowed_hosts", "cors_allowed_origins", "site_owner_skills", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> list[str]:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        return [str(value).strip()] if str(value).strip() else []


@lru_cache()
def get_settings(env_file: str | os.PathLike[str] | None = None) -> AppSettings:
    """Load settings from environment and optional .env file with caching."""

    kwargs: dict[str, Any] = {}
    env_file_path: Path | None = None

    if env_file:
        env_file_path = Path(env_file)
    elif os.getenv("DJANGO_ENV_FILE"):
        env_file_path = Path(os.environ["DJANGO_ENV_FILE"])
    elif DEFAULT_ENV_FILE.exists():
        env_file_path = DEFAULT_ENV_FILE

    if env_file_path is not None:
        kwargs["_env_file"] = env_file_path
        kwargs["_env_file_encoding"] = "utf-8"

    return AppSettings(**kwargs)


__all__ = [
    "AppSettings",
    "BASE_DIR",
    "DEFAULT_ENV_FILE",
    "get_settings",
]
