"""Persistence helpers for chat sessions and their message history."""

from __future__ import annotations

import logging
import re
import secrets
import string
import time
from typing import Any, Optional

from django.db import transaction
from django.utils import timezone

from apps.chat import models as chat_models

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 50
SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class SessionNotFoundError(Exception):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Chat session {session_id!r} does not exist")
        self.session_id = session_id


def generate_session_id() -> str:
    """Return ``session-<epoch ms>-<random suffix>``."""

    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"session-{int(time.time() * 1000)}-{suffix}"


def is_valid_session_id(session_id: Optional[str]) -> bool:
    return bool(session_id) and bool(SESSION_ID_PATTERN.match(session_id))


def create_session(session_id: str, ip_address: Optional[str] = None) -> chat_models.ChatSession:
    return chat_models.ChatSession.objects.create(session_id=session_id, ip_address=ip_address)


def get_session(session_id: str) -> Optional[chat_models.ChatSession]:
    return chat_models.ChatSession.objects.filter(session_id=session_id).first()


def resolve_session(
    session_id: Optional[str], ip_address: Optional[str] = None
) -> chat_models.ChatSession:
    """Return the session for ``session_id``, creating one when needed.

    An unknown but well-formed id is adopted for the new session so the
    client keeps using the id it already holds. A missing or malformed id
    gets a freshly generated one.
    """

    if not is_valid_session_id(session_id):
        if session_id:
            logger.info("Ignoring malformed chat session id from %s", ip_address)
        return create_session(generate_session_id(), ip_address)

    session, created = chat_models.ChatSession.objects.get_or_create(
        session_id=session_id,
        defaults={"ip_address": ip_address},
    )
    if created:
        logger.info("Created chat session %s for unrecognised id", session.session_id)
    return session


def add_message(
    session_id: str,
    role: str,
    content: str,
    metadata: Optional[dict[str, Any]] = None,
) -> chat_models.ChatMessage:
    """Append a message and bump the session's ``updated_at`` atomically."""

    with transaction.atomic():
        try:
            session = chat_models.ChatSession.objects.select_for_update().get(
                session_id=session_id
            )
        except chat_models.ChatSession.DoesNotExist as exc:
            raise SessionNotFoundError(session_id) from exc

        message = chat_models.ChatMessage.objects.create(
            session=session,
            role=role,
            content=content,
            metadata=metadata or {},
        )
        chat_models.ChatSession.objects.filter(pk=session.pk).update(updated_at=timezone.now())
    return message


def get_messages(session_id: str, limit: int = DEFAULT_MESSAGE_LIMIT) -> list[chat_models.ChatMessage]:
    """Return up to ``limit`` messages, oldest first."""

    return list(
        chat_models.ChatMessage.objects.filter(session__session_id=session_id).order_by(
            "created_at", "id"
        )[:limit]
    )


def get_recent_messages(session_id: str, limit: int) -> list[chat_models.ChatMessage]:
    """Return the latest ``limit`` messages in chronological order."""

    latest = chat_models.ChatMessage.objects.filter(session__session_id=session_id).order_by(
        "-created_at", "-id"
    )[:limit]
    return list(reversed(list(latest)))


def delete_message(message_id: int) -> bool:
    deleted, _ = chat_models.ChatMessage.objects.filter(pk=message_id).delete()
    return deleted > 0


def delete_session(session_id: str) -> bool:
    deleted, _ = chat_models.ChatSession.objects.filter(session_id=session_id).delete()
    return deleted > 0


__all__ = [
    "SessionNotFoundError",
    "add_message",
    "create_session",
    "delete_message",
    "delete_session",
    "generate_session_id",
    "get_messages",
    "get_recent_messages",
    "get_session",
    "is_valid_session_id",
    "resolve_session",
]
