"""One chat turn: validate, persist, generate a reply, persist the reply."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from apps.chat.models import ChatMessageRole
from apps.chat.services import store
from apps.chat.services.responders import (
    ChatPrompt,
    ChatTurn,
    Reply,
    ResponderChain,
    build_default_chain,
)
from apps.core.services import sanitize_input, validate_chat_message

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20


class ChatValidationError(Exception):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass
class ChatTurnResult:
    response: str
    session_id: str
    reply: Reply


def run_chat_turn(
    *,
    message: Optional[str],
    session_id: Optional[str],
    ip_address: Optional[str],
    chain: Optional[ResponderChain] = None,
) -> ChatTurnResult:
    """Answer a user message within its session.

    Invalid input raises ``ChatValidationError`` before anything is written.
    Both the user message and the reply are stored in the same session,
    whichever responder produced the reply. If no reply can be stored, the
    user message is removed again before the error propagates.
    """

    cleaned = sanitize_input(message)
    validation = validate_chat_message(cleaned)
    if not validation.valid:
        raise ChatValidationError(validation.errors)

    session = store.resolve_session(session_id, ip_address)
    user_message = store.add_message(session.session_id, ChatMessageRole.USER, cleaned)

    try:
        reply = _reply_and_store(session.session_id, cleaned, ip_address, chain)
    except Exception:
        # A user turn without an answer is never left behind.
        store.delete_message(user_message.pk)
        logger.warning(
            "Chat turn failed for session %s; removed unanswered user message",
            session.session_id,
        )
        raise

    logger.info(
        "Chat reply for session %s produced by %s responder",
        session.session_id,
        reply.source,
    )
    return ChatTurnResult(response=reply.text, session_id=session.session_id, reply=reply)


def _reply_and_store(
    session_id: str,
    message: str,
    ip_address: Optional[str],
    chain: Optional[ResponderChain],
) -> Reply:
    history_limit = int(getattr(settings, "CHAT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT))
    history = [
        ChatTurn(role=item.role, content=item.content)
        for item in store.get_recent_messages(session_id, history_limit)
    ]
    prompt = ChatPrompt(
        message=message,
        history=history,
        session_id=session_id,
        distinct_id=ip_address,
    )

    reply = (chain or build_default_chain()).respond(prompt)
    store.add_message(session_id, ChatMessageRole.ASSISTANT, reply.text, metadata=reply.metadata)
    return reply


__all__ = ["ChatTurnResult", "ChatValidationError", "run_chat_turn"]
