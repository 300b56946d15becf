"""Chat service helpers."""

from .conversation import ChatTurnResult, ChatValidationError, run_chat_turn
from .responders import (
    ChatPrompt,
    ChatTurn,
    LocalKeywordResponder,
    RemoteModelResponder,
    Reply,
    ResponderChain,
    build_default_chain,
)
from .store import SessionNotFoundError

__all__ = [
    "ChatPrompt",
    "ChatTurn",
    "ChatTurnResult",
    "ChatValidationError",
    "LocalKeywordResponder",
    "RemoteModelResponder",
    "Reply",
    "ResponderChain",
    "SessionNotFoundError",
    "build_default_chain",
    "run_chat_turn",
]
