"""Reply generation for the chat assistant.

Replies come from an ordered chain of responders. Each responder either
produces a reply or returns ``None`` to hand the turn to the next one. The
default chain tries the remote chat model first and falls back to a local
keyword matcher, which always answers.
"""

from __future__ import annotations

import logging
import random
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from django.conf import settings
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from apps.chat.models import ChatMessageRole
from apps.chat.prompts import SiteOwner, build_system_prompt
from apps.core.posthog import get_posthog_client

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ChatTurn:
    role: str
    content: str


@dataclass
class ChatPrompt:
    """Everything a responder needs to answer one user message."""

    message: str
    history: Sequence[ChatTurn] = field(default_factory=tuple)
    session_id: Optional[str] = None
    distinct_id: Optional[str] = None


@dataclass
class Reply:
    text: str
    source: str
    category: Optional[str] = None
    model: Optional[str] = None

    @property
    def metadata(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source}
        if self.category:
            data["category"] = self.category
        if self.model:
            data["model"] = self.model
        return data


class Responder(ABC):
    name: str = "responder"

    @abstractmethod
    def try_respond(self, prompt: ChatPrompt) -> Optional[Reply]: ...


class RemoteModelResponder(Responder):
    """Single synchronous call to an OpenAI-compatible chat model via LangChain."""

    name = "remote"

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = DEFAULT_CHAT_MODEL,
        owner: SiteOwner,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        personality: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.owner = owner
        self.base_url = base_url
        self.timeout = timeout
        self.personality = personality
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, owner: Optional[SiteOwner] = None) -> "RemoteModelResponder":
        return cls(
            api_key=getattr(settings, "OPENAI_API_KEY", None),
            model=getattr(settings, "OPENAI_MODEL", None) or DEFAULT_CHAT_MODEL,
            owner=owner or SiteOwner.from_settings(),
            base_url=getattr(settings, "OPENAI_BASE_URL", None),
            timeout=float(getattr(settings, "CHAT_MODEL_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
            personality=getattr(settings, "CHATBOT_SYSTEM_PROMPT", None),
        )

    def try_respond(self, prompt: ChatPrompt) -> Optional[Reply]:
        if not self.api_key:
            return None

        try:
            chat = ChatOpenAI(**self._chat_kwargs())
            message = chat.invoke(
                self.build_messages(prompt),
                config={
                    "callbacks": _build_callbacks(prompt),
                    "run_name": "portfolio_chat",
                },
            )
        except Exception as exc:
            logger.warning(
                "Remote chat model %s failed for session %s: %s",
                self.model,
                prompt.session_id,
                exc,
            )
            return None

        text = _normalise_content(getattr(message, "content", ""))
        if not text:
            logger.warning(
                "Remote chat model %s returned an empty completion for session %s",
                self.model,
                prompt.session_id,
            )
            return None

        return Reply(text=text, source=self.name, model=self.model)

    def build_messages(self, prompt: ChatPrompt) -> list[BaseMessage]:
        messages: list[BaseMessage] = [
            SystemMessage(content=build_system_prompt(self.owner, self.personality))
        ]
        for turn in prompt.history:
            if turn.role == ChatMessageRole.ASSISTANT:
                messages.append(AIMessage(content=turn.content))
            else:
                messages.append(HumanMessage(content=turn.content))

        if not prompt.history or prompt.history[-1].content != prompt.message:
            messages.append(HumanMessage(content=prompt.message))
        return messages

    def _chat_kwargs(self) -> dict[str, Any]:
        chat_kwargs: dict[str, Any] = {
            "api_key": self.api_key,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "max_retries": 0,
        }
        if self.base_url:
            chat_kwargs["base_url"] = self.base_url.rstrip("/")
        return chat_kwargs


@dataclass(frozen=True)
class ResponseCategory:
    name: str
    pattern: re.Pattern[str]
    responses: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))


# Evaluated in order; the first matching category answers.
CATEGORY_TEMPLATES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    (
        "identity",
        r"\b(who are you|what are you|who is this|your name|introduce yourself"
        r"|are you (a |an )?(bot|robot|ai|human|real person))\b",
        (
            "I'm the virtual assistant for {name}'s portfolio. I can tell you about "
            "{name}'s projects, skills, and how to get in touch.",
            "I'm an automated assistant on {name}'s website. Ask me about the work, "
            "the tech stack, or how to reach {name}.",
            "Think of me as {name}'s portfolio guide. {name} is a {title} based in "
            "{location}, and I'm here to answer questions about their work.",
        ),
    ),
    (
        "greeting",
        r"\b(hi|hello|hey|hiya|howdy|greetings|good (morning|afternoon|evening))\b",
        (
            "Hello! Welcome to {name}'s portfolio. How can I help you today?",
            "Hi there! Feel free to ask about {name}'s projects, skills, or availability.",
            "Hey! Great to have you here. What would you like to know about {name}'s work?",
        ),
    ),
    (
        "portfolio",
        r"\b(projects?|portfolio|work|built|build|case stud(y|ies)|experience|apps?)\b",
        (
            "{name} has worked on a range of projects as a {title}. The Projects section "
            "has details, tech stacks, and links for each one.",
            "You can browse {name}'s recent work in the Projects section. Each entry "
            "describes the problem, the approach, and the technologies used.",
        ),
    ),
    (
        "skills",
        r"\b(skills?|stack|tech|technolog(y|ies)|languages?|frameworks?|tools?"
        r"|python|django|javascript|typescript|react|backend|frontend|machine learning|ai)\b",
        (
            "{name}'s core skills include {skills}.",
            "{name} works mostly with {skills}, with a focus on backend systems and AI.",
        ),
    ),
    (
        "contact",
        r"\b(contact|email|e-mail|reach|hire|hiring|available|availability|freelance"
        r"|get in touch|phone|call)\b",
        (
            "You can reach {name} at {email}, or use the contact form on this site.",
            "The best way to get in touch is the contact form, or email {name} directly "
            "at {email}.",
        ),
    ),
)

DEFAULT_RESPONSE_TEMPLATES: tuple[str, ...] = (
    "I'm not sure I have an answer for that. You can ask about {name}'s projects, "
    "skills, or how to get in touch.",
    "That's a good question! For anything specific, the best option is to contact "
    "{name} directly at {email}.",
    "I can help with questions about {name}'s work, skills, and availability. "
    "What would you like to know?",
)

DEFAULT_CATEGORY = "default"


class LocalKeywordResponder(Responder):
    """Deterministic keyword matcher with canned responses; always answers."""

    name = "local"

    def __init__(
        self,
        owner: SiteOwner,
        *,
        templates: Sequence[tuple[str, str, Sequence[str]]] = CATEGORY_TEMPLATES,
        default_templates: Sequence[str] = DEFAULT_RESPONSE_TEMPLATES,
        rng: Optional[random.Random] = None,
    ) -> None:
        context = {
            "name": owner.name or "the site owner",
            "title": owner.title or "software engineer",
            "email": owner.email or "the contact form",
            "location": owner.location or "an undisclosed location",
            "skills": owner.skills_summary,
        }
        self.categories: list[ResponseCategory] = [
            ResponseCategory(
                name=name,
                pattern=re.compile(pattern),
                responses=tuple(template.format(**context) for template in responses),
            )
            for name, pattern, responses in templates
        ]
        self.default_responses: tuple[str, ...] = tuple(
            template.format(**context) for template in default_templates
        )
        self._rng = rng or random.Random()

    def classify(self, message: str) -> str:
        text = message.lower()
        for category in self.categories:
            if category.matches(text):
                return category.name
        return DEFAULT_CATEGORY

    def pool_for(self, category_name: str) -> tuple[str, ...]:
        for category in self.categories:
            if category.name == category_name:
                return category.responses
        return self.default_responses

    def try_respond(self, prompt: ChatPrompt) -> Optional[Reply]:
        category_name = self.classify(prompt.message)
        text = self._rng.choice(self.pool_for(category_name))
        return Reply(text=text, source=self.name, category=category_name)


class NoReplyError(RuntimeError):
    """Raised when every responder in a chain declined to answer."""


class ResponderChain:
    def __init__(self, responders: Sequence[Responder]) -> None:
        self.responders = list(responders)

    def respond(self, prompt: ChatPrompt) -> Reply:
        for responder in self.responders:
            reply = responder.try_respond(prompt)
            if reply is not None:
                logger.debug("Responder %s answered session %s", responder.name, prompt.session_id)
                return reply
        raise NoReplyError("No responder produced a reply")


def build_default_chain() -> ResponderChain:
    owner = SiteOwner.from_settings()
    return ResponderChain(
        [
            RemoteModelResponder.from_settings(owner),
            LocalKeywordResponder(owner),
        ]
    )


def _build_callbacks(prompt: ChatPrompt) -> list[Any]:
    posthog_client = get_posthog_client()
    if not posthog_client:
        return []

    from posthog.ai.langchain import CallbackHandler

    return [
        CallbackHandler(
            client=posthog_client,
            distinct_id=prompt.distinct_id or prompt.session_id,
            trace_id=prompt.session_id,
            properties={"chat_session_id": prompt.session_id},
        )
    ]


def _normalise_content(content: Any) -> str:
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, dict) and item.get("type") == "text":
                parts.append(str(item.get("text", "")))
            elif isinstance(item, str):
                parts.append(item)
        content = "".join(parts)

    if content is None:
        return ""
    if not isinstance(content, str):
        content = str(content)
    return content.strip()


__all__ = [
    "CATEGORY_TEMPLATES",
    "ChatPrompt",
    "ChatTurn",
    "LocalKeywordResponder",
    "NoReplyError",
    "RemoteModelResponder",
    "Reply",
    "Responder",
    "ResponderChain",
    "ResponseCategory",
    "build_default_chain",
]
