"""Prompt templates for the portfolio chat assistant."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from django.conf import settings

DEFAULT_PERSONALITY = "Standard Professional Assistant"


@dataclass(frozen=True)
class SiteOwner:
    """Facts about the portfolio owner that the assistant may share."""

    name: str
    title: str
    email: str
    location: str
    bio: str
    skills: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_settings(cls) -> "SiteOwner":
        data: dict[str, Any] = dict(getattr(settings, "SITE_OWNER", {}) or {})
        return cls(
            name=data.get("name", ""),
            title=data.get("title", ""),
            email=data.get("email", ""),
            location=data.get("location", ""),
            bio=data.get("bio", ""),
            skills=tuple(data.get("skills") or ()),
        )

    @property
    def skills_summary(self) -> str:
        return ", ".join(self.skills) if self.skills else "a broad range of technologies"


def build_system_prompt(owner: SiteOwner, personality: Optional[str] = None) -> str:
    """Build the fixed system prompt sent ahead of every remote model call."""

    owner_name = owner.name or "the site owner"
    skill_lines = [f"- {skill}" for skill in owner.skills] or ["- (not listed)"]

    prompt_parts = [
        f"You are the professional AI assistant for {owner_name}'s portfolio website.",
        "",
        f"ABOUT {owner_name}:",
        f"- Title: {owner.title}",
        f"- Location: {owner.location}",
        f"- Bio: {owner.bio}",
        f"- Email: {owner.email}",
        "",
        "TECHNICAL SKILLS:",
        *skill_lines,
        "",
        "INSTRUCTIONS:",
        "- Be professional, concise, and helpful.",
        "- Use Markdown for bold text, lists, and code blocks.",
        f"- If you don't know something, suggest contacting {owner_name} directly.",
        "- Always respond in the language of the user's message.",
        f"- Custom Personality: {personality or DEFAULT_PERSONALITY}",
    ]
    return "\n".join(prompt_parts)


__all__ = ["DEFAULT_PERSONALITY", "SiteOwner", "build_system_prompt"]
