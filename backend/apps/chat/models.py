"""Models for chat assistant conversations."""

from __future__ import annotations

from django.db import models


class ChatMessageRole(models.TextChoices):
    USER = "user", "User"
    ASSISTANT = "assistant", "Assistant"


class ChatSession(models.Model):
    id = models.BigAutoField(primary_key=True)
    session_id = models.CharField(max_length=128, unique=True)
    ip_address = models.CharField(max_length=64, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "chat_sessions"
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"ChatSession {self.session_id}"


class ChatMessage(models.Model):
    id = models.BigAutoField(primary_key=True)
    session = models.ForeignKey(ChatSession, related_name="messages", on_delete=models.CASCADE)
    role = models.CharField(max_length=16, choices=ChatMessageRole.choices)
    content = models.TextField()
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "chat_messages"
        ordering = ["created_at", "id"]
        indexes = [models.Index(fields=["session", "created_at"], name="chat_message_session_idx")]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"ChatMessage {self.id} for session {self.session_id}"
