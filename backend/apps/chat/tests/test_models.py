"""Basic tests for chat models."""

import pytest

from apps.chat import models


def test_chat_message_roles():
    assert models.ChatMessageRole.USER == "user"
    assert models.ChatMessageRole.ASSISTANT == "assistant"


@pytest.mark.django_db()
def test_deleting_session_cascades_to_messages():
    session = models.ChatSession.objects.create(session_id="session-1")
    models.ChatMessage.objects.create(
        session=session, role=models.ChatMessageRole.USER, content="hi"
    )

    session.delete()

    assert models.ChatMessage.objects.count() == 0
    assert "ChatSession" in str(models.ChatSession(session_id="abc"))
