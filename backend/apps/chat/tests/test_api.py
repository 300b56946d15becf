"""Tests for the chat API endpoint."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse
from langchain_core.messages import AIMessage
from rest_framework.test import APIClient

from apps.chat import models as chat_models
from apps.chat.prompts import SiteOwner
from apps.chat.services import LocalKeywordResponder, Reply


@pytest.fixture
def client() -> APIClient:
    return APIClient()


def _pool(category: str) -> tuple[str, ...]:
    return LocalKeywordResponder(SiteOwner.from_settings()).pool_for(category)


@pytest.mark.django_db()
def test_first_message_creates_session(client):
    response = client.post(reverse("chat:chat"), {"message": "hello"}, format="json")

    assert response.status_code == 200
    payload = response.json()
    assert payload["sessionId"].startswith("session-")
    assert payload["response"] in _pool("greeting")
    assert response["X-Session-Id"] == payload["sessionId"]
    assert response["X-RateLimit-Limit"] == "20"
    assert response["X-RateLimit-Remaining"] == "19"

    session = chat_models.ChatSession.objects.get(session_id=payload["sessionId"])
    roles = list(session.messages.values_list("role", flat=True))
    assert roles == [chat_models.ChatMessageRole.USER, chat_models.ChatMessageRole.ASSISTANT]
    assert session.messages.last().metadata == {"source": "local", "category": "greeting"}


@pytest.mark.django_db()
def test_follow_up_reuses_session(client):
    first = client.post(reverse("chat:chat"), {"message": "hello"}, format="json").json()

    second = client.post(
        reverse("chat:chat"),
        {"message": "who are you", "sessionId": first["sessionId"]},
        format="json",
    )

    assert second.status_code == 200
    payload = second.json()
    assert payload["sessionId"] == first["sessionId"]
    assert payload["response"] in _pool("identity")
    assert chat_models.ChatSession.objects.count() == 1
    assert chat_models.ChatMessage.objects.count() == 4


@pytest.mark.django_db()
def test_empty_message_is_rejected_without_writes(client):
    response = client.post(reverse("chat:chat"), {"message": "   "}, format="json")

    assert response.status_code == 400
    assert response.json() == {
        "error": "Validation failed",
        "errors": ["Message cannot be empty"],
    }
    assert chat_models.ChatSession.objects.count() == 0


@pytest.mark.django_db()
def test_missing_message_is_rejected(client):
    response = client.post(reverse("chat:chat"), {}, format="json")

    assert response.status_code == 400
    assert "Message cannot be empty" in response.json()["errors"]


@pytest.mark.django_db()
def test_rate_limit_after_twenty_messages(client):
    for _ in range(20):
        assert client.post(reverse("chat:chat"), {"message": "hi"}, format="json").status_code == 200

    response = client.post(reverse("chat:chat"), {"message": "hi"}, format="json")

    assert response.status_code == 429
    payload = response.json()
    assert payload["error"] == "Too many requests. Please slow down."
    assert payload["retryAfter"] >= 1
    assert int(response["Retry-After"]) == payload["retryAfter"]
    assert response["X-RateLimit-Remaining"] == "0"


@pytest.mark.django_db()
def test_rate_limit_is_per_client(client):
    for _ in range(20):
        client.post(reverse("chat:chat"), {"message": "hi"}, format="json")

    other = client.post(
        reverse("chat:chat"),
        {"message": "hi"},
        format="json",
        HTTP_X_FORWARDED_FOR="203.0.113.50",
    )

    assert other.status_code == 200


@pytest.mark.django_db()
def test_remote_model_reply_is_returned_and_stored(client, settings):
    settings.OPENAI_API_KEY = "sk-test"

    with patch("apps.chat.services.responders.ChatOpenAI") as chat_cls:
        chat_cls.return_value.invoke.return_value = AIMessage(content="Hello from the model")
        response = client.post(reverse("chat:chat"), {"message": "hello"}, format="json")

    assert response.status_code == 200
    assert response.json()["response"] == "Hello from the model"
    assistant = chat_models.ChatMessage.objects.get(role=chat_models.ChatMessageRole.ASSISTANT)
    assert assistant.metadata["source"] == "remote"


@pytest.mark.django_db()
def test_remote_timeout_falls_back_to_local(client, settings):
    settings.OPENAI_API_KEY = "sk-test"

    with patch("apps.chat.services.responders.ChatOpenAI") as chat_cls:
        chat_cls.return_value.invoke.side_effect = TimeoutError("timed out")
        response = client.post(reverse("chat:chat"), {"message": "hello"}, format="json")

    assert response.status_code == 200
    assert response.json()["response"] in _pool("greeting")


@pytest.mark.django_db()
def test_database_failure_returns_500(client):
    with patch(
        "apps.chat.services.store.resolve_session", side_effect=DatabaseError("db down")
    ):
        response = client.post(reverse("chat:chat"), {"message": "hello"}, format="json")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.django_db()
def test_unexpected_error_returns_json_500(client):
    with patch("apps.chat.api.run_chat_turn", side_effect=RuntimeError("boom")), patch(
        "apps.core.responses.capture_exception"
    ) as capture:
        response = client.post(reverse("chat:chat"), {"message": "hello"}, format="json")

    assert response.status_code == 500
    assert response["Content-Type"] == "application/json"
    assert response.json() == {"error": "Internal server error"}
    capture.assert_called_once()


@pytest.mark.django_db()
def test_session_deleted_mid_turn_returns_json_500(client):
    class DeletingChain:
        def respond(self, prompt):
            chat_models.ChatSession.objects.filter(session_id=prompt.session_id).delete()
            return Reply(text="too late", source="local")

    with patch(
        "apps.chat.services.conversation.build_default_chain", return_value=DeletingChain()
    ):
        response = client.post(reverse("chat:chat"), {"message": "hello"}, format="json")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert chat_models.ChatMessage.objects.count() == 0


@pytest.mark.django_db()
def test_malformed_json_uses_validation_shape(client):
    response = client.post(
        reverse("chat:chat"), data="{not json", content_type="application/json"
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "Validation failed"
    assert len(payload["errors"]) == 1
