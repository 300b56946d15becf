"""Tests for the contact API endpoints."""

from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest
from django.core import mail
from django.db import DatabaseError
from django.urls import reverse
from rest_framework.test import APIClient

from apps.contact import models

VALID_FORM = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "message": "I would like to talk about a project.",
}


@pytest.fixture
def client() -> APIClient:
    return APIClient()


@pytest.fixture
def admin_client(settings) -> APIClient:
    settings.ADMIN_API_KEY = "admin-secret"
    api_client = APIClient()
    api_client.credentials(HTTP_AUTHORIZATION="Bearer admin-secret")
    return api_client


def _create_submission(**kwargs) -> models.ContactSubmission:
    data = {**VALID_FORM, **kwargs}
    return models.ContactSubmission.objects.create(**data)


@pytest.mark.django_db()
def test_valid_submission_is_stored_and_emailed(client):
    response = client.post(reverse("contact:contact"), VALID_FORM, format="json")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Contact form submitted successfully"
    assert payload["emailSent"] is True
    submission = models.ContactSubmission.objects.get(pk=payload["submissionId"])
    assert submission.read is False
    assert submission.ip_address == "127.0.0.1"
    assert len(mail.outbox) == 1
    assert response["X-RateLimit-Limit"] == "5"
    assert response["X-RateLimit-Remaining"] == "4"


@pytest.mark.django_db()
def test_markup_is_stripped_before_storage(client):
    response = client.post(
        reverse("contact:contact"),
        {**VALID_FORM, "message": "<script>alert('hello')</script> and more"},
        format="json",
    )

    assert response.status_code == 200
    stored = models.ContactSubmission.objects.get()
    assert "<" not in stored.message
    assert ">" not in stored.message


@pytest.mark.django_db()
def test_invalid_submission_lists_every_error(client):
    response = client.post(
        reverse("contact:contact"),
        {"name": "Jo", "email": "bad", "message": "short"},
        format="json",
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "Validation failed"
    assert len(payload["errors"]) == 2
    assert any("email" in error for error in payload["errors"])
    assert any("Message" in error for error in payload["errors"])
    assert models.ContactSubmission.objects.count() == 0


@pytest.mark.django_db()
def test_sixth_submission_is_throttled(client):
    for _ in range(5):
        assert client.post(reverse("contact:contact"), VALID_FORM, format="json").status_code == 200

    response = client.post(reverse("contact:contact"), VALID_FORM, format="json")

    assert response.status_code == 429
    payload = response.json()
    assert payload["error"] == "Too many requests. Please try again later."
    assert isinstance(payload["retryAfter"], int)
    assert 0 < payload["retryAfter"] <= 900
    assert int(response["Retry-After"]) == payload["retryAfter"]
    assert models.ContactSubmission.objects.count() == 5


@pytest.mark.django_db()
def test_email_failure_does_not_fail_request(client):
    with patch(
        "apps.contact.services.mailers.DjangoMailEmailService.send",
        side_effect=RuntimeError("smtp down"),
    ):
        response = client.post(reverse("contact:contact"), VALID_FORM, format="json")

    assert response.status_code == 200
    assert response.json()["emailSent"] is False
    assert models.ContactSubmission.objects.count() == 1


@pytest.mark.django_db()
def test_database_failure_returns_500(client):
    with patch(
        "apps.contact.api.submit_contact", side_effect=DatabaseError("db down")
    ), patch("apps.contact.api.capture_exception") as capture:
        response = client.post(reverse("contact:contact"), VALID_FORM, format="json")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    capture.assert_called_once()


@pytest.mark.django_db()
def test_listing_requires_admin_key(client, settings):
    settings.ADMIN_API_KEY = "admin-secret"

    assert client.get(reverse("contact:contact")).status_code == 401
    response = client.get(reverse("contact:contact"), HTTP_AUTHORIZATION="Bearer wrong")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.django_db()
def test_listing_is_closed_when_no_admin_key_configured(client, settings):
    settings.ADMIN_API_KEY = None

    response = client.get(reverse("contact:contact"), HTTP_AUTHORIZATION="Bearer ")

    assert response.status_code == 401


@pytest.mark.django_db()
def test_listing_returns_recent_submissions(admin_client):
    for index in range(3):
        _create_submission(name=f"Person {index}")

    response = admin_client.get(reverse("contact:contact"), {"limit": 2})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["count"] == 2
    assert set(payload["submissions"][0]) == {
        "id",
        "name",
        "email",
        "message",
        "ipAddress",
        "read",
        "createdAt",
    }


@pytest.mark.django_db()
def test_admin_listing_paginates(admin_client):
    for index in range(4):
        _create_submission(name=f"Person {index}")

    response = admin_client.get(reverse("contact:admin-contact"), {"limit": 3, "offset": 2})

    payload = response.json()
    assert response.status_code == 200
    assert payload["count"] == 2
    assert payload["total"] == 4
    assert payload["unread"] == 4


@pytest.mark.django_db()
def test_admin_mark_read_and_delete(admin_client):
    submission = _create_submission()
    url = reverse("contact:admin-contact")

    response = admin_client.post(url, {"action": "markRead", "id": str(submission.id)}, format="json")
    assert response.status_code == 200
    submission.refresh_from_db()
    assert submission.read is True

    response = admin_client.post(url, {"action": "delete", "id": str(submission.id)}, format="json")
    assert response.status_code == 200
    assert models.ContactSubmission.objects.count() == 0

    response = admin_client.post(url, {"action": "delete", "id": str(submission.id)}, format="json")
    assert response.status_code == 404


@pytest.mark.django_db()
def test_admin_action_validation(admin_client):
    url = reverse("contact:admin-contact")

    missing_id = admin_client.post(url, {"action": "markRead"}, format="json")
    bad_action = admin_client.post(url, {"action": "archive", "id": str(uuid.uuid4())}, format="json")

    assert missing_id.status_code == 400
    assert bad_action.status_code == 400


@pytest.mark.django_db()
def test_admin_endpoint_requires_key(client, settings):
    settings.ADMIN_API_KEY = "admin-secret"

    assert client.get(reverse("contact:admin-contact")).status_code == 401
    assert client.post(reverse("contact:admin-contact"), {}, format="json").status_code == 401


@pytest.mark.django_db()
def test_overlong_email_is_rejected_before_storage(client):
    response = client.post(
        reverse("contact:contact"),
        {**VALID_FORM, "email": "a" * 300 + "@example.com"},
        format="json",
    )

    assert response.status_code == 400
    assert response.json()["errors"] == ["Email must be at most 254 characters"]
    assert models.ContactSubmission.objects.count() == 0


@pytest.mark.django_db()
def test_forged_forwarded_header_is_stored_within_column(client):
    response = client.post(
        reverse("contact:contact"),
        VALID_FORM,
        format="json",
        HTTP_X_FORWARDED_FOR="f" * 300,
    )

    assert response.status_code == 200
    stored = models.ContactSubmission.objects.get()
    assert len(stored.ip_address) <= models.ContactSubmission._meta.get_field("ip_address").max_length


@pytest.mark.django_db()
def test_unexpected_error_returns_json_500(client):
    with patch("apps.contact.api.submit_contact", side_effect=RuntimeError("boom")), patch(
        "apps.core.responses.capture_exception"
    ) as capture:
        response = client.post(reverse("contact:contact"), VALID_FORM, format="json")

    assert response.status_code == 500
    assert response["Content-Type"] == "application/json"
    assert response.json() == {"error": "Internal server error"}
    capture.assert_called_once()


@pytest.mark.django_db()
def test_malformed_json_uses_validation_shape(client):
    response = client.post(
        reverse("contact:contact"), data="{not json", content_type="application/json"
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"


@pytest.mark.django_db()
def test_admin_listing_database_failure_returns_500(admin_client):
    with patch(
        "apps.contact.api.list_submissions", side_effect=DatabaseError("db down")
    ), patch("apps.contact.api.capture_exception") as capture:
        response = admin_client.get(reverse("contact:admin-contact"))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    capture.assert_called_once()


@pytest.mark.django_db()
def test_admin_action_database_failure_returns_500(admin_client):
    with patch(
        "apps.contact.api.delete_submission", side_effect=DatabaseError("db down")
    ), patch("apps.contact.api.capture_exception") as capture:
        response = admin_client.post(
            reverse("contact:admin-contact"),
            {"action": "delete", "id": str(uuid.uuid4())},
            format="json",
        )

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    capture.assert_called_once()
