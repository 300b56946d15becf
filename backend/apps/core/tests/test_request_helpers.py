"""Tests for client identification and the admin key check."""

from __future__ import annotations

from django.test import RequestFactory

from apps.core.services import (
    extract_bearer_token,
    get_client_identifier,
    is_admin_request,
    rate_bucket,
    verify_admin_key,
)


def test_client_identifier_prefers_first_forwarded_hop():
    request = RequestFactory().get(
        "/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1", HTTP_X_REAL_IP="198.51.100.2"
    )

    assert get_client_identifier(request) == "203.0.113.7"


def test_client_identifier_falls_back_to_real_ip_then_remote_addr():
    factory = RequestFactory()

    assert get_client_identifier(factory.get("/", HTTP_X_REAL_IP="198.51.100.2")) == "198.51.100.2"
    assert get_client_identifier(factory.get("/", REMOTE_ADDR="192.0.2.9")) == "192.0.2.9"


def test_client_identifier_unknown_without_address():
    request = RequestFactory().get("/")
    request.META.pop("REMOTE_ADDR", None)

    assert get_client_identifier(request) == "unknown"


def test_rate_bucket_is_scoped_per_endpoint():
    assert rate_bucket("chat", "1.2.3.4") == "chat-1.2.3.4"
    assert rate_bucket("chat", "1.2.3.4") != rate_bucket("contact", "1.2.3.4")


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc123") == "abc123"
    assert extract_bearer_token("Basic abc123") is None
    assert extract_bearer_token("Bearer ") is None
    assert extract_bearer_token(None) is None


def test_verify_admin_key(settings):
    settings.ADMIN_API_KEY = "s3cret"

    assert verify_admin_key("s3cret") is True
    assert verify_admin_key("wrong") is False
    assert verify_admin_key(None) is False


def test_unset_admin_key_never_authorizes(settings):
    settings.ADMIN_API_KEY = None
    request = RequestFactory().get("/", HTTP_AUTHORIZATION="Bearer anything")

    assert verify_admin_key("") is False
    assert is_admin_request(request) is False


def test_client_identifier_is_capped_to_column_length():
    factory = RequestFactory()
    forged = "x" * 500

    assert len(get_client_identifier(factory.get("/", HTTP_X_FORWARDED_FOR=forged))) == 64
    assert len(get_client_identifier(factory.get("/", HTTP_X_REAL_IP=forged))) == 64
