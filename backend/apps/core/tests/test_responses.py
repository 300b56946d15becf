"""Tests for the shared JSON error handling."""

from __future__ import annotations

from unittest.mock import patch

from django.http import Http404
from rest_framework.exceptions import ParseError
from rest_framework.test import APIRequestFactory

from apps.core.responses import api_exception_handler


def _context():
    return {"request": APIRequestFactory().post("/api/chat"), "view": None}


def test_parse_error_uses_validation_shape():
    response = api_exception_handler(ParseError("JSON parse error"), _context())

    assert response.status_code == 400
    assert response.data == {"error": "Validation failed", "errors": ["JSON parse error"]}


def test_api_exceptions_keep_status_with_error_key():
    response = api_exception_handler(Http404(), _context())

    assert response.status_code == 404
    assert set(response.data) == {"error"}


def test_unexpected_exception_becomes_reported_500():
    error = RuntimeError("boom")

    with patch("apps.core.responses.capture_exception") as capture:
        response = api_exception_handler(error, _context())

    assert response.status_code == 500
    assert response.data == {"error": "Internal server error"}
    capture.assert_called_once()
    assert capture.call_args.args[0] is error
    assert capture.call_args.kwargs["distinct_id"] == "127.0.0.1"
