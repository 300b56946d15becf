"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from apps.core.services import get_rate_limiter


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    limiter = get_rate_limiter()
    limiter.reset()
    yield
    limiter.reset()
