"""Fixtures for infrastructure resilience tests."""

import pytest

from infrastructure.resilience import RateLimitPolicy


@pytest.fixture
def default_policy():
    """Policy with the default five attempts and three second backoff."""
    return RateLimitPolicy()
