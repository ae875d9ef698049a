"""Shared fixtures for the onboarding ops test suite."""

from unittest.mock import MagicMock

import pytest
from slack_sdk.errors import SlackApiError
from slack_sdk.web.slack_response import SlackResponse

from infrastructure.operations import classify_slack_error
from integrations.slack.client import ChatApiError


@pytest.fixture
def slack_api_error_factory():
    """Factory for SlackApiError instances as raised by slack_sdk.

    Example:
        exc = slack_api_error_factory("missing_scope")
        limited = slack_api_error_factory("ratelimited", status_code=429)
    """

    def _factory(error: str, status_code: int = 200, headers=None) -> SlackApiError:
        response = SlackResponse(
            client=None,
            http_verb="POST",
            api_url="https://slack.com/api/test",
            req_args={},
            data={"ok": False, "error": error},
            headers=headers or {},
            status_code=status_code,
        )
        return SlackApiError(f"The request failed: {error}", response)

    return _factory


@pytest.fixture
def chat_error_factory():
    """Factory for ChatApiError instances as raised by SlackChatClient.

    Example:
        error = chat_error_factory("chat.postMessage", "missing_scope")
    """

    def _factory(endpoint: str = "chat.postMessage", error_code: str = "missing_scope"):
        return ChatApiError(endpoint, error_code, classify_slack_error(error_code))

    return _factory


@pytest.fixture
def mock_sleep():
    """Sleep replacement so rate-limit tests never wait."""
    return MagicMock()
