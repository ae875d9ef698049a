"""Test fixtures for notification infrastructure tests."""

from typing import Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications import Destination, ResolvedDestination
from integrations.slack.client import SlackChatClient


@pytest.fixture
def mock_chat():
    """Mock SlackChatClient where every call succeeds by default.

    Returns:
        MagicMock with the SlackChatClient interface; post_message echoes the
        channel it was given
    """
    chat = MagicMock(spec=SlackChatClient)
    chat.lookup_user_by_email.return_value = "U123"
    chat.open_conversation.return_value = "D123"
    chat.find_direct_conversation.return_value = None
    chat.post_message.side_effect = lambda channel, text: {
        "channel": channel,
        "ts": "1700000000.000100",
    }
    return chat


@pytest.fixture
def destination_factory():
    """Factory for Destination instances.

    Example:
        by_email = destination_factory(email="new.hire@example.com")
        by_id = destination_factory(user_id="U999")
    """

    def _factory(
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        channel_id: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> Destination:
        return Destination(
            user_id=user_id,
            email=email,
            channel_id=channel_id,
            display_name=display_name,
        )

    return _factory


@pytest.fixture
def direct_resolution():
    return ResolvedDestination.direct("U123")


@pytest.fixture
def unresolved():
    return ResolvedDestination.unresolved("users_not_found")


@pytest.fixture
def post_fails_for(chat_error_factory):
    """Make post_message fail for specific channels and succeed elsewhere."""

    def _configure(chat, failing_channels, error_code="missing_scope"):
        def _post(channel, text):
            if channel in failing_channels:
                raise chat_error_factory("chat.postMessage", error_code)
            return {"channel": channel, "ts": "1700000000.000100"}

        chat.post_message.side_effect = _post
        return chat

    return _configure
