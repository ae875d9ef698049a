"""Slack Integration Package.

- client: Slack Web API client used for notification delivery
"""

from integrations.slack.client import ChatApiError, SlackChatClient

__all__ = ["ChatApiError", "SlackChatClient"]
