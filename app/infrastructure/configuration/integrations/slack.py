"""Slack integration settings."""

from pydantic import AliasChoices, Field

from infrastructure.configuration.base import IntegrationSettings


class SlackSettings(IntegrationSettings):
    """Slack Web API configuration.

    Environment Variables:
        SLACK_TOKEN / SLACK_BOT_TOKEN: Bot (xoxb-*) or user (xoxp-*) token
        SLACK_FALLBACK_CHANNEL: Channel ID used when a direct message cannot
            be delivered

    Example:
        ```python
        from infrastructure.configuration import settings

        token = settings.slack.SLACK_TOKEN
        fallback = settings.slack.SLACK_FALLBACK_CHANNEL
        ```
    """

    SLACK_TOKEN: str = Field(
        default="",
        validation_alias=AliasChoices("SLACK_TOKEN", "SLACK_BOT_TOKEN"),
    )
    SLACK_FALLBACK_CHANNEL: str = ""
