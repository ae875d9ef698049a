"""Shared plumbing for the onboarding script entry points.

Exit codes:
    0  success, dry run, or nothing to do
    1  unhandled error, or at least one item failed
    2  missing or invalid configuration
"""

import sys
from typing import Callable, Optional

from infrastructure.configuration import ConfigurationError, require, settings
from infrastructure.logging import bind_run_context, get_module_logger
from infrastructure.notifications import NotificationDispatcher, default_strategies
from infrastructure.resilience import RateLimitPolicy
from integrations.slack import SlackChatClient

logger = get_module_logger()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_dispatcher(
    slack_token: Optional[str],
    fallback_channel: Optional[str] = None,
    conversation_page_limit: int = 10,
) -> NotificationDispatcher:
    """Build a dispatcher with the standard strategy order.

    Raises:
        ConfigurationError: no Slack token
    """
    token = require(slack_token, "SLACK_TOKEN", "pass --slack-token or set SLACK_BOT_TOKEN")
    chat = SlackChatClient(
        token=token, policy=RateLimitPolicy.from_settings(settings.rate_limit)
    )
    return NotificationDispatcher(
        chat,
        strategies=default_strategies(max_conversation_pages=conversation_page_limit),
        fallback_channel=fallback_channel,
    )


def run_script(script: str, body: Callable[[], int]) -> int:
    """Run a script body with run-scoped logging and uniform exit handling."""
    with bind_run_context(script=script):
        try:
            return body()
        except ConfigurationError as exc:
            logger.error("configuration_error", setting=exc.setting, error=str(exc))
            print(f"ERROR: {exc}", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        except Exception as exc:
            logger.error("script_failed", error=str(exc), exc_info=True)
            print(f"ERROR: {exc}", file=sys.stderr)
            return EXIT_FAILURE
