"""Slack Web API client used for notification delivery.

Wraps ``slack_sdk.WebClient`` with the four operations the notification
strategies need, applying the bounded rate-limit retry to each call and
turning every other failure into a ``ChatApiError`` that names the endpoint
and the Slack error code.

The client is an explicit object passed to whoever needs it; nothing here is
module-level state.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, OperationStatus, classify_slack_error
from infrastructure.operations.classifiers import SLACK_CAPABILITY_ERRORS
from infrastructure.resilience import (
    RateLimitedError,
    RateLimitPolicy,
    call_with_rate_limit_retry,
)

logger = get_module_logger()


class ChatApiError(Exception):
    """A Slack Web API call failed with something other than a rate limit.

    Attributes:
        endpoint: Slack method name, e.g. ``chat.postMessage``
        error_code: Slack error code, e.g. ``missing_scope``
        result: Classified OperationResult for the failure
    """

    def __init__(self, endpoint: str, error_code: str, result: OperationResult):
        self.endpoint = endpoint
        self.error_code = error_code
        self.result = result
        super().__init__(f"Slack API call {endpoint} failed: {error_code}")

    @property
    def is_capability_error(self) -> bool:
        """The token lacks the scope or permission for this call."""
        return self.result.status == OperationStatus.PERMANENT_ERROR and (
            self.error_code in SLACK_CAPABILITY_ERRORS
        )

    @property
    def is_not_found(self) -> bool:
        return self.result.status == OperationStatus.NOT_FOUND


class SlackChatClient:
    """Slack operations consumed by the notification dispatcher.

    Args:
        token: Bearer token (bot or user token)
        policy: Rate-limit retry policy applied to every call
        client: Pre-built WebClient (tests inject a mock)
        sleep: Sleep function used between rate-limited attempts

    Example:
        chat = SlackChatClient(token=settings.slack.SLACK_TOKEN)
        user_id = chat.lookup_user_by_email("new.hire@example.com")
        chat.post_message(user_id, "Welcome!")
    """

    def __init__(
        self,
        token: Optional[str] = None,
        policy: Optional[RateLimitPolicy] = None,
        client: Optional[WebClient] = None,
        sleep=None,
    ):
        if client is None and not token:
            raise ValueError("A Slack token or a WebClient is required")
        self._client = client or WebClient(token=token)
        self._policy = policy or RateLimitPolicy()
        self._sleep = sleep

    def _call(self, endpoint: str, method_name: str, **kwargs: Any):
        method = getattr(self._client, method_name)

        def _attempt():
            try:
                return method(**kwargs)
            except SlackApiError as exc:
                result = classify_slack_error(exc)
                if result.is_rate_limited:
                    raise RateLimitedError(endpoint, result.retry_after) from exc
                code = result.error_code or "unknown_error"
                logger.warning(
                    "slack_api_call_failed",
                    endpoint=endpoint,
                    error_code=code,
                    status=result.status.value,
                )
                raise ChatApiError(endpoint, code, result) from exc

        retry_kwargs = {"operation": endpoint, "policy": self._policy}
        if self._sleep is not None:
            retry_kwargs["sleep"] = self._sleep
        return call_with_rate_limit_retry(_attempt, **retry_kwargs)

    def lookup_user_by_email(self, email: str) -> str:
        """Resolve an email address to a Slack user ID.

        Raises:
            ChatApiError: ``users_not_found`` when nobody has that email
        """
        response = self._call("users.lookupByEmail", "users_lookupByEmail", email=email)
        return response["user"]["id"]

    def open_conversation(self, user_id: str) -> str:
        """Open (or re-open) a direct conversation and return its channel ID."""
        response = self._call("conversations.open", "conversations_open", users=user_id)
        return response["channel"]["id"]

    def list_conversations(
        self,
        cursor: Optional[str] = None,
        types: str = "im",
        limit: int = 200,
    ) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """Fetch one page of conversations.

        Returns:
            (channels, next_cursor); next_cursor is None on the last page
        """
        kwargs: Dict[str, Any] = {
            "types": types,
            "limit": limit,
            "exclude_archived": True,
        }
        if cursor:
            kwargs["cursor"] = cursor
        response = self._call("conversations.list", "conversations_list", **kwargs)
        channels = response.get("channels", [])
        next_cursor = response.get("response_metadata", {}).get("next_cursor") or None
        return channels, next_cursor

    def iter_conversations(
        self, types: str = "im", max_pages: Optional[int] = None
    ) -> Iterator[Dict[str, Any]]:
        """Yield conversations page by page until the cursor is exhausted."""
        cursor = None
        pages = 0
        while True:
            channels, cursor = self.list_conversations(cursor=cursor, types=types)
            pages += 1
            yield from channels
            if not cursor:
                break
            if max_pages is not None and pages >= max_pages:
                logger.info(
                    "conversation_scan_page_limit_reached",
                    types=types,
                    pages=pages,
                )
                break

    def find_direct_conversation(
        self, user_id: str, max_pages: Optional[int] = None
    ) -> Optional[str]:
        """Return the ID of an existing IM with ``user_id``, if there is one."""
        for conversation in self.iter_conversations(types="im", max_pages=max_pages):
            if conversation.get("user") == user_id:
                return conversation["id"]
        return None

    def post_message(self, channel: str, text: str) -> Dict[str, Any]:
        """Post ``text`` to a channel, IM or user ID.

        Returns:
            dict with the ``channel`` and message ``ts`` reported by Slack
        """
        response = self._call(
            "chat.postMessage", "chat_postMessage", channel=channel, text=text
        )
        return {"channel": response.get("channel", channel), "ts": response.get("ts")}
