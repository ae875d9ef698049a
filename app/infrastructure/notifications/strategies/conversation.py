"""Open-or-find conversation strategy."""

from typing import Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.exceptions import NotificationError
from infrastructure.notifications.models import StrategyName
from infrastructure.notifications.strategies.base import DeliveryStrategy
from infrastructure.operations import OperationResult
from integrations.slack.client import ChatApiError

logger = get_module_logger()


class ConversationNotFoundError(NotificationError):
    """No existing direct conversation with the user was found."""

    def __init__(self, user_id: str, open_error: str):
        self.user_id = user_id
        super().__init__(
            f"conversations.open denied ({open_error}) and no existing "
            f"conversation with {user_id}"
        )


class OpenOrFindConversationStrategy(DeliveryStrategy):
    """Open a private conversation with the user and post there.

    When the token may not open conversations, scan the conversations it can
    already see for a DM with the user and reuse that one instead.

    Args:
        max_pages: Upper bound on conversation pages scanned
    """

    def __init__(self, max_pages: Optional[int] = 10):
        self.max_pages = max_pages

    @property
    def name(self) -> StrategyName:
        return StrategyName.OPEN_OR_FIND

    def is_applicable(self, target, resolved, fallback_channel) -> bool:
        return resolved.is_direct

    def deliver(self, chat, message, target, resolved, fallback_channel) -> OperationResult:
        user_id = resolved.value
        try:
            channel_id = chat.open_conversation(user_id)
        except ChatApiError as exc:
            if not exc.is_capability_error:
                raise
            logger.info(
                "conversation_open_denied_searching_existing",
                user_id=user_id,
                error_code=exc.error_code,
            )
            channel_id = chat.find_direct_conversation(user_id, max_pages=self.max_pages)
            if channel_id is None:
                raise ConversationNotFoundError(user_id, exc.error_code) from exc

        posted = chat.post_message(channel_id, message)
        return OperationResult.success(data=posted, message="Sent in conversation")
