"""Direct send: post straight to the user's implicit DM channel."""

from infrastructure.notifications.models import StrategyName
from infrastructure.notifications.strategies.base import DeliveryStrategy
from infrastructure.operations import OperationResult


class DirectSendStrategy(DeliveryStrategy):
    """Post to the resolved user ID; Slack routes it to the app DM.

    A missing scope here is expected for some token types and simply lets the
    next strategy try.
    """

    @property
    def name(self) -> StrategyName:
        return StrategyName.DIRECT

    def is_applicable(self, target, resolved, fallback_channel) -> bool:
        return resolved.is_direct

    def deliver(self, chat, message, target, resolved, fallback_channel) -> OperationResult:
        posted = chat.post_message(resolved.value, message)
        return OperationResult.success(data=posted, message="Sent direct message")
