"""Broadcast fallback: post to a shared channel with an explicit mention."""

from infrastructure.notifications.models import StrategyName
from infrastructure.notifications.strategies.base import DeliveryStrategy
from infrastructure.operations import OperationResult


def mention_for(target, resolved) -> str:
    """Mention naming the intended recipient so a human can redirect it."""
    if resolved.is_direct:
        return f"<@{resolved.value}>"
    return f"*{target.label}*"


class BroadcastFallbackStrategy(DeliveryStrategy):
    """Post to the configured fallback channel, prefixed with the recipient."""

    @property
    def name(self) -> StrategyName:
        return StrategyName.BROADCAST

    def is_applicable(self, target, resolved, fallback_channel) -> bool:
        return bool(fallback_channel)

    def deliver(self, chat, message, target, resolved, fallback_channel) -> OperationResult:
        text = f"{mention_for(target, resolved)} (could not reach directly)\n{message}"
        posted = chat.post_message(fallback_channel, text)
        return OperationResult.success(data=posted, message="Sent to fallback channel")
