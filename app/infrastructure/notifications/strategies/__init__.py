"""Delivery strategy implementations."""

from infrastructure.notifications.strategies.base import DeliveryStrategy
from infrastructure.notifications.strategies.broadcast import BroadcastFallbackStrategy
from infrastructure.notifications.strategies.conversation import (
    ConversationNotFoundError,
    OpenOrFindConversationStrategy,
)
from infrastructure.notifications.strategies.direct import DirectSendStrategy


def default_strategies(max_conversation_pages=10):
    """Strategies in their standard order: direct, open-or-find, broadcast."""
    return [
        DirectSendStrategy(),
        OpenOrFindConversationStrategy(max_pages=max_conversation_pages),
        BroadcastFallbackStrategy(),
    ]


__all__ = [
    "DeliveryStrategy",
    "DirectSendStrategy",
    "OpenOrFindConversationStrategy",
    "ConversationNotFoundError",
    "BroadcastFallbackStrategy",
    "default_strategies",
]
