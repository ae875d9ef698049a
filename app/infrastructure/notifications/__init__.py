"""Notification delivery with ordered fallback strategies.

Usage:
    from infrastructure.notifications import (
        Destination,
        NotificationDispatcher,
        DeliveryFailedError,
    )

    dispatcher = NotificationDispatcher(chat, fallback_channel="C0FALLBACK")
    try:
        outcome = dispatcher.deliver(text, Destination(email="user@example.com"))
    except DeliveryFailedError as e:
        logger.error("not_delivered", error=str(e))
"""

# Models
from infrastructure.notifications.models import (
    DeliveryOutcome,
    Destination,
    ResolutionKind,
    ResolvedDestination,
    StrategyName,
)

# Errors
from infrastructure.notifications.exceptions import (
    DeliveryFailedError,
    NotificationError,
)

# Strategies
from infrastructure.notifications.strategies import (
    BroadcastFallbackStrategy,
    DeliveryStrategy,
    DirectSendStrategy,
    OpenOrFindConversationStrategy,
    default_strategies,
)

# Dispatcher
from infrastructure.notifications.dispatcher import NotificationDispatcher

__all__ = [
    "DeliveryOutcome",
    "Destination",
    "ResolutionKind",
    "ResolvedDestination",
    "StrategyName",
    "DeliveryFailedError",
    "NotificationError",
    "DeliveryStrategy",
    "DirectSendStrategy",
    "OpenOrFindConversationStrategy",
    "BroadcastFallbackStrategy",
    "default_strategies",
    "NotificationDispatcher",
]
