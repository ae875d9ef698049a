"""Delivery strategy abstract base class.

Each strategy is one concrete way of getting a message to a recipient. The
dispatcher asks every strategy in order whether it applies to the target and,
if so, lets it try. A strategy signals failure by raising; the dispatcher
records the error and moves on to the next one.
"""

from abc import ABC, abstractmethod
from typing import Optional

from infrastructure.notifications.models import (
    Destination,
    ResolvedDestination,
    StrategyName,
)
from infrastructure.operations import OperationResult
from integrations.slack.client import SlackChatClient


class DeliveryStrategy(ABC):
    """Abstract base class for delivery strategies.

    Example Implementation:
        class DirectSendStrategy(DeliveryStrategy):

            @property
            def name(self) -> StrategyName:
                return StrategyName.DIRECT

            def is_applicable(self, target, resolved, fallback_channel):
                return resolved.is_direct

            def deliver(self, chat, message, target, resolved, fallback_channel):
                posted = chat.post_message(resolved.value, message)
                return OperationResult.success(data=posted)
    """

    @property
    @abstractmethod
    def name(self) -> StrategyName:
        """Strategy identifier used in outcomes and logs."""
        pass

    @abstractmethod
    def is_applicable(
        self,
        target: Destination,
        resolved: ResolvedDestination,
        fallback_channel: Optional[str],
    ) -> bool:
        """Whether this strategy can be tried for the target at all.

        Inapplicable strategies are skipped and do not appear in
        DeliveryOutcome.attempted.
        """
        pass

    @abstractmethod
    def deliver(
        self,
        chat: SlackChatClient,
        message: str,
        target: Destination,
        resolved: ResolvedDestination,
        fallback_channel: Optional[str],
    ) -> OperationResult:
        """Deliver the message.

        Returns:
            OperationResult.success with ``{"channel", "ts"}`` in data

        Raises:
            Any exception on failure; the dispatcher falls through to the
            next strategy.
        """
        pass
