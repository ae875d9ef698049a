"""Notification dispatcher with ordered strategy fallback.

Delivers one message to one destination:
- Resolves the destination once (user ID, email lookup, or channel)
- Tries each applicable strategy in order, stopping at the first success
- Records every attempt in a DeliveryOutcome
- Raises DeliveryFailedError when nothing worked

The dispatcher holds no state between calls and does not deduplicate:
delivering the same message twice sends it twice.

Usage Example:
    from infrastructure.notifications import Destination, NotificationDispatcher

    dispatcher = NotificationDispatcher(chat, fallback_channel="C0FALLBACK")
    outcome = dispatcher.deliver(
        "Your account is ready", Destination(email="new.hire@example.com")
    )
    logger.info("delivered", strategy=outcome.succeeded.value)
"""

from typing import List, Optional, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.notifications.exceptions import DeliveryFailedError
from infrastructure.notifications.models import (
    DeliveryOutcome,
    Destination,
    ResolutionKind,
    ResolvedDestination,
    StrategyName,
)
from infrastructure.notifications.strategies import DeliveryStrategy, default_strategies
from integrations.slack.client import ChatApiError, SlackChatClient

logger = get_module_logger()


class NotificationDispatcher:
    """Deliver messages through an ordered list of strategies.

    Attributes:
        chat: Slack client used by every strategy
        strategies: Default strategy order (direct, open-or-find, broadcast)
        fallback_channel: Channel used by the broadcast strategy; a
            destination's own channel_id takes precedence

    Example:
        dispatcher = NotificationDispatcher(
            chat=SlackChatClient(token=token),
            fallback_channel="C0FALLBACK",
        )
        outcome = dispatcher.deliver(message, Destination(user_id="U123"))
    """

    def __init__(
        self,
        chat: SlackChatClient,
        strategies: Optional[Sequence[DeliveryStrategy]] = None,
        fallback_channel: Optional[str] = None,
    ):
        self.chat = chat
        self.strategies: List[DeliveryStrategy] = list(
            strategies if strategies is not None else default_strategies()
        )
        self.fallback_channel = fallback_channel or None

        logger.debug(
            "initialized_notification_dispatcher",
            strategies=[s.name.value for s in self.strategies],
            fallback_channel=self.fallback_channel,
        )

    def resolve(self, target: Destination) -> ResolvedDestination:
        """Resolve a destination to a direct identity or a channel.

        Lookup failures (unknown email, exhausted rate limit, network) leave
        the target unresolved rather than raising.
        """
        if target.user_id:
            return ResolvedDestination.direct(target.user_id)

        if target.email:
            try:
                user_id = self.chat.lookup_user_by_email(str(target.email))
            except ChatApiError as exc:
                logger.warning(
                    "recipient_not_found" if exc.is_not_found else "recipient_lookup_failed",
                    recipient=target.label,
                    error_code=exc.error_code,
                )
                return ResolvedDestination.unresolved(str(exc))
            except Exception as exc:
                logger.error(
                    "recipient_resolution_error",
                    recipient=target.label,
                    error=str(exc),
                    exc_info=True,
                )
                return ResolvedDestination.unresolved(str(exc))
            return ResolvedDestination.direct(user_id)

        return ResolvedDestination.channel(target.channel_id)

    def deliver(
        self,
        message: str,
        target: Destination,
        strategies: Optional[Sequence[DeliveryStrategy]] = None,
    ) -> DeliveryOutcome:
        """Deliver ``message`` to ``target``.

        Args:
            message: Text to send (Slack mrkdwn)
            target: Destination to deliver to
            strategies: Override of the dispatcher's strategy order

        Returns:
            DeliveryOutcome naming the strategy that succeeded

        Raises:
            DeliveryFailedError: every applicable strategy failed
        """
        resolved = self.resolve(target)
        outcome = DeliveryOutcome(resolution_error=resolved.error)
        fallback_channel = self._fallback_for(target)

        if resolved.kind == ResolutionKind.CHANNEL_ID:
            self._deliver_to_channel(message, resolved.value, outcome)
        else:
            for strategy in strategies if strategies is not None else self.strategies:
                if not strategy.is_applicable(target, resolved, fallback_channel):
                    continue
                if self._attempt(strategy, message, target, resolved, fallback_channel, outcome):
                    break

        if not outcome.is_success:
            reason = "" if fallback_channel else "no fallback channel configured"
            logger.error(
                "notification_delivery_failed",
                recipient=target.label,
                attempted=[name.value for name in outcome.attempted],
                errors=outcome.summary(),
            )
            raise DeliveryFailedError(target.label, outcome, reason)

        logger.info(
            "notification_delivered",
            recipient=target.label,
            strategy=outcome.succeeded.value,
            attempted=[name.value for name in outcome.attempted],
            channel=outcome.channel,
        )
        return outcome

    def _fallback_for(self, target: Destination) -> Optional[str]:
        if target.channel_id and (target.user_id or target.email):
            return target.channel_id
        return self.fallback_channel

    def _attempt(
        self,
        strategy: DeliveryStrategy,
        message: str,
        target: Destination,
        resolved: ResolvedDestination,
        fallback_channel: Optional[str],
        outcome: DeliveryOutcome,
    ) -> bool:
        outcome.attempted.append(strategy.name)
        try:
            result = strategy.deliver(
                self.chat, message, target, resolved, fallback_channel
            )
        except Exception as exc:
            outcome.errors[strategy.name] = str(exc)
            logger.warning(
                "delivery_strategy_failed",
                strategy=strategy.name.value,
                recipient=target.label,
                error=str(exc),
            )
            return False

        if not result.is_success:
            outcome.errors[strategy.name] = result.message
            return False

        data = result.data or {}
        outcome.succeeded = strategy.name
        outcome.channel = data.get("channel")
        outcome.ts = data.get("ts")
        return True

    def _deliver_to_channel(
        self, message: str, channel_id: str, outcome: DeliveryOutcome
    ) -> None:
        outcome.attempted.append(StrategyName.BROADCAST)
        try:
            posted = self.chat.post_message(channel_id, message)
        except Exception as exc:
            outcome.errors[StrategyName.BROADCAST] = str(exc)
            logger.warning(
                "channel_delivery_failed", channel=channel_id, error=str(exc)
            )
            return
        outcome.succeeded = StrategyName.BROADCAST
        outcome.channel = posted.get("channel")
        outcome.ts = posted.get("ts")
