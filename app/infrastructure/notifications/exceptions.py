"""Notification delivery exceptions."""

from infrastructure.notifications.models import DeliveryOutcome


class NotificationError(Exception):
    """Base exception for notification delivery errors."""

    pass


class DeliveryFailedError(NotificationError):
    """Raised when no strategy could deliver a message.

    Carries the DeliveryOutcome so callers can report every attempted strategy
    and its error.

    Example:
        try:
            dispatcher.deliver(text, Destination(email=email))
        except DeliveryFailedError as e:
            logger.error("delivery_failed", attempts=e.outcome.summary())
    """

    def __init__(self, target_label: str, outcome: DeliveryOutcome, reason: str = ""):
        self.target_label = target_label
        self.outcome = outcome
        message = f"Could not deliver message to {target_label}: {outcome.summary()}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
