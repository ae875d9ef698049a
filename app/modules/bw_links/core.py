"""Deliver Bitwarden Send links to new users over Slack.

Each row of the Send links CSV becomes one direct message. Delivery goes
through the notification dispatcher, so a user the bot cannot DM still gets
reached through the fallback channel.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    DeliveryFailedError,
    Destination,
    NotificationDispatcher,
)

logger = get_module_logger()

INPUT_COLUMNS = ("email", "sendurl")
REPORT_FIELDS = ("Email", "Username", "Status", "Strategy", "Error")

STATUS_SENT = "sent"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"

# Rows the Send creation step did not complete
UNUSABLE_UPSTREAM_STATUSES = frozenset({"failed", "skipped"})


@dataclass
class LinkDelivery:
    email: str
    username: str
    status: str = ""
    strategy: str = ""
    error: str = ""

    def to_row(self) -> Dict[str, str]:
        return {
            "Email": self.email,
            "Username": self.username,
            "Status": self.status,
            "Strategy": self.strategy,
            "Error": self.error,
        }


def format_link_message(username: str, send_url: str) -> str:
    account = f" *{username}*" if username else ""
    return (
        f":wave: Hi! Your account{account} has been created.\n"
        f"Your password is waiting in this one-time Bitwarden Send link: {send_url}\n"
        "The link stops working after it has been opened, so save the password right away."
    )


def _skip(delivery: LinkDelivery, reason: str) -> LinkDelivery:
    delivery.status = STATUS_SKIPPED
    delivery.error = reason
    logger.warning("link_row_skipped", email=delivery.email, reason=reason)
    return delivery


def deliver_links(
    rows: Iterable[Dict[str, str]],
    dispatcher: Optional[NotificationDispatcher],
    dry_run: bool = False,
) -> List[LinkDelivery]:
    """Send every usable row's link to its owner.

    Args:
        rows: CSV rows with ``email``, ``sendurl`` and optional ``username``
        dispatcher: Delivery; may be None in dry-run mode
        dry_run: Log the deliveries instead of sending

    Returns:
        One LinkDelivery per input row
    """
    deliveries: List[LinkDelivery] = []
    for row in rows:
        email = row.get("email", "")
        username = row.get("username", "")
        send_url = row.get("sendurl", "")
        delivery = LinkDelivery(email=email, username=username)
        deliveries.append(delivery)

        if row.get("status", "").lower() in UNUSABLE_UPSTREAM_STATUSES:
            _skip(delivery, f"send step status {row['status']}")
            continue
        if not email or not send_url:
            _skip(delivery, "missing email or send link")
            continue

        try:
            target = Destination(email=email, display_name=username or None)
        except ValidationError:
            _skip(delivery, "invalid email address")
            continue

        if dry_run:
            delivery.status = STATUS_SKIPPED
            delivery.error = "dry run"
            logger.info("dry_run_link_delivery", email=email, username=username)
            continue

        try:
            outcome = dispatcher.deliver(format_link_message(username, send_url), target)
        except DeliveryFailedError as exc:
            delivery.status = STATUS_FAILED
            delivery.error = str(exc)
            logger.error("link_delivery_failed", email=email, error=str(exc))
            continue

        delivery.status = STATUS_SENT
        delivery.strategy = outcome.succeeded.value
        logger.info(
            "link_delivered",
            email=email,
            strategy=delivery.strategy,
        )

    return deliveries
