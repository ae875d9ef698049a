"""New-repository watcher.

Compares the current repository listing of an owner with the baseline from the
previous run and notifies one recipient about every repository that appeared
in between.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    DeliveryFailedError,
    Destination,
    NotificationDispatcher,
)
from infrastructure.persistence import ChangeSetDetector, EntityRecord

logger = get_module_logger()

GITHUB_WEB_URL = "https://github.com"


@dataclass
class RepoWatchReport:
    """Summary of one watcher run.

    Attributes:
        owner: Watched organization or user
        bootstrap: First run; baseline seeded and nothing notified
        dry_run: Nothing was persisted or sent
        added: Repository names detected as new
        delivered: Repository name -> strategy that delivered its notification
        failed: Repository name -> delivery error
    """

    owner: str
    bootstrap: bool = False
    dry_run: bool = False
    added: List[str] = field(default_factory=list)
    delivered: Dict[str, str] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failed


def format_repository_message(
    owner: str, record: EntityRecord, web_url: str = GITHUB_WEB_URL
) -> str:
    url = f"{web_url.rstrip('/')}/{owner}/{record.name}"
    message = f":new: New repository in *{owner}*: <{url}|{record.name}>"
    if record.description:
        message = f"{message}\n> {record.description}"
    return message


def run_repo_watch(
    owner: str,
    repositories: Sequence[EntityRecord],
    detector: ChangeSetDetector,
    dispatcher: Optional[NotificationDispatcher],
    target: Destination,
    dry_run: bool = False,
    persist_before_notify: bool = True,
    web_url: str = GITHUB_WEB_URL,
) -> RepoWatchReport:
    """Detect new repositories and notify ``target`` about each one.

    Args:
        owner: Organization or user the listing belongs to
        repositories: Current listing
        detector: Baseline holder
        dispatcher: Delivery; may be None in dry-run mode
        target: Recipient of the notifications
        dry_run: Log what would be sent; persist nothing
        persist_before_notify: Write the baseline before notifying (default)
            or only after the notification loop has finished
        web_url: Base URL used for repository links

    Returns:
        RepoWatchReport

    Raises:
        BaselinePersistError: the baseline could not be written
    """
    report = RepoWatchReport(owner=owner, dry_run=dry_run)

    if dry_run:
        change_set = detector.detect(repositories, commit=False, audit=False)
        if change_set.is_bootstrap:
            report.bootstrap = True
            logger.info("dry_run_baseline_missing", owner=owner, count=len(repositories))
            return report
        report.added = sorted(change_set.added)
        for record in change_set.added_records:
            logger.info(
                "dry_run_notification",
                repository=record.name,
                recipient=target.label,
                message=format_repository_message(owner, record, web_url),
            )
        return report

    if dispatcher is None:
        raise ValueError("A dispatcher is required unless dry_run is set")

    change_set = detector.detect(repositories, commit=persist_before_notify)
    if change_set.is_bootstrap:
        if not change_set.committed:
            detector.commit(change_set)
        report.bootstrap = True
        logger.info("first_run_no_notifications", owner=owner, count=len(repositories))
        return report

    if not change_set.has_additions:
        logger.info("no_new_repositories", owner=owner, count=len(repositories))

    report.added = sorted(change_set.added)
    for record in change_set.added_records:
        message = format_repository_message(owner, record, web_url)
        try:
            outcome = dispatcher.deliver(message, target)
        except DeliveryFailedError as exc:
            report.failed[record.name] = str(exc)
            logger.error(
                "repository_notification_failed", repository=record.name, error=str(exc)
            )
            continue
        report.delivered[record.name] = outcome.succeeded.value
        logger.info(
            "repository_notification_sent",
            repository=record.name,
            strategy=outcome.succeeded.value,
        )

    if not change_set.committed:
        detector.commit(change_set)

    logger.info(
        "repo_watch_completed",
        owner=owner,
        added=len(report.added),
        delivered=len(report.delivered),
        failed=len(report.failed),
    )
    return report
