"""New-repository watcher settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class RepoWatchSettings(FeatureSettings):
    """Configuration for the new-repository notifier.

    Environment Variables:
        REPO_WATCH_OWNER: Organization (or user) whose repositories are watched
        REPO_WATCH_BASELINE_PATH: JSON file holding the last seen repository names
        REPO_WATCH_PERSIST_BEFORE_NOTIFY: Persist the baseline before sending
            notifications (default). When False the baseline is written after
            the notification loop, trading duplicate notifications after a
            crash for never silently missing one.
        REPO_WATCH_NOTIFY_EMAIL: Email of the person to notify
        REPO_WATCH_NOTIFY_USER_ID: Slack user ID of the person to notify
        REPO_WATCH_CONVERSATION_PAGE_LIMIT: Max pages scanned when looking
            for an existing direct conversation
    """

    owner: str = Field(default="", alias="REPO_WATCH_OWNER")
    baseline_path: str = Field(
        default="./state/repositories.json", alias="REPO_WATCH_BASELINE_PATH"
    )
    persist_before_notify: bool = Field(
        default=True, alias="REPO_WATCH_PERSIST_BEFORE_NOTIFY"
    )
    notify_email: str = Field(default="", alias="REPO_WATCH_NOTIFY_EMAIL")
    notify_user_id: str = Field(default="", alias="REPO_WATCH_NOTIFY_USER_ID")
    conversation_page_limit: int = Field(
        default=10, ge=1, alias="REPO_WATCH_CONVERSATION_PAGE_LIMIT"
    )
