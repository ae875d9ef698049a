"""Onboarding ops configuration settings - main aggregator."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.integrations import (
    BitwardenSettings,
    GitHubSettings,
    SlackSettings,
)
from infrastructure.configuration.features import RepoWatchSettings
from infrastructure.configuration.infrastructure import RateLimitSettings


class Settings(BaseSettings):
    """Onboarding ops configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.

    - **Integrations**: Slack, GitHub, Bitwarden
    - **Features**: per-script settings (repo watch)
    - **Infrastructure**: rate-limit handling

    Environment Variables:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        LOG_FORMAT: ``console`` (default) or ``json``

    Example:
        ```python
        from infrastructure.configuration import settings

        slack_token = settings.slack.SLACK_TOKEN
        attempts = settings.rate_limit.max_attempts
        ```
    """

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="console", pattern="^(console|json)$")

    # Integration settings
    slack: SlackSettings
    github: GitHubSettings
    bitwarden: BitwardenSettings

    # Feature settings
    repo_watch: RepoWatchSettings

    # Infrastructure settings
    rate_limit: RateLimitSettings

    @property
    def is_json_logging(self) -> bool:
        return self.LOG_FORMAT == "json"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "slack": SlackSettings,
            "github": GitHubSettings,
            "bitwarden": BitwardenSettings,
            "repo_watch": RepoWatchSettings,
            "rate_limit": RateLimitSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
