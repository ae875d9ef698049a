"""Settings base classes.

Every section reads the process environment first and a local ``.env`` file
second. Field names are matched case-sensitively, and a field may declare an
alias that names its environment variable. Unknown variables are ignored
because the scripts share one ``.env`` with other tooling.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=True,
    extra="ignore",
    populate_by_name=True,
)


class IntegrationSettings(BaseSettings):
    """Credentials and endpoints of one vendor (Slack, GitHub, Bitwarden)."""

    model_config = SECTION_CONFIG


class FeatureSettings(BaseSettings):
    """Settings of a single onboarding script, aliased ``<SCRIPT>_*``."""

    model_config = SECTION_CONFIG


class InfrastructureSettings(BaseSettings):
    """Cross-cutting behaviour shared by every script, e.g. rate limits."""

    model_config = SECTION_CONFIG
