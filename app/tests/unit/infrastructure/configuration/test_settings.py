"""Unit tests for infrastructure.configuration.

Tests cover:
- Defaults of every settings section
- Environment variable overrides and aliases
- Settings aggregation
- ConfigurationError and require()
"""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import ConfigurationError, Settings, require
from infrastructure.configuration.features import RepoWatchSettings
from infrastructure.configuration.infrastructure import RateLimitSettings
from infrastructure.configuration.integrations import (
    BitwardenSettings,
    GitHubSettings,
    SlackSettings,
)

MANAGED_ENV_VARS = (
    "SLACK_TOKEN",
    "SLACK_BOT_TOKEN",
    "SLACK_FALLBACK_CHANNEL",
    "GITHUB_TOKEN",
    "BW_SESSION",
    "BW_PASSWORD",
    "REPO_WATCH_OWNER",
    "REPO_WATCH_PERSIST_BEFORE_NOTIFY",
    "RATE_LIMIT_MAX_ATTEMPTS",
    "RATE_LIMIT_BACKOFF_SECONDS",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer environment and any local .env file."""
    monkeypatch.chdir(tmp_path)
    for name in MANAGED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestSlackSettings:
    def test_defaults(self):
        slack = SlackSettings()

        assert slack.SLACK_TOKEN == ""
        assert slack.SLACK_FALLBACK_CHANNEL == ""

    def test_bot_token_alias(self, monkeypatch):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-test")

        assert SlackSettings().SLACK_TOKEN == "xoxb-test"

    def test_slack_token_takes_precedence(self, monkeypatch):
        monkeypatch.setenv("SLACK_TOKEN", "xoxp-user")
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-bot")

        assert SlackSettings().SLACK_TOKEN == "xoxp-user"


@pytest.mark.unit
class TestRateLimitSettings:
    def test_defaults(self):
        rate_limit = RateLimitSettings()

        assert rate_limit.max_attempts == 5
        assert rate_limit.backoff_seconds == 3.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_ATTEMPTS", "2")
        monkeypatch.setenv("RATE_LIMIT_BACKOFF_SECONDS", "0.25")

        rate_limit = RateLimitSettings()

        assert rate_limit.max_attempts == 2
        assert rate_limit.backoff_seconds == 0.25

    def test_zero_attempts_rejected(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_ATTEMPTS", "0")

        with pytest.raises(ValidationError):
            RateLimitSettings()


@pytest.mark.unit
class TestFeatureAndIntegrationSettings:
    def test_repo_watch_defaults(self):
        repo_watch = RepoWatchSettings()

        assert repo_watch.owner == ""
        assert repo_watch.baseline_path == "./state/repositories.json"
        assert repo_watch.persist_before_notify is True
        assert repo_watch.conversation_page_limit == 10

    def test_persist_after_notify_from_env(self, monkeypatch):
        monkeypatch.setenv("REPO_WATCH_PERSIST_BEFORE_NOTIFY", "false")

        assert RepoWatchSettings().persist_before_notify is False

    def test_github_defaults(self):
        github = GitHubSettings()

        assert github.GITHUB_API_URL == "https://api.github.com"
        assert github.GITHUB_PER_PAGE == 100

    def test_bitwarden_defaults(self):
        bitwarden = BitwardenSettings()

        assert bitwarden.BW_CLI_PATH == "bw"
        assert bitwarden.BW_SEND_DELETION_DAYS == 7
        assert bitwarden.BW_SEND_MAX_ACCESS_COUNT == 1


@pytest.mark.unit
class TestSettings:
    def test_sections_are_instantiated(self):
        settings = Settings()

        assert isinstance(settings.slack, SlackSettings)
        assert isinstance(settings.rate_limit, RateLimitSettings)
        assert isinstance(settings.repo_watch, RepoWatchSettings)
        assert settings.LOG_LEVEL == "INFO"
        assert not settings.is_json_logging

    def test_section_override(self):
        settings = Settings(rate_limit=RateLimitSettings(max_attempts=1))

        assert settings.rate_limit.max_attempts == 1

    def test_json_logging(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")

        assert Settings().is_json_logging

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValidationError):
            Settings()


@pytest.mark.unit
class TestRequire:
    def test_returns_value(self):
        assert require("xoxb-1", "SLACK_TOKEN") == "xoxb-1"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values_raise(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            require(value, "SLACK_TOKEN", "set SLACK_BOT_TOKEN")

        assert exc_info.value.setting == "SLACK_TOKEN"
        assert str(exc_info.value) == (
            "Missing required configuration: SLACK_TOKEN (set SLACK_BOT_TOKEN)"
        )
