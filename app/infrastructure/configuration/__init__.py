"""Infrastructure configuration module - public API.

Centralized configuration management using pydantic-settings with
domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    ConfigurationError: Raised when a required setting is missing
    require: Helper that raises ConfigurationError for empty values

Example:
    ```python
    from infrastructure.configuration import settings, require

    token = require(settings.slack.SLACK_TOKEN, "SLACK_TOKEN")
    ```
"""

from infrastructure.configuration.errors import ConfigurationError, require
from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.infrastructure.rate_limit import RateLimitSettings

__all__ = [
    "Settings",
    "settings",
    "RateLimitSettings",
    "ConfigurationError",
    "require",
]
