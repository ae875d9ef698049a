"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.slack import SlackSettings
from infrastructure.configuration.integrations.github import GitHubSettings
from infrastructure.configuration.integrations.bitwarden import BitwardenSettings

__all__ = [
    "SlackSettings",
    "GitHubSettings",
    "BitwardenSettings",
]
