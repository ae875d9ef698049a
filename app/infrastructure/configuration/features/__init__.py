"""Feature settings __init__ - exports per-script settings."""

from infrastructure.configuration.features.repo_watch import RepoWatchSettings

__all__ = ["RepoWatchSettings"]
