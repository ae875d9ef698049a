"""GitHub Integration Package.

- repositories: Paginated repository listing
"""

from integrations.github.repositories import (
    GitHubApiError,
    github_session,
    list_repositories,
)

__all__ = ["GitHubApiError", "github_session", "list_repositories"]
