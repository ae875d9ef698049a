"""GitHub integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class GitHubSettings(IntegrationSettings):
    """GitHub REST API configuration.

    Environment Variables:
        GITHUB_TOKEN: Optional token. Without it only public repositories
            are listed, at the lower unauthenticated rate limit.
        GITHUB_API_URL: API base URL (GitHub Enterprise installs differ)
        GITHUB_PER_PAGE: Page size for paginated listings (max 100)
    """

    GITHUB_TOKEN: str = ""
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_PER_PAGE: int = Field(default=100, ge=1, le=100)
