"""GitHub repository listing.

Lists the repositories of an organization (or user) through the REST API,
following the ``Link: rel="next"`` header until the last page. With a token
the listing includes private repositories; without one only public
repositories are returned, under the lower anonymous rate limit.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import classify_http_error
from infrastructure.persistence import EntityRecord
from infrastructure.resilience import (
    RateLimitedError,
    RateLimitPolicy,
    call_with_rate_limit_retry,
)

logger = get_module_logger()

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 30


class GitHubApiError(Exception):
    """A GitHub REST call returned a non-success, non rate-limit response."""

    def __init__(self, url: str, status_code: int, detail: str = ""):
        self.url = url
        self.status_code = status_code
        message = f"GitHub API request {url} failed with HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


@contextmanager
def github_session(token: Optional[str] = None) -> Iterator[requests.Session]:
    """Yield a configured requests.Session, closed on every exit path."""
    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "onboarding-ops",
        }
    )
    if token:
        session.headers["Authorization"] = f"Bearer {token}"
    try:
        yield session
    finally:
        session.close()


def _error_detail(response: requests.Response) -> str:
    try:
        return response.json().get("message", "")
    except ValueError:
        return response.text[:200]


def _get_page(session: requests.Session, url: str, params: Optional[dict]):
    response = session.get(url, params=params, timeout=REQUEST_TIMEOUT)
    if response.ok:
        return response

    result = classify_http_error(response)
    if result.is_rate_limited:
        raise RateLimitedError(f"GET {url}", result.retry_after)
    raise GitHubApiError(url, response.status_code, _error_detail(response))


def list_repositories(
    owner: str,
    session: requests.Session,
    authenticated: bool = False,
    api_url: str = DEFAULT_API_URL,
    per_page: int = 100,
    owner_type: str = "org",
    policy: Optional[RateLimitPolicy] = None,
    sleep=None,
) -> List[EntityRecord]:
    """List every repository of ``owner``.

    Args:
        owner: Organization or user login
        session: Session from github_session()
        authenticated: Whether the session carries a token; selects the
            ``all`` listing type instead of ``public``
        api_url: REST API base URL
        per_page: Page size (max 100)
        owner_type: ``org`` or ``user``
        policy: Rate-limit retry policy
        sleep: Sleep function used between rate-limited attempts

    Returns:
        EntityRecords (name, description) in API order

    Raises:
        GitHubApiError: a page request failed
        RateLimitExhaustedError: a page stayed rate limited
    """
    if owner_type not in ("org", "user"):
        raise ValueError(f"owner_type must be 'org' or 'user', got {owner_type!r}")

    segment = "orgs" if owner_type == "org" else "users"
    url: Optional[str] = f"{api_url.rstrip('/')}/{segment}/{owner}/repos"
    if owner_type == "org":
        listing_type = "all" if authenticated else "public"
    else:
        listing_type = "owner"
    params: Optional[dict] = {"per_page": per_page, "type": listing_type}

    retry_kwargs = {"policy": policy or RateLimitPolicy()}
    if sleep is not None:
        retry_kwargs["sleep"] = sleep

    repositories: List[EntityRecord] = []
    pages = 0
    while url:
        response = call_with_rate_limit_retry(
            _get_page, session, url, params, operation=f"GET {url}", **retry_kwargs
        )
        pages += 1
        for repo in response.json():
            repositories.append(
                EntityRecord(name=repo["name"], description=repo.get("description"))
            )
        # The next link already carries the query string
        url = response.links.get("next", {}).get("url")
        params = None

    logger.info(
        "repositories_listed",
        owner=owner,
        authenticated=authenticated,
        pages=pages,
        repository_count=len(repositories),
    )
    return repositories
