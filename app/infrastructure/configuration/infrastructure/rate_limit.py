"""Rate-limit handling settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RateLimitSettings(InfrastructureSettings):
    """Bounded retry applied to remote calls that report a rate limit.

    Only rate-limit responses are retried. Every other failure surfaces
    immediately to the caller.

    Environment Variables:
        RATE_LIMIT_MAX_ATTEMPTS: Total attempts per call, including the first
        RATE_LIMIT_BACKOFF_SECONDS: Fixed delay between attempts

    Example:
        ```python
        from infrastructure.configuration import settings

        attempts = settings.rate_limit.max_attempts
        ```
    """

    max_attempts: int = Field(
        default=5,
        ge=1,
        alias="RATE_LIMIT_MAX_ATTEMPTS",
        description="Total attempts for a rate-limited call before giving up",
    )
    backoff_seconds: float = Field(
        default=3.0,
        ge=0,
        alias="RATE_LIMIT_BACKOFF_SECONDS",
        description="Fixed delay between rate-limited attempts (seconds)",
    )
