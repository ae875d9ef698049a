"""Bounded fixed-backoff retry for rate-limited remote calls.

Remote calls signal a rate limit by raising ``RateLimitedError``. The call is
retried after a fixed delay until ``max_attempts`` is reached, then
``RateLimitExhaustedError`` is raised. Any other exception propagates on the
first occurrence; only rate limits are retried.

Usage:
    from infrastructure.resilience import RateLimitPolicy, call_with_rate_limit_retry

    policy = RateLimitPolicy(max_attempts=5, backoff_seconds=3)
    response = call_with_rate_limit_retry(
        fetch_page, cursor, operation="conversations.list", policy=policy
    )
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from infrastructure.configuration import RateLimitSettings
from infrastructure.logging import get_module_logger

logger = get_module_logger()

T = TypeVar("T")


class RateLimitedError(Exception):
    """Raised by a remote call wrapper when the service reports a rate limit.

    Attributes:
        operation: Name of the remote operation (endpoint, method)
        retry_after: Delay suggested by the service, if any (informational)
    """

    def __init__(self, operation: str, retry_after: Optional[int] = None):
        self.operation = operation
        self.retry_after = retry_after
        super().__init__(f"{operation} was rate limited")


class RateLimitExhaustedError(Exception):
    """Raised when a call is still rate limited after every allowed attempt."""

    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"{operation} still rate limited after {attempts} attempt(s)"
        )


@dataclass(frozen=True)
class RateLimitPolicy:
    """Retry policy for rate-limited calls.

    Attributes:
        max_attempts: Total attempts including the first call
        backoff_seconds: Fixed delay between attempts
    """

    max_attempts: int = 5
    backoff_seconds: float = 3.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must not be negative")

    @classmethod
    def from_settings(cls, rate_limit: RateLimitSettings) -> "RateLimitPolicy":
        return cls(
            max_attempts=rate_limit.max_attempts,
            backoff_seconds=rate_limit.backoff_seconds,
        )


def call_with_rate_limit_retry(
    func: Callable[..., T],
    *args: Any,
    operation: str,
    policy: RateLimitPolicy,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> T:
    """Call ``func`` and retry it while it raises RateLimitedError.

    Args:
        func: Callable performing a single remote call
        *args: Positional arguments forwarded to ``func``
        operation: Operation name used in logs and errors
        policy: Attempt count and fixed backoff
        sleep: Sleep function (injected in tests)
        **kwargs: Keyword arguments forwarded to ``func``

    Returns:
        Whatever ``func`` returns on the first non rate-limited call

    Raises:
        RateLimitExhaustedError: every attempt was rate limited
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except RateLimitedError as exc:
            if attempt >= policy.max_attempts:
                logger.error(
                    "rate_limit_retries_exhausted",
                    operation=operation,
                    attempts=attempt,
                )
                raise RateLimitExhaustedError(operation, attempt) from exc
            logger.warning(
                "rate_limited_retrying",
                operation=operation,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                backoff_seconds=policy.backoff_seconds,
                retry_after=exc.retry_after,
            )
            sleep(policy.backoff_seconds)

    # max_attempts >= 1 guarantees the loop returns or raises
    raise RateLimitExhaustedError(operation, policy.max_attempts)
