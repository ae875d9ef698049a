"""Resilience patterns.

Bounded retry for remote calls that report rate limiting.
"""

from infrastructure.resilience.rate_limit import (
    RateLimitedError,
    RateLimitExhaustedError,
    RateLimitPolicy,
    call_with_rate_limit_retry,
)

__all__ = [
    "RateLimitedError",
    "RateLimitExhaustedError",
    "RateLimitPolicy",
    "call_with_rate_limit_retry",
]
