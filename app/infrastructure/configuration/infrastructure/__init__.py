"""Infrastructure settings __init__ - exports cross-cutting settings."""

from infrastructure.configuration.infrastructure.rate_limit import RateLimitSettings

__all__ = ["RateLimitSettings"]
