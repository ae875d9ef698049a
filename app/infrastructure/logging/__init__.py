"""Structured logging infrastructure.

Centralized logging configuration for the onboarding scripts using structlog.

Public API:
    - configure_logging(): Initialize logging for a script run
    - get_module_logger(): Get a logger for the calling module
    - bind_run_context(): Context manager binding run_id/script to all logs

Processors:
    - mask_sensitive_data(): Redact credential-looking fields
    - truncate_large_values(): Limit string lengths

Example:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging()
    logger = get_module_logger()
    logger.info("module_initialized")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)

from infrastructure.logging.context import (
    bind_run_context,
)

from infrastructure.logging.formatters import (
    mask_sensitive_data,
    truncate_large_values,
    SENSITIVE_PATTERNS,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_run_context",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
