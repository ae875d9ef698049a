"""Redaction processors for structured logging.

The scripts handle Slack tokens, the Bitwarden master password and session
key, and one-time Send links. None of them may reach the console or a log
file, whether they are passed as a keyword or embedded in an error message.

Usage:
    from infrastructure.logging.formatters import mask_sensitive_data

Dependencies:
    - structlog processors
"""

import re
from typing import Any

REDACTED = "***REDACTED***"

# Keys whose values are always masked (substring, case-insensitive)
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "authorization",
        "credential",
        "bearer",
        "session",
        "send_url",
        "sendurl",
    }
)

# Secrets that can appear inside free text such as exception messages
SECRET_VALUE_PATTERNS = (
    # Slack bot, user and app tokens
    re.compile(r"xox[abposr]-[A-Za-z0-9-]+"),
    # GitHub personal access and app tokens
    re.compile(r"\b(?:ghp|gho|ghu|ghs|github_pat)_[A-Za-z0-9_]+"),
    # Bitwarden Send link key fragment: keep the host, drop id and key
    re.compile(r"(?<=/#/send/)[^\s>|]+"),
)


def _is_sensitive_key(key: str, patterns: frozenset) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in patterns)


def _scrub_text(value: str) -> str:
    for pattern in SECRET_VALUE_PATTERNS:
        value = pattern.sub(REDACTED, value)
    return value


def mask_sensitive_data(
    mask_value: str = REDACTED,
    additional_patterns: frozenset[str] | None = None,
):
    """Create a processor that masks sensitive keys and scrubs secret values.

    Values under a sensitive key are replaced entirely; nested dicts are
    masked the same way. Every other string value is scanned for tokens and
    Send links, which are replaced in place.

    Args:
        mask_value: The string to replace sensitive values with.
        additional_patterns: Extra key patterns to consider sensitive.

    Returns:
        A structlog processor function.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def _mask(mapping: dict[str, Any]) -> dict[str, Any]:
        masked = {}
        for key, value in mapping.items():
            if value is not None and _is_sensitive_key(str(key), patterns):
                masked[key] = mask_value
            elif isinstance(value, dict):
                masked[key] = _mask(value)
            elif isinstance(value, str):
                masked[key] = _scrub_text(value)
            else:
                masked[key] = value
        return masked

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return _mask(event_dict)

    return processor


def truncate_large_values(max_length: int = 500):
    """Create a processor that truncates overly large string values.

    Slack and GitHub error payloads can be long; a single failed row should
    not flood the console.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
