"""Error classifiers for provider errors.

Converts provider-specific failures (Slack Web API errors, GitHub REST
responses) into standardized OperationResult objects so the resilience and
notification layers can make decisions without knowing vendor details.

Key Functions:
- classify_slack_error(): slack_sdk SlackApiError / error code -> OperationResult
- classify_http_error(): requests.Response -> OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_slack_error

    try:
        client.chat_postMessage(channel=user_id, text=text)
    except SlackApiError as exc:
        result = classify_slack_error(exc)
        if result.is_rate_limited:
            ...
"""

from typing import Optional, Union

import requests
from slack_sdk.errors import SlackApiError

from infrastructure.operations.result import OperationResult

# Slack error codes returned when the token lacks the capability to perform
# the call. These never change on retry but another delivery path may work.
SLACK_CAPABILITY_ERRORS = frozenset(
    {
        "missing_scope",
        "not_allowed_token_type",
        "restricted_action",
        "no_permission",
        "method_deprecated",
        "cannot_dm_bot",
        "messages_tab_disabled",
    }
)

SLACK_NOT_FOUND_ERRORS = frozenset(
    {"users_not_found", "user_not_found", "channel_not_found"}
)

SLACK_AUTH_ERRORS = frozenset(
    {"invalid_auth", "not_authed", "token_revoked", "token_expired", "account_inactive"}
)

DEFAULT_RETRY_AFTER = 30


def _slack_error_code(exc: Union[SlackApiError, str]) -> str:
    if isinstance(exc, str):
        return exc
    response = getattr(exc, "response", None)
    if response is None:
        return "unknown_error"
    try:
        return response.get("error") or "unknown_error"
    except AttributeError:
        return "unknown_error"


def _retry_after_header(headers) -> Optional[int]:
    if not headers:
        return None
    value = headers.get("Retry-After") or headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def classify_slack_error(exc: Union[SlackApiError, str]) -> OperationResult:
    """Classify a Slack Web API failure into an OperationResult.

    Error Code Mapping:
    - ratelimited / HTTP 429: RATE_LIMITED
    - missing_scope and other capability errors: PERMANENT_ERROR
    - users_not_found, channel_not_found: NOT_FOUND
    - invalid_auth, not_authed, ...: UNAUTHORIZED
    - anything else: PERMANENT_ERROR carrying the Slack error code

    Args:
        exc: SlackApiError raised by slack_sdk, or a bare Slack error code

    Returns:
        OperationResult describing the failure
    """
    code = _slack_error_code(exc)
    status_code = getattr(getattr(exc, "response", None), "status_code", None)

    if code == "ratelimited" or status_code == 429:
        headers = getattr(getattr(exc, "response", None), "headers", None)
        return OperationResult.rate_limited(
            "Slack API rate limited",
            retry_after=_retry_after_header(headers) or DEFAULT_RETRY_AFTER,
        )

    if code in SLACK_CAPABILITY_ERRORS:
        return OperationResult.permanent_error(
            f"Slack token lacks capability: {code}", error_code=code
        )

    if code in SLACK_NOT_FOUND_ERRORS:
        return OperationResult.not_found(f"Slack entity not found: {code}", code)

    if code in SLACK_AUTH_ERRORS:
        return OperationResult.unauthorized(
            f"Slack authentication failed: {code}", error_code=code
        )

    return OperationResult.permanent_error(f"Slack API error: {code}", error_code=code)


def classify_http_error(response: requests.Response) -> OperationResult:
    """Classify a non-2xx REST response into an OperationResult.

    Status Code Mapping:
    - 429, or 403 with X-RateLimit-Remaining: 0: RATE_LIMITED
    - 401: UNAUTHORIZED
    - 403: PERMANENT_ERROR (forbidden)
    - 404: NOT_FOUND
    - 5xx: TRANSIENT_ERROR
    - Other 4xx: PERMANENT_ERROR
    """
    status_code = response.status_code
    headers = response.headers or {}

    if status_code == 429 or (
        status_code == 403 and headers.get("X-RateLimit-Remaining") == "0"
    ):
        return OperationResult.rate_limited(
            "API rate limited",
            retry_after=_retry_after_header(headers) or DEFAULT_RETRY_AFTER,
        )

    if status_code == 401:
        return OperationResult.unauthorized(
            "API authentication failed", error_code="UNAUTHORIZED"
        )

    if status_code == 403:
        return OperationResult.permanent_error(
            "API authorization denied", error_code="FORBIDDEN"
        )

    if status_code == 404:
        return OperationResult.not_found("API resource not found")

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"API server error ({status_code})", error_code="SERVER_ERROR"
        )

    return OperationResult.permanent_error(
        f"API client error ({status_code})", error_code="HTTP_ERROR"
    )
