"""Operation result dataclass.

Returned by delivery strategies on success and by the error classifiers for
every Slack or GitHub failure, so callers branch on one status enum instead
of vendor error shapes.
"""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Result of one remote operation.

    Attributes:
        status: OperationStatus
        message: Human-readable description for logs
        data: Payload on success (e.g. ``{"channel": ..., "ts": ...}``)
        error_code: Remote error code, e.g. ``missing_scope`` or ``FORBIDDEN``
        retry_after: Seconds the service asked us to wait (rate limits only)
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_rate_limited(self) -> bool:
        return self.status == OperationStatus.RATE_LIMITED

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def rate_limited(
        cls, message: str, retry_after: Optional[int] = None
    ) -> "OperationResult":
        """The service throttled the call; the caller may retry after a delay."""
        return cls(
            status=OperationStatus.RATE_LIMITED,
            message=message,
            error_code="RATE_LIMITED",
            retry_after=retry_after,
        )

    @classmethod
    def transient_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Server-side failure that might clear up, but is not retried here."""
        return cls(
            status=OperationStatus.TRANSIENT_ERROR,
            message=message,
            error_code=error_code,
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Failure that will not change on retry: missing scope, bad input."""
        return cls(
            status=OperationStatus.PERMANENT_ERROR,
            message=message,
            error_code=error_code,
        )

    @classmethod
    def unauthorized(cls, message: str, error_code: Optional[str] = None) -> "OperationResult":
        return cls(
            status=OperationStatus.UNAUTHORIZED,
            message=message,
            error_code=error_code,
        )

    @classmethod
    def not_found(
        cls, message: str, error_code: Optional[str] = "NOT_FOUND"
    ) -> "OperationResult":
        return cls(status=OperationStatus.NOT_FOUND, message=message, error_code=error_code)
