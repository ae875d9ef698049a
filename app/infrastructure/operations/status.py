"""Outcome classes for remote calls and delivery attempts."""

from enum import Enum


class OperationStatus(Enum):
    """How a remote call ended.

    Only RATE_LIMITED is ever retried; every other failure is handed back to
    the caller, which decides whether another delivery path is worth trying.
    """

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
