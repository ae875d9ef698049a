"""Operation result types and status enums.

Standardized result types shared by the notification strategies and the
vendor integrations, plus classifiers that translate vendor failures.
"""

from infrastructure.operations.classifiers import (
    classify_http_error,
    classify_slack_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
    "classify_slack_error",
]
