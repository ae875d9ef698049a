"""Persistence of run-to-run state.

Baseline snapshots used to detect entities added since the previous run.
"""

from infrastructure.persistence.baseline import BaselinePersistError, ChangeSetDetector
from infrastructure.persistence.models import ChangeSet, EntityRecord

__all__ = [
    "BaselinePersistError",
    "ChangeSet",
    "ChangeSetDetector",
    "EntityRecord",
]
