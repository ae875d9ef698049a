"""Entity and change-set models for baseline tracking."""

from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass(frozen=True)
class EntityRecord:
    """An externally listed entity (e.g. a repository).

    Identity and equality are by ``name`` alone; the description is carried
    for messages and audit output only.
    """

    name: str
    description: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}


@dataclass
class ChangeSet:
    """Result of comparing a fresh listing against the persisted baseline.

    Attributes:
        added: Names present now but absent from the baseline
        prior_baseline: Baseline names loaded at the start of the run
        current: Names observed in this run (the next baseline)
        added_records: Records for ``added``, sorted by name
        is_bootstrap: True on the first run; callers must not notify
        committed: True once ``current`` has been written as the baseline
        audit_path: Audit artifact written for this run, if any
    """

    added: Set[str]
    prior_baseline: Set[str]
    current: Set[str]
    added_records: List[EntityRecord] = field(default_factory=list)
    is_bootstrap: bool = False
    committed: bool = False
    audit_path: Optional[str] = None

    @property
    def has_additions(self) -> bool:
        return bool(self.added)
