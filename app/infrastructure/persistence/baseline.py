"""Change-set detection against a persisted baseline.

The baseline is the set of entity names seen at the end of the last run. Each
run compares the fresh listing with it, reports the additions and overwrites
it with the fresh listing.

Ordering: by default the new baseline is written inside ``detect`` so it is
on disk before the caller notifies anyone. A crash mid-notification then never
produces duplicate notifications on the next run, at the cost of possibly
missing one. Callers who prefer the opposite trade-off call
``detect(..., commit=False)`` and ``commit()`` after their side effects.

Usage:
    detector = ChangeSetDetector("./state/repositories.json")
    change_set = detector.detect(records)
    if change_set.is_bootstrap:
        return
    for record in change_set.added_records:
        notify(record)
"""

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Set, Union

from infrastructure.logging import get_module_logger
from infrastructure.persistence.models import ChangeSet, EntityRecord

logger = get_module_logger()

AUDIT_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


class BaselinePersistError(Exception):
    """Raised when the baseline cannot be written.

    Fatal: without a successful write the next run would re-detect the same
    additions.
    """

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = str(path)
        super().__init__(f"Failed to write baseline {self.path}: {cause}")


def _normalize(current: Iterable[Union[str, EntityRecord]]) -> Dict[str, EntityRecord]:
    """Collapse the listing to one record per name, first occurrence wins."""
    records: Dict[str, EntityRecord] = {}
    for item in current:
        record = item if isinstance(item, EntityRecord) else EntityRecord(name=item)
        if record.name not in records:
            records[record.name] = record
    return records


class ChangeSetDetector:
    """Detect entities added since the last run.

    Args:
        baseline_path: JSON file holding the baseline names
        clock: Returns the current time; used for audit file names
    """

    def __init__(
        self,
        baseline_path: Union[str, Path],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.baseline_path = Path(baseline_path)
        self._clock = clock or datetime.now

    def exists(self) -> bool:
        return self.baseline_path.is_file()

    def load_baseline(self) -> Set[str]:
        """Read the baseline, degrading to an empty set on any read problem."""
        try:
            raw = self.baseline_path.read_text(encoding="utf-8-sig")
            data = json.loads(raw)
        except (OSError, ValueError) as exc:
            logger.warning(
                "baseline_read_failed",
                path=str(self.baseline_path),
                error=str(exc),
            )
            return set()

        if not isinstance(data, list) or not all(isinstance(n, str) for n in data):
            logger.warning(
                "baseline_invalid_format",
                path=str(self.baseline_path),
                found_type=type(data).__name__,
            )
            return set()

        return set(data)

    def detect(
        self,
        current: Iterable[Union[str, EntityRecord]],
        commit: bool = True,
        audit: bool = True,
    ) -> ChangeSet:
        """Compare ``current`` with the baseline.

        Args:
            current: Fresh listing as names or EntityRecords (duplicates allowed)
            commit: Persist ``current`` as the new baseline before returning,
                including on the first run
            audit: Write the additions to a timestamped audit file

        Returns:
            ChangeSet with the additions

        Raises:
            BaselinePersistError: the baseline could not be written
        """
        records = _normalize(current)
        current_names = set(records)

        if not self.exists():
            # First run: seed the baseline, never notify about pre-existing entities
            change_set = ChangeSet(
                added=set(),
                prior_baseline=set(),
                current=current_names,
                is_bootstrap=True,
            )
            if commit:
                self.commit(change_set)
            logger.info(
                "baseline_bootstrapped",
                path=str(self.baseline_path),
                entity_count=len(current_names),
                committed=change_set.committed,
            )
            return change_set

        prior = self.load_baseline()
        added = current_names - prior
        change_set = ChangeSet(
            added=added,
            prior_baseline=prior,
            current=current_names,
            added_records=[records[name] for name in sorted(added)],
        )

        if commit:
            self.commit(change_set)

        if added and audit:
            change_set.audit_path = self._write_audit(change_set.added_records)

        logger.info(
            "change_set_detected",
            path=str(self.baseline_path),
            baseline_count=len(prior),
            current_count=len(current_names),
            added_count=len(added),
            committed=change_set.committed,
        )
        return change_set

    def commit(self, change_set: ChangeSet) -> None:
        """Persist ``change_set.current`` as the baseline."""
        self._write_baseline(change_set.current)
        change_set.committed = True

    def audit_path_for(self, moment: datetime) -> Path:
        stamp = moment.strftime(AUDIT_TIMESTAMP_FORMAT)
        return self.baseline_path.with_name(
            f"{self.baseline_path.stem}-added-{stamp}.json"
        )

    def _write_baseline(self, names: Set[str]) -> None:
        payload = json.dumps(sorted(names), indent=2, ensure_ascii=False)
        try:
            self.baseline_path.parent.mkdir(parents=True, exist_ok=True)
            # Readers never see a partially written baseline
            fd, tmp_name = tempfile.mkstemp(
                dir=self.baseline_path.parent,
                prefix=f".{self.baseline_path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.baseline_path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            logger.error(
                "baseline_write_failed",
                path=str(self.baseline_path),
                error=str(exc),
            )
            raise BaselinePersistError(self.baseline_path, exc) from exc

    def _write_audit(self, records) -> Optional[str]:
        payload = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
        base = self.audit_path_for(self._clock())
        path = base
        suffix = 1
        while True:
            try:
                # Same-second runs get a numbered suffix
                with path.open("x", encoding="utf-8") as handle:
                    handle.write(payload)
                return str(path)
            except FileExistsError:
                path = base.with_name(f"{base.stem}-{suffix}{base.suffix}")
                suffix += 1
            except OSError as exc:
                logger.warning("audit_write_failed", path=str(path), error=str(exc))
                return None
