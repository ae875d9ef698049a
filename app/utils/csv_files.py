"""CSV helpers shared by the onboarding scripts.

Scripts hand data to each other through CSV files. Headers are matched
case-insensitively and surrounding whitespace is stripped from every value.
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Union


class CsvFormatError(Exception):
    """The input CSV is missing a header row or a required column."""

    pass


def read_rows(
    path: Union[str, Path], required_columns: Sequence[str] = ()
) -> List[Dict[str, str]]:
    """Read a CSV file into dicts keyed by the lower-cased header.

    Args:
        path: CSV file (a UTF-8 BOM from spreadsheet exports is tolerated)
        required_columns: Columns that must be present (case-insensitive)

    Raises:
        FileNotFoundError: path does not exist
        CsvFormatError: no header row or a required column is missing
    """
    with open(path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise CsvFormatError(f"{path} has no header row")

        headers = {name.strip().lower() for name in reader.fieldnames if name}
        missing = [c for c in required_columns if c.lower() not in headers]
        if missing:
            raise CsvFormatError(f"{path} is missing column(s): {', '.join(missing)}")

        rows = []
        for row in reader:
            cleaned = {
                (key or "").strip().lower(): (value or "").strip()
                for key, value in row.items()
                if key is not None
            }
            if any(cleaned.values()):
                rows.append(cleaned)
        return rows


def write_rows(
    path: Union[str, Path], fieldnames: Sequence[str], rows: Iterable[Dict[str, str]]
) -> int:
    """Write rows to a CSV file, creating parent directories. Returns the row count."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(target, "w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(fieldnames), extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
            count += 1
    return count
