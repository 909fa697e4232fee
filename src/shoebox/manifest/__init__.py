"""Ledger persistence for organized files."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List

from .errors import ManifestError, ManifestWriteError
from .models import KEY_COLUMN_INDEX, MANIFEST_COLUMNS, ManifestEntry

if TYPE_CHECKING:
    from shoebox.organization.models import MovedFileRecord

LOGGER = logging.getLogger(__name__)

KEY_COLUMN = MANIFEST_COLUMNS[KEY_COLUMN_INDEX]


@dataclass
class ManifestTable:
    """In-memory copy of a ledger file.

    Attributes:
        header: Column names as found in the file.
        rows: Raw rows keyed by relative path.
    """

    header: List[str] = field(default_factory=lambda: list(MANIFEST_COLUMNS))
    rows: Dict[str, List[str]] = field(default_factory=dict)

    def sorted_rows(self) -> List[List[str]]:
        return [self.rows[key] for key in sorted(self.rows)]


class ManifestRepository:
    """Read, merge, and rewrite the ledger CSV."""

    def __init__(self, path: Path) -> None:
        """Initialize the repository.

        Args:
            path: Location of the ledger CSV. It need not exist yet.
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Return the ledger path."""
        return self._path

    def load(self) -> ManifestTable:
        """Load the ledger, or an empty table when it is missing or unreadable.

        Existing rows are kept exactly as written. Rows too short to carry a
        key are dropped.

        Returns:
            ManifestTable: Header and rows indexed by relative path.
        """
        if not self._path.exists():
            return ManifestTable()

        try:
            with self._path.open("r", encoding="utf-8", newline="") as fh:
                records = list(csv.reader(fh))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            LOGGER.warning("Ignoring unreadable manifest %s: %s", self._path, exc)
            return ManifestTable()

        if not records or not records[0]:
            return ManifestTable()

        header = records[0]
        key_index = header.index(KEY_COLUMN) if KEY_COLUMN in header else KEY_COLUMN_INDEX
        rows: Dict[str, List[str]] = {}
        for row in records[1:]:
            if len(row) > key_index:
                rows[row[key_index]] = row
        return ManifestTable(header=header, rows=rows)

    def merge(self, entries: Iterable[ManifestEntry]) -> int:
        """Add entries whose relative path is not yet in the ledger, then rewrite it.

        Entries for keys already present are ignored, even when the file they
        describe has changed, so repeated merges are idempotent.

        Args:
            entries: Candidate ledger rows.

        Returns:
            int: Number of rows added.

        Raises:
            ManifestWriteError: If the ledger cannot be written.
        """
        table = self.load()
        added = 0
        for entry in entries:
            if entry.relative_path in table.rows:
                continue
            table.rows[entry.relative_path] = entry.to_row()
            added += 1

        self.write(table)
        if added:
            LOGGER.info("Added %d entries to manifest %s", added, self._path)
        return added

    def write(self, table: ManifestTable) -> None:
        """Rewrite the ledger with the header followed by rows sorted by key.

        Raises:
            ManifestWriteError: If the ledger directory or file cannot be written.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8", newline="") as fh:
                writer = csv.writer(fh, lineterminator="\n")
                writer.writerow(table.header)
                writer.writerows(table.sorted_rows())
        except OSError as exc:
            raise ManifestWriteError(f"Could not write manifest {self._path}: {exc}") from exc


def entries_from_records(
    records: Iterable[MovedFileRecord], *, organized_at: datetime | None = None
) -> List[ManifestEntry]:
    """Convert moved-file records into ledger entries stamped with one timestamp."""
    stamp = organized_at or datetime.now()
    return [ManifestEntry.from_record(record, organized_at=stamp) for record in records]


__all__ = [
    "KEY_COLUMN",
    "MANIFEST_COLUMNS",
    "ManifestEntry",
    "ManifestError",
    "ManifestRepository",
    "ManifestTable",
    "ManifestWriteError",
    "entries_from_records",
]
