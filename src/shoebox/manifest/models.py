"""Ledger row model."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from shoebox.organization.models import MovedFileRecord

MANIFEST_COLUMNS: tuple[str, ...] = (
    "filename",
    "relative_path",
    "source_folder",
    "file_size_bytes",
    "file_size_mb",
    "file_modified",
    "capture_date",
    "camera_make",
    "camera_model",
    "file_hash",
    "extension",
    "organized_date",
)
KEY_COLUMN_INDEX = MANIFEST_COLUMNS.index("relative_path")

# `%Y` is not zero-padded before year 1000 on glibc; the year is filled in first.
TIMESTAMP_FORMAT = "{year:04d}-%m-%d %H:%M:%S"
CAPTURE_DATE_FORMAT = "{year:04d}:%m:%d %H:%M:%S"


def format_timestamp(value: datetime, layout: str = TIMESTAMP_FORMAT) -> str:
    """Render `value` with `layout`, always using a four-digit year."""
    return value.strftime(layout.format(year=value.year))


class ManifestEntry(BaseModel):
    """One ledger row, keyed by `relative_path`.

    Camera make and model are reserved columns and stay blank.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    relative_path: str
    source_folder: str = ""
    file_size_bytes: int
    file_modified: datetime
    capture_date: datetime
    camera_make: str = ""
    camera_model: str = ""
    file_hash: str = ""
    extension: str
    organized_date: datetime = Field(default_factory=datetime.now)

    @property
    def file_size_mb(self) -> float:
        return round(self.file_size_bytes / (1024 * 1024), 2)

    @classmethod
    def from_record(cls, record: MovedFileRecord, *, organized_at: datetime) -> "ManifestEntry":
        """Build a ledger entry for a freshly archived file."""
        return cls(
            filename=record.destination.name,
            relative_path=record.relative_path,
            source_folder=record.source_folder,
            file_size_bytes=record.size_bytes,
            file_modified=record.modified_at,
            capture_date=record.capture_date,
            file_hash=record.file_hash,
            extension=Path(record.destination.name).suffix.lower(),
            organized_date=organized_at,
        )

    def to_row(self) -> List[str]:
        """Render the entry in `MANIFEST_COLUMNS` order."""
        return [
            self.filename,
            self.relative_path,
            self.source_folder,
            str(self.file_size_bytes),
            f"{self.file_size_mb:.2f}",
            format_timestamp(self.file_modified),
            format_timestamp(self.capture_date, CAPTURE_DATE_FORMAT),
            self.camera_make,
            self.camera_model,
            self.file_hash,
            self.extension,
            format_timestamp(self.organized_date),
        ]


__all__ = [
    "MANIFEST_COLUMNS",
    "KEY_COLUMN_INDEX",
    "TIMESTAMP_FORMAT",
    "CAPTURE_DATE_FORMAT",
    "format_timestamp",
    "ManifestEntry",
]
