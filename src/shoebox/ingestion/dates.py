"""Capture-date resolution.

A file's capture date comes from the first strategy that produces one:

1. embedded EXIF metadata (photos only),
2. a date encoded in the file name,
3. the filesystem modification time,
4. the current time.

The resolver never raises; every file ends up with some timestamp.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .detectors import MediaClassifier
from .extractors import MetadataExtractor

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilenameDateRule:
    """A filename pattern paired with the layout of its captured date.

    Attributes:
        pattern: Regex whose first group holds the date text.
        layout: `strptime` format for the captured text.
        description: Human-readable name of the naming convention.
    """

    pattern: re.Pattern[str]
    layout: str
    description: str

    def parse(self, filename: str) -> Optional[datetime]:
        """Return the date encoded in `filename`, or None if absent or invalid."""
        match = self.pattern.search(filename)
        if match is None:
            return None
        try:
            return datetime.strptime(match.group(1), self.layout)
        except ValueError:
            return None


# Order matters: device conventions come before the bare 8-digit catch-all,
# which would otherwise grab digits belonging to another convention.
FILENAME_DATE_RULES: tuple[FilenameDateRule, ...] = (
    # DJI_20250619224111_0001_D.MP4
    FilenameDateRule(re.compile(r"DJI_(\d{8})"), "%Y%m%d", "DJI drone files"),
    # 20250616_C0416.MP4
    FilenameDateRule(re.compile(r"^(\d{8})_C\d+"), "%Y%m%d", "Sony video clips"),
    # IMG_20250619_123456.jpg
    FilenameDateRule(re.compile(r"(\d{8})_\d{6}"), "%Y%m%d", "Generic timestamp"),
    # 2025-06-19_photo.jpg
    FilenameDateRule(re.compile(r"(\d{4}-\d{2}-\d{2})"), "%Y-%m-%d", "ISO date"),
    # 20250619_photo.jpg
    FilenameDateRule(re.compile(r"(\d{8})"), "%Y%m%d", "Compact date"),
)


def date_from_filename(
    filename: str, rules: tuple[FilenameDateRule, ...] = FILENAME_DATE_RULES
) -> Optional[datetime]:
    """Return the date from the first rule that matches and parses `filename`."""
    for rule in rules:
        parsed = rule.parse(filename)
        if parsed is not None:
            return parsed
    return None


class CaptureDateResolver:
    """Pick the best available capture date for a file."""

    def __init__(
        self,
        *,
        classifier: MediaClassifier | None = None,
        extractor: MetadataExtractor | None = None,
        rules: tuple[FilenameDateRule, ...] = FILENAME_DATE_RULES,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.classifier = classifier or MediaClassifier()
        self.extractor = extractor or MetadataExtractor()
        self.rules = rules
        self._clock = clock

    def resolve(self, path: Path) -> datetime:
        """Return the capture date for `path`.

        Args:
            path: File whose capture date is needed. It does not have to exist.

        Returns:
            datetime: Naive local timestamp from the first successful strategy.
        """
        if self.classifier.is_eligible_for_metadata_date(path.suffix):
            embedded = self.extractor.capture_date(path)
            if embedded is not None:
                return embedded

        from_name = date_from_filename(path.name, self.rules)
        if from_name is not None:
            return from_name

        try:
            return datetime.fromtimestamp(path.stat().st_mtime)
        except OSError as exc:
            LOGGER.debug("Falling back to current time for %s: %s", path, exc)

        return self._clock()


__all__ = [
    "FilenameDateRule",
    "FILENAME_DATE_RULES",
    "date_from_filename",
    "CaptureDateResolver",
]
