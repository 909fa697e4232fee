"""Executor for organize plans."""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from shoebox.ingestion.dates import CaptureDateResolver
from shoebox.ingestion.detectors import HashComputer
from shoebox.library import LibraryPaths

from .errors import MoveError
from .models import MovedFileRecord, OrganizePlan

LOGGER = logging.getLogger(__name__)


class FileMover:
    """Move planned files into the archive and describe the result."""

    def __init__(
        self,
        paths: LibraryPaths,
        *,
        resolver: CaptureDateResolver | None = None,
        hasher: HashComputer | None = None,
    ) -> None:
        self.paths = paths
        self.resolver = resolver or CaptureDateResolver()
        self.hasher = hasher or HashComputer()

    def execute(self, plan: OrganizePlan) -> Optional[MovedFileRecord]:
        """Carry out `plan`.

        Args:
            plan: Placement decision for one file.

        Returns:
            Optional[MovedFileRecord]: Record for the moved file, or None when
            the plan skips a duplicate.

        Raises:
            MoveError: If the destination folder cannot be created or the file
                cannot be moved or copied.
        """
        if not plan.will_move:
            return None

        destination = plan.destination
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MoveError(f"could not create directory {destination.parent}: {exc}") from exc

        self._move(plan.source, destination)
        return self.describe(plan.source, destination)

    def describe(self, source: Path, destination: Path) -> MovedFileRecord:
        """Build a record from the archived file at `destination`."""
        stat = destination.stat()
        return MovedFileRecord(
            source=source,
            destination=destination,
            size_bytes=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime),
            capture_date=self.resolver.resolve(destination),
            file_hash=self.hasher.compute(destination),
            relative_path=self._relative_path(destination),
            source_folder=self._source_folder(source),
        )

    def _move(self, source: Path, destination: Path) -> None:
        try:
            os.rename(source, destination)
            return
        except OSError as exc:
            LOGGER.debug("Rename of %s failed (%s); copying instead.", source, exc)

        try:
            shutil.copy2(source, destination)
        except OSError as exc:
            destination.unlink(missing_ok=True)
            raise MoveError(f"could not move {source}: {exc}") from exc

        try:
            source.unlink()
        except OSError as exc:
            # The archive copy is already complete.
            LOGGER.debug("Could not remove %s after copying: %s", source, exc)

    def _relative_path(self, destination: Path) -> str:
        try:
            return str(destination.relative_to(self.paths.root))
        except ValueError:
            return str(destination)

    def _source_folder(self, source: Path) -> str:
        try:
            relative = source.relative_to(self.paths.incoming)
        except ValueError:
            return ""
        return relative.parts[0] if relative.parts else ""


__all__ = ["FileMover"]
