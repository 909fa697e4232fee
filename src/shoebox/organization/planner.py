"""Planner for archive placement."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from shoebox.ingestion.dates import CaptureDateResolver

from .models import OrganizePlan, PlanAction


def archive_path(archive_root: Path, capture_date: datetime, filename: str) -> Path:
    """Return `<archive_root>/<YYYY>/<YYYY-MM-DD>/<filename>`.

    Years are always four digits, including years before 1000.
    """
    day = capture_date.date()
    return archive_root / f"{day.year:04d}" / day.isoformat() / filename


class DestinationPlanner:
    """Compute where drop-folder files land in the archive tree."""

    def __init__(self, resolver: CaptureDateResolver | None = None) -> None:
        self.resolver = resolver or CaptureDateResolver()

    def plan_destination(self, source: Path, archive_root: Path) -> Path:
        """Return the canonical archive path for `source`, ignoring collisions.

        Args:
            source: File in the drop folder.
            archive_root: Root of the archive tree.

        Returns:
            Path: Destination derived from the source's capture date.
        """
        return archive_path(archive_root, self.resolver.resolve(source), source.name)

    def plan(
        self,
        source: Path,
        archive_root: Path,
        *,
        reserved: Optional[Mapping[Path, int]] = None,
    ) -> OrganizePlan:
        """Build a plan for `source`, applying the collision policy.

        An occupant of equal size is treated as the same file and the source is
        skipped. An occupant of different size keeps its name and the source
        gets the first free `_N` suffix.

        Args:
            source: File in the drop folder.
            archive_root: Root of the archive tree.
            reserved: Destinations claimed earlier in the same run mapped to
                the size of the file headed there. Treated like files on disk.

        Returns:
            OrganizePlan: Placement decision.

        Raises:
            OSError: If the source file cannot be inspected.
        """
        reserved = reserved or {}
        capture_date = self.resolver.resolve(source)
        candidate = archive_path(archive_root, capture_date, source.name)

        occupant_size = self._occupant_size(candidate, reserved)
        if occupant_size is None:
            return OrganizePlan(
                source=source,
                destination=candidate,
                capture_date=capture_date,
                action=PlanAction.MOVE,
            )

        if occupant_size == source.stat().st_size:
            return OrganizePlan(
                source=source,
                destination=candidate,
                capture_date=capture_date,
                action=PlanAction.SKIP_DUPLICATE,
            )

        return OrganizePlan(
            source=source,
            destination=self._next_free_name(candidate, reserved),
            capture_date=capture_date,
            action=PlanAction.RENAME_COLLISION,
        )

    def _occupant_size(self, candidate: Path, reserved: Mapping[Path, int]) -> Optional[int]:
        if candidate.exists():
            return candidate.stat().st_size
        return reserved.get(candidate)

    def _next_free_name(self, candidate: Path, reserved: Mapping[Path, int]) -> Path:
        counter = 1
        while True:
            option = candidate.with_name(f"{candidate.stem}_{counter}{candidate.suffix}")
            if not option.exists() and option not in reserved:
                return option
            counter += 1


__all__ = ["archive_path", "DestinationPlanner"]
