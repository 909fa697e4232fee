"""High-level organize run orchestration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from shoebox.config.models import OrganizationOptions
from shoebox.ingestion.dates import CaptureDateResolver
from shoebox.ingestion.detectors import HashComputer, MediaClassifier
from shoebox.ingestion.discovery import DirectoryScanner
from shoebox.ingestion.models import CapturedFile
from shoebox.library import LibraryPaths
from shoebox.manifest import ManifestRepository, ManifestWriteError, entries_from_records

from .cleanup import prune_empty_directories
from .errors import MissingDropFolderError, MoveError
from .executor import FileMover
from .models import MovedFileRecord, OrganizePlan, OrganizeResult
from .planner import DestinationPlanner

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[OrganizePlan, Optional[MovedFileRecord]], None]


class OrganizePipeline:
    """Scan the drop folder, plan each file, and move it into the archive."""

    def __init__(
        self,
        paths: LibraryPaths,
        *,
        options: OrganizationOptions | None = None,
        scanner: DirectoryScanner | None = None,
        planner: DestinationPlanner | None = None,
        mover: FileMover | None = None,
        manifest: ManifestRepository | None = None,
    ) -> None:
        classifier = MediaClassifier()
        resolver = CaptureDateResolver(classifier=classifier)
        self.paths = paths
        self.options = options or OrganizationOptions()
        self.scanner = scanner or DirectoryScanner(classifier)
        self.planner = planner or DestinationPlanner(resolver)
        self.mover = mover or FileMover(paths, resolver=resolver, hasher=HashComputer())
        self.manifest = manifest or ManifestRepository(paths.manifest_file)

    def discover(self) -> List[CapturedFile]:
        """Return the organizable files waiting in the drop folder.

        Raises:
            MissingDropFolderError: If the drop folder does not exist.
        """
        incoming = self.paths.incoming
        if not incoming.is_dir():
            raise MissingDropFolderError(f"Incoming directory not found at {incoming}")
        return list(self.scanner.scan(incoming))

    def run(
        self,
        *,
        commit: bool = False,
        update_manifest: bool = False,
        progress: ProgressCallback | None = None,
        captured: Sequence[CapturedFile] | None = None,
    ) -> OrganizeResult:
        """Organize the drop folder.

        Preview runs (`commit=False`) only plan; nothing on disk changes.

        Args:
            commit: Move files instead of previewing.
            update_manifest: Merge moved files into the ledger (commit runs only).
            progress: Called once per planned file, with the record when a file
                was moved.
            captured: Files returned by an earlier `discover` call; scanned
                afresh when omitted.

        Returns:
            OrganizeResult: Plans, records, and counts for the run.

        Raises:
            MissingDropFolderError: If the drop folder does not exist.
        """
        if captured is None:
            captured = self.discover()
        incoming = self.paths.incoming

        result = OrganizeResult(committed=commit)
        result.discovered = len(captured)
        LOGGER.info("Found %d files to organize in %s", result.discovered, incoming)

        reserved: dict[Path, int] = {}
        for item in captured:
            try:
                plan = self.planner.plan(item.path, self.paths.originals, reserved=reserved)
            except OSError as exc:
                self._record_failure(result, f"{item.path}: {exc}")
                continue

            result.plans.append(plan)
            if not plan.will_move:
                result.skipped_duplicates += 1
                LOGGER.info("Skipping duplicate %s", item.path)
                if progress:
                    progress(plan, None)
                continue

            if not commit:
                self._reserve(reserved, plan)
                if progress:
                    progress(plan, None)
                continue

            try:
                record = self.mover.execute(plan)
            except (MoveError, OSError) as exc:
                self._record_failure(result, f"{item.path}: {exc}")
                continue
            if record is not None:
                result.records.append(record)
            if progress:
                progress(plan, record)

        if not commit:
            return result

        if update_manifest and result.records:
            try:
                result.manifest_added = self.manifest.merge(entries_from_records(result.records))
            except ManifestWriteError as exc:
                LOGGER.error("%s", exc)
                result.errors.append(str(exc))

        if self.options.cleanup_empty_folders:
            result.folders_removed = prune_empty_directories(incoming)

        return result

    def _reserve(self, reserved: dict[Path, int], plan: OrganizePlan) -> None:
        try:
            reserved[plan.destination] = plan.source.stat().st_size
        except OSError as exc:
            LOGGER.debug("Could not stat %s: %s", plan.source, exc)

    def _record_failure(self, result: OrganizeResult, message: str) -> None:
        LOGGER.warning("%s", message)
        result.errors.append(message)
        result.failed += 1


__all__ = ["OrganizePipeline", "ProgressCallback"]
