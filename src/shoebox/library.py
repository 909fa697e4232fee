"""Photo library layout and bootstrapping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from shoebox.config.models import LayoutSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LibraryPaths:
    """Resolved locations for one photo library.

    Built once per run and handed to every component that needs a path.

    Attributes:
        root: Library root directory.
        incoming: Drop folder scanned for new files.
        originals: Root of the date-partitioned archive tree.
        exports: Folder reserved for curated exports.
        manifest_dir: Folder holding the ledger.
        manifest_file: Ledger CSV path.
    """

    root: Path
    incoming: Path
    originals: Path
    exports: Path
    manifest_dir: Path
    manifest_file: Path

    @classmethod
    def from_root(cls, root: Path, layout: LayoutSettings | None = None) -> "LibraryPaths":
        """Derive library paths from a root directory and layout settings."""
        layout = layout or LayoutSettings()
        root = root.expanduser().resolve()
        manifest_dir = root / layout.manifest_dirname
        return cls(
            root=root,
            incoming=root / layout.incoming_dirname,
            originals=root / layout.originals_dirname,
            exports=root / layout.exports_dirname,
            manifest_dir=manifest_dir,
            manifest_file=manifest_dir / layout.manifest_filename,
        )

    def layout_directories(self) -> list[tuple[Path, str]]:
        """Return the directories that make up a library with short descriptions."""
        return [
            (self.incoming, "Drop new photos here"),
            (self.originals, "Organized photos (YYYY/YYYY-MM-DD/)"),
            (self.exports, "Curated/edited photos"),
            (self.manifest_dir, "Tracking CSV"),
        ]


def initialize_library(paths: LibraryPaths) -> tuple[list[Path], list[Path]]:
    """Create any missing library directories.

    Args:
        paths: Library layout to materialize.

    Returns:
        tuple[list[Path], list[Path]]: Directories created and directories that
        already existed.

    Raises:
        OSError: If a directory cannot be created.
    """
    created: list[Path] = []
    existing: list[Path] = []
    for directory, _ in paths.layout_directories():
        if directory.exists():
            existing.append(directory)
            continue
        directory.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Created library directory %s", directory)
        created.append(directory)
    return created, existing


__all__ = ["LibraryPaths", "initialize_library"]
