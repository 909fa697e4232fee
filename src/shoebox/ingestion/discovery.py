"""Drop-folder discovery."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from .detectors import MediaClassifier, normalize_extension
from .models import CapturedFile

LOGGER = logging.getLogger(__name__)

# System and camera housekeeping folders that never hold user media.
SKIP_DIRECTORIES = frozenset(
    {
        ".stfolder",  # Syncthing
        ".fseventsd",  # macOS filesystem events
        ".Trashes",
        ".Spotlight-V100",
        "PRIVATE",  # camera system folder
        "AVF_INFO",  # Sony AVCHD info
        "THMBNL",  # Sony thumbnails
    }
)


def is_hidden_name(name: str) -> bool:
    """Return True for dot-prefixed file or directory names."""
    return name.startswith(".")


def is_skipped_directory(name: str) -> bool:
    """Return True when a directory must not be descended into."""
    return is_hidden_name(name) or name in SKIP_DIRECTORIES


class DirectoryScanner:
    """Discover organizable media files below a drop folder."""

    def __init__(self, classifier: MediaClassifier | None = None) -> None:
        self.classifier = classifier or MediaClassifier()

    def scan(self, root: Path) -> Iterator[CapturedFile]:
        """Yield media files under `root` in a stable, sorted walk order.

        Hidden entries and housekeeping directories are pruned. Entries that
        cannot be read are skipped without interrupting the walk.
        """
        root = root.expanduser().resolve()
        if not root.is_dir():
            return

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._log_walk_error):
            dirnames[:] = sorted(name for name in dirnames if not is_skipped_directory(name))
            for name in sorted(filenames):
                if is_hidden_name(name):
                    continue
                path = Path(dirpath) / name
                if not path.is_file():
                    continue
                extension = normalize_extension(path.suffix)
                if not self.classifier.is_eligible_for_organizing(extension):
                    continue
                yield CapturedFile(
                    path=path,
                    extension=extension,
                    category=self.classifier.classify(extension),
                )

    def _log_walk_error(self, error: OSError) -> None:
        LOGGER.debug("Skipping unreadable entry %s: %s", error.filename, error)


__all__ = ["SKIP_DIRECTORIES", "DirectoryScanner", "is_hidden_name", "is_skipped_directory"]
