"""Removal of emptied drop-folder directories."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from shoebox.ingestion.discovery import is_hidden_name

LOGGER = logging.getLogger(__name__)


def _has_visible_entries(directory: Path) -> bool:
    with os.scandir(directory) as entries:
        return any(not is_hidden_name(entry.name) for entry in entries)


def prune_empty_directories(root: Path) -> int:
    """Remove directories below `root` that hold no visible entries.

    The walk is bottom-up, so a parent whose only children were emptied
    directories is removed as well. Hidden leftovers such as `.DS_Store` are
    deleted along with their directory, and camera housekeeping folders such
    as `PRIVATE/M4ROOT` are pruned like any other. `root` itself is never
    removed.

    Args:
        root: Drop folder to tidy.

    Returns:
        int: Number of directories removed.
    """
    removed = 0
    for dirpath, _, _ in os.walk(root, topdown=False, onerror=_log_walk_error):
        directory = Path(dirpath)
        if directory == root:
            continue
        try:
            if _has_visible_entries(directory):
                continue
            shutil.rmtree(directory)
        except OSError as exc:
            LOGGER.warning("Could not remove empty folder %s: %s", directory, exc)
            continue
        LOGGER.info("Removed empty folder %s", directory)
        removed += 1
    return removed


def _log_walk_error(error: OSError) -> None:
    LOGGER.debug("Skipping unreadable entry %s: %s", error.filename, error)


__all__ = ["prune_empty_directories"]
