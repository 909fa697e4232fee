"""Media classification and content fingerprinting."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from types import MappingProxyType

from .models import MediaCategory

LOGGER = logging.getLogger(__name__)

PHOTO_EXTENSIONS = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".heic", ".hif", ".dng", ".arw", ".cr2", ".nef", ".raf"}
)
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".avi", ".mkv"})
# DJI drones record separate audio tracks next to their clips.
AUDIO_EXTENSIONS = frozenset({".wav", ".mp3"})
SIDECAR_EXTENSIONS = frozenset({".lrf", ".xmp", ".json"})

_CATEGORY_BY_EXTENSION = MappingProxyType(
    {
        **{ext: MediaCategory.PHOTO for ext in PHOTO_EXTENSIONS},
        **{ext: MediaCategory.VIDEO for ext in VIDEO_EXTENSIONS},
        **{ext: MediaCategory.AUDIO for ext in AUDIO_EXTENSIONS},
        **{ext: MediaCategory.SIDECAR for ext in SIDECAR_EXTENSIONS},
    }
)
_ORGANIZABLE = frozenset(
    {MediaCategory.PHOTO, MediaCategory.VIDEO, MediaCategory.AUDIO, MediaCategory.SIDECAR}
)

HASH_PREFIX_BYTES = 64 * 1024


def normalize_extension(extension: str) -> str:
    """Return `extension` lower-cased with a single leading dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    return extension


class MediaClassifier:
    """Map file extensions to media categories."""

    def classify(self, extension: str) -> MediaCategory:
        """Return the category for an extension such as `.JPG` or `mp4`."""
        return _CATEGORY_BY_EXTENSION.get(normalize_extension(extension), MediaCategory.UNSUPPORTED)

    def is_eligible_for_organizing(self, extension: str) -> bool:
        """Return True when files with this extension belong in the archive."""
        return self.classify(extension) in _ORGANIZABLE

    def is_eligible_for_metadata_date(self, extension: str) -> bool:
        """Return True when embedded metadata should be consulted for the capture date."""
        return self.classify(extension) is MediaCategory.PHOTO


class HashComputer:
    """Compute fast content fingerprints for duplicate bookkeeping.

    Only the first 64KB are hashed, so files that share a prefix but differ
    later produce the same fingerprint.
    """

    def __init__(self, prefix_bytes: int = HASH_PREFIX_BYTES) -> None:
        self.prefix_bytes = prefix_bytes

    def compute(self, path: Path) -> str:
        """Return the MD5 hex digest of the file prefix, or "" if unreadable."""
        try:
            with path.open("rb") as fh:
                chunk = fh.read(self.prefix_bytes)
        except OSError as exc:
            LOGGER.debug("Could not fingerprint %s: %s", path, exc)
            return ""
        return hashlib.md5(chunk, usedforsecurity=False).hexdigest()


__all__ = [
    "PHOTO_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "AUDIO_EXTENSIONS",
    "SIDECAR_EXTENSIONS",
    "HASH_PREFIX_BYTES",
    "normalize_extension",
    "MediaClassifier",
    "HashComputer",
]
