"""Models describing files discovered in the drop folder."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class MediaCategory(str, Enum):
    """Broad media category derived from a file extension."""

    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    SIDECAR = "sidecar"
    UNSUPPORTED = "unsupported"


class CapturedFile(BaseModel):
    """A media file waiting in the drop folder.

    Attributes:
        path: Absolute source path.
        extension: Lower-cased extension including the leading dot.
        category: Media category for the extension.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    extension: str
    category: MediaCategory


__all__ = ["MediaCategory", "CapturedFile"]
