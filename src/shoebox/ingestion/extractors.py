"""Embedded metadata extraction."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from PIL import ExifTags, Image

LOGGER = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


class MetadataExtractor:
    """Read capture timestamps embedded in image files."""

    def capture_date(self, path: Path) -> Optional[datetime]:
        """Return the EXIF capture date for `path`, or None when unavailable.

        `DateTimeOriginal` from the Exif IFD is preferred; the IFD0 `DateTime`
        tag is used when the camera did not record it. Unreadable files,
        formats Pillow cannot decode and malformed values all yield None.

        Args:
            path: Image file to inspect.

        Returns:
            Optional[datetime]: Naive local capture time, if one was recorded.
        """
        try:
            with Image.open(path) as img:
                exif = img.getexif()
                exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
                raw = exif_ifd.get(ExifTags.Base.DateTimeOriginal) or exif.get(
                    ExifTags.Base.DateTime
                )
        except Exception as exc:  # corrupt or unsupported images
            LOGGER.debug("No readable EXIF data in %s: %s", path, exc)
            return None

        if not raw:
            return None
        return self._parse(raw, path)

    def _parse(self, raw: object, path: Path) -> Optional[datetime]:
        if isinstance(raw, bytes):
            raw = raw.decode("ascii", errors="ignore")
        text = str(raw).strip().rstrip("\x00")
        try:
            return datetime.strptime(text[:19], EXIF_DATETIME_FORMAT)
        except ValueError:
            LOGGER.debug("Unparsable EXIF date %r in %s", text, path)
            return None


__all__ = ["EXIF_DATETIME_FORMAT", "MetadataExtractor"]
