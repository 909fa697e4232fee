"""Drop-folder discovery, classification, and capture-date resolution."""

from .dates import FILENAME_DATE_RULES, CaptureDateResolver, FilenameDateRule, date_from_filename
from .detectors import HashComputer, MediaClassifier
from .discovery import DirectoryScanner
from .extractors import MetadataExtractor
from .models import CapturedFile, MediaCategory

__all__ = [
    "CapturedFile",
    "CaptureDateResolver",
    "DirectoryScanner",
    "FILENAME_DATE_RULES",
    "FilenameDateRule",
    "HashComputer",
    "MediaCategory",
    "MediaClassifier",
    "MetadataExtractor",
    "date_from_filename",
]
