"""Shoebox files photos and videos into a date-partitioned archive."""

from importlib import metadata

try:
    __version__ = metadata.version("shoebox")
except metadata.PackageNotFoundError:  # source checkout without install
    __version__ = "0.0.0"

__all__ = ["__version__"]
