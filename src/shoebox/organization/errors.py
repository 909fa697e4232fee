"""Organization errors."""


class OrganizationError(Exception):
    """Base exception for organize runs."""


class MissingDropFolderError(OrganizationError):
    """Raised when the library has no drop folder to scan."""


class MoveError(OrganizationError):
    """Raised when a single file cannot be moved into the archive."""
