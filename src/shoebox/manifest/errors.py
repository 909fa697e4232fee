"""Manifest errors."""


class ManifestError(Exception):
    """Base exception for ledger operations."""


class ManifestWriteError(ManifestError):
    """Raised when the ledger file cannot be rewritten."""
