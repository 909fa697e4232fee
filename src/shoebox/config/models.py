"""Configuration models describing Shoebox settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShoeboxBaseModel(BaseModel):
    """Shared configuration for Shoebox Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class LayoutSettings(ShoeboxBaseModel):
    """Directory names that make up a photo library.

    Attributes:
        incoming_dirname: Drop folder scanned for new files.
        originals_dirname: Root of the date-partitioned archive tree.
        exports_dirname: Folder for curated exports (created by `shoebox init`).
        manifest_dirname: Folder holding the ledger CSV.
        manifest_filename: File name of the ledger CSV.
    """

    incoming_dirname: str = "Incoming"
    originals_dirname: str = "Originals"
    exports_dirname: str = "Exports"
    manifest_dirname: str = "_Manifest"
    manifest_filename: str = "photo_manifest.csv"

    @field_validator(
        "incoming_dirname",
        "originals_dirname",
        "exports_dirname",
        "manifest_dirname",
        "manifest_filename",
    )
    @classmethod
    def _single_segment(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError("layout names must be a single, non-empty path segment")
        return value


class OrganizationOptions(ShoeboxBaseModel):
    """Settings that govern an organize run.

    Attributes:
        update_manifest_default: Update the ledger on commit runs even without `-m`.
        cleanup_empty_folders: Remove emptied drop-folder directories after a commit run.
    """

    update_manifest_default: bool = False
    cleanup_empty_folders: bool = True


class LoggingSettings(ShoeboxBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown logging level {value!r}")
        return normalized


class CLIOptions(ShoeboxBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class ShoeboxConfig(ShoeboxBaseModel):
    """Top-level configuration struct for Shoebox.

    Attributes:
        layout: Library directory layout.
        organization: Organize-run behavior.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    organization: OrganizationOptions = Field(default_factory=OrganizationOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "ShoeboxBaseModel",
    "LayoutSettings",
    "OrganizationOptions",
    "LoggingSettings",
    "CLIOptions",
    "ShoeboxConfig",
]
