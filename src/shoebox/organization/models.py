"""Organization plan and result models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class PlanAction(str, Enum):
    """What an organize run does with one file."""

    MOVE = "move"
    SKIP_DUPLICATE = "skip_duplicate"
    RENAME_COLLISION = "rename_collision"


class OrganizePlan(BaseModel):
    """Resolved placement for one drop-folder file.

    Attributes:
        source: File in the drop folder.
        destination: Target path under `<archive>/<YYYY>/<YYYY-MM-DD>/`.
        capture_date: Capture date the destination was derived from.
        action: Placement decision.
    """

    model_config = ConfigDict(frozen=True)

    source: Path
    destination: Path
    capture_date: datetime
    action: PlanAction

    @property
    def will_move(self) -> bool:
        return self.action is not PlanAction.SKIP_DUPLICATE


class MovedFileRecord(BaseModel):
    """Facts about a file after it was moved into the archive.

    Size, timestamps, capture date and fingerprint are all read from the
    destination, after the move.

    Attributes:
        source: Original drop-folder path.
        destination: Final archive path.
        size_bytes: Size of the archived file.
        modified_at: Filesystem modification time of the archived file.
        capture_date: Capture date resolved from the archived file.
        file_hash: Fingerprint of the first 64KB.
        relative_path: Destination relative to the library root; the ledger key.
        source_folder: First path component below the drop folder, i.e. the
            subfolder the file came from, or its own name for top-level files.
    """

    model_config = ConfigDict(frozen=True)

    source: Path
    destination: Path
    size_bytes: int
    modified_at: datetime
    capture_date: datetime
    file_hash: str
    relative_path: str
    source_folder: str = ""


class OrganizeResult(BaseModel):
    """Aggregate outcome of one organize run."""

    committed: bool = False
    discovered: int = 0
    plans: List[OrganizePlan] = Field(default_factory=list)
    records: List[MovedFileRecord] = Field(default_factory=list)
    skipped_duplicates: int = 0
    failed: int = 0
    manifest_added: int = 0
    folders_removed: int = 0
    errors: List[str] = Field(default_factory=list)

    @property
    def organized(self) -> int:
        """Files moved (commit) or that would be moved (preview)."""
        if self.committed:
            return len(self.records)
        return sum(1 for plan in self.plans if plan.will_move)

    def counts(self) -> dict[str, int]:
        return {
            "discovered": self.discovered,
            "organized": self.organized,
            "skipped_duplicates": self.skipped_duplicates,
            "failed": self.failed,
            "manifest_added": self.manifest_added,
            "folders_removed": self.folders_removed,
        }


__all__ = ["PlanAction", "OrganizePlan", "MovedFileRecord", "OrganizeResult"]
