"""Archive placement, file moves, and drop-folder cleanup."""

from .cleanup import prune_empty_directories
from .errors import MissingDropFolderError, MoveError, OrganizationError
from .executor import FileMover
from .models import MovedFileRecord, OrganizePlan, OrganizeResult, PlanAction
from .planner import DestinationPlanner, archive_path

__all__ = [
    "DestinationPlanner",
    "FileMover",
    "MissingDropFolderError",
    "MoveError",
    "MovedFileRecord",
    "OrganizationError",
    "OrganizePlan",
    "OrganizeResult",
    "PlanAction",
    "archive_path",
    "prune_empty_directories",
]
