"""
File Manager
Incremental generation pipeline: change detection, user-edit protection,
bounded writes and the orchestrator that ties them together.
"""

from .types import (
    CACHE_SCHEMA_VERSION,
    FilePaths,
    ComponentHashEntry,
    ComponentHashCache,
    ChangeDetectionResult,
    UserEditInfo,
    UserEditsCache,
    UserEditConflict,
    FileToWrite,
    FileWriteResult,
    GenerationType,
    GenerationBreakdown,
    GenerationSummary,
    FileManagerOptions,
    ProjectPaths,
)
from .change_detector import ChangeDetector, compute_hash, find_root_component_ids
from .user_edits import UserEditTracker
from .file_writer import FileWriter
from .events import (
    EventBus,
    FileManagerEvent,
    GenerationStartEvent,
    GenerationProgressEvent,
    GenerationCompleteEvent,
    GenerationErrorEvent,
    UserEditEvent,
    UserEditConflictEvent,
    ComponentRemovedEvent,
)
from .manager import FileManager, create_file_manager

__all__ = [
    "CACHE_SCHEMA_VERSION",
    "FilePaths",
    "ComponentHashEntry",
    "ComponentHashCache",
    "ChangeDetectionResult",
    "UserEditInfo",
    "UserEditsCache",
    "UserEditConflict",
    "FileToWrite",
    "FileWriteResult",
    "GenerationType",
    "GenerationBreakdown",
    "GenerationSummary",
    "FileManagerOptions",
    "ProjectPaths",
    "ChangeDetector",
    "compute_hash",
    "find_root_component_ids",
    "UserEditTracker",
    "FileWriter",
    "EventBus",
    "FileManagerEvent",
    "GenerationStartEvent",
    "GenerationProgressEvent",
    "GenerationCompleteEvent",
    "GenerationErrorEvent",
    "UserEditEvent",
    "UserEditConflictEvent",
    "ComponentRemovedEvent",
    "FileManager",
    "create_file_manager",
]
