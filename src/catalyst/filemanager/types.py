"""File Manager Types."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from catalyst.core.config import RemovedFilePolicy, Settings

CACHE_SCHEMA_VERSION = "1.0.0"


class FilePaths:
    """Project-relative output locations."""

    COMPONENTS_DIR = "src/components"
    APP_JSX = "src/App.jsx"
    MAIN_JSX = "src/main.jsx"
    USER_EDITS_FILE = ".catalyst/user-edits.json"
    HASH_CACHE_FILE = ".catalyst/hash-cache.json"
    TRASH_DIR = ".catalyst/trash"


# ============================================================================
# Change detection
# ============================================================================


class ComponentHashEntry(BaseModel):
    """Cached hash of one component definition."""

    id: str
    display_name: str
    hash: str
    is_root: bool
    computed_at: str


class ComponentHashCache(BaseModel):
    """Hash cache sidecar document."""

    schema_version: str = CACHE_SCHEMA_VERSION
    hashes: dict[str, ComponentHashEntry] = Field(default_factory=dict)
    # The last App.jsx write failed; the next pass must rewrite it
    app_stale: bool = False
    updated_at: str = ""


@dataclass
class ChangeDetectionResult:
    """Outcome of comparing the manifest with the cached snapshot."""

    added: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    app_needs_update: bool = False

    @property
    def total_changes(self) -> int:
        return len(self.added) + len(self.modified) + len(self.removed)

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0 or self.app_needs_update

    def to_dict(self) -> dict[str, object]:
        """Export as dictionary."""
        return {
            "added": list(self.added),
            "modified": list(self.modified),
            "removed": list(self.removed),
            "app_needs_update": self.app_needs_update,
            "total_changes": self.total_changes,
            "has_changes": self.has_changes,
        }


# ============================================================================
# User edits
# ============================================================================


class UserEditInfo(BaseModel):
    """A file the user modified by hand."""

    filepath: str
    component_id: str | None = None
    detected_at: str
    content_hash: str | None = None


class UserEditsCache(BaseModel):
    """User edits sidecar document."""

    schema_version: str = CACHE_SCHEMA_VERSION
    edits: dict[str, UserEditInfo] = Field(default_factory=dict)
    updated_at: str = ""


class UserEditConflict(BaseModel):
    """A generated write skipped because the target was edited by hand."""

    filepath: str
    component_id: str | None = None
    message: str
    detected_at: str


# ============================================================================
# Writing
# ============================================================================


class FileToWrite(BaseModel):
    """Pending write request."""

    filepath: str
    content: str
    component_id: str | None = None
    kind: Literal["component", "entry", "bootstrap"] = "component"


class FileWriteResult(BaseModel):
    """Per-file write outcome."""

    success: bool
    filepath: str
    error: str | None = None


# ============================================================================
# Summary
# ============================================================================


class GenerationType(str, Enum):
    """Generation pass mode."""

    FULL = "full"
    INCREMENTAL = "incremental"


class GenerationBreakdown(BaseModel):
    """What a pass touched."""

    added: int = 0
    modified: int = 0
    removed: int = 0
    quarantined: int = 0
    app_regenerated: bool = False
    main_regenerated: bool = False


class GenerationSummary(BaseModel):
    """Result of one generation pass."""

    generation_id: str = ""
    type: GenerationType
    skipped: bool = False
    total_components: int = 0
    files_written: int = 0
    files_failed: int = 0
    errors: list[FileWriteResult] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)
    duration_ms: float = 0.0
    breakdown: GenerationBreakdown | None = None

    @property
    def ok(self) -> bool:
        return self.files_failed == 0


# ============================================================================
# Options
# ============================================================================


class FileManagerOptions(BaseModel):
    """FileManager configuration."""

    max_concurrent_writes: int = Field(default=10, gt=0)
    persist_user_edits: bool = True
    persist_hash_cache: bool = True
    emit_events: bool = True
    debug: bool = False
    retry_failed_writes: bool = True
    removed_file_policy: RemovedFilePolicy = "quarantine"
    components_dir: str = FilePaths.COMPONENTS_DIR
    component_extension: str = ".jsx"

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileManagerOptions":
        """Build options from application settings."""
        return cls(
            max_concurrent_writes=settings.max_concurrent_writes,
            persist_user_edits=settings.persist_user_edits,
            persist_hash_cache=settings.persist_hash_cache,
            emit_events=settings.emit_events,
            debug=settings.debug,
            retry_failed_writes=settings.retry_failed_writes,
            removed_file_policy=settings.removed_file_policy,
            components_dir=settings.components_dir,
            component_extension=settings.component_extension,
        )


@dataclass(frozen=True)
class ProjectPaths:
    """Resolved absolute paths for one project."""

    project: Path
    components_dir: Path
    app_jsx: Path
    main_jsx: Path
    user_edits_file: Path
    hash_cache_file: Path
    trash_dir: Path

    @classmethod
    def resolve(cls, project_path: Path, components_dir: str = FilePaths.COMPONENTS_DIR) -> "ProjectPaths":
        root = Path(project_path).resolve()
        return cls(
            project=root,
            components_dir=root / components_dir,
            app_jsx=root / FilePaths.APP_JSX,
            main_jsx=root / FilePaths.MAIN_JSX,
            user_edits_file=root / FilePaths.USER_EDITS_FILE,
            hash_cache_file=root / FilePaths.HASH_CACHE_FILE,
            trash_dir=root / FilePaths.TRASH_DIR,
        )


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
]
