"""Generation orchestrator.

Pipeline for one pass:
1. ChangeDetector: what changed since the last pass?
2. Component generator: source for added/modified components
3. FileWriter: batch write (hand-edited files are skipped with a conflict event)
4. Files of removed or renamed components: keep, quarantine or delete
5. Entry point generator: App.jsx when the root set or logic changed
6. ChangeDetector: snapshot the manifest for the next pass

Only one pass runs at a time per FileManager; overlapping calls wait.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from returns.result import Failure, Success

from catalyst.codegen import (
    AppGenerator,
    ComponentGenerator,
    EntryPointGenerator,
    ReactCodeGenerator,
    find_root_components,
)
from catalyst.core import LogContext, get_logger, hash_string, new_generation_id
from catalyst.manifest import Component, LogicContext, Manifest, validate_manifest
from catalyst.monitoring import MetricsCollector
from .change_detector import ChangeDetector
from .events import (
    ComponentRemovedEvent,
    EventBus,
    FileManagerEvent,
    GenerationCompleteEvent,
    GenerationErrorEvent,
    GenerationProgressEvent,
    GenerationStartEvent,
    Listener,
    UserEditConflictEvent,
    UserEditEvent,
)
from .file_writer import FileWriter
from .types import (
    ChangeDetectionResult,
    FileManagerOptions,
    FileToWrite,
    FileWriteResult,
    GenerationBreakdown,
    GenerationSummary,
    GenerationType,
    ProjectPaths,
    UserEditConflict,
    UserEditInfo,
)
from .user_edits import UserEditTracker

logger = get_logger(__name__)


@dataclass
class _PassState:
    """Mutable tallies for one pass."""

    generation_id: str
    errors: list[FileWriteResult] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    files_written: int = 0
    failed_component_ids: set[str] = field(default_factory=set)
    quarantined: int = 0
    app_regenerated: bool = False
    main_regenerated: bool = False

    def record(self, result: FileWriteResult, component_id: str | None = None) -> None:
        if result.success:
            self.files_written += 1
        else:
            self.errors.append(result)
            if component_id:
                self.failed_component_ids.add(component_id)


def _aliases_any(filepath: str, live_paths: set[str]) -> bool:
    """True if ``filepath`` is the same file as a live path (case-insensitive filesystems, links)."""
    path = Path(filepath)
    if not path.exists():
        return False
    for live in live_paths:
        try:
            if path.samefile(live):
                return True
        except FileNotFoundError:
            continue
    return False


class FileManager:
    """
    Single entry point for turning a manifest into files.

    Usage:
        >>> manager = FileManager("/path/to/project")
        >>> manager.load_caches()
        >>> summary = await manager.generate_incremental(manifest)
        >>> if summary.skipped:
        ...     print("no changes")

    Listeners subscribe through ``manager.on(FileManagerEvent.GENERATION_PROGRESS, cb)``.
    """

    def __init__(
        self,
        project_path: str | Path,
        options: FileManagerOptions | None = None,
        *,
        change_detector: ChangeDetector | None = None,
        component_generator: ComponentGenerator | None = None,
        entry_point_generator: EntryPointGenerator | None = None,
        file_writer: FileWriter | None = None,
        user_edits: UserEditTracker | None = None,
        events: EventBus | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        if not project_path:
            raise ValueError("FileManager requires a project path")

        self.options = options or FileManagerOptions()
        self.paths = ProjectPaths.resolve(Path(project_path), self.options.components_dir)

        self.change_detector = change_detector or ChangeDetector(debug=self.options.debug)
        self.component_generator = component_generator or ReactCodeGenerator()
        self.entry_point_generator = entry_point_generator or AppGenerator()
        self.file_writer = file_writer or FileWriter(
            max_concurrent_writes=self.options.max_concurrent_writes,
            debug=self.options.debug,
        )
        self.user_edits = user_edits or UserEditTracker(
            self.paths.user_edits_file,
            persist=self.options.persist_user_edits,
        )
        self.events = events or EventBus(enabled=self.options.emit_events)
        self.metrics = metrics or MetricsCollector()

        self._lock = asyncio.Lock()
        self._main_generated = False

        logger.info(
            "initialized",
            project=str(self.paths.project),
            components_dir=str(self.paths.components_dir),
            persist_user_edits=self.options.persist_user_edits,
        )

    # ======================================================================
    # Generation passes
    # ======================================================================

    async def generate_all(self, manifest: Manifest) -> GenerationSummary:
        """
        Regenerate every component, the entry point and (once) the bootstrap.

        Returns:
            Summary; failures are reported in it, never raised
        """
        async with self._lock:
            state = _PassState(generation_id=new_generation_id())
            with LogContext(generation_id=state.generation_id):
                return await self._run_full(manifest, state)

    async def generate_incremental(self, manifest: Manifest) -> GenerationSummary:
        """
        Regenerate only what changed since the last pass.

        Returns a ``skipped`` summary without any I/O when nothing changed
        and the manifest has no logic data.
        """
        async with self._lock:
            changes = self.change_detector.detect_changes(manifest.components)
            logic_context = manifest.logic_context()
            app_stale = self.change_detector.entry_point_stale

            if not changes.has_changes and logic_context is None and not app_stale:
                if self.options.debug:
                    logger.debug("incremental_skipped")
                self.metrics.record_pass(GenerationType.INCREMENTAL.value, "skipped", 0.0)
                return GenerationSummary(
                    type=GenerationType.INCREMENTAL,
                    skipped=True,
                    total_components=len(manifest.components),
                    breakdown=GenerationBreakdown(),
                )

            state = _PassState(generation_id=new_generation_id())
            with LogContext(generation_id=state.generation_id):
                return await self._run_incremental(manifest, changes, logic_context, state)

    async def _run_full(self, manifest: Manifest, state: _PassState) -> GenerationSummary:
        start = time.perf_counter()
        components = list(manifest.components.values())
        self._emit(FileManagerEvent.GENERATION_START, GenerationStartEvent(
            type=GenerationType.FULL.value,
            total_components=len(components),
        ))

        stale = self._cached_file_changes(manifest)
        try:
            self._check_manifest(manifest)
            await self._generate_components(manifest, components, state)
            await self._dispose_stale_files(manifest, stale, state)
            await self._write_entry_point(manifest, manifest.logic_context(), state)
            await self._write_bootstrap(state)
            self._update_cache(manifest, state)
        except Exception as e:
            return self._fail(GenerationType.FULL, len(components), state, e, start)

        return self._complete(
            GenerationType.FULL,
            len(components),
            state,
            GenerationBreakdown(
                added=len(components),
                removed=len(stale.removed),
                quarantined=state.quarantined,
                app_regenerated=state.app_regenerated,
                main_regenerated=state.main_regenerated,
            ),
            start,
        )

    async def _run_incremental(
        self,
        manifest: Manifest,
        changes: ChangeDetectionResult,
        logic_context: LogicContext | None,
        state: _PassState,
    ) -> GenerationSummary:
        start = time.perf_counter()
        self._emit(FileManagerEvent.GENERATION_START, GenerationStartEvent(
            type=GenerationType.INCREMENTAL.value,
            total_components=changes.total_changes,
            changes=changes,
        ))

        try:
            self._check_manifest(manifest)

            to_generate: list[Component] = []
            for component_id in [*changes.added, *changes.modified]:
                component = manifest.components.get(component_id)
                if component is None:
                    state.errors.append(FileWriteResult(
                        success=False,
                        filepath="",
                        error=f"Component {component_id} not found in manifest",
                    ))
                    continue
                to_generate.append(component)

            await self._generate_components(manifest, to_generate, state)
            await self._dispose_stale_files(manifest, changes, state)

            app_stale = self.change_detector.entry_point_stale
            if changes.app_needs_update or logic_context is not None or app_stale:
                await self._write_entry_point(manifest, logic_context, state)
            await self._write_bootstrap(state)
            self._update_cache(manifest, state)
        except Exception as e:
            return self._fail(GenerationType.INCREMENTAL, changes.total_changes, state, e, start)

        return self._complete(
            GenerationType.INCREMENTAL,
            changes.total_changes,
            state,
            GenerationBreakdown(
                added=len(changes.added),
                modified=len(changes.modified),
                removed=len(changes.removed),
                quarantined=state.quarantined,
                app_regenerated=state.app_regenerated,
                main_regenerated=state.main_regenerated,
            ),
            start,
        )

    # ======================================================================
    # Pass steps
    # ======================================================================

    async def _generate_components(
        self,
        manifest: Manifest,
        components: list[Component],
        state: _PassState,
    ) -> None:
        """Generate each component (skipping hand-edited files) and batch write."""
        pending: list[FileToWrite] = []
        total = len(components)

        for current, component in enumerate(components, start=1):
            self._emit(FileManagerEvent.GENERATION_PROGRESS, GenerationProgressEvent(
                current=current,
                total=total,
                component_id=component.id,
                component_name=component.display_name,
            ))

            filepath = str(self.get_component_file_path(component.display_name))
            if self.user_edits.is_edited(filepath):
                self._conflict(filepath, component.id, state)
                continue

            result = await self.component_generator.generate_component(component, manifest)
            if result.success:
                pending.append(FileToWrite(
                    filepath=filepath,
                    content=result.code,
                    component_id=component.id,
                ))
            else:
                logger.warning("component_generation_failed", component_id=component.id, error=result.error)
                state.record(
                    FileWriteResult(
                        success=False,
                        filepath=filepath,
                        error=result.error or "Code generation failed",
                    ),
                    component.id,
                )

        results = await self.file_writer.write_files(pending)
        for item, result in zip(pending, results):
            state.record(result, item.component_id)

    async def _write_entry_point(
        self,
        manifest: Manifest,
        logic_context: LogicContext | None,
        state: _PassState,
    ) -> None:
        filepath = str(self.paths.app_jsx)
        if self.user_edits.is_edited(filepath):
            self._conflict(filepath, None, state)
            return

        roots = find_root_components(manifest)
        code = await self.entry_point_generator.generate_entry_point(roots, logic_context)
        result = await self._write_one(FileToWrite(filepath=filepath, content=code, kind="entry"))
        state.record(result)
        self.change_detector.entry_point_stale = not result.success
        state.app_regenerated = result.success

    async def _write_bootstrap(self, state: _PassState) -> None:
        """Write main.jsx once per session."""
        if self._main_generated:
            return

        filepath = str(self.paths.main_jsx)
        if self.user_edits.is_edited(filepath):
            self._conflict(filepath, None, state)
            self._main_generated = True
            return

        code = await self.entry_point_generator.generate_bootstrap()
        result = await self._write_one(FileToWrite(filepath=filepath, content=code, kind="bootstrap"))
        state.record(result)
        if result.success:
            self._main_generated = True
            state.main_regenerated = True

    async def _write_one(self, item: FileToWrite) -> FileWriteResult:
        [result] = await self.file_writer.write_files([item])
        return result

    def _cached_file_changes(self, manifest: Manifest) -> ChangeDetectionResult:
        """
        Cached components as seen by a full pass: gone from the manifest, or
        still present (disposal picks out the renamed ones).
        """
        cached_ids = self.change_detector.get_cached_ids()
        return ChangeDetectionResult(
            modified=[cid for cid in cached_ids if cid in manifest.components],
            removed=[cid for cid in cached_ids if cid not in manifest.components],
        )

    async def _dispose_stale_files(
        self,
        manifest: Manifest,
        changes: ChangeDetectionResult,
        state: _PassState,
    ) -> None:
        """
        Handle files of removed and renamed components per ``removed_file_policy``.

        The old file name comes from the cached display name. A file that a
        current component still maps to, or that the user edited, is kept.
        """
        live_paths = {str(self.get_component_file_path(c.display_name)) for c in manifest.components.values()}
        stale: list[tuple[str, str | None]] = []

        for component_id in changes.removed:
            entry = self.change_detector.get_component_hash(component_id)
            filepath = str(self.get_component_file_path(entry.display_name)) if entry else None
            self._emit(FileManagerEvent.COMPONENT_REMOVED, ComponentRemovedEvent(
                component_id=component_id,
                filepath=filepath,
            ))
            if filepath:
                stale.append((filepath, component_id))

        for component_id in changes.modified:
            entry = self.change_detector.get_component_hash(component_id)
            component = manifest.components.get(component_id)
            if entry and component and entry.display_name != component.display_name:
                stale.append((str(self.get_component_file_path(entry.display_name)), component_id))

        policy = self.options.removed_file_policy
        if policy == "keep":
            return

        for filepath, component_id in stale:
            if filepath in live_paths or self.user_edits.is_edited(filepath):
                continue
            if _aliases_any(filepath, live_paths):
                logger.debug("stale_file_aliases_live_file", filepath=filepath, component_id=component_id)
                continue
            if policy == "quarantine":
                result = await self.file_writer.quarantine(filepath, self.paths.trash_dir)
            else:
                result = await self.file_writer.remove_file(filepath)

            if result.success:
                if result.filepath != filepath:
                    state.quarantined += 1
            else:
                state.errors.append(result)
            logger.debug("stale_file_disposed", filepath=filepath, component_id=component_id, policy=policy)

    def _update_cache(self, manifest: Manifest, state: _PassState) -> None:
        stale_ids = state.failed_component_ids if self.options.retry_failed_writes else set()
        self.change_detector.update_cache(manifest.components, stale_ids=stale_ids)
        self.metrics.set_cached_components(len(self.change_detector))

        if self.options.persist_hash_cache:
            try:
                self.change_detector.save(self.paths.hash_cache_file)
            except OSError as e:
                logger.error("hash_cache_persist_failed", error=str(e))

    def _check_manifest(self, manifest: Manifest) -> None:
        match validate_manifest(manifest):
            case Success(warnings):
                for issue in warnings:
                    logger.warning("manifest_issue", component_id=issue.component_id, message=issue.message)
            case Failure(errors):
                for issue in errors:
                    logger.error("manifest_error", component_id=issue.component_id, message=issue.message)

    # ======================================================================
    # Summaries
    # ======================================================================

    def _complete(
        self,
        mode: GenerationType,
        total: int,
        state: _PassState,
        breakdown: GenerationBreakdown,
        start: float,
    ) -> GenerationSummary:
        duration = time.perf_counter() - start
        summary = GenerationSummary(
            generation_id=state.generation_id,
            type=mode,
            total_components=total,
            files_written=state.files_written,
            files_failed=len(state.errors),
            errors=state.errors,
            conflicts=state.conflicts,
            duration_ms=duration * 1000,
            breakdown=breakdown,
        )
        self.metrics.record_pass(
            mode.value,
            "success" if summary.ok else "partial",
            duration,
            summary.files_written,
            summary.files_failed,
        )
        self._emit(FileManagerEvent.GENERATION_COMPLETE, GenerationCompleteEvent(summary=summary))
        logger.info(
            "pass_complete",
            mode=mode.value,
            files_written=summary.files_written,
            files_failed=summary.files_failed,
            conflicts=len(summary.conflicts),
            duration_ms=round(summary.duration_ms, 2),
        )
        return summary

    def _fail(
        self,
        mode: GenerationType,
        total: int,
        state: _PassState,
        error: Exception,
        start: float,
    ) -> GenerationSummary:
        duration = time.perf_counter() - start
        message = str(error) or type(error).__name__
        logger.error("pass_failed", mode=mode.value, error=message, exc_info=True)
        self._emit(FileManagerEvent.GENERATION_ERROR, GenerationErrorEvent(error=message))

        errors = [*state.errors, FileWriteResult(success=False, filepath="", error=message)]
        self.metrics.record_pass(mode.value, "error", duration, state.files_written, len(errors))
        return GenerationSummary(
            generation_id=state.generation_id,
            type=mode,
            total_components=total,
            files_written=state.files_written,
            files_failed=len(errors),
            errors=errors,
            conflicts=state.conflicts,
            duration_ms=duration * 1000,
        )

    # ======================================================================
    # User edits
    # ======================================================================

    def mark_user_edited(
        self,
        filepath: str | Path,
        component_id: str | None = None,
        content_hash: str | None = None,
    ) -> UserEditInfo:
        """Protect a file from regeneration."""
        info = self.user_edits.mark_edited(filepath, component_id, content_hash)
        self._emit(FileManagerEvent.USER_EDIT_DETECTED, UserEditEvent(
            filepath=info.filepath,
            component_id=component_id,
        ))
        return info

    def clear_user_edited(self, filepath: str | Path) -> bool:
        """Allow regeneration of a file again."""
        cleared = self.user_edits.clear_edited(filepath)
        self._emit(FileManagerEvent.USER_EDIT_CLEARED, UserEditEvent(filepath=str(Path(filepath))))
        return cleared

    def is_user_edited(self, filepath: str | Path) -> bool:
        return self.user_edits.is_edited(filepath)

    def get_user_edited_files(self) -> list[str]:
        return self.user_edits.edited_files()

    def load_user_edits(self) -> int:
        if not self.options.persist_user_edits:
            return 0
        return self.user_edits.load_from_disk()

    async def handle_external_change(self, filepath: str | Path) -> bool:
        """
        React to a file watcher notification.

        Changes that match what the pipeline itself last wrote are ignored;
        anything else marks the file as user-edited.

        Returns:
            True if the file is now tracked as user-edited
        """
        path = Path(filepath)
        try:
            content = await asyncio.to_thread(path.read_text, "utf-8")
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("external_change_unreadable", filepath=str(path), error=str(e))
            return False

        if self.file_writer.was_written_by_us(path, content):
            return False

        self.mark_user_edited(
            path,
            component_id=self._component_id_for_path(str(path)),
            content_hash=hash_string(content),
        )
        return True

    def _component_id_for_path(self, filepath: str) -> str | None:
        for component_id in self.change_detector.get_cached_ids():
            entry = self.change_detector.get_component_hash(component_id)
            if entry and str(self.get_component_file_path(entry.display_name)) == filepath:
                return component_id
        return None

    # ======================================================================
    # Utilities
    # ======================================================================

    def load_caches(self) -> None:
        """Load persisted user edits and hash cache (startup)."""
        self.load_user_edits()
        if self.options.persist_hash_cache:
            self.change_detector.load(self.paths.hash_cache_file)
            self.metrics.set_cached_components(len(self.change_detector))

    def clear_cache(self) -> None:
        """Force the next pass to regenerate everything."""
        self.change_detector.clear_cache()
        self._main_generated = False
        logger.info("cache_cleared")

    def get_component_file_path(self, display_name: str) -> Path:
        return self.paths.components_dir / f"{display_name}{self.options.component_extension}"

    def on(self, event: FileManagerEvent | str, listener: Listener):
        """Subscribe to a lifecycle event. Returns an unsubscribe callable."""
        return self.events.on(event, listener)

    def _emit(self, event: FileManagerEvent, payload: object) -> None:
        self.events.emit(event, payload)

    def _conflict(self, filepath: str, component_id: str | None, state: _PassState) -> None:
        conflict = UserEditConflict(
            filepath=filepath,
            component_id=component_id,
            message=(
                f'File "{filepath}" has been manually edited. '
                "Regenerating will overwrite your changes."
            ),
            detected_at=datetime.now(timezone.utc).isoformat(),
        )
        state.conflicts.append(filepath)
        self.metrics.record_conflict()
        self._emit(FileManagerEvent.USER_EDIT_CONFLICT, UserEditConflictEvent(conflict=conflict))
        if self.options.debug:
            logger.debug("user_edit_conflict", filepath=filepath, component_id=component_id)


def create_file_manager(project_path: str | Path, options: FileManagerOptions | None = None) -> FileManager:
    """Factory function to create FileManager instance."""
    return FileManager(project_path, options)


__all__ = ["FileManager", "create_file_manager"]
