"""User-Edit Tracker - files generation must not overwrite."""

from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from catalyst.core import get_logger, read_json_file, write_json_file, JSONParseError
from .types import UserEditInfo, UserEditsCache

logger = get_logger(__name__)


def _key(filepath: str | Path) -> str:
    return str(Path(filepath))


class UserEditTracker:
    """
    Authoritative set of hand-edited file paths.

    Persistence is best-effort: a failed save is logged, and a missing or
    unreadable sidecar loads as "no prior edits".
    """

    def __init__(self, sidecar_path: Path | None = None, persist: bool = False) -> None:
        """
        Initialize tracker.

        Args:
            sidecar_path: JSON file holding the edit set
            persist: Save the set after every change
        """
        self.sidecar_path = Path(sidecar_path) if sidecar_path else None
        self.persist = persist and self.sidecar_path is not None
        self._edits: dict[str, UserEditInfo] = {}

    def mark_edited(
        self,
        filepath: str | Path,
        component_id: str | None = None,
        content_hash: str | None = None,
    ) -> UserEditInfo:
        """Record a hand-edited file (overwrites any previous record)."""
        info = UserEditInfo(
            filepath=_key(filepath),
            component_id=component_id,
            detected_at=datetime.now(timezone.utc).isoformat(),
            content_hash=content_hash,
        )
        self._edits[info.filepath] = info
        logger.info("user_edit_marked", filepath=info.filepath, component_id=component_id)
        self._save_if_enabled()
        return info

    def is_edited(self, filepath: str | Path) -> bool:
        return _key(filepath) in self._edits

    def clear_edited(self, filepath: str | Path) -> bool:
        """Forget a hand edit. Returns False if the path was not tracked."""
        removed = self._edits.pop(_key(filepath), None) is not None
        if removed:
            logger.info("user_edit_cleared", filepath=_key(filepath))
            self._save_if_enabled()
        return removed

    def get(self, filepath: str | Path) -> UserEditInfo | None:
        return self._edits.get(_key(filepath))

    def edited_files(self) -> list[str]:
        return list(self._edits)

    def __contains__(self, filepath: object) -> bool:
        return isinstance(filepath, (str, Path)) and self.is_edited(filepath)

    def __len__(self) -> int:
        return len(self._edits)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load_from_disk(self) -> int:
        """
        Replace the in-memory set with the sidecar contents.

        Returns:
            Number of edits loaded
        """
        if self.sidecar_path is None:
            return 0
        try:
            data = read_json_file(self.sidecar_path)
            cache = UserEditsCache.model_validate(data)
        except FileNotFoundError:
            return 0
        except (OSError, JSONParseError, ValidationError) as e:
            logger.warning("user_edits_load_failed", path=str(self.sidecar_path), error=str(e))
            return 0

        self._edits = {_key(path): info for path, info in cache.edits.items()}
        logger.debug("user_edits_loaded", count=len(self._edits))
        return len(self._edits)

    def persist_to_disk(self) -> None:
        """Write the sidecar. Raises OSError on failure."""
        if self.sidecar_path is None:
            return
        cache = UserEditsCache(
            edits=dict(self._edits),
            updated_at=datetime.now(timezone.utc).isoformat(),
        )
        write_json_file(self.sidecar_path, cache.model_dump(mode="json"))

    def _save_if_enabled(self) -> None:
        if not self.persist:
            return
        try:
            self.persist_to_disk()
        except OSError as e:
            logger.error("user_edits_persist_failed", path=str(self.sidecar_path), error=str(e))


__all__ = ["UserEditTracker"]
