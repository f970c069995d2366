"""Hash-based component change detection for incremental generation.

Each component definition is hashed (excluding ``metadata.updatedAt``, which
changes on every save) and compared with the snapshot taken after the last
successful pass. Root components (no parent) are tracked separately because
the entry point renders exactly that set.
"""

import time
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from catalyst.core import get_logger, hash_canonical, read_json_file, write_json_file, JSONParseError
from catalyst.manifest import Component
from .types import CACHE_SCHEMA_VERSION, ChangeDetectionResult, ComponentHashCache, ComponentHashEntry

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def hashable_view(component: Component) -> dict[str, Any]:
    """Semantically meaningful fields of a component, ready for hashing."""
    data = component.to_json_dict()
    metadata = dict(data.get("metadata", {}))
    metadata.pop("updatedAt", None)
    return {
        "id": data["id"],
        "displayName": data["displayName"],
        "type": data["type"],
        "category": data.get("category"),
        "properties": data.get("properties", {}),
        "styling": data.get("styling", {}),
        "children": data.get("children", []),
        "events": data.get("events"),
        "metadata": metadata,
    }


def compute_hash(component: Component) -> str:
    """SHA256 of the component's canonical (key-sorted) JSON form."""
    return hash_canonical(hashable_view(component))


def find_root_component_ids(components: Mapping[str, Component]) -> set[str]:
    """Ids that no component lists as a child."""
    child_ids: set[str] = set()
    for component in components.values():
        child_ids.update(component.children)
    return {component_id for component_id in components if component_id not in child_ids}


class ChangeDetector:
    """
    Compares manifest state with the last generated snapshot.

    Usage:
        >>> detector = ChangeDetector()
        >>> changes = detector.detect_changes(manifest.components)  # all added
        >>> detector.update_cache(manifest.components)  # after writing
        >>> detector.detect_changes(manifest.components).has_changes
        False
    """

    def __init__(self, debug: bool = False) -> None:
        self.debug = debug
        self._hashes: dict[str, ComponentHashEntry] = {}
        self._root_ids: set[str] = set()
        # Last App.jsx write failed; saved with the sidecar
        self.entry_point_stale = False

    compute_hash = staticmethod(compute_hash)
    find_root_component_ids = staticmethod(find_root_component_ids)

    def is_root_component(self, component_id: str, components: Mapping[str, Component]) -> bool:
        """True if no component has ``component_id`` among its children."""
        return all(component_id not in c.children for c in components.values())

    def detect_changes(self, components: Mapping[str, Component]) -> ChangeDetectionResult:
        """
        Diff current components against the cached snapshot.

        Args:
            components: Current manifest components keyed by id

        Returns:
            Added, modified and removed ids plus the entry point flag
        """
        start = time.perf_counter()
        result = ChangeDetectionResult()
        current_ids = set(components)
        cached_ids = set(self._hashes)
        current_roots = find_root_component_ids(components)

        for component_id in components:
            if component_id not in cached_ids:
                result.added.append(component_id)
                if component_id in current_roots:
                    result.app_needs_update = True

        for component_id in self._hashes:
            if component_id not in current_ids:
                result.removed.append(component_id)
                if component_id in self._root_ids:
                    result.app_needs_update = True

        for component_id, component in components.items():
            entry = self._hashes.get(component_id)
            if entry is None:
                continue
            if compute_hash(component) != entry.hash:
                result.modified.append(component_id)
                if entry.is_root or component_id in current_roots:
                    result.app_needs_update = True

        # Re-parenting changes the root set without touching any hash of the
        # moved component.
        if not result.app_needs_update and current_roots != self._root_ids:
            result.app_needs_update = True

        if self.debug:
            logger.debug(
                "detect_changes",
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                added=len(result.added),
                modified=len(result.modified),
                removed=len(result.removed),
                app_needs_update=result.app_needs_update,
            )
        return result

    def update_cache(
        self,
        components: Mapping[str, Component],
        stale_ids: Iterable[str] = (),
    ) -> None:
        """
        Rebuild the snapshot from the full component set.

        Call only after a pass has written its results.

        Args:
            components: Full current component set
            stale_ids: Ids whose output was not written; they keep their
                previous entry (or stay absent) so the next pass retries them
        """
        stale = set(stale_ids)
        previous = self._hashes
        root_ids = find_root_component_ids(components)
        computed_at = _now()

        hashes: dict[str, ComponentHashEntry] = {}
        for component_id, component in components.items():
            if component_id in stale:
                if component_id in previous:
                    hashes[component_id] = previous[component_id]
                continue
            hashes[component_id] = ComponentHashEntry(
                id=component_id,
                display_name=component.display_name,
                hash=compute_hash(component),
                is_root=component_id in root_ids,
                computed_at=computed_at,
            )

        self._hashes = hashes
        self._root_ids = root_ids

        if self.debug:
            logger.debug("cache_updated", components=len(hashes), roots=len(root_ids), stale=len(stale))

    def clear_cache(self) -> None:
        """Forget everything; the next diff reports every component as added."""
        self._hashes = {}
        self._root_ids = set()
        self.entry_point_stale = False
        if self.debug:
            logger.debug("cache_cleared")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def get_cache(self) -> ComponentHashCache:
        """Snapshot suitable for the sidecar file."""
        return ComponentHashCache(
            hashes=dict(self._hashes),
            app_stale=self.entry_point_stale,
            updated_at=_now(),
        )

    def load_cache(self, cache: ComponentHashCache) -> None:
        """Replace the snapshot with a previously saved one."""
        self._hashes = dict(cache.hashes)
        self._root_ids = {component_id for component_id, entry in cache.hashes.items() if entry.is_root}
        self.entry_point_stale = cache.app_stale
        if self.debug:
            logger.debug("cache_loaded", components=len(self._hashes), roots=len(self._root_ids))

    def save(self, path: Path) -> None:
        """Write the hash cache sidecar."""
        write_json_file(path, self.get_cache().model_dump(mode="json"))

    def load(self, path: Path) -> bool:
        """
        Load the hash cache sidecar.

        A corrupt or incompatible file clears the cache, which forces a full
        regeneration on the next pass.

        Returns:
            True if a cache was loaded
        """
        try:
            data = read_json_file(path)
        except FileNotFoundError:
            return False
        except (OSError, JSONParseError) as e:
            logger.warning("hash_cache_unreadable", path=str(path), error=str(e))
            self.clear_cache()
            return False

        try:
            cache = ComponentHashCache.model_validate(data)
        except ValidationError as e:
            logger.warning("hash_cache_invalid", path=str(path), error=str(e))
            self.clear_cache()
            return False

        if cache.schema_version != CACHE_SCHEMA_VERSION:
            logger.warning("hash_cache_version_mismatch", found=cache.schema_version)
            self.clear_cache()
            return False

        self.load_cache(cache)
        return True

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_root_component_ids(self) -> list[str]:
        return sorted(self._root_ids)

    def get_cached_ids(self) -> list[str]:
        return list(self._hashes)

    def get_component_hash(self, component_id: str) -> ComponentHashEntry | None:
        return self._hashes.get(component_id)

    def __len__(self) -> int:
        return len(self._hashes)


__all__ = ["ChangeDetector", "compute_hash", "find_root_component_ids", "hashable_view"]
