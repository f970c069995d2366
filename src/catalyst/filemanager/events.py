"""Typed lifecycle events with fire-and-forget observers."""

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from catalyst.core import get_logger
from .types import ChangeDetectionResult, GenerationSummary, UserEditConflict

logger = get_logger(__name__)


class FileManagerEvent(str, Enum):
    """Event names emitted by the FileManager."""

    GENERATION_START = "generation:start"
    GENERATION_PROGRESS = "generation:progress"
    GENERATION_COMPLETE = "generation:complete"
    GENERATION_ERROR = "generation:error"
    USER_EDIT_DETECTED = "user-edit:detected"
    USER_EDIT_CLEARED = "user-edit:cleared"
    USER_EDIT_CONFLICT = "user-edit:conflict"
    COMPONENT_REMOVED = "component:removed"


@dataclass(frozen=True)
class GenerationStartEvent:
    type: str
    total_components: int
    changes: ChangeDetectionResult | None = None


@dataclass(frozen=True)
class GenerationProgressEvent:
    current: int
    total: int
    component_id: str
    component_name: str


@dataclass(frozen=True)
class GenerationCompleteEvent:
    summary: GenerationSummary


@dataclass(frozen=True)
class GenerationErrorEvent:
    error: str


@dataclass(frozen=True)
class UserEditEvent:
    filepath: str
    component_id: str | None = None


@dataclass(frozen=True)
class UserEditConflictEvent:
    conflict: UserEditConflict


@dataclass(frozen=True)
class ComponentRemovedEvent:
    component_id: str
    filepath: str | None = None


Listener = Callable[[Any], None]


@dataclass
class EventBus:
    """
    Multiple observers per event; emission never fails the emitter.

    Examples:
        >>> bus = EventBus()
        >>> unsubscribe = bus.on(FileManagerEvent.GENERATION_COMPLETE, print)
        >>> unsubscribe()
    """

    enabled: bool = True
    _listeners: dict[FileManagerEvent, list[Listener]] = field(
        default_factory=lambda: defaultdict(list), init=False, repr=False
    )

    def on(self, event: FileManagerEvent | str, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that removes it."""
        name = FileManagerEvent(event)
        self._listeners[name].append(listener)
        return lambda: self.off(name, listener)

    def off(self, event: FileManagerEvent | str, listener: Listener) -> None:
        listeners = self._listeners.get(FileManagerEvent(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: FileManagerEvent, payload: Any) -> None:
        """Deliver payload to every listener of ``event``."""
        if not self.enabled:
            return
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(payload)
            except Exception as e:
                logger.warning("listener_failed", event=event.value, error=str(e))

    def listener_count(self, event: FileManagerEvent | str) -> int:
        return len(self._listeners.get(FileManagerEvent(event), []))


__all__ = [
    "FileManagerEvent",
    "EventBus",
    "Listener",
    "GenerationStartEvent",
    "GenerationProgressEvent",
    "GenerationCompleteEvent",
    "GenerationErrorEvent",
    "UserEditEvent",
    "UserEditConflictEvent",
    "ComponentRemovedEvent",
]
