"""EventBus for decoupled publish/subscribe communication."""

from enum import Enum, auto
from typing import Any, Callable
from collections import defaultdict


class EventType(Enum):
    # Scanning
    PATCH_UPDATED = auto()      # data: patch_ids (list), total_vertices (int)
    SCAN_PROGRESS = auto()      # data: progress (int, 0-100), ready (bool)
    SCAN_RESET = auto()

    # Mode machine
    MODE_CHANGED = auto()       # data: previous (ScanMode), mode (ScanMode)

    # Capture
    CAPTURE_COMPLETE = auto()   # data: result (CaptureResult)
    SAVE_REQUESTED = auto()     # data: result (CaptureResult)


class EventBus:
    """Simple publish/subscribe event system."""

    def __init__(self):
        self._handlers: dict[EventType, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        for handler in list(self._handlers[event_type]):
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()
