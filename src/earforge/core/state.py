"""Scan session state: the scanning / distorted / saved mode machine."""

from dataclasses import dataclass
from enum import Enum, auto

from earforge.constants import SCAN_READY_VERTEX_COUNT


class ScanMode(Enum):
    SCANNING = auto()   # patches streaming in
    DISTORTED = auto()  # captured mesh shown with ears applied
    SAVED = auto()      # result handed off for export


# Allowed transitions; reset to SCANNING is always allowed.
_TRANSITIONS: dict[ScanMode, set[ScanMode]] = {
    ScanMode.SCANNING: {ScanMode.DISTORTED},
    ScanMode.DISTORTED: {ScanMode.SAVED},
    ScanMode.SAVED: set(),
}


def scan_progress(total_vertices: int, ready_count: int = SCAN_READY_VERTEX_COUNT) -> int:
    """Scan completeness in percent, saturating at 100."""
    if ready_count <= 0:
        return 100
    return min(100, int(total_vertices / ready_count * 100))


@dataclass
class ScanState:
    """Current scan session state."""
    mode: ScanMode = ScanMode.SCANNING
    total_vertices: int = 0
    ready_count: int = SCAN_READY_VERTEX_COUNT

    @property
    def progress(self) -> int:
        return scan_progress(self.total_vertices, self.ready_count)

    @property
    def is_ready(self) -> bool:
        return self.total_vertices > self.ready_count

    def can_transition(self, mode: ScanMode) -> bool:
        if mode is ScanMode.SCANNING:
            return True
        return mode in _TRANSITIONS[self.mode]

    def transition(self, mode: ScanMode) -> ScanMode:
        """Move to ``mode``; return the previous mode."""
        if not self.can_transition(mode):
            raise ValueError(f"Invalid mode transition: {self.mode.name} -> {mode.name}")
        previous = self.mode
        self.mode = mode
        return previous
