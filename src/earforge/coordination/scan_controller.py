"""Scan session controller: patch intake, mode machine, capture, restart.

Owns the ``PatchStore``, the ``ScanState`` and an ``EventBus``.  The
geometric core never sees the mode; it only receives snapshots.

Modes:
  - **scanning**: patch updates are stored and progress is reported
  - **distorted**: the captured mesh with ears is on show; drag rotates it
  - **saved**: the result was handed off for export

Patch updates keep being stored in every mode (the source may still be
running), but they only matter for the next capture.
"""

import logging
from typing import Iterable, Optional

from earforge.coordination.capture_pipeline import CaptureResult, capture
from earforge.core.config_loader import DistortionParams
from earforge.core.events import EventBus, EventType
from earforge.core.math_utils import Mat4
from earforge.core.state import ScanMode, ScanState
from earforge.rendering.object_rotation import ObjectRotation
from earforge.scan.merger import MalformedPatchError
from earforge.scan.patch_store import PatchStore, PatchUpdate

logger = logging.getLogger(__name__)


class ScanController:
    """Drives a scan session from first patch to saved result."""

    def __init__(
        self,
        params: Optional[DistortionParams] = None,
        event_bus: Optional[EventBus] = None,
        require_ready: bool = False,
    ) -> None:
        self.params = params or DistortionParams()
        self.require_ready = require_ready
        self.event_bus = event_bus or EventBus()
        self.store = PatchStore()
        self.state = ScanState()
        self.rotation = ObjectRotation()
        self.result: Optional[CaptureResult] = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ScanMode:
        return self.state.mode

    @property
    def progress(self) -> int:
        return self.state.progress

    @property
    def is_ready(self) -> bool:
        return self.state.is_ready

    # ------------------------------------------------------------------
    # Patch intake
    # ------------------------------------------------------------------

    def on_patches_added(self, updates: Iterable[PatchUpdate]) -> None:
        self._ingest(updates)

    def on_patches_updated(self, updates: Iterable[PatchUpdate]) -> None:
        self._ingest(updates)

    def on_patches_removed(self, patch_ids: Iterable) -> None:
        removed = [pid for pid in patch_ids if self.store.discard(pid)]
        if removed:
            self._refresh_progress(removed)

    def _ingest(self, updates: Iterable[PatchUpdate]) -> None:
        records = self.store.upsert_many(updates)
        if records:
            self._refresh_progress([r.patch_id for r in records])

    def _refresh_progress(self, patch_ids: list) -> None:
        self.state.total_vertices = self.store.total_vertex_count
        self.event_bus.publish(
            EventType.PATCH_UPDATED,
            patch_ids=patch_ids,
            total_vertices=self.state.total_vertices,
        )
        if self.state.mode is ScanMode.SCANNING:
            self.event_bus.publish(
                EventType.SCAN_PROGRESS,
                progress=self.state.progress,
                ready=self.state.is_ready,
            )

    # ------------------------------------------------------------------
    # Mode actions
    # ------------------------------------------------------------------

    def apply(self) -> Optional[CaptureResult]:
        """Capture the current patches and apply the ears.

        Readiness is advisory unless ``require_ready`` is set: capturing
        early simply works on fewer vertices, while a gated controller
        refuses and returns None.  Malformed patch data aborts the capture,
        is logged, and re-raised; the session stays in scanning mode.
        """
        if self.state.mode is not ScanMode.SCANNING:
            logger.warning("Apply ignored in %s mode", self.state.mode.name.lower())
            return None
        if not self.state.is_ready:
            if self.require_ready:
                logger.warning(
                    "Apply ignored: scan not ready (%d%%, %d vertices)",
                    self.state.progress, self.state.total_vertices,
                )
                return None
            logger.info(
                "Capturing before scan is ready (%d%%, %d vertices)",
                self.state.progress, self.state.total_vertices,
            )

        try:
            result = capture(self.store.snapshot(), self.params)
        except MalformedPatchError as exc:
            logger.error("Capture aborted: %s", exc)
            raise

        self.result = result
        self.rotation.reset()
        self._set_mode(ScanMode.DISTORTED)
        self.event_bus.publish(EventType.CAPTURE_COMPLETE, result=result)
        return result

    def drag(self, dx: float, dy: float) -> Optional[Mat4]:
        """Rotate the presented object; only meaningful in distorted mode."""
        if self.state.mode is not ScanMode.DISTORTED:
            logger.warning("Drag ignored in %s mode", self.state.mode.name.lower())
            return None
        return self.rotation.drag(dx, dy)

    def save(self) -> bool:
        """Hand the capture off for export and enter saved mode."""
        if self.state.mode is not ScanMode.DISTORTED or self.result is None:
            logger.warning("Save ignored in %s mode", self.state.mode.name.lower())
            return False
        self.event_bus.publish(EventType.SAVE_REQUESTED, result=self.result)
        self._set_mode(ScanMode.SAVED)
        return True

    def reset(self) -> None:
        """Drop all patches and the capture, and start scanning again."""
        self.store.clear()
        self.result = None
        self.rotation.reset()
        self.state.total_vertices = 0
        self.event_bus.publish(EventType.SCAN_RESET)
        self._set_mode(ScanMode.SCANNING)

    def _set_mode(self, mode: ScanMode) -> None:
        previous = self.state.transition(mode)
        if previous is not mode:
            logger.info("Mode: %s -> %s", previous.name.lower(), mode.name.lower())
        self.event_bus.publish(EventType.MODE_CHANGED, previous=previous, mode=mode)
