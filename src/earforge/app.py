"""EarForge headless entry point.

Replays a recorded patch stream through the scan controller, captures, and
reports what the capture produced.  Drawing and image export belong to the
host application.
"""

import argparse
import logging
import sys

from earforge.coordination.scan_controller import ScanController
from earforge.core.config_loader import load_distortion_params
from earforge.loaders.patch_recording import load_patch_recording
from earforge.scan.merger import MalformedPatchError

logger = logging.getLogger(__name__)


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="earforge-replay",
        description="Replay a recorded patch stream and apply the ear distortion.",
    )
    parser.add_argument("recording", help="Patch recording (JSON)")
    parser.add_argument("--config", default=None, help="Distortion config (JSON)")
    parser.add_argument(
        "--require-ready", action="store_true",
        help="Refuse to capture until the scan is ready",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run one replay; returns a process exit code."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )

    params = load_distortion_params(args.config)
    controller = ScanController(params=params, require_ready=args.require_ready)
    controller.on_patches_added(load_patch_recording(args.recording))
    logger.info(
        "Scan progress %d%% (%d vertices, %d patches)",
        controller.progress, controller.state.total_vertices, len(controller.store),
    )

    try:
        result = controller.apply()
    except MalformedPatchError:
        return 1
    if result is None:
        logger.error("Scan not ready, nothing captured")
        return 1

    presented = result.presented
    print(
        f"vertices={result.mesh.vertex_count} faces={result.mesh.face_count} "
        f"ears={'yes' if result.distorted else 'no'} "
        f"tinted={int(presented.mesh.highlight.sum())} "
        f"camera_distance={presented.camera_distance:.3f}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
