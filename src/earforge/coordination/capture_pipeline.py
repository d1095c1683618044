"""One-shot capture: merge -> detect -> distort -> normals -> present.

Call order:
  1. Merge the patch snapshot into one world-space mesh
  2. Search the crown for an attachment point pair
  3. Displace vertices around both points (skipped if none were found)
  4. Recompute normals on the displaced positions
  5. Pack renderable arrays, tint the ear regions, frame the object

The pipeline is a pure function of the snapshot and the params.  It holds
no state, so later patch updates cannot affect a capture in progress.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
from numpy.typing import NDArray

from earforge.core.config_loader import DistortionParams
from earforge.core.mesh import AttachmentPointPair, GlobalMesh
from earforge.deform.displacement import distort
from earforge.deform.landmarks import detect
from earforge.deform.normals import compute_normals
from earforge.rendering.presenter import PresentedMesh, present
from earforge.scan.merger import merge
from earforge.scan.patch_store import PatchRecord

logger = logging.getLogger(__name__)


@dataclass
class CaptureResult:
    """Everything a capture produced, kept for display and later export."""
    mesh: GlobalMesh
    attachment_points: Optional[AttachmentPointPair]
    vertices: NDArray[np.float64]
    normals: NDArray[np.float64]
    presented: PresentedMesh

    @property
    def distorted(self) -> bool:
        return self.attachment_points is not None


def capture(
    snapshot: Iterable[PatchRecord],
    params: Optional[DistortionParams] = None,
) -> CaptureResult:
    """Run the full capture pipeline on a patch snapshot.

    Finding no attachment points is not a failure: the merged mesh is
    returned undistorted.  Malformed patch buffers raise
    ``MalformedPatchError`` from the merge step.
    """
    params = params or DistortionParams()

    mesh = merge(snapshot)
    points = detect(mesh, params)
    vertices = distort(mesh.vertices, points, params)
    normals = compute_normals(vertices, mesh.faces)
    presented = present(
        vertices, mesh.faces, normals, points, params,
        original_vertices=mesh.vertices,
    )

    logger.info(
        "Capture complete: %d vertices, %d faces, ears %s",
        mesh.vertex_count, mesh.face_count,
        "applied" if points is not None else "not found",
    )
    return CaptureResult(
        mesh=mesh,
        attachment_points=points,
        vertices=vertices,
        normals=normals,
        presented=presented,
    )
