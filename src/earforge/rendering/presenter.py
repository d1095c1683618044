"""Build renderable geometry and framing for the captured, distorted mesh.

The presenter does not draw anything.  It packs the final vertex data into
GL-ready arrays, tints the ear regions, and works out where to put the
pivot and the camera so an external renderer can show the whole object
regardless of how large the scan was.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from earforge.constants import (
    BASE_TINT,
    CAMERA_DISTANCE_SCALE,
    EAR_TINT,
    MIN_CAMERA_DISTANCE,
)
from earforge.core.config_loader import DistortionParams
from earforge.core.math_utils import Mat4, Vec3, mat4_identity, mat4_translation
from earforge.core.mesh import AttachmentPointPair, RenderableMesh
from earforge.deform.displacement import influence_mask
from earforge.rendering.camera import Camera

logger = logging.getLogger(__name__)

_DEFAULT_PARAMS = DistortionParams()


@dataclass
class PresentedMesh:
    """Renderable mesh plus the pivot and viewpoint that frame it."""
    mesh: RenderableMesh
    pivot: Vec3
    camera_distance: float
    camera: Camera
    bounds_min: Vec3
    bounds_max: Vec3

    def model_matrix(self, rotation: Optional[Mat4] = None) -> Mat4:
        """Model matrix that moves the pivot to the origin, then rotates."""
        center = mat4_translation(-self.pivot[0], -self.pivot[1], -self.pivot[2])
        rot = rotation if rotation is not None else mat4_identity()
        return rot @ center


def bounding_box(vertices: NDArray) -> tuple[Vec3, Vec3]:
    """Axis-aligned bounds; an empty set collapses to the origin."""
    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    if len(verts) == 0:
        return np.zeros(3), np.zeros(3)
    return verts.min(axis=0), verts.max(axis=0)


def frame_distance(bounds_min: Vec3, bounds_max: Vec3) -> float:
    """Camera distance proportional to the bounding box diagonal."""
    diagonal = float(np.linalg.norm(np.asarray(bounds_max) - np.asarray(bounds_min)))
    return max(diagonal * CAMERA_DISTANCE_SCALE, MIN_CAMERA_DISTANCE)


def vertex_colors(highlight: NDArray[np.bool_]) -> NDArray[np.float32]:
    colors = np.empty((len(highlight), 3), dtype=np.float32)
    colors[:] = BASE_TINT
    colors[highlight] = EAR_TINT
    return colors


def present(
    vertices: NDArray,
    faces: NDArray,
    normals: NDArray,
    attachment_points: Optional[AttachmentPointPair],
    params: DistortionParams = _DEFAULT_PARAMS,
    original_vertices: Optional[NDArray] = None,
) -> PresentedMesh:
    """Pack the final mesh and compute its pivot and camera distance.

    The ear tint marks vertices that were within ``influence_radius`` of an
    attachment point before displacement.  Pass the pre-displacement
    positions as ``original_vertices``; without them the final positions
    are tested instead.
    """
    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    norms = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
    if len(norms) != len(verts):
        raise ValueError(f"Got {len(norms)} normals for {len(verts)} vertices")

    if attachment_points is not None:
        source = verts if original_vertices is None else np.asarray(original_vertices).reshape(-1, 3)
        highlight = influence_mask(source, attachment_points, params.influence_radius)
    else:
        highlight = np.zeros(len(verts), dtype=bool)

    mesh = RenderableMesh(
        positions=verts.astype(np.float32),
        normals=norms.astype(np.float32),
        colors=vertex_colors(highlight),
        indices=np.asarray(faces, dtype=np.uint32).reshape(-1),
        highlight=highlight,
    )

    bounds_min, bounds_max = bounding_box(verts)
    pivot = (bounds_min + bounds_max) / 2.0
    distance = frame_distance(bounds_min, bounds_max)
    logger.debug(
        "Presented %d vertices (%d tinted), pivot %s, camera distance %.3f",
        mesh.vertex_count, int(highlight.sum()), np.round(pivot, 4), distance,
    )
    return PresentedMesh(
        mesh=mesh,
        pivot=pivot,
        camera_distance=distance,
        camera=Camera.framing(distance),
        bounds_min=bounds_min,
        bounds_max=bounds_max,
    )
