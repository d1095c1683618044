"""Radial ear-bump displacement around each attachment point."""

import logging
from typing import Iterable, Optional

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from earforge.constants import UP_VECTOR
from earforge.core.config_loader import DistortionParams
from earforge.core.math_utils import Vec3, batch_normalize
from earforge.core.mesh import AttachmentPointPair

logger = logging.getLogger(__name__)

_DEFAULT_PARAMS = DistortionParams()


def falloff(distance, radius: float, exponent: float) -> NDArray[np.float64]:
    """Ease-out weight ``(1 - d / r) ** exponent``; 1 at the center, 0 at and past ``r``."""
    d = np.asarray(distance, dtype=np.float64)
    t = np.clip(1.0 - d / radius, 0.0, 1.0)
    return t ** exponent


def influence_mask(
    vertices: NDArray,
    points: Iterable[Vec3],
    radius: float,
) -> NDArray[np.bool_]:
    """True for vertices strictly inside ``radius`` of any of ``points``."""
    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    mask = np.zeros(len(verts), dtype=bool)
    if len(verts) == 0:
        return mask
    tree = cKDTree(verts)
    for point in points:
        point = np.asarray(point, dtype=np.float64)
        candidates = np.asarray(tree.query_ball_point(point, radius), dtype=np.intp)
        if len(candidates):
            dist = np.linalg.norm(verts[candidates] - point, axis=1)
            mask[candidates[dist < radius]] = True
    return mask


def displacement_offsets(
    vertices: NDArray,
    point: Vec3,
    params: DistortionParams = _DEFAULT_PARAMS,
) -> NDArray[np.float64]:
    """Per-vertex offset pushing vertices radially away from one point.

    A vertex sitting exactly on the point has no radial direction; it is
    pushed along the up vector instead.
    """
    verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    point = np.asarray(point, dtype=np.float64)
    offsets = np.zeros_like(verts)
    idx = np.flatnonzero(influence_mask(verts, [point], params.influence_radius))
    if len(idx) == 0:
        return offsets

    delta = verts[idx] - point
    dist = np.linalg.norm(delta, axis=1)
    direction = batch_normalize(delta, np.asarray(UP_VECTOR, dtype=np.float64))
    weight = falloff(dist, params.influence_radius, params.falloff_exponent)
    offsets[idx] = direction * (params.displacement_height * weight)[:, None]
    return offsets


def distort(
    vertices: NDArray,
    attachment_points: Optional[AttachmentPointPair],
    params: DistortionParams = _DEFAULT_PARAMS,
) -> NDArray[np.float64]:
    """Return a displaced copy of ``vertices``; the input is left untouched.

    Both attachment points are measured against the original positions and
    their offsets are summed, so a vertex inside both radii moves twice as
    far along the combined direction (no blending, no cap).  Without
    attachment points the copy is returned unchanged.
    """
    verts = np.array(vertices, dtype=np.float64).reshape(-1, 3)
    if attachment_points is None:
        return verts

    total = np.zeros_like(verts)
    for point in attachment_points:
        total += displacement_offsets(verts, point, params)
    moved = int(np.count_nonzero(np.any(total != 0.0, axis=1)))
    logger.debug("Displaced %d of %d vertices", moved, len(verts))
    return verts + total
