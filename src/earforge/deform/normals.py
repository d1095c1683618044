"""Smooth per-vertex normals from triangle topology."""

import logging

import numpy as np
from numpy.typing import NDArray

from earforge.constants import UP_VECTOR
from earforge.core.math_utils import batch_normalize

logger = logging.getLogger(__name__)


def compute_normals(vertices: NDArray, faces: NDArray) -> NDArray[np.float64]:
    """Compute per-vertex normals from the current vertex positions.

    Each face adds its unnormalised normal ``(v1 - v0) x (v2 - v0)`` to all
    three of its vertices, so larger faces weigh more.  Accumulators are then
    normalised.  Vertices no valid face touches (or whose contributions
    cancel) get the up vector.  Faces with an index outside the vertex array
    are skipped.

    Must run after displacement: moved vertices change face directions.
    """
    pos = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    up = np.asarray(UP_VECTOR, dtype=np.float64)
    if len(pos) == 0:
        return np.empty((0, 3), dtype=np.float64)

    idx = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if len(idx):
        in_range = np.all((idx >= 0) & (idx < len(pos)), axis=1)
        if not in_range.all():
            logger.warning(
                "Skipping %d faces with out-of-range indices", int((~in_range).sum()),
            )
            idx = idx[in_range]

    norms = np.zeros_like(pos)
    if len(idx):
        v0, v1, v2 = pos[idx[:, 0]], pos[idx[:, 1]], pos[idx[:, 2]]
        face_normals = np.cross(v1 - v0, v2 - v0)
        for corner in range(3):
            np.add.at(norms, idx[:, corner], face_normals)

    return batch_normalize(norms, up)
