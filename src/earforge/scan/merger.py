"""Merge a patch snapshot into one world-space GlobalMesh."""

import logging
from typing import Iterable

import numpy as np

from earforge.core.math_utils import is_mat4, transform_points
from earforge.core.mesh import GlobalMesh
from earforge.scan.patch_store import PatchRecord

logger = logging.getLogger(__name__)


class MalformedPatchError(ValueError):
    """A patch buffer violates the layout the reconstruction source promises."""

    def __init__(self, patch_id, reason: str):
        self.patch_id = patch_id
        self.reason = reason
        super().__init__(f"Malformed patch {patch_id!r}: {reason}")


def _checked_vertices(record: PatchRecord) -> np.ndarray:
    verts = record.vertices
    if verts.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    if verts.ndim == 1 and verts.size % 3 == 0:
        verts = verts.reshape(-1, 3)
    elif verts.ndim != 2 or verts.shape[1] != 3:
        raise MalformedPatchError(
            record.patch_id, f"vertex buffer has shape {verts.shape}, expected (N, 3)",
        )
    finite = np.isfinite(verts).all(axis=1)
    if not finite.all():
        bad = np.flatnonzero(~finite)
        raise MalformedPatchError(
            record.patch_id,
            f"{len(bad)} non-finite vertices (first at index {int(bad[0])})",
        )
    return verts


def _checked_faces(record: PatchRecord, vertex_count: int) -> np.ndarray:
    faces = record.faces
    if faces.size == 0:
        return np.empty((0, 3), dtype=np.int64)
    if faces.ndim == 1:
        if faces.size % 3 != 0:
            raise MalformedPatchError(
                record.patch_id, f"flat face buffer length {faces.size} is not a multiple of 3",
            )
        faces = faces.reshape(-1, 3)
    elif faces.ndim != 2 or faces.shape[1] != 3:
        raise MalformedPatchError(
            record.patch_id, f"face buffer has shape {faces.shape}, expected (F, 3)",
        )
    if not np.issubdtype(faces.dtype, np.integer):
        # Whole-valued floats are accepted; anything else would be truncated
        whole = faces.dtype.kind == "f" and bool(
            np.all(np.isfinite(faces) & (faces == np.round(faces)))
        )
        if not whole:
            raise MalformedPatchError(
                record.patch_id,
                f"face buffer holds non-integer indices (dtype {faces.dtype})",
            )
    faces = faces.astype(np.int64)
    lo, hi = int(faces.min()), int(faces.max())
    if lo < 0 or hi >= vertex_count:
        raise MalformedPatchError(
            record.patch_id,
            f"face index range [{lo}, {hi}] outside vertex count {vertex_count}",
        )
    return faces


def merge(snapshot: Iterable[PatchRecord]) -> GlobalMesh:
    """Concatenate patches into one vertex array and one offset face array.

    Each patch's local vertices are moved to world space by its transform
    (homogeneous, unit weight).  Face indices are shifted by the number of
    vertices appended before the patch, so every merged index is valid
    against the merged vertex array.  Pure: the same snapshot always yields
    the same mesh.

    Raises
    ------
    MalformedPatchError
        If a patch has a non-4x4 transform, a vertex buffer that is not
        (N, 3) or holds NaN or inf, a face buffer that does not split into
        triples or holds non-integer indices, or a face index outside its
        own vertex range.
    """
    vert_chunks: list[np.ndarray] = []
    face_chunks: list[np.ndarray] = []
    offset = 0
    patch_count = 0

    for record in snapshot:
        if not is_mat4(record.transform):
            raise MalformedPatchError(
                record.patch_id,
                f"transform has shape {np.shape(record.transform)}, expected finite 4x4",
            )
        local = _checked_vertices(record)
        faces = _checked_faces(record, len(local))

        vert_chunks.append(transform_points(record.transform, local))
        face_chunks.append(faces + offset)
        offset += len(local)
        patch_count += 1

    if patch_count == 0:
        logger.debug("Merged empty snapshot")
        return GlobalMesh()

    mesh = GlobalMesh(
        vertices=np.concatenate(vert_chunks, axis=0),
        faces=np.concatenate(face_chunks, axis=0).astype(np.int64),
    )
    logger.debug(
        "Merged %d patches: %d vertices, %d faces",
        patch_count, mesh.vertex_count, mesh.face_count,
    )
    return mesh
