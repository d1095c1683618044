"""Geometric attachment point detection for the ear bumps.

No semantic head model is used.  The highest vertices are taken as the
crown of the scan, and two well separated points lying at a similar,
moderate distance from the crown's centroid are taken as the places where
the ears go.
"""

import logging
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from earforge.core.config_loader import DistortionParams
from earforge.core.mesh import AttachmentPointPair, GlobalMesh

logger = logging.getLogger(__name__)

_DEFAULT_PARAMS = DistortionParams()


def _as_vertices(mesh_or_vertices: Union[GlobalMesh, NDArray]) -> NDArray[np.float64]:
    if isinstance(mesh_or_vertices, GlobalMesh):
        return mesh_or_vertices.vertices
    verts = np.asarray(mesh_or_vertices, dtype=np.float64)
    if verts.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    return verts.reshape(-1, 3)


def top_subset_size(vertex_count: int, params: DistortionParams = _DEFAULT_PARAMS) -> int:
    """Size of the crown subset: ``max(top_subset_min, N // divisor)``, capped at N."""
    size = max(params.top_subset_min, vertex_count // params.top_subset_divisor)
    return min(size, vertex_count)


def select_top_subset(
    vertices: NDArray,
    params: DistortionParams = _DEFAULT_PARAMS,
) -> NDArray[np.float64]:
    """Return the highest vertices along the up axis, highest first.

    Ties keep their original order.
    """
    verts = _as_vertices(vertices)
    if len(verts) == 0:
        return verts
    order = np.argsort(-verts[:, params.up_axis], kind="stable")
    return verts[order[:top_subset_size(len(verts), params)]]


def _search_indices(count: int, params: DistortionParams) -> NDArray[np.intp]:
    return np.arange(0, min(count, params.search_sample_limit), params.search_stride)


def detect(
    mesh_or_vertices: Union[GlobalMesh, NDArray],
    params: DistortionParams = _DEFAULT_PARAMS,
) -> Optional[AttachmentPointPair]:
    """Propose a symmetric pair of attachment points, or None.

    The pair search only looks at a strided sample of the first
    ``search_sample_limit`` crown vertices, so its cost does not grow with
    the scan size.  Returns None when there are too few vertices or when no
    sampled pair qualifies (e.g. a flat or evenly curved crown); neither is
    an error.
    """
    verts = _as_vertices(mesh_or_vertices)
    if len(verts) <= params.min_vertex_count:
        logger.info(
            "Attachment point search skipped: %d vertices (need more than %d)",
            len(verts), params.min_vertex_count,
        )
        return None

    top = select_top_subset(verts, params)
    center = top.mean(axis=0)
    avg_dist = float(np.linalg.norm(top - center, axis=1).mean())
    target_dist = avg_dist * params.target_distance_ratio
    min_separation = avg_dist * params.min_separation_ratio

    sample = top[_search_indices(len(top), params)]
    dists = np.linalg.norm(sample - center, axis=1)
    in_band = np.abs(dists - target_dist) < target_dist * params.centroid_tolerance

    # Pairwise separation over the sample; only i < j pairs count.
    separation = np.linalg.norm(sample[:, None, :] - sample[None, :, :], axis=2)
    valid = np.triu(in_band[:, None] & in_band[None, :], k=1)
    valid &= separation > min_separation
    if not valid.any():
        logger.info(
            "No attachment point pair found (avg_dist=%.4f, %d/%d sampled points in band)",
            avg_dist, int(in_band.sum()), len(sample),
        )
        return None

    # argmax returns the first maximum in (i, j) order
    scored = np.where(valid, separation, -np.inf)
    i, j = np.unravel_index(int(np.argmax(scored)), scored.shape)
    pair = AttachmentPointPair(first=sample[i].copy(), second=sample[j].copy())
    logger.debug(
        "Attachment points %s, %s (separation %.4f, avg_dist %.4f)",
        np.round(pair.first, 4), np.round(pair.second, 4), pair.separation, avg_dist,
    )
    return pair
