"""Ear deformation: attachment point search, displacement, normals."""

from earforge.deform.displacement import distort, falloff, influence_mask
from earforge.deform.landmarks import detect, select_top_subset
from earforge.deform.normals import compute_normals

__all__ = [
    "compute_normals",
    "detect",
    "distort",
    "falloff",
    "influence_mask",
    "select_top_subset",
]
