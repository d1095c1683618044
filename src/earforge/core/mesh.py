"""Mesh data structures for captured geometry (no GL dependencies)."""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


def _empty_vertices() -> NDArray[np.float64]:
    return np.empty((0, 3), dtype=np.float64)


def _empty_faces() -> NDArray[np.int64]:
    return np.empty((0, 3), dtype=np.int64)


@dataclass
class GlobalMesh:
    """All tracked patches merged into one index space.

    vertices: (N, 3) float64 world-space positions, in patch concatenation order
    faces: (F, 3) int64 triangle indices into ``vertices``
    """
    vertices: NDArray[np.float64] = field(default_factory=_empty_vertices)
    faces: NDArray[np.int64] = field(default_factory=_empty_faces)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def copy(self) -> "GlobalMesh":
        """Create a deep copy."""
        return GlobalMesh(vertices=self.vertices.copy(), faces=self.faces.copy())


@dataclass(frozen=True, eq=False)
class AttachmentPointPair:
    """Two inferred attachment positions (no vertex indices)."""
    first: NDArray[np.float64]
    second: NDArray[np.float64]

    def __iter__(self):
        yield self.first
        yield self.second

    @property
    def separation(self) -> float:
        return float(np.linalg.norm(self.first - self.second))


@dataclass
class RenderableMesh:
    """Vertex attribute arrays handed to the external renderer.

    All float arrays use float32 for GL compatibility.
    positions: (N, 3)
    normals: (N, 3) unit vectors
    colors: (N, 3) per-vertex RGB (0..1)
    indices: (F * 3,) uint32 triangle list
    highlight: (N,) bool, True inside an ear region
    """
    positions: NDArray[np.float32]
    normals: NDArray[np.float32]
    colors: NDArray[np.float32]
    indices: NDArray[np.uint32]
    highlight: NDArray[np.bool_]

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3
