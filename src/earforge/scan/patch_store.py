"""Latest geometry for every tracked surface patch, keyed by patch identity.

The reconstruction source delivers updates one at a time on a single
thread, so the store holds no locks.  Records are immutable: an update
replaces the record instead of mutating it, which lets ``snapshot()`` hand
out the records themselves without aliasing anything that will change.
"""

from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray


def _frozen_array(data: ArrayLike, dtype) -> NDArray:
    arr = np.array(data, dtype=dtype, copy=True)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True)
class PatchUpdate:
    """One patch update as delivered by the reconstruction source.

    transform: 4x4 patch-to-world matrix
    vertices: (N, 3) local positions
    faces: (F, 3) or flat (3F,) local triangle indices
    normals: optional (N, 3) local normals
    """
    patch_id: Hashable
    transform: ArrayLike
    vertices: ArrayLike
    faces: ArrayLike
    normals: Optional[ArrayLike] = None


@dataclass(frozen=True, eq=False)
class PatchRecord:
    """Read-only copy of a patch's buffers as of its latest update.

    Buffers are stored exactly as received (no reshaping, and face indices
    keep their dtype); the merger validates them at capture time.
    """
    patch_id: Hashable
    transform: NDArray[np.float64]
    vertices: NDArray[np.float64]
    faces: NDArray
    normals: Optional[NDArray[np.float64]] = None

    @property
    def vertex_count(self) -> int:
        if self.vertices.ndim == 2:
            return self.vertices.shape[0]
        return self.vertices.size // 3


class PatchStore:
    """Insert-or-replace table of patch records."""

    def __init__(self) -> None:
        self._records: dict[Hashable, PatchRecord] = {}

    def upsert(
        self,
        patch_id: Hashable,
        transform: ArrayLike,
        vertices: ArrayLike,
        faces: ArrayLike,
        normals: Optional[ArrayLike] = None,
    ) -> PatchRecord:
        """Store the latest buffers for ``patch_id``, replacing any previous ones.

        A replaced patch keeps its position in iteration order.
        """
        record = PatchRecord(
            patch_id=patch_id,
            transform=_frozen_array(transform, np.float64),
            vertices=_frozen_array(vertices, np.float64),
            faces=_frozen_array(faces, None),
            normals=_frozen_array(normals, np.float64) if normals is not None else None,
        )
        self._records[patch_id] = record
        return record

    def upsert_update(self, update: PatchUpdate) -> PatchRecord:
        return self.upsert(
            update.patch_id, update.transform, update.vertices,
            update.faces, update.normals,
        )

    def upsert_many(self, updates: Iterable[PatchUpdate]) -> list[PatchRecord]:
        return [self.upsert_update(u) for u in updates]

    def discard(self, patch_id: Hashable) -> bool:
        """Forget a patch the source no longer reports.  Returns True if present."""
        return self._records.pop(patch_id, None) is not None

    def clear(self) -> None:
        self._records.clear()

    def get(self, patch_id: Hashable) -> Optional[PatchRecord]:
        return self._records.get(patch_id)

    def snapshot(self) -> tuple[PatchRecord, ...]:
        """Return the current records in iteration order."""
        return tuple(self._records.values())

    @property
    def total_vertex_count(self) -> int:
        return sum(r.vertex_count for r in self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, patch_id: object) -> bool:
        return patch_id in self._records

    def __iter__(self) -> Iterator[PatchRecord]:
        return iter(self.snapshot())
