"""Recorded patch streams (JSON) for headless replay.

Format::

    {
      "patches": [
        {
          "id": "patch-0",
          "transform": [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]],
          "vertices": [[x, y, z], ...],
          "faces": [[i0, i1, i2], ...],
          "normals": [[nx, ny, nz], ...]
        },
        ...
      ]
    }

Entries are replayed in file order; a repeated ``id`` is an update of
that patch.  ``normals`` is optional.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

import numpy as np

from earforge.core.config_loader import load_json
from earforge.scan.patch_store import PatchUpdate

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("id", "transform", "vertices", "faces")


def parse_patch_recording(data: dict) -> list[PatchUpdate]:
    """Convert a parsed recording into patch updates.

    Raises
    ------
    ValueError
        If the document has no ``patches`` list or an entry lacks a
        required key.
    """
    if not isinstance(data, dict) or not isinstance(data.get("patches"), list):
        raise ValueError("Invalid patch recording: expected an object with a 'patches' list")

    updates: list[PatchUpdate] = []
    for i, entry in enumerate(data["patches"]):
        missing = [k for k in _REQUIRED_KEYS if k not in entry]
        if missing:
            raise ValueError(f"Invalid patch recording: entry {i} missing {', '.join(missing)}")
        updates.append(PatchUpdate(
            patch_id=entry["id"],
            transform=np.asarray(entry["transform"], dtype=np.float64),
            vertices=np.asarray(entry["vertices"], dtype=np.float64),
            faces=np.asarray(entry["faces"]),
            normals=(
                np.asarray(entry["normals"], dtype=np.float64)
                if entry.get("normals") is not None else None
            ),
        ))
    return updates


def load_patch_recording(path) -> list[PatchUpdate]:
    """Load a recorded patch stream from disk."""
    updates = parse_patch_recording(load_json(Path(path)))
    logger.info("Loaded %d patch updates from %s", len(updates), path)
    return updates


def _to_list(value):
    return np.asarray(value).tolist()


def _json_id(patch_id):
    """Strings and ints are written as-is; other ids (e.g. UUIDs) as str."""
    if isinstance(patch_id, (str, int)):
        return patch_id
    return str(patch_id)


def save_patch_recording(updates: Iterable[PatchUpdate], path) -> int:
    """Write patch updates to ``path``.  Returns the number written.

    Ids that JSON cannot hold are written as strings, so a reloaded
    recording keys its patches by those strings.
    """
    entries = []
    for u in updates:
        entry = {
            "id": _json_id(u.patch_id),
            "transform": _to_list(u.transform),
            "vertices": _to_list(u.vertices),
            "faces": _to_list(u.faces),
        }
        if u.normals is not None:
            entry["normals"] = _to_list(u.normals)
        entries.append(entry)

    path = Path(path)
    with open(path, "w") as f:
        json.dump({"patches": entries}, f)
    logger.info("Saved %d patch updates to %s", len(entries), path)
    return len(entries)
