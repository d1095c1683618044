"""Tests for the one-shot capture pipeline."""

import numpy as np
import pytest

from earforge.core.math_utils import mat4_translation
from earforge.coordination.capture_pipeline import capture
from earforge.scan.merger import MalformedPatchError
from earforge.scan.patch_store import PatchStore


def _ring(count, radius, y):
    angles = np.linspace(0.0, 2 * np.pi, count, endpoint=False)
    return np.column_stack([
        radius * np.cos(angles), np.full(count, y), radius * np.sin(angles),
    ])


def _make_head_store():
    """Crown ring lifted to y=1 by its transform, plus a low ring, joined by faces."""
    store = PatchStore()
    crown = _ring(100, 1.0, 0.0)
    crown_faces = [[k, k + 1, (k + 2) % 100] for k in range(0, 98, 2)]
    store.upsert("crown", mat4_translation(0, 1, 0), crown, crown_faces)
    low = _ring(20, 3.0, -10.0)
    low_faces = [[k, (k + 1) % 20, (k + 2) % 20] for k in range(20)]
    store.upsert("low", np.eye(4), low, low_faces)
    return store


def test_full_capture_applies_ears():
    result = capture(_make_head_store().snapshot())
    assert result.distorted
    assert result.mesh.vertex_count == 120
    assert result.mesh.face_count == 69
    assert result.vertices.shape == (120, 3)
    assert not np.allclose(result.vertices, result.mesh.vertices)
    assert result.presented.mesh.highlight.any()
    np.testing.assert_allclose(np.linalg.norm(result.normals, axis=1), 1.0, atol=1e-9)


def test_capture_keeps_merged_mesh_intact():
    store = _make_head_store()
    result = capture(store.snapshot())
    np.testing.assert_allclose(result.mesh.vertices[:100, 1], 1.0)


def test_empty_snapshot_completes():
    result = capture(PatchStore().snapshot())
    assert result.mesh.is_empty
    assert result.attachment_points is None
    assert not result.distorted
    assert result.vertices.shape == (0, 3)
    assert result.presented.camera_distance == 0.5


def test_too_few_vertices_returns_undistorted():
    store = PatchStore()
    verts = _ring(10, 1.0, 0.0)
    store.upsert("small", np.eye(4), verts, [[0, 1, 2]])
    result = capture(store.snapshot())
    assert result.attachment_points is None
    np.testing.assert_array_equal(result.vertices, result.mesh.vertices)
    # Vertices outside the only face keep the default normal
    np.testing.assert_array_almost_equal(result.normals[5], [0, 1, 0])
    assert not result.presented.mesh.highlight.any()


def test_malformed_patch_aborts():
    store = _make_head_store()
    store.upsert("broken", np.eye(4), _ring(3, 1.0, 0.0), [[0, 1, 3]])
    with pytest.raises(MalformedPatchError, match="broken"):
        capture(store.snapshot())


def test_capture_is_repeatable():
    snap = _make_head_store().snapshot()
    a = capture(snap)
    b = capture(snap)
    np.testing.assert_array_equal(a.vertices, b.vertices)
    np.testing.assert_array_equal(a.normals, b.normals)


def test_non_finite_vertex_aborts_before_detection():
    store = _make_head_store()
    low = _ring(20, 3.0, -10.0)
    low[4] = np.nan
    store.upsert("low", np.eye(4), low, [])
    with pytest.raises(MalformedPatchError, match="non-finite"):
        capture(store.snapshot())
