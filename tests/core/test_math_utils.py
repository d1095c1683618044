"""Tests for math_utils module."""

import numpy as np
import pytest

from earforge.core.math_utils import (
    vec3, mat4_identity, mat4_translation,
    mat4_rotation_x, mat4_rotation_y,
    mat4_perspective, mat4_look_at, deg_to_rad,
    normalize, transform_points, batch_normalize, is_mat4,
)


def test_vec3():
    v = vec3(1, 2, 3)
    assert v.shape == (3,)
    np.testing.assert_array_equal(v, [1, 2, 3])


def test_mat4_identity():
    np.testing.assert_array_equal(mat4_identity(), np.eye(4))


def test_mat4_translation():
    m = mat4_translation(1, 2, 3)
    p = transform_points(m, vec3(0, 0, 0))[0]
    np.testing.assert_array_almost_equal(p, [1, 2, 3])


def test_mat4_rotation_x():
    m = mat4_rotation_x(np.pi / 2)
    p = transform_points(m, vec3(0, 1, 0))[0]
    np.testing.assert_array_almost_equal(p, [0, 0, 1], decimal=10)


def test_mat4_rotation_y():
    m = mat4_rotation_y(np.pi / 2)
    p = transform_points(m, vec3(0, 0, 1))[0]
    np.testing.assert_array_almost_equal(p, [1, 0, 0], decimal=10)


def test_transform_points_matches_matrix_product():
    m = mat4_translation(1, -2, 0.5) @ mat4_rotation_y(0.3)
    pts = np.array([[0, 0, 0], [1, 2, 3], [-1, 0.5, 2]], dtype=np.float64)
    batch = transform_points(m, pts)
    for p, q in zip(pts, batch):
        np.testing.assert_array_almost_equal((m @ np.append(p, 1.0))[:3], q)


def test_transform_points_empty():
    out = transform_points(mat4_identity(), np.empty((0, 3)))
    assert out.shape == (0, 3)


def test_normalize():
    np.testing.assert_array_almost_equal(normalize(vec3(3, 0, 0)), [1, 0, 0])


def test_normalize_zero():
    np.testing.assert_array_equal(normalize(vec3(0, 0, 0)), [0, 0, 0])


def test_batch_normalize_fallback():
    v = np.array([[0, 0, 2], [0, 0, 0]], dtype=np.float64)
    out = batch_normalize(v, vec3(0, 1, 0))
    np.testing.assert_array_almost_equal(out, [[0, 0, 1], [0, 1, 0]])


def test_is_mat4():
    assert is_mat4(np.eye(4))
    assert not is_mat4(np.eye(3))
    bad = np.eye(4)
    bad[0, 0] = np.nan
    assert not is_mat4(bad)


def test_mat4_look_at():
    eye = vec3(0, 0, 5)
    m = mat4_look_at(eye, vec3(0, 0, 0), vec3(0, 1, 0))
    np.testing.assert_array_almost_equal(transform_points(m, eye)[0], [0, 0, 0], decimal=10)


def test_mat4_perspective():
    m = mat4_perspective(deg_to_rad(60), 1.0, 0.1, 100.0)
    assert m[0, 0] != 0
    assert m[1, 1] != 0
    assert m[3, 2] == -1.0
