"""Tests for drag-to-rotate."""

import numpy as np
import pytest

from earforge.core.math_utils import transform_points, vec3
from earforge.rendering.object_rotation import ObjectRotation


def test_starts_at_identity():
    np.testing.assert_array_equal(ObjectRotation().matrix, np.eye(4))


def test_horizontal_drag_spins_about_y():
    rot = ObjectRotation(speed=0.01)
    m = rot.drag(100, 0)  # 1 radian
    p = transform_points(m, vec3(0, 1, 0))[0]
    np.testing.assert_array_almost_equal(p, [0, 1, 0])
    q = transform_points(m, vec3(0, 0, 1))[0]
    np.testing.assert_array_almost_equal(q, [np.sin(1.0), 0, np.cos(1.0)])


def test_vertical_drag_tilts_about_x():
    rot = ObjectRotation(speed=0.01)
    m = rot.drag(0, 100)
    p = transform_points(m, vec3(1, 0, 0))[0]
    np.testing.assert_array_almost_equal(p, [1, 0, 0])


def test_drags_accumulate():
    rot = ObjectRotation(speed=0.005)
    rot.drag(50, 0)
    rot.drag(50, 0)
    single = ObjectRotation(speed=0.005)
    single.drag(100, 0)
    np.testing.assert_array_almost_equal(rot.matrix, single.matrix)


def test_stays_orthonormal():
    rot = ObjectRotation()
    for dx, dy in [(10, 4), (-30, 12), (7, -50)]:
        m = rot.drag(dx, dy)
    r = m[:3, :3]
    np.testing.assert_array_almost_equal(r @ r.T, np.eye(3))
    assert np.linalg.det(r) == pytest.approx(1.0)


def test_reset():
    rot = ObjectRotation()
    rot.drag(40, 40)
    rot.reset()
    np.testing.assert_array_equal(rot.matrix, np.eye(4))
