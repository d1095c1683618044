"""NumPy-backed math utilities: Vec3 and Mat4 operations.

Vectors are plain numpy arrays.  Matrices are 4x4 numpy arrays acting on
column vectors (translation in the last column), so a point ``p`` maps to
``m @ [p, 1]``.
"""

import numpy as np
from numpy.typing import NDArray

# Type aliases
Vec3 = NDArray[np.float64]
Mat4 = NDArray[np.float64]


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    return np.array([x, y, z], dtype=np.float64)


def mat4_identity() -> Mat4:
    return np.eye(4, dtype=np.float64)


def mat4_translation(x: float, y: float, z: float) -> Mat4:
    m = np.eye(4, dtype=np.float64)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m


def mat4_rotation_x(angle_rad: float) -> Mat4:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    m = np.eye(4, dtype=np.float64)
    m[1, 1] = c
    m[1, 2] = -s
    m[2, 1] = s
    m[2, 2] = c
    return m


def mat4_rotation_y(angle_rad: float) -> Mat4:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    m = np.eye(4, dtype=np.float64)
    m[0, 0] = c
    m[0, 2] = s
    m[2, 0] = -s
    m[2, 2] = c
    return m


def mat4_perspective(fov_rad: float, aspect: float, near: float, far: float) -> Mat4:
    """Create perspective projection matrix."""
    f = 1.0 / np.tan(fov_rad / 2.0)
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = (2 * far * near) / (near - far)
    m[3, 2] = -1.0
    return m


def mat4_look_at(eye: Vec3, target: Vec3, up: Vec3) -> Mat4:
    """Create view matrix (camera look-at)."""
    f = normalize(target - eye)
    s = normalize(np.cross(f, up))
    # Forward parallel to up: pick another up vector.
    if np.linalg.norm(s) < 1e-6:
        alt_up = np.array([0.0, 0.0, -1.0]) if abs(f[1]) > 0.9 else np.array([0.0, 1.0, 0.0])
        s = normalize(np.cross(f, alt_up))
    u = np.cross(s, f)
    m = np.eye(4, dtype=np.float64)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


def is_mat4(m) -> bool:
    """True if ``m`` is a finite 4x4 matrix."""
    arr = np.asarray(m)
    return arr.shape == (4, 4) and bool(np.all(np.isfinite(arr)))


# Vector operations

def normalize(v: Vec3) -> Vec3:
    n = np.linalg.norm(v)
    if n < 1e-10:
        return np.zeros_like(v)
    return v / n


def deg_to_rad(degrees: float) -> float:
    return degrees * np.pi / 180.0


def transform_points(m: Mat4, points: NDArray) -> NDArray[np.float64]:
    """Transform (N, 3) points by a 4x4 matrix with unit homogeneous weight."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    homo = np.empty((len(pts), 4), dtype=np.float64)
    homo[:, :3] = pts
    homo[:, 3] = 1.0
    return (homo @ np.asarray(m, dtype=np.float64).T)[:, :3]


def batch_normalize(v: NDArray, fallback: Vec3) -> NDArray[np.float64]:
    """Normalize (N, 3) rows; zero-length rows become ``fallback``."""
    v = np.asarray(v, dtype=np.float64)
    lengths = np.linalg.norm(v, axis=1)
    out = np.empty_like(v)
    ok = lengths > 1e-12
    out[ok] = v[ok] / lengths[ok, None]
    out[~ok] = fallback
    return out
