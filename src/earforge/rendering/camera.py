"""Perspective camera with view and projection matrices."""

from earforge.constants import DEFAULT_CAMERA_FOV, MIN_CAMERA_DISTANCE
from earforge.core.math_utils import (
    Mat4,
    Vec3,
    deg_to_rad,
    mat4_identity,
    mat4_look_at,
    mat4_perspective,
    vec3,
)


class Camera:
    """A perspective camera that produces view and projection matrices.

    Parameters
    ----------
    fov : float
        Vertical field-of-view in degrees.
    near : float
        Near clipping plane distance.
    far : float
        Far clipping plane distance.
    """

    def __init__(
        self,
        fov: float = DEFAULT_CAMERA_FOV,
        near: float = 0.01,
        far: float = 100.0,
    ) -> None:
        self.fov = fov
        self.near = near
        self.far = far
        self.aspect: float = 1.0

        self.position: Vec3 = vec3(0.0, 0.0, MIN_CAMERA_DISTANCE)
        self.target: Vec3 = vec3()
        self.up: Vec3 = vec3(0.0, 1.0, 0.0)

        # Cached matrices (recomputed on demand)
        self._view_dirty: bool = True
        self._proj_dirty: bool = True
        self._view: Mat4 = mat4_identity()
        self._proj: Mat4 = mat4_identity()

    @classmethod
    def framing(cls, distance: float, **kwargs) -> "Camera":
        """Camera on the +z axis at ``distance``, looking at the origin.

        The far plane is pushed out so the framed object is never clipped.
        """
        cam = cls(**kwargs)
        cam.far = max(cam.far, distance * 4.0)
        cam.set_position(0.0, 0.0, distance)
        return cam

    @property
    def distance(self) -> float:
        return float(((self.position - self.target) ** 2).sum() ** 0.5)

    def set_aspect(self, width: int, height: int) -> None:
        """Update the aspect ratio from viewport dimensions."""
        if height > 0:
            self.aspect = width / height
            self._proj_dirty = True

    def get_view_matrix(self) -> Mat4:
        """Return the current view (camera) matrix."""
        if self._view_dirty:
            self._view = mat4_look_at(self.position, self.target, self.up)
            self._view_dirty = False
        return self._view

    def get_projection_matrix(self) -> Mat4:
        """Return the current perspective projection matrix."""
        if self._proj_dirty:
            fov_rad = deg_to_rad(self.fov)
            self._proj = mat4_perspective(fov_rad, self.aspect, self.near, self.far)
            self._proj_dirty = False
        return self._proj

    def get_view_projection(self) -> Mat4:
        """Return ``projection @ view``."""
        return self.get_projection_matrix() @ self.get_view_matrix()

    def set_position(self, x: float, y: float, z: float) -> None:
        self.position = vec3(x, y, z)
        self._view_dirty = True
