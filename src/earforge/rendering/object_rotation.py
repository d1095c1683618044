"""Drag-to-rotate for the presented object."""

from earforge.constants import ROTATE_SPEED
from earforge.core.math_utils import Mat4, mat4_identity, mat4_rotation_x, mat4_rotation_y


class ObjectRotation:
    """Accumulates a rotation of the captured object from drag gestures.

    Horizontal drag spins about the y axis, vertical drag tilts about the x
    axis.  Each increment is applied in the object's local frame, on top of
    the rotation accumulated so far.

    Parameters
    ----------
    speed : float
        Radians per pixel of drag.
    """

    def __init__(self, speed: float = ROTATE_SPEED) -> None:
        self.speed = speed
        self._matrix: Mat4 = mat4_identity()

    @property
    def matrix(self) -> Mat4:
        return self._matrix.copy()

    def drag(self, dx: float, dy: float) -> Mat4:
        """Apply a drag of (dx, dy) pixels; return the new rotation."""
        x_angle = dy * self.speed
        y_angle = dx * self.speed
        increment = mat4_rotation_x(x_angle) @ mat4_rotation_y(y_angle)
        self._matrix = self._matrix @ increment
        return self.matrix

    def reset(self) -> None:
        self._matrix = mat4_identity()
