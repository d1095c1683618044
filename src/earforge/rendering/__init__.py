"""Rendering handoff -- renderable arrays, framing camera, drag rotation."""

from earforge.rendering.camera import Camera
from earforge.rendering.object_rotation import ObjectRotation
from earforge.rendering.presenter import PresentedMesh, present

__all__ = [
    "Camera",
    "ObjectRotation",
    "PresentedMesh",
    "present",
]
