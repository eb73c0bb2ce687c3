"""Camera module for view and ray generation.

Components:
    camera: Camera with ``ray_for_pixel`` and the ``render`` entry point
    pinhole: Kernel-side copy of the camera for Taichi ray generation

Pixel coordinates are integer (px, py) with (0, 0) at the top-left; rays
pass through pixel centers. ``pinhole`` is not imported here because it
declares Taichi fields.
"""

from .camera import Camera

__all__ = ["Camera"]
