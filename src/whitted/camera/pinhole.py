"""Kernel-side pinhole camera for primary ray generation.

Mirrors a ``Camera`` into Taichi fields so render kernels can build the same
primary rays as ``Camera.ray_for_pixel``:

- The canvas sits at z = -1 in camera space, centered on the view axis
- Pixel (px, py) is sampled at its center, (px + 0.5, py + 0.5) * pixel_size
  from the top-left corner; +x in camera space points left on the canvas
- The camera-space canvas point and the camera origin are both moved to
  world space with the inverse view transform

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.camera import Camera
    >>> from whitted.camera.pinhole import setup_camera, get_ray
    >>> setup_camera(Camera(201, 101, 1.5707963))
    >>>
    >>> @ti.kernel
    ... def center_direction() -> ti.math.vec3:
    ...     origin, direction = get_ray(100, 50)
    ...     return direction  # (0, 0, -1)
"""

import logging
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from whitted.core.ray import transform_point, vec3

if TYPE_CHECKING:
    from whitted.camera.camera import Camera

logger = logging.getLogger(__name__)

# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

# Inverse of the view transform (world <- camera)
_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=())

# Canvas geometry at unit distance
_half_width = ti.field(dtype=ti.f32, shape=())
_half_height = ti.field(dtype=ti.f32, shape=())
_pixel_size = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: "Camera") -> None:
    """Copy a camera's derived geometry into the Taichi fields.

    Must be called before rendering and again whenever the camera changes.

    Args:
        camera: The camera to mirror.
    """
    _camera_inverse[None] = ti.Matrix(camera.inverse.tolist())
    _half_width[None] = camera.half_width
    _half_height[None] = camera.half_height
    _pixel_size[None] = camera.pixel_size
    logger.debug(
        "Camera set up: %dx%d, pixel_size=%g", camera.hsize, camera.vsize, camera.pixel_size
    )


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(px: ti.i32, py: ti.i32):
    """Generate the primary ray through the center of a pixel.

    Args:
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).

    Returns:
        Tuple of (origin, direction) in world space, direction normalized.
    """
    pixel_size = _pixel_size[None]
    xoffset = (ti.cast(px, ti.f32) + 0.5) * pixel_size
    yoffset = (ti.cast(py, ti.f32) + 0.5) * pixel_size

    world_x = _half_width[None] - xoffset
    world_y = _half_height[None] - yoffset

    inv = _camera_inverse[None]
    pixel = transform_point(inv, vec3(world_x, world_y, -1.0))
    origin = transform_point(inv, vec3(0.0, 0.0, 0.0))
    return origin, tm.normalize(pixel - origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, float]:
    """Get the current kernel-side camera geometry for debugging.

    Returns:
        Dictionary with half_width, half_height and pixel_size.
    """
    return {
        "half_width": float(_half_width[None]),
        "half_height": float(_half_height[None]),
        "pixel_size": float(_pixel_size[None]),
    }
