"""Camera: maps pixels to rays and renders a world into a canvas.

The camera sits at the origin of camera space looking down -z, with the
canvas one unit away at z = -1. The transform is a view transform
(world -> camera); its inverse moves the camera-space canvas points and the
eye into world space.

Canvas geometry is derived once from the field of view and aspect ratio:

    half_view = tan(field_of_view / 2)
    aspect    = hsize / vsize
    aspect >= 1:  half_width = half_view,          half_height = half_view / aspect
    aspect <  1:  half_width = half_view * aspect, half_height = half_view
    pixel_size = 2 * half_width / hsize

Two render backends produce the same image:

- ``"taichi"``: uploads the world into the scene manager fields and runs
  the data-parallel integrator kernel in bands of scanlines
- ``"python"``: calls ``World.color_at`` for every pixel

Example:
    >>> import math
    >>> from whitted.core.transforms import view_transform
    >>> from whitted.core.tuples import point, vector
    >>> from whitted.scene.world import default_world
    >>> camera = Camera(11, 11, math.pi / 2)
    >>> camera.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
    >>> canvas = camera.render(default_world(), backend="python")
    >>> canvas.pixel_at(5, 5)  # approximately color(0.38066, 0.47583, 0.2855)
"""

import logging
import math
from collections.abc import Callable
from typing import Literal

import numpy as np

from whitted.core.matrix import Matrix, identity, inverse
from whitted.core.ray import Ray
from whitted.core.tuples import normalize, point
from whitted.preview.canvas import Canvas
from whitted.scene.world import MAX_DEPTH, World, validate_max_depth

logger = logging.getLogger(__name__)

# Type alias for render backends
RenderBackend = Literal["taichi", "python"]

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Default number of scanlines between progress callbacks
DEFAULT_ROWS_PER_BATCH = 16


class Camera:
    """A pinhole camera with a view transform.

    Attributes:
        hsize: Canvas width in pixels.
        vsize: Canvas height in pixels.
        field_of_view: Horizontal (or vertical, for portrait canvases) angle
            of view in radians.
        transform: View transform. Assigning a singular matrix raises
            ``SingularMatrixError`` immediately.
        half_width: Half the canvas width at z = -1.
        half_height: Half the canvas height at z = -1.
        pixel_size: World-space size of one pixel at z = -1.
    """

    def __init__(
        self,
        hsize: int,
        vsize: int,
        field_of_view: float,
        transform: Matrix | None = None,
    ) -> None:
        if hsize <= 0 or vsize <= 0:
            raise ValueError(f"Camera size ({hsize}x{vsize}) must be positive")
        if not 0.0 < field_of_view < math.pi:
            raise ValueError(f"Field of view {field_of_view} must be in (0, pi)")

        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view
        self.transform = identity(4) if transform is None else transform

        half_view = math.tan(field_of_view / 2.0)
        aspect = hsize / vsize
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = self.half_width * 2.0 / hsize

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, m: Matrix) -> None:
        self._inverse = inverse(m)
        self._transform = m

    @property
    def inverse(self) -> Matrix:
        """Cached inverse of the view transform."""
        return self._inverse

    def ray_for_pixel(self, px: int, py: int) -> Ray:
        """Build the world-space ray through the center of a pixel.

        Args:
            px: Pixel column (0 = left).
            py: Pixel row (0 = top).

        Returns:
            A ray from the eye with a normalized direction.
        """
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size

        # +x in camera space points to the left of the canvas
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = self._inverse @ point(world_x, world_y, -1.0)
        origin = self._inverse @ point(0.0, 0.0, 0.0)
        return Ray(origin, normalize(pixel - origin))

    def render(
        self,
        world: World,
        *,
        backend: RenderBackend = "taichi",
        max_depth: int = MAX_DEPTH,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
        callback: ProgressCallback | None = None,
    ) -> Canvas:
        """Render a world into a new canvas.

        The taichi backend requires ``ti.init`` to have been called.

        Args:
            world: The world to render.
            backend: "taichi" for the data-parallel kernel, "python" for the
                per-pixel reference path.
            max_depth: Recursion budget for reflected and refracted rays.
            rows_per_batch: Scanlines between progress callbacks (and per
                kernel launch on the taichi backend).
            callback: Optional callback invoked with (rows_done, total_rows)
                after each completed batch of scanlines.

        Returns:
            The rendered canvas, hsize x vsize.

        Raises:
            ValueError: If the backend is unknown or max_depth is outside
                0..MAX_DEPTH_LIMIT.
            RuntimeError: If the world has no light.
        """
        validate_max_depth(max_depth)
        if world.light is None:
            raise RuntimeError("World has no light. Set world.light before rendering.")

        logger.info(
            "Rendering %dx%d (%d shapes, depth %d) with %s backend",
            self.hsize,
            self.vsize,
            len(world.shapes),
            max_depth,
            backend,
        )
        if backend == "taichi":
            canvas = self._render_taichi(world, max_depth, rows_per_batch, callback)
        elif backend == "python":
            canvas = self._render_python(world, max_depth, rows_per_batch, callback)
        else:
            raise ValueError(f"Unknown render backend: {backend!r}")
        logger.info("Render finished")
        return canvas

    def _render_python(
        self,
        world: World,
        max_depth: int,
        rows_per_batch: int,
        callback: ProgressCallback | None,
    ) -> Canvas:
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        canvas = Canvas(self.hsize, self.vsize)
        row = np.zeros((self.hsize, 3), dtype=np.float64)
        for y in range(self.vsize):
            for x in range(self.hsize):
                row[x] = world.color_at(self.ray_for_pixel(x, y), max_depth)[:3]
            canvas.write_row(y, row)

            rows_done = y + 1
            if callback is not None and (
                rows_done % rows_per_batch == 0 or rows_done == self.vsize
            ):
                callback(rows_done, self.vsize)
        return canvas

    def _render_taichi(
        self,
        world: World,
        max_depth: int,
        rows_per_batch: int,
        callback: ProgressCallback | None,
    ) -> Canvas:
        # Field-backed modules need ti.init before import
        from whitted.camera.pinhole import setup_camera
        from whitted.core.renderer import ScanlineRenderer
        from whitted.scene.manager import SceneManager

        SceneManager().load(world)
        setup_camera(self)
        renderer = ScanlineRenderer(self.hsize, self.vsize)
        renderer.render(max_depth, rows_per_batch=rows_per_batch, callback=callback)
        return renderer.to_canvas()

    def __repr__(self) -> str:
        return (
            f"Camera(hsize={self.hsize}, vsize={self.vsize}, "
            f"field_of_view={self.field_of_view:.4f})"
        )
