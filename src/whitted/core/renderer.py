"""Scanline renderer driving the Taichi integrator in row bands.

Each kernel launch renders a band of ``rows_per_batch`` rows. Pixels are
independent, so a band is one data-parallel launch writing disjoint entries
of the color buffer; between bands the renderer reports progress through an
injected callback instead of any shared progress state.

The scene and camera must already be uploaded (``SceneManager.load`` and
``setup_camera``); the renderer only owns the render target.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.camera import Camera
    >>> from whitted.camera.pinhole import setup_camera
    >>> from whitted.core.renderer import ScanlineRenderer
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.scene.world import default_world
    >>>
    >>> SceneManager().load(default_world())
    >>> setup_camera(Camera(64, 48, 1.0))
    >>> renderer = ScanlineRenderer(64, 48)
    >>> renderer.render(max_depth=5, rows_per_batch=8)
    >>> canvas = renderer.to_canvas()
"""

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from whitted.core.integrator import (
    clear_render_target,
    get_image_numpy,
    render_rows,
    setup_render_target,
)
from whitted.preview.canvas import Canvas
from whitted.scene.world import validate_max_depth

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Default number of scanlines per kernel launch
DEFAULT_ROWS_PER_BATCH = 16


class ScanlineRenderer:
    """Renders the loaded scene one band of scanlines at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer and its render target.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of scanlines rendered since the last reset."""
        return self._rows_done

    def reset(self) -> None:
        """Clear the color buffer for a fresh render."""
        clear_render_target()
        self._rows_done = 0

    def render_progressive(
        self,
        max_depth: int,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    ) -> Generator[tuple[int, int], None, None]:
        """Render every scanline, yielding progress after each band.

        Args:
            max_depth: Recursion budget for reflected and refracted rays.
            rows_per_batch: Number of rows per kernel launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch or max_depth is out of range.
        """
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")
        validate_max_depth(max_depth)

        self.reset()
        while self._rows_done < self._height:
            row_end = min(self._rows_done + rows_per_batch, self._height)
            render_rows(self._rows_done, row_end, max_depth)
            logger.debug("Rendered rows %d-%d", self._rows_done, row_end - 1)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def render(
        self,
        max_depth: int,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render every scanline with an optional progress callback.

        Args:
            max_depth: Recursion budget for reflected and refracted rays.
            rows_per_batch: Number of rows per kernel launch.
            callback: Optional callback invoked after each band with
                (rows_done, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"{done}/{total} rows")
            >>> renderer.render(5, rows_per_batch=32, callback=progress)
        """
        for rows_done, total in self.render_progressive(max_depth, rows_per_batch):
            if callback is not None:
                callback(rows_done, total)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the unclamped image as an array of shape (height, width, 3)."""
        return get_image_numpy()

    def to_canvas(self) -> Canvas:
        """Copy the rendered image into a new Canvas."""
        return Canvas.from_numpy(self.get_image_numpy())

    def __repr__(self) -> str:
        return (
            f"ScanlineRenderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )
