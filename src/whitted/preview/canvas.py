"""Canvas: the raster a camera renders into.

Pixels hold linear RGB with unconstrained float channels; values are only
clamped when the canvas is encoded. Storage is a NumPy array of shape
(height, width, 3) with row 0 at the top, the layout the export and display
helpers expect.

PPM encoding (plain "P3"):

    P3
    <width> <height>
    255
    <r g b values, each int(clamp(channel * 255, 0, 255))>

Value lines are wrapped so that no line exceeds 70 characters, and the file
ends with a newline.

Example:
    >>> from whitted.core.tuples import color
    >>> c = Canvas(5, 3)
    >>> c.write_pixel(0, 0, color(1.5, 0.0, 0.0))
    >>> c.to_ppm().splitlines()[3]
    '255 0 0 0 0 0 0 0 0 0 0 0 0 0 0'
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt

from whitted.core.tuples import Tuple, color

logger = logging.getLogger(__name__)

# Maximum characters per line in a PPM file
PPM_LINE_LENGTH = 70

# Maximum channel value written to the PPM header
PPM_MAX_VALUE = 255


class Canvas:
    """A width x height grid of colors, initially black.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions ({width}x{height}) must be positive")
        self._pixels = np.zeros((height, width, 3), dtype=np.float64)

    @classmethod
    def from_numpy(cls, image: npt.ArrayLike) -> "Canvas":
        """Create a canvas from an array of shape (height, width, 3)."""
        array = np.asarray(image, dtype=np.float64)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
        canvas = cls(array.shape[1], array.shape[0])
        canvas._pixels[:] = array
        return canvas

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside {self.width}x{self.height} canvas")

    def write_pixel(self, x: int, y: int, c: Tuple) -> None:
        """Set the color at column ``x``, row ``y``.

        Raises:
            IndexError: If the pixel is outside the canvas.
        """
        self._check_bounds(x, y)
        self._pixels[y, x] = c[:3]

    def pixel_at(self, x: int, y: int) -> Tuple:
        """Get the color at column ``x``, row ``y``.

        Raises:
            IndexError: If the pixel is outside the canvas.
        """
        self._check_bounds(x, y)
        r, g, b = self._pixels[y, x]
        return color(r, g, b)

    def write_row(self, y: int, colors: npt.ArrayLike) -> None:
        """Set every pixel of row ``y`` from an array of shape (width, 3)."""
        self._check_bounds(0, y)
        self._pixels[y] = colors

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Get a copy of the pixels as an array of shape (height, width, 3)."""
        return self._pixels.copy()

    def to_ppm(self) -> str:
        """Encode the canvas as a plain-text PPM image."""
        scaled = np.clip(self._pixels * PPM_MAX_VALUE, 0, PPM_MAX_VALUE).astype(np.int64)

        lines = ["P3", f"{self.width} {self.height}", str(PPM_MAX_VALUE)]
        for row in scaled:
            line = ""
            for value in row.reshape(-1):
                token = str(value)
                if not line:
                    line = token
                elif len(line) + 1 + len(token) > PPM_LINE_LENGTH:
                    lines.append(line)
                    line = token
                else:
                    line = f"{line} {token}"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def save_ppm(self, filepath: str | Path) -> None:
        """Write the PPM encoding of the canvas to a file."""
        Path(filepath).write_text(self.to_ppm(), encoding="ascii")
        logger.info("Saved %dx%d PPM to %s", self.width, self.height, filepath)

    def __repr__(self) -> str:
        return f"Canvas(width={self.width}, height={self.height})"
