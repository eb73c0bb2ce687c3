"""Writing canvases to disk and comparing rendered images.

The output format follows the file extension:

    .ppm  plain P3 text, raw channels clamped (``Canvas.to_ppm``)
    .png  8-bit RGB through Pillow, after the display pipeline

Example:
    >>> from whitted.preview.export import save_image
    >>> save_image(camera.render(world), "scene.png", gamma=1.0)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from whitted.preview.canvas import Canvas

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".ppm", ".png")


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Quantize an (H, W, 3) linear image to 8 bits.

    Processed channels in [0, 1] are scaled by 255 and truncated, the same
    rounding the PPM encoder uses.
    """
    processed = process_image_for_display(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    return (processed * 255).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Write an (H, W, 3) linear image as an RGB PNG."""
    pixels = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(pixels).save(filepath)


def save_png(
    canvas: Canvas,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Write a canvas as an RGB PNG.

    Args:
        canvas: The rendered canvas.
        filepath: Destination path.
        tone_map: Tone mapping applied before quantizing.
        gamma: Encoding gamma. 1.0 stores the clamped linear values, which
            matches the PPM output.
        exposure: Scale for the exposure operator.
    """
    save_png_from_array(
        canvas.to_numpy(), filepath, tone_map=tone_map, gamma=gamma, exposure=exposure
    )
    logger.info("Saved %dx%d PNG to %s", canvas.width, canvas.height, filepath)


def save_image(
    canvas: Canvas,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> Path:
    """Write a canvas in the format named by the file extension.

    Tone mapping arguments only affect PNG output.

    Returns:
        The path written.

    Raises:
        ValueError: If the extension is not one of SUPPORTED_SUFFIXES.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported image format {suffix!r}; use one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    if suffix == ".ppm":
        canvas.save_ppm(path)
    else:
        save_png(canvas, path, tone_map=tone_map, gamma=gamma, exposure=exposure)
    return path


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared channel difference between two images.

    Used to check that the Taichi and Python backends agree.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
