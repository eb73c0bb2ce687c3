"""Preview module for output and visualization.

Components:
    canvas: The raster a camera renders into, with PPM encoding
    display: Tone mapping, gamma correction and Matplotlib preview
    export: PNG export via Pillow and image comparison helpers

Example:
    >>> from whitted.preview import save_image
    >>> canvas = camera.render(world)
    >>> save_image(canvas, "scene.ppm")
"""

from whitted.preview.canvas import Canvas
from whitted.preview.display import (
    DisplaySettings,
    ToneMapMethod,
    apply_gamma,
    canvas_for_display,
    process_image_for_display,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from whitted.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_image,
    save_png,
    save_png_from_array,
)

__all__ = [
    "Canvas",
    # Display functions
    "show_preview",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "canvas_for_display",
    "DisplaySettings",
    "ToneMapMethod",
    # Export functions
    "save_image",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
