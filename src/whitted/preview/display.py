"""Display pipeline and Matplotlib preview for rendered canvases.

Canvas channels are linear and unbounded: a specular highlight seen through
a mirror easily exceeds 1.0. Before an image is shown or stored as 8-bit,
it goes through

    tone map  ->  gamma  ->  clamp to [0, 1]

PPM encoding skips this pipeline and clamps the raw channels, so a PPM and a
``gamma=1.0, tone_map="none"`` PNG hold the same values.

Example:
    >>> from whitted.preview.display import DisplaySettings, show_preview
    >>> canvas = camera.render(world)
    >>> show_preview(canvas, settings=DisplaySettings(tone_map="reinhard"))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from whitted.preview.canvas import Canvas


ToneMapMethod = Literal["none", "reinhard", "exposure"]


@dataclass(frozen=True)
class DisplaySettings:
    """How linear canvas values are turned into displayable ones.

    Attributes:
        tone_map: "none", "reinhard" or "exposure".
        gamma: Encoding gamma; 1.0 keeps values linear.
        exposure: Scale used by the exposure operator.
    """

    tone_map: ToneMapMethod = "none"
    gamma: float = 2.2
    exposure: float = 1.0


# =============================================================================
# Tone Mapping Operators
# =============================================================================


def tone_map_reinhard(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Compress channels with c / (1 + c). Negative channels become 0."""
    c = np.maximum(image, 0.0)
    return (c / (1.0 + c)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.floating],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Compress channels with 1 - exp(-c * exposure). Negative channels become 0."""
    c = np.maximum(image, 0.0)
    return (1.0 - np.exp(-c * exposure)).astype(np.float32)


_TONE_MAPS: dict[str, Callable[[npt.NDArray[np.floating], float], npt.NDArray[np.float32]]] = {
    "none": lambda image, exposure: image.astype(np.float32),
    "reinhard": lambda image, exposure: tone_map_reinhard(image),
    "exposure": tone_map_exposure,
}


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Gamma encode with ``out = in ** (1 / gamma)``.

    A gamma of exactly 1.0 returns the values untouched (not even clamped).
    Otherwise channels are clamped to [0, 1] first.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image.astype(np.float32)
    return np.power(np.clip(image, 0.0, 1.0), 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run tone mapping, gamma and the final clamp on an (H, W, 3) image.

    Raises:
        ValueError: If the tone mapping method is unknown or gamma is not
            positive.
    """
    try:
        operator = _TONE_MAPS[tone_map]
    except KeyError:
        raise ValueError(f"Unknown tone mapping method: {tone_map}") from None

    mapped = operator(np.asarray(image, dtype=np.float32), exposure)
    return np.clip(apply_gamma(mapped, gamma), 0.0, 1.0).astype(np.float32)


def canvas_for_display(
    canvas: Canvas,
    settings: DisplaySettings | None = None,
) -> npt.NDArray[np.float32]:
    """Run the display pipeline on a canvas."""
    if settings is None:
        settings = DisplaySettings()
    return process_image_for_display(
        canvas.to_numpy(),
        tone_map=settings.tone_map,
        gamma=settings.gamma,
        exposure=settings.exposure,
    )


# =============================================================================
# Matplotlib Preview
# =============================================================================


def show_preview(
    canvas: Canvas,
    *,
    settings: DisplaySettings | None = None,
    reference: Canvas | None = None,
    title: str | None = None,
    block: bool = True,
) -> None:
    """Show a canvas in a Matplotlib window.

    With a ``reference`` canvas (for instance the same scene rendered by the
    other backend) the window shows both images and their absolute
    difference side by side.

    Requires the ``preview`` extra (matplotlib).

    Raises:
        ValueError: If ``reference`` has a different size.
    """
    import matplotlib.pyplot as plt

    if settings is None:
        settings = DisplaySettings()
    if title is None:
        title = f"{canvas.width}x{canvas.height}"
        if settings.tone_map != "none":
            title += f" ({settings.tone_map})"

    panels = [(title, canvas_for_display(canvas, settings))]
    if reference is not None:
        if (reference.width, reference.height) != (canvas.width, canvas.height):
            raise ValueError(
                f"Reference is {reference.width}x{reference.height}, "
                f"expected {canvas.width}x{canvas.height}"
            )
        difference = np.abs(canvas.to_numpy() - reference.to_numpy())
        panels.append(("reference", canvas_for_display(reference, settings)))
        panels.append(("|difference|", np.clip(difference, 0.0, 1.0)))

    fig, axes = plt.subplots(1, len(panels), figsize=(6 * len(panels), 6), squeeze=False)
    for ax, (label, image) in zip(axes[0], panels):
        ax.imshow(image)
        ax.set_title(label)
        ax.axis("off")

    fig.tight_layout()
    plt.show(block=block)
