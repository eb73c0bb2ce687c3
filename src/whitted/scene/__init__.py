"""Scene module: intersections, lights and worlds.

Components:
    intersection: Intersection records, hit selection and shading context
    light: Point light source
    world: Shapes plus a light, and the recursive color evaluation
    manager: Uploads a World into Taichi fields for the render kernel
    showcase: Demo scene using every shape, pattern and material feature

Only intersection and light are imported here. ``world`` and ``showcase``
import the geometry package, which itself imports this package, and
``manager`` declares Taichi fields that need ti.init() first.
"""

from .intersection import (
    SHADOW_BIAS,
    Computation,
    Intersection,
    hit,
    intersections,
    prepare_computations,
    refractive_indices,
)
from .light import PointLight

__all__ = [
    "Intersection",
    "Computation",
    "intersections",
    "hit",
    "prepare_computations",
    "refractive_indices",
    "SHADOW_BIAS",
    "PointLight",
]
