"""Geometry module for shape primitives.

Components:
    shape: Shape base class (transform, identity, world-space queries)
    sphere: Unit sphere and the glass_sphere helper
    plane: The y = 0 plane
    cube: The [-1, 1]^3 axis-aligned cube

Each primitive implements ``local_intersect`` and ``local_normal_at`` in
object space for the Python path, and a matching Taichi function
(``*_roots`` / ``*_normal``) used by the render kernel.
"""

from .cube import Cube, check_axis
from .plane import Plane
from .shape import Shape, ShapeKind
from .sphere import Sphere, glass_sphere

__all__ = [
    "Shape",
    "ShapeKind",
    "Sphere",
    "glass_sphere",
    "Plane",
    "Cube",
    "check_axis",
]
