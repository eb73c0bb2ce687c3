"""Infinite plane primitive.

The plane is the object-space xz plane (y = 0) with normal (0, 1, 0)
everywhere. A ray whose direction has (almost) no y component is parallel
to the plane, or lies in it, and never hits.
"""

import taichi as ti

from whitted.core.ray import Ray, vec3
from whitted.core.tuples import EPSILON, Tuple, vector
from whitted.geometry.shape import Shape, ShapeKind

PLANE_NORMAL = vector(0.0, 1.0, 0.0)


class Plane(Shape):
    """The y = 0 plane in object space."""

    kind = ShapeKind.PLANE

    def local_intersect(self, ray: Ray) -> list[float]:
        if abs(ray.direction[1]) < EPSILON:
            return []
        return [-ray.origin[1] / ray.direction[1]]

    def local_normal_at(self, object_point: Tuple) -> Tuple:
        return PLANE_NORMAL.copy()


@ti.func
def plane_roots(origin: vec3, direction: vec3):
    """Kernel-side counterpart of ``Plane.local_intersect``.

    Returns:
        Tuple of (count, t0, t1); count is 0 or 1 and t1 repeats t0.
    """
    count = 0
    t0 = 0.0
    if ti.abs(direction.y) >= EPSILON:
        t0 = -origin.y / direction.y
        count = 1
    return count, t0, t0
