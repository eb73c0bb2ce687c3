"""Axis-aligned cube primitive.

The cube spans [-1, 1] on every object-space axis. Intersection uses the
slab method: each axis contributes the interval of ``t`` during which the
ray is between that axis' two faces, and the ray hits the cube when the
three intervals overlap:

    tmin = max(xtmin, ytmin, ztmin)
    tmax = min(xtmax, ytmax, ztmax)
    hit  iff tmin <= tmax

When the direction is (nearly) zero along an axis the division is replaced
by a multiplication with a large finite value so the interval keeps the
sign of the numerator: a ray parallel to a slab is inside it for all ``t``
or for none.
"""

import taichi as ti

from whitted.core.ray import Ray, vec3
from whitted.core.tuples import EPSILON, Tuple, vector
from whitted.geometry.shape import Shape, ShapeKind

# Stand-in for 1 / direction when a ray is parallel to a pair of faces
PARALLEL_SCALE = 1e30


def check_axis(origin: float, direction: float) -> tuple[float, float]:
    """Compute the entry and exit ``t`` for one pair of faces.

    Args:
        origin: Ray origin component along the axis.
        direction: Ray direction component along the axis.

    Returns:
        Tuple of (tmin, tmax) with tmin <= tmax.
    """
    tmin_numerator = -1.0 - origin
    tmax_numerator = 1.0 - origin

    if abs(direction) >= EPSILON:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    else:
        tmin = tmin_numerator * PARALLEL_SCALE
        tmax = tmax_numerator * PARALLEL_SCALE

    if tmin > tmax:
        tmin, tmax = tmax, tmin
    return tmin, tmax


class Cube(Shape):
    """The [-1, 1]^3 cube in object space."""

    kind = ShapeKind.CUBE

    def local_intersect(self, ray: Ray) -> list[float]:
        xtmin, xtmax = check_axis(ray.origin[0], ray.direction[0])
        ytmin, ytmax = check_axis(ray.origin[1], ray.direction[1])
        ztmin, ztmax = check_axis(ray.origin[2], ray.direction[2])

        tmin = max(xtmin, ytmin, ztmin)
        tmax = min(xtmax, ytmax, ztmax)
        if tmin > tmax:
            return []
        return [tmin, tmax]

    def local_normal_at(self, object_point: Tuple) -> Tuple:
        x, y, z = abs(object_point[0]), abs(object_point[1]), abs(object_point[2])
        maxc = max(x, y, z)
        if maxc == x:
            return vector(object_point[0], 0.0, 0.0)
        if maxc == y:
            return vector(0.0, object_point[1], 0.0)
        return vector(0.0, 0.0, object_point[2])


@ti.func
def _check_axis_kernel(origin: ti.f32, direction: ti.f32):
    tmin_numerator = -1.0 - origin
    tmax_numerator = 1.0 - origin
    tmin = tmin_numerator * PARALLEL_SCALE
    tmax = tmax_numerator * PARALLEL_SCALE
    if ti.abs(direction) >= EPSILON:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    return ti.min(tmin, tmax), ti.max(tmin, tmax)


@ti.func
def cube_roots(origin: vec3, direction: vec3):
    """Kernel-side counterpart of ``Cube.local_intersect``.

    Returns:
        Tuple of (count, t0, t1) where count is 0 on a miss and 2 otherwise.
    """
    xtmin, xtmax = _check_axis_kernel(origin.x, direction.x)
    ytmin, ytmax = _check_axis_kernel(origin.y, direction.y)
    ztmin, ztmax = _check_axis_kernel(origin.z, direction.z)
    tmin = ti.max(xtmin, ytmin, ztmin)
    tmax = ti.min(xtmax, ytmax, ztmax)

    count = 0
    if tmin <= tmax:
        count = 2
    return count, tmin, tmax


@ti.func
def cube_normal(object_point: vec3) -> vec3:
    """Kernel-side counterpart of ``Cube.local_normal_at``."""
    a = ti.abs(object_point)
    normal = vec3(0.0, 0.0, object_point.z)
    if a.x >= a.y and a.x >= a.z:
        normal = vec3(object_point.x, 0.0, 0.0)
    elif a.y >= a.z:
        normal = vec3(0.0, object_point.y, 0.0)
    return normal
