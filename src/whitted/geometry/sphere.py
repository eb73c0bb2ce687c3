"""Unit sphere primitive.

The sphere is centered at the object-space origin with radius 1; position
and size come from the shape transform.

The ray-sphere intersection solves

    |origin + t * direction - center|^2 = 1

which expands to the quadratic a*t^2 + b*t + c = 0 with:

    a = dot(direction, direction)
    b = 2 * dot(direction, origin - center)
    c = dot(origin - center, origin - center) - 1

A zero-length direction (a == 0) and a negative discriminant are misses.
Otherwise both roots are returned in ascending order, so a tangent ray
produces two equal roots. Large scalings legitimately make ``a`` tiny, so
only an exactly zero ``a`` is rejected.

Example:
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.tuples import point, vector
    >>> s = Sphere()
    >>> [i.t for i in s.intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))]
    [4.0, 6.0]
"""

import math

import taichi as ti
import taichi.math as tm

from whitted.core.matrix import Matrix
from whitted.core.ray import Ray, vec3
from whitted.core.tuples import Tuple, dot, point
from whitted.geometry.shape import Shape, ShapeKind
from whitted.materials.material import GLASS, Material

ORIGIN = point(0.0, 0.0, 0.0)


class Sphere(Shape):
    """A unit sphere at the object-space origin."""

    kind = ShapeKind.SPHERE

    def local_intersect(self, ray: Ray) -> list[float]:
        sphere_to_ray = ray.origin - ORIGIN
        a = dot(ray.direction, ray.direction)
        b = 2.0 * dot(ray.direction, sphere_to_ray)
        c = dot(sphere_to_ray, sphere_to_ray) - 1.0
        if a == 0.0:
            return []

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return []

        sqrt_d = math.sqrt(discriminant)
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)
        return [t0, t1]

    def local_normal_at(self, object_point: Tuple) -> Tuple:
        return object_point - ORIGIN


def glass_sphere(transform: Matrix | None = None) -> Sphere:
    """Create a fully transparent sphere with the refractive index of glass."""
    material = Material(transparency=1.0, refractive_index=GLASS)
    return Sphere(transform=transform, material=material)


@ti.func
def sphere_roots(origin: vec3, direction: vec3):
    """Kernel-side counterpart of ``Sphere.local_intersect``.

    Args:
        origin: Object-space ray origin.
        direction: Object-space ray direction.

    Returns:
        Tuple of (count, t0, t1) where count is 0 on a miss (or a zero-length
        direction) and 2 otherwise.
    """
    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(direction, origin)
    c = tm.dot(origin, origin) - 1.0
    discriminant = b * b - 4.0 * a * c

    count = 0
    t0 = 0.0
    t1 = 0.0
    if a > 0.0 and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)
        count = 2
    return count, t0, t1


@ti.func
def sphere_normal(object_point: vec3) -> vec3:
    """Kernel-side counterpart of ``Sphere.local_normal_at``."""
    return object_point
