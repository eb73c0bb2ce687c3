"""World: shapes, one light, and the recursive color evaluation.

The world drives Whitted-style shading for a single ray:

    color_at(ray, remaining)
        -> intersect every shape, pick the hit
        -> shade_hit(comps, remaining)
               surface   = lighting(...) with a shadow test at over_point
               reflected = reflective   * color_at(reflect ray,  remaining - 1)
               refracted = transparency * color_at(refract ray, remaining - 1)
               return surface + reflected + refracted

``remaining`` is an explicit recursion budget threaded through every call;
reflected and refracted rays are never traced without decrementing it, so
two facing mirrors terminate after ``remaining`` bounces. Exhausting the
budget contributes black, as does a ray that escapes the scene.

Example:
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.tuples import point, vector
    >>> w = default_world()
    >>> c = w.color_at(Ray(point(0.0, 0.0, -5.0), vector(0.0, 0.0, 1.0)))
    >>> # c is approximately color(0.38066, 0.47583, 0.2855)
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from whitted.core.ray import Ray
from whitted.core.transforms import scaling
from whitted.core.tuples import BLACK, EPSILON, Tuple, color, dot, magnitude, normalize, point
from whitted.geometry.shape import Shape
from whitted.geometry.sphere import Sphere
from whitted.materials.material import Material, lighting
from whitted.scene.intersection import (
    Computation,
    Intersection,
    hit,
    intersections,
    prepare_computations,
)
from whitted.scene.light import PointLight

# Default recursion budget for reflected and refracted rays
MAX_DEPTH = 5

# Largest budget a render accepts; sizes the kernel's ray stack
MAX_DEPTH_LIMIT = 16


def validate_max_depth(max_depth: int) -> None:
    """Reject a recursion budget outside 0..MAX_DEPTH_LIMIT.

    Raises:
        ValueError: If ``max_depth`` is negative or above MAX_DEPTH_LIMIT.
    """
    if not 0 <= max_depth <= MAX_DEPTH_LIMIT:
        raise ValueError(f"max_depth must be in 0..{MAX_DEPTH_LIMIT}, got {max_depth}")


class World:
    """A collection of shapes lit by a single point light.

    Attributes:
        light: The point light, or None for an unlit world (which cannot be
            shaded).
        shapes: Shapes in insertion order. The order only matters for
            breaking ties between intersections at identical ``t``.
    """

    def __init__(self, light: PointLight | None = None, shapes: Iterable[Shape] = ()) -> None:
        self.light = light
        self.shapes: list[Shape] = list(shapes)

    def add(self, shape: Shape) -> Shape:
        """Append a shape to the world and return it."""
        self.shapes.append(shape)
        return shape

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a ray with every shape.

        Returns:
            All intersections, sorted by ascending ``t``. Ties keep world
            order, then each shape's own root order.
        """
        xs: list[Intersection] = []
        for shape in self.shapes:
            xs.extend(shape.intersect(ray))
        return intersections(*xs)

    def shade_hit(self, comps: Computation, remaining: int = MAX_DEPTH) -> Tuple:
        """Compute the color at a prepared hit.

        Args:
            comps: The shading context.
            remaining: Recursion budget for reflected and refracted rays.

        Returns:
            Surface color plus reflected and refracted contributions.

        Raises:
            RuntimeError: If the world has no light.
        """
        if self.light is None:
            raise RuntimeError("World has no light. Set world.light before shading.")

        shadowed = self.is_shadowed(comps.over_point)
        surface = lighting(
            comps.shape.material,
            comps.shape,
            self.light,
            comps.over_point,
            comps.eyev,
            comps.normalv,
            shadowed,
        )
        reflected = self.reflected_color(comps, remaining)
        refracted = self.refracted_color(comps, remaining)
        return surface + reflected + refracted

    def color_at(self, ray: Ray, remaining: int = MAX_DEPTH) -> Tuple:
        """Compute the color seen along a ray.

        Args:
            ray: The ray to trace.
            remaining: Recursion budget; the top-level call seeds it.

        Returns:
            The color of the nearest visible surface, or black on a miss.
        """
        xs = self.intersect(ray)
        h = hit(xs)
        if h is None:
            return BLACK.copy()
        comps = prepare_computations(h, ray, xs)
        return self.shade_hit(comps, remaining)

    def is_shadowed(self, at: Tuple) -> bool:
        """Check whether any shape lies between a point and the light.

        Callers pass the biased ``over_point`` so the surface being shaded
        does not shadow itself. A point at the light itself is never shadowed.
        """
        if self.light is None:
            raise RuntimeError("World has no light. Set world.light before shading.")

        to_light = self.light.position - at
        distance = magnitude(to_light)
        if distance < EPSILON:
            return False
        shadow_ray = Ray(at, normalize(to_light))
        h = hit(self.intersect(shadow_ray))
        return h is not None and h.t < distance

    def reflected_color(self, comps: Computation, remaining: int = MAX_DEPTH) -> Tuple:
        """Color arriving along the mirror direction, scaled by reflectivity."""
        reflective = comps.shape.material.reflective
        if reflective == 0.0 or remaining <= 0:
            return BLACK.copy()

        reflect_ray = Ray(comps.over_point, comps.reflectv)
        return self.color_at(reflect_ray, remaining - 1) * reflective

    def refracted_color(self, comps: Computation, remaining: int = MAX_DEPTH) -> Tuple:
        """Color arriving through the surface, scaled by transparency.

        Applies Snell's law with ``n1 / n2``. Total internal reflection
        contributes black.
        """
        transparency = comps.shape.material.transparency
        if transparency == 0.0 or remaining <= 0:
            return BLACK.copy()

        n_ratio = comps.n1 / comps.n2
        cos_i = dot(comps.eyev, comps.normalv)
        sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            return BLACK.copy()

        cos_t = math.sqrt(1.0 - sin2_t)
        direction = comps.normalv * (n_ratio * cos_i - cos_t) - comps.eyev * n_ratio
        refract_ray = Ray(comps.under_point, direction)
        return self.color_at(refract_ray, remaining - 1) * transparency

    def __repr__(self) -> str:
        return f"World(shapes={len(self.shapes)}, light={'set' if self.light else 'none'})"


def default_world() -> World:
    """Create the standard two-sphere test world.

    A white light at (-10, 10, -10), a unit sphere colored (0.8, 1.0, 0.6)
    with diffuse 0.7 and specular 0.2, and a plain sphere scaled by 0.5
    inside it.
    """
    light = PointLight(point(-10.0, 10.0, -10.0), color(1.0, 1.0, 1.0))
    outer = Sphere(material=Material(color=color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
    inner = Sphere(transform=scaling(0.5, 0.5, 0.5))
    return World(light=light, shapes=[outer, inner])
