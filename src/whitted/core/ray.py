"""Ray data structure.

A ray is an origin point plus a direction vector. Rays are created fresh for
every pixel and every reflected, refracted or shadow bounce and are never
mutated; ``transform`` returns a new ray.

Example:
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.tuples import point, vector
    >>> ray = Ray(origin=point(2.0, 3.0, 4.0), direction=vector(1.0, 0.0, 0.0))
    >>> ray.position(2.5)  # point(4.5, 3.0, 4.0)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.matrix import Matrix
from whitted.core.tuples import Tuple

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (homogeneous point).
        direction: The direction of the ray (homogeneous vector). Not
            normalized automatically; object-space rays keep the scale of
            the inverse transform so that ``t`` stays valid in world space.
    """

    origin: Tuple
    direction: Tuple

    def position(self, t: float) -> Tuple:
        """Compute the point ``origin + direction * t``."""
        return self.origin + self.direction * t

    def transform(self, m: Matrix) -> "Ray":
        """Return a new ray with origin and direction multiplied by ``m``."""
        return Ray(origin=m @ self.origin, direction=m @ self.direction)


# =============================================================================
# Kernel-side Helpers
# =============================================================================


@ti.func
def transform_point(m: tm.mat4, p: vec3) -> vec3:
    """Multiply a 4x4 matrix with a point (w = 1) inside a Taichi kernel."""
    r = m @ tm.vec4(p.x, p.y, p.z, 1.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def transform_vector(m: tm.mat4, v: vec3) -> vec3:
    """Multiply a 4x4 matrix with a vector (w = 0) inside a Taichi kernel."""
    r = m @ tm.vec4(v.x, v.y, v.z, 0.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f32) -> vec3:
    """Compute ``origin + direction * t`` inside a Taichi kernel."""
    return origin + direction * t
