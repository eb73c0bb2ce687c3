"""Abstract shape with transform handling and identity.

Every primitive is defined once in its own object space (a unit sphere at
the origin, the y = 0 plane, the [-1, 1] cube). The Shape base class does
the world/object conversion uniformly:

    intersect:  world ray -> object ray (inverse transform) -> local_intersect
    normal_at:  world point -> object point -> local_normal_at
                -> world normal (inverse transpose), renormalized

Subclasses only implement ``local_intersect`` and ``local_normal_at``.

Each shape carries a random 128-bit identifier. Equality and hashing use
that identifier only, so a shape keeps its identity when its material or
transform is edited; the refraction containment stack relies on this.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from enum import IntEnum

from whitted.core.matrix import Matrix, identity, inverse, transpose
from whitted.core.ray import Ray
from whitted.core.tuples import Tuple, normalize
from whitted.materials.material import Material
from whitted.scene.intersection import Intersection


class ShapeKind(IntEnum):
    """Enumeration of supported primitive types.

    Used by the scene manager to dispatch intersection inside render
    kernels.
    """

    SPHERE = 0
    PLANE = 1
    CUBE = 2


class Shape(ABC):
    """Base class for all primitives.

    Attributes:
        id: Unique identifier used for equality and hashing.
        transform: Object-to-world transform. Assigning a singular matrix
            raises ``SingularMatrixError``.
        material: The surface material.
    """

    kind: ShapeKind

    def __init__(
        self,
        transform: Matrix | None = None,
        material: Material | None = None,
    ) -> None:
        self.id = uuid.uuid4()
        self.transform = identity(4) if transform is None else transform
        self.material = Material() if material is None else material

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, m: Matrix) -> None:
        # Invert eagerly so a singular transform fails at scene setup
        inv = inverse(m)
        self._transform = m
        self._inverse = inv
        self._normal_matrix = transpose(inv)

    @property
    def inverse(self) -> Matrix:
        """Cached inverse of the shape transform (world to object)."""
        return self._inverse

    @property
    def normal_matrix(self) -> Matrix:
        """Cached transpose of the inverse transform (object normals to world)."""
        return self._normal_matrix

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a world-space ray with this shape.

        Args:
            ray: The ray in world space.

        Returns:
            Intersections sorted by ascending ``t``; empty on a miss.
        """
        local_ray = ray.transform(self._inverse)
        return [Intersection(t, self) for t in self.local_intersect(local_ray)]

    def normal_at(self, world_point: Tuple) -> Tuple:
        """Compute the unit world-space normal at a point on the surface."""
        object_point = self._inverse @ world_point
        object_normal = self.local_normal_at(object_point)
        world_normal = self._normal_matrix @ object_normal
        world_normal[3] = 0.0
        return normalize(world_normal)

    @abstractmethod
    def local_intersect(self, ray: Ray) -> list[float]:
        """Return the ascending ``t`` values where an object-space ray hits."""

    @abstractmethod
    def local_normal_at(self, object_point: Tuple) -> Tuple:
        """Return the (unnormalized) object-space normal at a point."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={str(self.id)[:8]})"
