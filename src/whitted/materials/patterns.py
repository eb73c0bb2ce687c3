"""Procedural color patterns.

A pattern maps a point in its own local space to a color. Each pattern owns a
transform that is independent of the shape it decorates, so a world-space
point reaches pattern space through two inverse transforms:

    world point -> object point   (inverse of the shape transform)
    object point -> pattern point (inverse of the pattern transform)

Supported patterns:
    - StripePattern: alternates by floor(x) mod 2
    - GradientPattern: linear blend by the fractional part of x
    - RingPattern: alternates by floor(sqrt(x^2 + z^2)) mod 2
    - CheckerPattern: alternates by floor(|x| + |y| + |z|) mod 2

Example:
    >>> from whitted.core.transforms import scaling
    >>> from whitted.core.tuples import BLACK, WHITE, point
    >>> stripes = StripePattern(WHITE, BLACK)
    >>> stripes.transform = scaling(0.25, 0.25, 0.25)
    >>> stripes.pattern_at(point(0.3, 0.0, 0.0))  # BLACK
"""

import math
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from whitted.core.matrix import Matrix, identity, inverse
from whitted.core.tuples import Tuple

vec3 = tm.vec3

if TYPE_CHECKING:
    from whitted.geometry.shape import Shape


class PatternKind(IntEnum):
    """Enumeration of pattern variants.

    Used by the scene manager to dispatch pattern evaluation inside render
    kernels. ``NONE`` marks a material without a pattern.
    """

    NONE = -1
    STRIPE = 0
    GRADIENT = 1
    RING = 2
    CHECKER = 3


class Pattern(ABC):
    """Base class for two-color procedural patterns.

    Attributes:
        a: First color.
        b: Second color.
        transform: Pattern-to-object transform. Assigning a singular matrix
            raises ``SingularMatrixError`` immediately.
    """

    kind: PatternKind = PatternKind.NONE

    def __init__(self, a: Tuple, b: Tuple, transform: Matrix | None = None) -> None:
        self.a = a
        self.b = b
        self.transform = identity(4) if transform is None else transform

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, m: Matrix) -> None:
        # Inverting here surfaces singular transforms at scene setup time
        self._inverse = inverse(m)
        self._transform = m

    @property
    def inverse(self) -> Matrix:
        """Cached inverse of the pattern transform."""
        return self._inverse

    @abstractmethod
    def pattern_at(self, pattern_point: Tuple) -> Tuple:
        """Evaluate the pattern at a point already in pattern space."""

    def pattern_at_shape(self, shape: "Shape", world_point: Tuple) -> Tuple:
        """Evaluate the pattern at a world-space point on ``shape``.

        Args:
            shape: The shape the pattern decorates.
            world_point: The point in world space.

        Returns:
            The pattern color at that point.
        """
        object_point = shape.inverse @ world_point
        pattern_point = self._inverse @ object_point
        return self.pattern_at(pattern_point)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(a={self.a.tolist()}, b={self.b.tolist()})"


class StripePattern(Pattern):
    """Stripes along x, constant in y and z."""

    kind = PatternKind.STRIPE

    def pattern_at(self, pattern_point: Tuple) -> Tuple:
        if math.floor(pattern_point[0]) % 2 == 0:
            return self.a
        return self.b


class GradientPattern(Pattern):
    """Linear blend from ``a`` to ``b`` repeating every unit along x."""

    kind = PatternKind.GRADIENT

    def pattern_at(self, pattern_point: Tuple) -> Tuple:
        x = pattern_point[0]
        fraction = x - math.floor(x)
        return self.a + (self.b - self.a) * fraction


class RingPattern(Pattern):
    """Concentric rings in the xz plane."""

    kind = PatternKind.RING

    def pattern_at(self, pattern_point: Tuple) -> Tuple:
        x, z = pattern_point[0], pattern_point[2]
        if math.floor(math.sqrt(x * x + z * z)) % 2 == 0:
            return self.a
        return self.b


class CheckerPattern(Pattern):
    """Three-dimensional checker on the sum of absolute coordinates."""

    kind = PatternKind.CHECKER

    def pattern_at(self, pattern_point: Tuple) -> Tuple:
        total = abs(pattern_point[0]) + abs(pattern_point[1]) + abs(pattern_point[2])
        if math.floor(total) % 2 == 0:
            return self.a
        return self.b


# =============================================================================
# Kernel-side Evaluation
# =============================================================================


@ti.func
def _alternate(index: ti.f32, a: vec3, b: vec3) -> vec3:
    result = a
    if ti.cast(ti.floor(index), ti.i32) % 2 != 0:
        result = b
    return result


@ti.func
def pattern_color(kind: ti.i32, a: vec3, b: vec3, p: vec3) -> vec3:
    """Evaluate a pattern inside a Taichi kernel.

    Args:
        kind: A ``PatternKind`` value other than ``NONE``.
        a: First color.
        b: Second color.
        p: Point in pattern space.

    Returns:
        The pattern color at ``p``.
    """
    result = a
    if kind == int(PatternKind.STRIPE):
        result = _alternate(p.x, a, b)
    elif kind == int(PatternKind.GRADIENT):
        result = a + (b - a) * (p.x - ti.floor(p.x))
    elif kind == int(PatternKind.RING):
        result = _alternate(ti.sqrt(p.x * p.x + p.z * p.z), a, b)
    elif kind == int(PatternKind.CHECKER):
        result = _alternate(ti.abs(p.x) + ti.abs(p.y) + ti.abs(p.z), a, b)
    return result
