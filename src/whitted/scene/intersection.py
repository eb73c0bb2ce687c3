"""Intersections, hit selection and shading computations.

This module is the bridge between geometry and shading:

    1. Shapes produce ``Intersection`` records (a ``t`` and the shape hit).
    2. ``intersections`` sorts a batch of records by ``t`` (stable, so
       equal ``t`` keeps world order, then per-shape root order).
    3. ``hit`` picks the first record with ``t > 0``: the visible surface.
    4. ``prepare_computations`` derives everything shading needs from that
       hit: point, eye and normal vectors, reflection vector, the two
       biased points, and the refractive indices on either side of the
       surface.

Refractive indices are found by walking the full sorted intersection list
with a containment stack: the list of shapes the ray is currently inside,
in the order they were entered. Entering a shape pushes it; exiting removes
it by identity wherever it sits. At the target hit, ``n1`` is the index of
the innermost container before the crossing and ``n2`` the index after it
(1.0 when the ray is in empty space).

Example:
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.tuples import point, vector
    >>> from whitted.geometry.sphere import Sphere
    >>> ray = Ray(point(0.0, 0.0, -5.0), vector(0.0, 0.0, 1.0))
    >>> xs = intersections(*Sphere().intersect(ray))
    >>> comps = prepare_computations(hit(xs), ray, xs)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from whitted.core.ray import Ray
from whitted.core.tuples import Tuple, dot, reflect

if TYPE_CHECKING:
    from whitted.geometry.shape import Shape

# Offset applied along the normal to keep secondary rays off their surface
SHADOW_BIAS = 1e-4

# Refractive index outside of every shape
DEFAULT_REFRACTIVE_INDEX = 1.0


@dataclass(frozen=True)
class Intersection:
    """One crossing of a ray with a shape.

    Equality is structural over ``t`` and the shape (shape identity is its
    id). Ordering compares ``t`` only.

    Attributes:
        t: Ray parameter of the crossing. Negative values lie behind the
            ray origin.
        shape: The shape that was crossed.
    """

    t: float
    shape: Shape

    def __lt__(self, other: Intersection) -> bool:
        return self.t < other.t


def intersections(*xs: Intersection) -> list[Intersection]:
    """Collect intersections into a list sorted by ascending ``t``.

    The sort is stable, so records with equal ``t`` keep their input order.
    """
    return sorted(xs, key=lambda i: i.t)


def hit(xs: Iterable[Intersection]) -> Intersection | None:
    """Return the visible intersection: the smallest ``t`` greater than 0.

    Args:
        xs: Intersections in any order.

    Returns:
        The hit, or None if every intersection is at or behind the origin.
    """
    best: Intersection | None = None
    for i in xs:
        if i.t > 0.0 and (best is None or i.t < best.t):
            best = i
    return best


@dataclass(frozen=True, eq=False)
class Computation:
    """Shading context for one hit.

    Attributes:
        t: Ray parameter of the hit.
        shape: The shape hit.
        point: World-space hit point.
        eyev: Unit vector from the point back toward the ray origin.
        normalv: Surface normal, flipped to face the eye.
        inside: True when the normal was flipped (hit from inside).
        reflectv: Ray direction mirrored about the normal.
        over_point: Point nudged along the normal, origin for shadow and
            reflection rays.
        under_point: Point nudged against the normal, origin for refraction
            rays.
        n1: Refractive index of the medium being exited.
        n2: Refractive index of the medium being entered.
    """

    t: float
    shape: Shape
    point: Tuple
    eyev: Tuple
    normalv: Tuple
    inside: bool
    reflectv: Tuple
    over_point: Tuple
    under_point: Tuple
    n1: float
    n2: float


def refractive_indices(target: Intersection, xs: Sequence[Intersection]) -> tuple[float, float]:
    """Find the refractive indices on both sides of ``target``.

    Args:
        target: The intersection being shaded.
        xs: Every intersection of the ray, sorted by ascending ``t``.

    Returns:
        Tuple of (n1, n2). Both are 1.0 if ``target`` is not in ``xs``.
    """
    n1 = DEFAULT_REFRACTIVE_INDEX
    n2 = DEFAULT_REFRACTIVE_INDEX
    containers: list[Shape] = []

    for i in xs:
        is_target = i == target
        if is_target and containers:
            n1 = containers[-1].material.refractive_index

        if i.shape in containers:
            containers.remove(i.shape)
        else:
            containers.append(i.shape)

        if is_target:
            if containers:
                n2 = containers[-1].material.refractive_index
            break

    return n1, n2


def prepare_computations(
    target: Intersection,
    ray: Ray,
    xs: Sequence[Intersection] | None = None,
) -> Computation:
    """Build the shading context for an intersection.

    Args:
        target: The intersection to shade (usually ``hit(xs)``).
        ray: The ray that produced it.
        xs: All intersections of the ray, sorted. Needed for the refractive
            indices; defaults to ``[target]``.

    Returns:
        The Computation for ``target``.
    """
    if xs is None:
        xs = [target]

    point = ray.position(target.t)
    eyev = -ray.direction
    normalv = target.shape.normal_at(point)

    inside = False
    if dot(normalv, eyev) < 0.0:
        inside = True
        normalv = -normalv

    n1, n2 = refractive_indices(target, xs)

    return Computation(
        t=target.t,
        shape=target.shape,
        point=point,
        eyev=eyev,
        normalv=normalv,
        inside=inside,
        reflectv=reflect(ray.direction, normalv),
        over_point=point + normalv * SHADOW_BIAS,
        under_point=point - normalv * SHADOW_BIAS,
        n1=n1,
        n2=n2,
    )
