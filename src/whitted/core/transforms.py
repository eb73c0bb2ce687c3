"""Affine transformation matrices.

All transforms are 4x4 matrices acting on homogeneous tuples, so
translation moves points but leaves vectors untouched. Chained transforms
read right to left: ``translation(...) @ scaling(...)`` scales first.
"""

import math

import numpy as np

from whitted.core.matrix import Matrix, identity
from whitted.core.tuples import Tuple, cross, normalize


def translation(x: float, y: float, z: float) -> Matrix:
    """Create a translation matrix."""
    m = identity(4)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m


def scaling(x: float, y: float, z: float) -> Matrix:
    """Create a scaling matrix. Negative factors reflect across an axis."""
    m = identity(4)
    m[0, 0] = x
    m[1, 1] = y
    m[2, 2] = z
    return m


def rotation_x(radians: float) -> Matrix:
    """Rotate around the x axis (left-handed)."""
    c, s = math.cos(radians), math.sin(radians)
    m = identity(4)
    m[1, 1] = c
    m[1, 2] = -s
    m[2, 1] = s
    m[2, 2] = c
    return m


def rotation_y(radians: float) -> Matrix:
    """Rotate around the y axis (left-handed)."""
    c, s = math.cos(radians), math.sin(radians)
    m = identity(4)
    m[0, 0] = c
    m[0, 2] = s
    m[2, 0] = -s
    m[2, 2] = c
    return m


def rotation_z(radians: float) -> Matrix:
    """Rotate around the z axis (left-handed)."""
    c, s = math.cos(radians), math.sin(radians)
    m = identity(4)
    m[0, 0] = c
    m[0, 1] = -s
    m[1, 0] = s
    m[1, 1] = c
    return m


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
    """Create a shearing matrix.

    Each argument moves one coordinate in proportion to another, e.g. ``xy``
    moves x in proportion to y.
    """
    m = identity(4)
    m[0, 1] = xy
    m[0, 2] = xz
    m[1, 0] = yx
    m[1, 2] = yz
    m[2, 0] = zx
    m[2, 1] = zy
    return m


def view_transform(from_point: Tuple, to_point: Tuple, up: Tuple) -> Matrix:
    """Orient the world relative to an eye position.

    Builds the camera basis the same way a look-at camera does: ``forward``
    points from the eye toward the target, ``left`` is perpendicular to
    forward and up, and ``true_up`` completes the orthonormal frame.

    Args:
        from_point: Eye position in world space.
        to_point: Point the eye is looking at.
        up: Approximate up vector (need not be exactly perpendicular).

    Returns:
        A matrix that maps world space into camera space, with the eye at
        the origin looking down -z.
    """
    forward = normalize(to_point - from_point)
    left = cross(forward, normalize(up))
    true_up = cross(left, forward)
    orientation = np.array(
        [
            [left[0], left[1], left[2], 0.0],
            [true_up[0], true_up[1], true_up[2], 0.0],
            [-forward[0], -forward[1], -forward[2], 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )
    return orientation @ translation(-from_point[0], -from_point[1], -from_point[2])
