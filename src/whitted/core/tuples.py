"""Homogeneous tuples for points, vectors and colors.

Points and vectors are NumPy arrays of length 4 in homogeneous form: a point
carries ``w = 1`` and a vector ``w = 0``. The tag follows from ordinary
arithmetic, so adding a vector to a point yields a point, subtracting two
points yields a vector, and adding two points yields ``w = 2`` which is
neither (an undefined tuple). Colors are plain length-3 arrays.

Example:
    >>> from whitted.core.tuples import point, vector, normalize
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = normalize(vector(0.0, 0.0, 5.0))
    >>> is_point(p + v)
    True
"""

import math

import numpy as np
import numpy.typing as npt

# Type alias for tuples and colors
Tuple = npt.NDArray[np.float64]

# Tolerance for tuple and scalar equality
EPSILON = 1e-5


def make_tuple(x: float, y: float, z: float, w: float) -> Tuple:
    """Create a raw homogeneous tuple."""
    return np.array([x, y, z, w], dtype=np.float64)


def point(x: float, y: float, z: float) -> Tuple:
    """Create a point (w = 1)."""
    return make_tuple(x, y, z, 1.0)


def vector(x: float, y: float, z: float) -> Tuple:
    """Create a vector (w = 0)."""
    return make_tuple(x, y, z, 0.0)


def color(red: float, green: float, blue: float) -> Tuple:
    """Create an RGB color.

    Channels are unconstrained floats; clamping only happens when an
    image is encoded.
    """
    return np.array([red, green, blue], dtype=np.float64)


BLACK = color(0.0, 0.0, 0.0)
WHITE = color(1.0, 1.0, 1.0)


def is_point(t: Tuple) -> bool:
    """Check whether a homogeneous tuple is a point."""
    return bool(t[3] == 1.0)


def is_vector(t: Tuple) -> bool:
    """Check whether a homogeneous tuple is a vector."""
    return bool(t[3] == 0.0)


def approx_equal(a: float, b: float) -> bool:
    """Compare two scalars within EPSILON."""
    return abs(a - b) < EPSILON


def equal(a: Tuple, b: Tuple) -> bool:
    """Compare two tuples (or colors) component-wise within EPSILON.

    Tuples of different length are never equal, so a color never equals a
    point with the same components.
    """
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) < EPSILON))


# =============================================================================
# Vector Operations
# =============================================================================


def magnitude(v: Tuple) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(float(np.dot(v, v)))


def normalize(v: Tuple) -> Tuple:
    """Normalize a vector to unit length.

    Args:
        v: The vector to normalize.

    Returns:
        A unit vector with the same direction. A zero-length vector is
        returned unchanged rather than producing NaN components.
    """
    length = magnitude(v)
    if length == 0.0:
        return v.copy()
    return v / length


def dot(a: Tuple, b: Tuple) -> float:
    """Compute the dot product of two tuples."""
    return float(np.dot(a, b))


def cross(a: Tuple, b: Tuple) -> Tuple:
    """Compute the cross product of two vectors.

    Only the x, y and z components take part; the result is a vector.
    """
    x, y, z = np.cross(a[:3], b[:3])
    return vector(x, y, z)


def reflect(incident: Tuple, normal: Tuple) -> Tuple:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction ``incident - normal * 2 * dot(incident, normal)``.
    """
    return incident - normal * 2.0 * dot(incident, normal)


def hadamard(a: Tuple, b: Tuple) -> Tuple:
    """Multiply two colors component-wise."""
    return a * b


def as_xyz(t: Tuple) -> tuple[float, float, float]:
    """Return the first three components as a plain Python tuple."""
    return (float(t[0]), float(t[1]), float(t[2]))
