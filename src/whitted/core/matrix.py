"""Square matrices for object, pattern and camera transforms.

Matrices are NumPy ``float64`` arrays. Multiplication and transposition
are NumPy's own; the determinant is computed by cofactor expansion so that
a singular matrix yields exactly ``0.0`` and is rejected by ``inverse``
instead of producing a matrix full of huge or NaN entries.

Example:
    >>> from whitted.core.matrix import identity, inverse
    >>> from whitted.core.transforms import translation
    >>> m = translation(5.0, -3.0, 2.0)
    >>> inverse(m) @ m
"""

import numpy as np
import numpy.typing as npt

from whitted.core.tuples import EPSILON

# Type alias for matrices
Matrix = npt.NDArray[np.float64]


class SingularMatrixError(ValueError):
    """Raised when a matrix with determinant exactly zero is inverted."""


def identity(size: int = 4) -> Matrix:
    """Create an identity matrix."""
    return np.identity(size, dtype=np.float64)


def make_matrix(rows: list[list[float]]) -> Matrix:
    """Create a matrix from nested rows.

    Raises:
        ValueError: If the rows do not form a square matrix.
    """
    m = np.array(rows, dtype=np.float64)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise ValueError(f"Matrix must be square, got shape {m.shape}")
    return m


def transpose(m: Matrix) -> Matrix:
    """Return the transpose of a matrix."""
    return m.T.copy()


def matrices_equal(a: Matrix, b: Matrix) -> bool:
    """Compare two matrices element-wise within EPSILON."""
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) < EPSILON))


# =============================================================================
# Cofactor Expansion
# =============================================================================


def submatrix(m: Matrix, row: int, column: int) -> Matrix:
    """Remove one row and one column from a matrix."""
    return np.delete(np.delete(m, row, axis=0), column, axis=1)


def minor(m: Matrix, row: int, column: int) -> float:
    """Determinant of the submatrix at (row, column)."""
    return determinant(submatrix(m, row, column))


def cofactor(m: Matrix, row: int, column: int) -> float:
    """Minor at (row, column), negated when row + column is odd."""
    value = minor(m, row, column)
    if (row + column) % 2 == 1:
        return -value
    return value


def determinant(m: Matrix) -> float:
    """Compute the determinant by cofactor expansion along the first row.

    Args:
        m: A square matrix of size 1 or larger.

    Returns:
        The determinant as a float.
    """
    size = m.shape[0]
    if size == 1:
        return float(m[0, 0])
    if size == 2:
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])
    return float(sum(m[0, column] * cofactor(m, 0, column) for column in range(size)))


def is_invertible(m: Matrix) -> bool:
    """Check whether a matrix has an inverse (determinant not exactly 0)."""
    return determinant(m) != 0.0


def inverse(m: Matrix) -> Matrix:
    """Invert a matrix through its cofactor matrix.

    Args:
        m: The square matrix to invert.

    Returns:
        The inverse matrix.

    Raises:
        SingularMatrixError: If the determinant is exactly zero.
    """
    det = determinant(m)
    if det == 0.0:
        raise SingularMatrixError("Matrix is not invertible (determinant is 0)")

    size = m.shape[0]
    result = np.empty((size, size), dtype=np.float64)
    for row in range(size):
        for column in range(size):
            # Transposed assignment builds the adjugate in place
            result[column, row] = cofactor(m, row, column) / det
    return result
