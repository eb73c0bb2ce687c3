"""Core module: numeric foundation and rendering.

Components:
    tuples: Points, vectors and colors as NumPy 4-tuples
    matrix: 4x4 matrix helpers with a determinant-checked inverse
    transforms: Translation, scaling, rotation, shearing and view transforms
    ray: Ray data structure and kernel-side ray helpers
    integrator: Taichi render kernel (Whitted recursion without recursion)
    renderer: Scanline renderer driving the integrator in row bands
"""

from .matrix import (
    Matrix,
    SingularMatrixError,
    determinant,
    identity,
    inverse,
    is_invertible,
    make_matrix,
    matrices_equal,
    transpose,
)
from .ray import Ray, vec3
from .transforms import (
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from .tuples import (
    BLACK,
    EPSILON,
    WHITE,
    Tuple,
    color,
    cross,
    dot,
    equal,
    hadamard,
    magnitude,
    normalize,
    point,
    reflect,
    vector,
)

# Note: integrator and renderer are NOT imported here. They declare Taichi
# fields, which requires ti.init() to run first. Import them directly:
#   from whitted.core.renderer import ScanlineRenderer

__all__ = [
    # Tuples
    "Tuple",
    "EPSILON",
    "BLACK",
    "WHITE",
    "point",
    "vector",
    "color",
    "equal",
    "magnitude",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "hadamard",
    # Matrices
    "Matrix",
    "SingularMatrixError",
    "identity",
    "make_matrix",
    "transpose",
    "matrices_equal",
    "determinant",
    "is_invertible",
    "inverse",
    # Transforms
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "view_transform",
    # Rays
    "Ray",
    "vec3",
]
