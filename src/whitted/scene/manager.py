"""Scene manager that mirrors a World into Taichi fields.

The Python ``World`` is the source of truth for a scene. Before a Taichi
render, the SceneManager flattens it into Structure-of-Arrays fields that
render kernels can read:

- Per shape: kind, inverse transform, normal matrix and the material
  coefficients (the material is owned by the shape, so it shares the index)
- Per shape pattern: kind (``PatternKind.NONE`` without one), both colors and
  the pattern inverse transform
- The single point light

Shape order in the fields is world insertion order, which the kernels use to
break ties between intersections at identical ``t``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.scene.world import default_world
    >>> scene = SceneManager()
    >>> scene.load(default_world())
    >>> scene.get_shape_count()
    2
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from whitted.core.matrix import identity
from whitted.geometry.shape import Shape, ShapeKind
from whitted.materials.patterns import PatternKind

if TYPE_CHECKING:
    from whitted.scene.world import World

logger = logging.getLogger(__name__)

# Maximum number of shapes supported in the scene
MAX_SHAPES = 256

# =============================================================================
# Shape Storage (Structure of Arrays)
# =============================================================================

shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SHAPES)
shape_normal_matrices = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())

# =============================================================================
# Material Storage (indexed by shape)
# =============================================================================

material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
material_ambient = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_diffuse = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_specular = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_reflective = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_transparency = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_refractive_index = ti.field(dtype=ti.f32, shape=MAX_SHAPES)

pattern_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
pattern_colors_a = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
pattern_colors_b = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
pattern_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SHAPES)

# =============================================================================
# Light
# =============================================================================

light_position = ti.Vector.field(3, dtype=ti.f32, shape=())
light_intensity = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_scene() -> None:
    """Remove all shapes from the Taichi fields.

    Only the count is reset; stale entries are overwritten by the next load.
    """
    num_shapes[None] = 0


def get_shape_count() -> int:
    """Get the number of shapes currently loaded into the fields."""
    return int(num_shapes[None])


@dataclass
class ShapeInfo:
    """Bookkeeping for one uploaded shape.

    Attributes:
        index: The index of the shape in the Taichi fields.
        kind: The shape variant.
        shape: The Python shape the entry was built from.
    """

    index: int
    kind: ShapeKind
    shape: Shape


class SceneManager:
    """Uploads a World into the module-level Taichi fields.

    Attributes:
        shapes: ShapeInfo for every uploaded shape, in field order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.shapes: list[ShapeInfo] = []
        clear_scene()

    def clear(self) -> None:
        """Clear the Taichi fields and the local bookkeeping."""
        clear_scene()
        self.shapes.clear()

    def get_shape_count(self) -> int:
        return get_shape_count()

    def index_of(self, shape: Shape) -> int:
        """Get the field index of an uploaded shape.

        Raises:
            KeyError: If the shape was not part of the loaded world.
        """
        for info in self.shapes:
            if info.shape == shape:
                return info.index
        raise KeyError(f"{shape!r} is not loaded")

    def load(self, world: "World") -> None:
        """Replace the field contents with the given world.

        Args:
            world: The World to upload.

        Raises:
            RuntimeError: If the world has no light or more than MAX_SHAPES
                shapes.
            ValueError: If a material has an out-of-range coefficient.
        """
        if world.light is None:
            raise RuntimeError("World has no light. Set world.light before rendering.")
        count = len(world.shapes)
        if count > MAX_SHAPES:
            raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")

        self.clear()

        kinds = np.zeros(MAX_SHAPES, dtype=np.int32)
        inverses = np.zeros((MAX_SHAPES, 4, 4), dtype=np.float32)
        normal_matrices = np.zeros((MAX_SHAPES, 4, 4), dtype=np.float32)
        colors = np.zeros((MAX_SHAPES, 3), dtype=np.float32)
        coefficients = {
            name: np.zeros(MAX_SHAPES, dtype=np.float32)
            for name in (
                "ambient",
                "diffuse",
                "specular",
                "shininess",
                "reflective",
                "transparency",
                "refractive_index",
            )
        }
        p_kinds = np.full(MAX_SHAPES, int(PatternKind.NONE), dtype=np.int32)
        p_colors_a = np.zeros((MAX_SHAPES, 3), dtype=np.float32)
        p_colors_b = np.zeros((MAX_SHAPES, 3), dtype=np.float32)
        p_inverses = np.zeros((MAX_SHAPES, 4, 4), dtype=np.float32)
        p_inverses[:] = identity(4)

        for index, shape in enumerate(world.shapes):
            material = shape.material
            material.validate()

            kinds[index] = int(shape.kind)
            inverses[index] = shape.inverse
            normal_matrices[index] = shape.normal_matrix
            colors[index] = material.color[:3]
            for name, values in coefficients.items():
                values[index] = getattr(material, name)

            pattern = material.pattern
            if pattern is not None:
                p_kinds[index] = int(pattern.kind)
                p_colors_a[index] = pattern.a[:3]
                p_colors_b[index] = pattern.b[:3]
                p_inverses[index] = pattern.inverse

            self.shapes.append(ShapeInfo(index=index, kind=shape.kind, shape=shape))

        shape_kinds.from_numpy(kinds)
        shape_inverses.from_numpy(inverses)
        shape_normal_matrices.from_numpy(normal_matrices)
        material_colors.from_numpy(colors)
        material_ambient.from_numpy(coefficients["ambient"])
        material_diffuse.from_numpy(coefficients["diffuse"])
        material_specular.from_numpy(coefficients["specular"])
        material_shininess.from_numpy(coefficients["shininess"])
        material_reflective.from_numpy(coefficients["reflective"])
        material_transparency.from_numpy(coefficients["transparency"])
        material_refractive_index.from_numpy(coefficients["refractive_index"])
        pattern_kinds.from_numpy(p_kinds)
        pattern_colors_a.from_numpy(p_colors_a)
        pattern_colors_b.from_numpy(p_colors_b)
        pattern_inverses.from_numpy(p_inverses)

        position = world.light.position
        intensity = world.light.intensity
        light_position[None] = [float(position[0]), float(position[1]), float(position[2])]
        light_intensity[None] = [float(intensity[0]), float(intensity[1]), float(intensity[2])]

        num_shapes[None] = count
        logger.debug("Loaded %d shapes into scene fields", count)
