"""Whitted integrator: the Taichi render kernel.

This module evaluates the same recursive color as ``World.color_at`` for
every pixel in parallel. Taichi functions cannot recurse, so

    color_at(ray, d) = surface(hit)
                     + reflective   * color_at(reflect ray, d - 1)
                     + transparency * color_at(refract ray, d - 1)

is walked depth-first with a fixed-size local stack of pending rays. Each
entry carries its origin, direction, remaining budget and weight (the
product of the reflective/transparency factors that spawned it). Popping an
entry adds ``weight * surface`` at its hit and pushes only the children that
can contribute: a reflected ray when ``reflective > 0``, a refracted ray when
the surface is transparent and not totally internally reflecting, and
neither once the budget is spent. Scenes without mirrors or glass therefore
trace one ray per pixel. The stack never holds more than ``max_depth + 1``
entries, so its size is fixed by MAX_DEPTH_LIMIT.

Refractive indices (n1, n2) are found without a containers list. A shape
contains the hit point when an odd number of its crossings precede the hit
(ordering by ``t``, then shape index, then root index, the same order the
sorted Python intersection list uses). The innermost container is the one
whose last crossing comes latest.

Key features:
    - Shapes, materials and the light read from the scene manager fields
    - Shadow test at every hit
    - Row-range kernel launches for scanline progress reporting

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.camera import Camera
    >>> from whitted.camera.pinhole import setup_camera
    >>> from whitted.core.integrator import render_rows, setup_render_target
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.scene.world import default_world
    >>>
    >>> SceneManager().load(default_world())
    >>> setup_camera(Camera(11, 11, 1.5707963))
    >>> setup_render_target(11, 11)
    >>> render_rows(0, 11, max_depth=5)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_ray
from whitted.core.ray import transform_point, transform_vector
from whitted.core.tuples import EPSILON
from whitted.geometry.cube import cube_normal, cube_roots
from whitted.geometry.plane import plane_roots
from whitted.geometry.shape import ShapeKind
from whitted.geometry.sphere import sphere_normal, sphere_roots
from whitted.materials.material import phong
from whitted.materials.patterns import PatternKind, pattern_color
from whitted.scene.intersection import DEFAULT_REFRACTIVE_INDEX, SHADOW_BIAS
from whitted.scene.manager import (
    light_intensity,
    light_position,
    material_ambient,
    material_colors,
    material_diffuse,
    material_reflective,
    material_refractive_index,
    material_shininess,
    material_specular,
    material_transparency,
    num_shapes,
    pattern_colors_a,
    pattern_colors_b,
    pattern_inverses,
    pattern_kinds,
    shape_inverses,
    shape_kinds,
    shape_normal_matrices,
)
from whitted.scene.world import MAX_DEPTH_LIMIT, validate_max_depth

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Upper bound on t for closest-hit searches
T_MAX = 1e10

# Pending rays per pixel: one sibling per level plus the ray being shaded
STACK_SIZE = MAX_DEPTH_LIMIT + 1

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Colors are returned unclamped, as accumulated by the kernel.

    Returns:
        Array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = _color_buffer.to_numpy()[:width, :height, :]
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2)))


# =============================================================================
# Scene Queries
# =============================================================================


@ti.func
def _local_roots(kind: ti.i32, origin: vec3, direction: vec3):
    count = 0
    t0 = 0.0
    t1 = 0.0
    if kind == int(ShapeKind.SPHERE):
        count, t0, t1 = sphere_roots(origin, direction)
    elif kind == int(ShapeKind.PLANE):
        count, t0, t1 = plane_roots(origin, direction)
    elif kind == int(ShapeKind.CUBE):
        count, t0, t1 = cube_roots(origin, direction)
    return count, t0, t1


@ti.func
def _object_roots(j: ti.i32, origin: vec3, direction: vec3):
    """Intersect a world-space ray with shape ``j``.

    Returns:
        Tuple of (count, t0, t1). Only the first ``count`` roots are valid.
    """
    inv = shape_inverses[j]
    return _local_roots(
        shape_kinds[j], transform_point(inv, origin), transform_vector(inv, direction)
    )


@ti.func
def _closest_hit(origin: vec3, direction: vec3):
    """Find the smallest positive root across the scene.

    Shapes are scanned in world order and roots in ascending order, and only a
    strictly smaller ``t`` replaces the current best, so ties resolve to the
    first record of the sorted intersection list.

    Returns:
        Tuple of (shape index, root index, t). The shape index is -1 on a miss.
    """
    best_j = -1
    best_k = -1
    best_t = T_MAX
    for j in range(num_shapes[None]):
        count, t0, t1 = _object_roots(j, origin, direction)
        if count > 0 and t0 > 0.0 and t0 < best_t:
            best_j = j
            best_k = 0
            best_t = t0
        if count > 1 and t1 > 0.0 and t1 < best_t:
            best_j = j
            best_k = 1
            best_t = t1
    return best_j, best_k, best_t


@ti.func
def _is_shadowed(point: vec3) -> ti.i32:
    """Check for any crossing between ``point`` and the light.

    A point at the light itself is never shadowed.
    """
    to_light = light_position[None] - point
    distance = tm.length(to_light)

    shadowed = 0
    if distance >= EPSILON:
        direction = to_light / distance
        for j in range(num_shapes[None]):
            count, t0, t1 = _object_roots(j, point, direction)
            if count > 0 and t0 > 0.0 and t0 < distance:
                shadowed = 1
            if count > 1 and t1 > 0.0 and t1 < distance:
                shadowed = 1
    return shadowed


@ti.func
def _precedes(t: ti.f32, j: ti.i32, target_t: ti.f32, target_j: ti.i32) -> ti.i32:
    # Roots of different shapes only; same-shape roots compare by root index
    result = 0
    if t < target_t or (t == target_t and j < target_j):
        result = 1
    return result


@ti.func
def _refractive_indices(origin: vec3, direction: vec3, hj: ti.i32, hk: ti.i32, ht: ti.f32):
    """Compute (n1, n2) at root ``hk`` of shape ``hj``.

    Returns:
        Tuple of (n1, n2).
    """
    # Innermost container including and excluding the hit shape
    top_all = -1
    top_all_t = -T_MAX
    top_other = -1
    top_other_t = -T_MAX
    target_inside = 0

    for j in range(num_shapes[None]):
        count, t0, t1 = _object_roots(j, origin, direction)
        crossings = 0
        last_t = -T_MAX
        if j == hj:
            crossings = hk
            last_t = t0
        else:
            if count > 0 and _precedes(t0, j, ht, hj) == 1:
                crossings += 1
                last_t = t0
            if count > 1 and _precedes(t1, j, ht, hj) == 1:
                crossings += 1
                last_t = t1

        if crossings % 2 == 1:
            if j == hj:
                target_inside = 1
            else:
                if last_t >= top_other_t:
                    top_other = j
                    top_other_t = last_t
            if last_t >= top_all_t:
                top_all = j
                top_all_t = last_t

    n1 = DEFAULT_REFRACTIVE_INDEX
    if top_all >= 0:
        n1 = material_refractive_index[top_all]

    n2 = material_refractive_index[hj]
    if target_inside == 1:
        n2 = DEFAULT_REFRACTIVE_INDEX
        if top_other >= 0:
            n2 = material_refractive_index[top_other]
    return n1, n2


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _surface_normal(j: ti.i32, world_point: vec3) -> vec3:
    object_point = transform_point(shape_inverses[j], world_point)
    kind = shape_kinds[j]
    local_normal = vec3(0.0, 1.0, 0.0)
    if kind == int(ShapeKind.SPHERE):
        local_normal = sphere_normal(object_point)
    elif kind == int(ShapeKind.CUBE):
        local_normal = cube_normal(object_point)
    return tm.normalize(transform_vector(shape_normal_matrices[j], local_normal))


@ti.func
def _base_color(j: ti.i32, world_point: vec3) -> vec3:
    result = material_colors[j]
    kind = pattern_kinds[j]
    if kind != int(PatternKind.NONE):
        object_point = transform_point(shape_inverses[j], world_point)
        pattern_point = transform_point(pattern_inverses[j], object_point)
        result = pattern_color(kind, pattern_colors_a[j], pattern_colors_b[j], pattern_point)
    return result


@ti.func
def _surface_color(j: ti.i32, over_point: vec3, eyev: vec3, normalv: vec3) -> vec3:
    """Local Phong color at a hit, with the shadow test at ``over_point``."""
    return phong(
        _base_color(j, over_point),
        material_ambient[j],
        material_diffuse[j],
        material_specular[j],
        material_shininess[j],
        light_position[None],
        light_intensity[None],
        over_point,
        eyev,
        normalv,
        _is_shadowed(over_point),
    )


@ti.func
def _trace(origin: vec3, direction: vec3, max_depth: ti.i32):
    """Evaluate the recursive Whitted color of a ray with an explicit stack.

    Args:
        origin: Primary ray origin.
        direction: Primary ray direction (unit length).
        max_depth: Recursion budget, at most MAX_DEPTH_LIMIT.

    Returns:
        Tuple of (color, rays) where color is what ``World.color_at`` would
        compute for the ray and rays is the number of rays cast from the
        stack.
    """
    result = vec3(0.0, 0.0, 0.0)
    rays = 0

    # Stack columns: origin, direction, weight, remaining budget
    origin_x = ti.Vector.zero(ti.f32, STACK_SIZE)
    origin_y = ti.Vector.zero(ti.f32, STACK_SIZE)
    origin_z = ti.Vector.zero(ti.f32, STACK_SIZE)
    direction_x = ti.Vector.zero(ti.f32, STACK_SIZE)
    direction_y = ti.Vector.zero(ti.f32, STACK_SIZE)
    direction_z = ti.Vector.zero(ti.f32, STACK_SIZE)
    weights = ti.Vector.zero(ti.f32, STACK_SIZE)
    budgets = ti.Vector.zero(ti.i32, STACK_SIZE)

    origin_x[0] = origin.x
    origin_y[0] = origin.y
    origin_z[0] = origin.z
    direction_x[0] = direction.x
    direction_y[0] = direction.y
    direction_z[0] = direction.z
    weights[0] = 1.0
    budgets[0] = max_depth
    top = 1

    while top > 0:
        top -= 1
        ray_origin = vec3(origin_x[top], origin_y[top], origin_z[top])
        ray_direction = vec3(direction_x[top], direction_y[top], direction_z[top])
        weight = weights[top]
        remaining = budgets[top]
        rays += 1

        hj, hk, ht = _closest_hit(ray_origin, ray_direction)
        if hj >= 0:
            point = ray_origin + ray_direction * ht
            eyev = -ray_direction
            normalv = _surface_normal(hj, point)
            if tm.dot(normalv, eyev) < 0.0:
                normalv = -normalv
            over_point = point + normalv * SHADOW_BIAS

            result += weight * _surface_color(hj, over_point, eyev, normalv)

            if remaining > 0:
                reflective = material_reflective[hj]
                if reflective > 0.0:
                    reflectv = tm.reflect(ray_direction, normalv)
                    origin_x[top] = over_point.x
                    origin_y[top] = over_point.y
                    origin_z[top] = over_point.z
                    direction_x[top] = reflectv.x
                    direction_y[top] = reflectv.y
                    direction_z[top] = reflectv.z
                    weights[top] = weight * reflective
                    budgets[top] = remaining - 1
                    top += 1

                transparency = material_transparency[hj]
                if transparency > 0.0:
                    n1, n2 = _refractive_indices(ray_origin, ray_direction, hj, hk, ht)
                    n_ratio = n1 / n2
                    cos_i = tm.dot(eyev, normalv)
                    sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
                    if sin2_t <= 1.0:
                        cos_t = ti.sqrt(1.0 - sin2_t)
                        under_point = point - normalv * SHADOW_BIAS
                        refractv = normalv * (n_ratio * cos_i - cos_t) - eyev * n_ratio
                        origin_x[top] = under_point.x
                        origin_y[top] = under_point.y
                        origin_z[top] = under_point.z
                        direction_x[top] = refractv.x
                        direction_y[top] = refractv.y
                        direction_z[top] = refractv.z
                        weights[top] = weight * transparency
                        budgets[top] = remaining - 1
                        top += 1

    return result, rays


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(row_start: ti.i32, row_end: ti.i32, width: ti.i32, max_depth: ti.i32):
    """Render every pixel of rows [row_start, row_end) into the color buffer."""
    for x, y in ti.ndrange(width, (row_start, row_end)):
        origin, direction = get_ray(x, y)
        color, rays = _trace(origin, direction, max_depth)
        _color_buffer[x, y] = color


@ti.kernel
def _render_single_pixel(px: ti.i32, py: ti.i32, max_depth: ti.i32) -> vec3:
    origin, direction = get_ray(px, py)
    color, rays = _trace(origin, direction, max_depth)
    return color


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
) -> vec3:
    color, rays = _trace(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)), max_depth)
    return color


@ti.kernel
def _count_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
) -> ti.i32:
    color, rays = _trace(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)), max_depth)
    return rays


@ti.kernel
def _closest_hit_query(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
) -> vec3:
    hj, hk, ht = _closest_hit(vec3(ox, oy, oz), vec3(dx, dy, dz))
    return vec3(ti.cast(hj, ti.f32), ti.cast(hk, ti.f32), ht)


@ti.kernel
def _refractive_indices_query(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    hj: ti.i32,
    hk: ti.i32,
) -> tm.vec2:
    origin = vec3(ox, oy, oz)
    direction = vec3(dx, dy, dz)
    count, t0, t1 = _object_roots(hj, origin, direction)
    ht = t0
    if hk == 1:
        ht = t1
    n1, n2 = _refractive_indices(origin, direction, hj, hk, ht)
    return tm.vec2(n1, n2)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int, max_depth: int) -> None:
    """Render a band of rows into the render target.

    Args:
        row_start: First row to render (0 = top).
        row_end: One past the last row to render.
        max_depth: Recursion budget for reflected and refracted rays.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image or max_depth is
            outside 0..MAX_DEPTH_LIMIT.
    """
    _check_render_target_initialized()
    validate_max_depth(max_depth)

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) is outside 0..{height}")
    if row_start == row_end:
        return
    _render_rows(row_start, row_end, width, max_depth)


def render_pixel(px: int, py: int, max_depth: int) -> tuple[float, float, float]:
    """Render a single pixel of the configured camera.

    Python-callable for testing; production renders go through render_rows().

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If max_depth is outside 0..MAX_DEPTH_LIMIT.
    """
    validate_max_depth(max_depth)
    color = _render_single_pixel(px, py, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
) -> tuple[float, float, float]:
    """Trace an arbitrary world-space ray through the loaded scene.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z); normalized before tracing.
        max_depth: Recursion budget.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If max_depth is outside 0..MAX_DEPTH_LIMIT.
    """
    validate_max_depth(max_depth)
    color = _trace_single_ray(*origin, *direction, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def count_traced_rays(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
) -> int:
    """Count the rays the integrator casts to shade one world-space ray.

    The primary ray counts as one; every reflected or refracted ray that is
    spawned adds one more.

    Raises:
        ValueError: If max_depth is outside 0..MAX_DEPTH_LIMIT.
    """
    validate_max_depth(max_depth)
    return int(_count_single_ray(*origin, *direction, max_depth))


def closest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[int, int, float] | None:
    """Find the visible hit of a ray against the loaded scene.

    Returns:
        Tuple of (shape index, root index, t), or None on a miss.
    """
    result = _closest_hit_query(*origin, *direction)
    shape_index = int(round(float(result[0])))
    if shape_index < 0:
        return None
    return shape_index, int(round(float(result[1]))), float(result[2])


def refractive_indices_at(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    shape_index: int,
    root: int,
) -> tuple[float, float]:
    """Compute (n1, n2) where a ray crosses a loaded shape.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z).
        shape_index: Field index of the crossed shape.
        root: Which of the shape's roots (0 or 1) is the crossing.

    Returns:
        Tuple of (n1, n2).
    """
    result = _refractive_indices_query(*origin, *direction, shape_index, root)
    return float(result[0]), float(result[1])
