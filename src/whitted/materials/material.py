"""Surface material and Phong local illumination.

A Material bundles the coefficients of the Phong reflection model with the
parameters the recursive stage needs (reflectivity, transparency and
refractive index) and an optional procedural pattern.

The ``lighting`` function evaluates the local contribution of one point
light:

    color = ambient + diffuse + specular

with diffuse and specular suppressed in shadow or when the light is behind
the surface. Results are not clamped; clamping only happens when an image
is encoded.

Example:
    >>> from whitted.core.tuples import color, point, vector
    >>> from whitted.geometry.sphere import Sphere
    >>> from whitted.scene.light import PointLight
    >>> m = Material()
    >>> light = PointLight(point(0.0, 0.0, -10.0), color(1.0, 1.0, 1.0))
    >>> lighting(m, Sphere(), light, point(0.0, 0.0, 0.0),
    ...          vector(0.0, 0.0, -1.0), vector(0.0, 0.0, -1.0), False)
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from whitted.core.tuples import BLACK, Tuple, color, dot, hadamard, normalize, reflect
from whitted.materials.patterns import Pattern

if TYPE_CHECKING:
    from whitted.geometry.shape import Shape
    from whitted.scene.light import PointLight

# Refractive indices of common media
VACUUM = 1.0
AIR = 1.00029
WATER = 1.333
GLASS = 1.5
DIAMOND = 2.417


@dataclass(eq=False)
class Material:
    """Phong material with reflection and refraction parameters.

    Attributes:
        color: Base surface color, used when no pattern is set.
        ambient: Ambient reflection coefficient (>= 0).
        diffuse: Diffuse reflection coefficient (>= 0).
        specular: Specular reflection coefficient (>= 0).
        shininess: Specular exponent (> 0). Larger values give smaller,
            tighter highlights.
        reflective: Mirror reflectance in [0, 1]. 0 disables reflected rays.
        transparency: Transmittance in [0, 1]. 0 disables refracted rays.
        refractive_index: Index of refraction (> 0). 1.0 is vacuum.
        pattern: Optional procedural pattern overriding ``color``.
    """

    color: Tuple = field(default_factory=lambda: color(1.0, 1.0, 1.0))
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = VACUUM
    pattern: Pattern | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check that every coefficient is in its valid range.

        Materials may be edited after construction, so the scene manager
        calls this again before uploading a world.

        Raises:
            ValueError: If any parameter is out of range.
        """
        for name in ("ambient", "diffuse", "specular"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"Material {name} = {value} must be non-negative")
        if self.shininess <= 0.0:
            raise ValueError(f"Material shininess = {self.shininess} must be positive")
        if not 0.0 <= self.reflective <= 1.0:
            raise ValueError(f"Material reflective = {self.reflective} is outside [0, 1]")
        if not 0.0 <= self.transparency <= 1.0:
            raise ValueError(f"Material transparency = {self.transparency} is outside [0, 1]")
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be positive"
            )


def lighting(
    material: Material,
    shape: "Shape",
    light: "PointLight",
    position: Tuple,
    eyev: Tuple,
    normalv: Tuple,
    in_shadow: bool,
) -> Tuple:
    """Compute the Phong color of a surface point lit by one point light.

    Args:
        material: The surface material.
        shape: The shape being shaded; needed to move the point into pattern
            space when the material has a pattern.
        light: The point light.
        position: The point being shaded, in world space.
        eyev: Unit vector from the point toward the eye.
        normalv: Unit surface normal at the point.
        in_shadow: Whether the point is occluded from the light.

    Returns:
        The resulting color (ambient + diffuse + specular), unclamped.
    """
    if material.pattern is not None:
        base_color = material.pattern.pattern_at_shape(shape, position)
    else:
        base_color = material.color

    effective_color = hadamard(base_color, light.intensity)
    ambient = effective_color * material.ambient
    if in_shadow:
        return ambient

    lightv = normalize(light.position - position)
    light_dot_normal = dot(lightv, normalv)
    if light_dot_normal < 0.0:
        # Light is on the other side of the surface
        return ambient + BLACK

    diffuse = effective_color * material.diffuse * light_dot_normal

    reflectv = reflect(-lightv, normalv)
    reflect_dot_eye = dot(reflectv, eyev)
    if reflect_dot_eye <= 0.0:
        specular = BLACK
    else:
        factor = math.pow(reflect_dot_eye, material.shininess)
        specular = light.intensity * material.specular * factor

    return ambient + diffuse + specular


# =============================================================================
# Kernel-side Evaluation
# =============================================================================


@ti.func
def phong(
    base_color: tm.vec3,
    ambient: ti.f32,
    diffuse: ti.f32,
    specular: ti.f32,
    shininess: ti.f32,
    light_position: tm.vec3,
    light_intensity: tm.vec3,
    position: tm.vec3,
    eyev: tm.vec3,
    normalv: tm.vec3,
    in_shadow: ti.i32,
) -> tm.vec3:
    """Kernel-side counterpart of ``lighting`` with unpacked material fields."""
    effective_color = base_color * light_intensity
    result = effective_color * ambient

    if in_shadow == 0:
        # Zero-length stays zero, as with the host-side normalize
        to_light = light_position - position
        lightv = tm.vec3(0.0, 0.0, 0.0)
        if tm.length(to_light) > 0.0:
            lightv = tm.normalize(to_light)
        light_dot_normal = tm.dot(lightv, normalv)
        if light_dot_normal >= 0.0:
            result += effective_color * diffuse * light_dot_normal
            reflect_dot_eye = tm.dot(tm.reflect(-lightv, normalv), eyev)
            if reflect_dot_eye > 0.0:
                result += light_intensity * specular * reflect_dot_eye**shininess
    return result
