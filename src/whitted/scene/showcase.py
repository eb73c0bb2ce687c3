"""Showcase scene exercising every shape, pattern and material feature.

The showcase consists of:
- A checkered floor plane, slightly reflective
- A back wall plane with rings
- A hollow glass sphere (a glass shell around an air bubble)
- A mirror cube, rotated about y
- A striped sphere and a small gradient sphere
- One white point light above and to the left of the camera

Example:
    >>> from whitted.scene.showcase import ShowcaseParams, create_showcase_scene
    >>> world, camera = create_showcase_scene(ShowcaseParams(width=320, height=180))
    >>> canvas = camera.render(world, backend="python")
"""

import math
from dataclasses import dataclass

from whitted.camera.camera import Camera
from whitted.core.transforms import (
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    translation,
    view_transform,
)
from whitted.core.tuples import color, point, vector
from whitted.geometry.cube import Cube
from whitted.geometry.plane import Plane
from whitted.geometry.sphere import Sphere, glass_sphere
from whitted.materials.material import AIR, Material
from whitted.materials.patterns import (
    CheckerPattern,
    GradientPattern,
    RingPattern,
    StripePattern,
)
from whitted.scene.light import PointLight
from whitted.scene.world import World

# =============================================================================
# Showcase Parameters
# =============================================================================


@dataclass
class ShowcaseParams:
    """Parameters for configuring the showcase scene.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Camera field of view in radians.
        camera_from: Eye position.
        camera_to: Point the camera looks at.
        light_position: Position of the point light.
        light_color: RGB intensity of the point light.
        floor_reflective: Reflectivity of the checkered floor.
        mirror_reflective: Reflectivity of the mirror cube.
        glass_index: Refractive index of the glass shell.

    Example:
        >>> params = ShowcaseParams()
        >>> params.width, params.height
        (400, 225)
        >>> warm = ShowcaseParams(light_color=(1.0, 0.9, 0.8))
    """

    width: int = 400
    height: int = 225
    field_of_view: float = math.pi / 3.0
    camera_from: tuple[float, float, float] = (0.0, 1.8, -6.0)
    camera_to: tuple[float, float, float] = (0.0, 1.0, 0.0)
    light_position: tuple[float, float, float] = (-6.0, 8.0, -8.0)
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    floor_reflective: float = 0.2
    mirror_reflective: float = 0.9
    glass_index: float = 1.5


# =============================================================================
# Showcase Factory
# =============================================================================


def create_showcase_world(params: ShowcaseParams | None = None) -> World:
    """Build the showcase world.

    Args:
        params: Optional ShowcaseParams. If None, uses default ShowcaseParams().

    Returns:
        The world with its light and shapes.
    """
    if params is None:
        params = ShowcaseParams()

    world = World(light=PointLight(point(*params.light_position), color(*params.light_color)))

    floor = Plane(
        material=Material(
            pattern=CheckerPattern(color(0.9, 0.9, 0.9), color(0.15, 0.15, 0.2)),
            specular=0.0,
            reflective=params.floor_reflective,
        )
    )
    world.add(floor)

    wall = Plane(
        transform=translation(0.0, 0.0, 8.0) @ rotation_x(math.pi / 2.0),
        material=Material(
            pattern=RingPattern(
                color(0.55, 0.65, 0.8),
                color(0.35, 0.45, 0.6),
                transform=scaling(0.5, 0.5, 0.5),
            ),
            specular=0.0,
        ),
    )
    world.add(wall)

    # Hollow glass ball: a glass shell with an air bubble inside
    shell = glass_sphere(transform=translation(0.0, 1.0, 0.0))
    shell.material.refractive_index = params.glass_index
    shell.material.diffuse = 0.1
    shell.material.ambient = 0.0
    shell.material.specular = 1.0
    shell.material.shininess = 300.0
    shell.material.reflective = 0.1
    shell.material.color = color(0.1, 0.1, 0.1)
    world.add(shell)

    bubble = Sphere(
        transform=translation(0.0, 1.0, 0.0) @ scaling(0.6, 0.6, 0.6),
        material=Material(
            color=color(0.0, 0.0, 0.0),
            ambient=0.0,
            diffuse=0.0,
            specular=0.9,
            shininess=300.0,
            transparency=1.0,
            refractive_index=AIR,
        ),
    )
    world.add(bubble)

    mirror = Cube(
        transform=translation(2.4, 0.8, 1.5) @ rotation_y(math.pi / 5.0) @ scaling(0.8, 0.8, 0.8),
        material=Material(
            color=color(0.1, 0.1, 0.1),
            diffuse=0.1,
            specular=0.8,
            reflective=params.mirror_reflective,
        ),
    )
    world.add(mirror)

    striped = Sphere(
        transform=translation(-2.2, 0.75, 0.8) @ scaling(0.75, 0.75, 0.75),
        material=Material(
            pattern=StripePattern(
                color(0.9, 0.3, 0.2),
                color(0.95, 0.85, 0.3),
                transform=rotation_z(math.pi / 4.0) @ scaling(0.2, 0.2, 0.2),
            ),
            diffuse=0.8,
            specular=0.3,
        ),
    )
    world.add(striped)

    gradient = Sphere(
        transform=translation(-0.9, 0.35, -1.6) @ scaling(0.35, 0.35, 0.35),
        material=Material(
            pattern=GradientPattern(
                color(0.2, 0.8, 0.4),
                color(0.2, 0.3, 0.9),
                transform=translation(-1.0, 0.0, 0.0) @ scaling(2.0, 2.0, 2.0),
            ),
            specular=0.5,
        ),
    )
    world.add(gradient)

    return world


def create_showcase_camera(params: ShowcaseParams | None = None) -> Camera:
    """Build the showcase camera from the view parameters."""
    if params is None:
        params = ShowcaseParams()

    camera = Camera(params.width, params.height, params.field_of_view)
    camera.transform = view_transform(
        point(*params.camera_from),
        point(*params.camera_to),
        vector(0.0, 1.0, 0.0),
    )
    return camera


def create_showcase_scene(params: ShowcaseParams | None = None) -> tuple[World, Camera]:
    """Create the showcase world and a camera framing it.

    Args:
        params: Optional ShowcaseParams. If None, uses default ShowcaseParams().

    Returns:
        A tuple of (World, Camera).
    """
    if params is None:
        params = ShowcaseParams()
    return create_showcase_world(params), create_showcase_camera(params)
