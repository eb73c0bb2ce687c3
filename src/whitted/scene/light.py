"""Point light source."""

from dataclasses import dataclass

from whitted.core.tuples import Tuple, equal


@dataclass(eq=False)
class PointLight:
    """A point light with no size, emitting equally in every direction.

    Attributes:
        position: Light position in world space (homogeneous point).
        intensity: Light color and brightness (RGB, may exceed 1).
    """

    position: Tuple
    intensity: Tuple

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointLight):
            return NotImplemented
        return equal(self.position, other.position) and equal(self.intensity, other.intensity)
