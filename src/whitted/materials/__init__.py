"""Materials module: Phong materials and procedural patterns.

Components:
    material: Material coefficients and the Phong ``lighting`` function
    patterns: Stripe, gradient, ring and checker patterns
"""

from .material import AIR, DIAMOND, GLASS, VACUUM, WATER, Material, lighting
from .patterns import (
    CheckerPattern,
    GradientPattern,
    Pattern,
    PatternKind,
    RingPattern,
    StripePattern,
)

__all__ = [
    # Material
    "Material",
    "lighting",
    "VACUUM",
    "AIR",
    "WATER",
    "GLASS",
    "DIAMOND",
    # Patterns
    "Pattern",
    "PatternKind",
    "StripePattern",
    "GradientPattern",
    "RingPattern",
    "CheckerPattern",
]
