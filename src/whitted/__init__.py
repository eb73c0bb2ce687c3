"""Whitted-style recursive ray tracer with a Taichi render backend.

This package renders scenes of spheres, planes and cubes lit by a point
light, with support for:
- Phong local illumination with hard shadows
- Procedural patterns (stripe, gradient, ring, checker)
- Recursive reflection and refraction with a bounded depth budget
- A pure-Python reference path and a data-parallel Taichi kernel

Subpackages:
    core: Tuples, matrices, transforms, rays, the render kernel and renderer
    geometry: Shape primitives and their intersection routines
    materials: Phong materials and procedural patterns
    scene: Intersections, lights, the World and the Taichi scene manager
    camera: Pixel-to-ray mapping and the render entry point
    preview: Canvas, PPM/PNG export and display utilities
"""

__version__ = "0.1.0"
