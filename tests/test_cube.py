"""Unit tests for the axis-aligned cube primitive.

Tests cover:
- Slab intersection from each face and from inside
- Rays that miss, including rays parallel to a pair of faces
- Face normals, including edges and corners
- The kernel-side slab solver
"""

import pytest
import taichi as ti


class TestCubeIntersection:
    """Tests for ray-cube intersection."""

    @pytest.mark.parametrize(
        "origin, direction, t1, t2",
        [
            ((5.0, 0.5, 0.0), (-1.0, 0.0, 0.0), 4.0, 6.0),
            ((-5.0, 0.5, 0.0), (1.0, 0.0, 0.0), 4.0, 6.0),
            ((0.5, 5.0, 0.0), (0.0, -1.0, 0.0), 4.0, 6.0),
            ((0.5, -5.0, 0.0), (0.0, 1.0, 0.0), 4.0, 6.0),
            ((0.5, 0.0, 5.0), (0.0, 0.0, -1.0), 4.0, 6.0),
            ((0.5, 0.0, -5.0), (0.0, 0.0, 1.0), 4.0, 6.0),
            ((0.0, 0.5, 0.0), (0.0, 0.0, 1.0), -1.0, 1.0),
        ],
    )
    def test_ray_hits_cube(self, origin, direction, t1, t2):
        from whitted.core.ray import Ray
        from whitted.core.tuples import point, vector
        from whitted.geometry.cube import Cube

        xs = Cube().local_intersect(Ray(point(*origin), vector(*direction)))
        assert len(xs) == 2
        assert abs(xs[0] - t1) < 1e-9
        assert abs(xs[1] - t2) < 1e-9

    @pytest.mark.parametrize(
        "origin, direction",
        [
            ((-2.0, 0.0, 0.0), (0.2673, 0.5345, 0.8018)),
            ((0.0, -2.0, 0.0), (0.8018, 0.2673, 0.5345)),
            ((0.0, 0.0, -2.0), (0.5345, 0.8018, 0.2673)),
            ((2.0, 0.0, 2.0), (0.0, 0.0, -1.0)),
            ((0.0, 2.0, 2.0), (0.0, -1.0, 0.0)),
            ((2.0, 2.0, 0.0), (-1.0, 0.0, 0.0)),
        ],
    )
    def test_ray_misses_cube(self, origin, direction):
        from whitted.core.ray import Ray
        from whitted.core.tuples import point, vector
        from whitted.geometry.cube import Cube

        assert Cube().local_intersect(Ray(point(*origin), vector(*direction))) == []

    def test_check_axis_parallel_outside_slab(self):
        from whitted.geometry.cube import check_axis

        tmin, tmax = check_axis(2.0, 0.0)
        # Both bounds far behind the origin, so no finite interval overlaps
        assert tmin <= tmax < -1e20

    def test_check_axis_parallel_inside_slab(self):
        from whitted.geometry.cube import check_axis

        tmin, tmax = check_axis(0.5, 0.0)
        assert tmin < -1e20
        assert tmax > 1e20


class TestCubeNormal:
    """Tests for cube face normals."""

    @pytest.mark.parametrize(
        "p, n",
        [
            ((1.0, 0.5, -0.8), (1.0, 0.0, 0.0)),
            ((-1.0, -0.2, 0.9), (-1.0, 0.0, 0.0)),
            ((-0.4, 1.0, -0.1), (0.0, 1.0, 0.0)),
            ((0.3, -1.0, -0.7), (0.0, -1.0, 0.0)),
            ((-0.6, 0.3, 1.0), (0.0, 0.0, 1.0)),
            ((0.4, 0.4, -1.0), (0.0, 0.0, -1.0)),
            ((1.0, 1.0, 1.0), (1.0, 0.0, 0.0)),
            ((-1.0, -1.0, -1.0), (-1.0, 0.0, 0.0)),
        ],
    )
    def test_normal_on_surface(self, p, n):
        from whitted.core.tuples import equal, point, vector
        from whitted.geometry.cube import Cube

        assert equal(Cube().local_normal_at(point(*p)), vector(*n))


class TestCubeKernel:
    """Tests for cube_roots and cube_normal inside kernels."""

    def test_kernel_roots_and_normal(self):
        from whitted.geometry.cube import cube_normal, cube_roots, vec3

        counts = ti.field(dtype=ti.i32, shape=3)
        roots = ti.field(dtype=ti.math.vec2, shape=3)
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            n0, a0, b0 = cube_roots(vec3(5.0, 0.5, 0.0), vec3(-1.0, 0.0, 0.0))
            counts[0] = n0
            roots[0] = ti.math.vec2(a0, b0)
            n1, a1, b1 = cube_roots(vec3(0.0, 0.5, 0.0), vec3(0.0, 0.0, 1.0))
            counts[1] = n1
            roots[1] = ti.math.vec2(a1, b1)
            n2, a2, b2 = cube_roots(vec3(2.0, 2.0, 0.0), vec3(-1.0, 0.0, 0.0))
            counts[2] = n2
            roots[2] = ti.math.vec2(a2, b2)
            normal[None] = cube_normal(vec3(-0.4, 1.0, -0.1))

        test_kernel()
        assert counts[0] == 2
        assert abs(roots[0][0] - 4.0) < 1e-5
        assert abs(roots[0][1] - 6.0) < 1e-5
        assert counts[1] == 2
        assert abs(roots[1][0] + 1.0) < 1e-5
        assert abs(roots[1][1] - 1.0) < 1e-5
        assert counts[2] == 0
        n = normal[None]
        assert abs(n[0]) < 1e-6 and abs(n[1] - 1.0) < 1e-6 and abs(n[2]) < 1e-6
