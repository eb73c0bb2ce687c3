"""Unit tests for points, vectors and colors.

Tests cover:
- Point/vector tagging and tolerant equality
- Arithmetic on homogeneous tuples
- Magnitude, normalization, dot and cross products
- Reflection about a normal
- Color blending
"""

import math

import numpy as np


class TestTupleConstruction:
    """Tests for tuple constructors and predicates."""

    def test_point_has_w_one(self):
        from whitted.core.tuples import is_point, is_vector, point

        p = point(4.3, -4.2, 3.1)
        assert p[3] == 1.0
        assert is_point(p)
        assert not is_vector(p)

    def test_vector_has_w_zero(self):
        from whitted.core.tuples import is_point, is_vector, vector

        v = vector(4.3, -4.2, 3.1)
        assert v[3] == 0.0
        assert is_vector(v)
        assert not is_point(v)

    def test_color_has_three_channels(self):
        from whitted.core.tuples import color

        c = color(-0.5, 0.4, 1.7)
        assert c.shape == (3,)
        assert c[0] == -0.5
        assert c[2] == 1.7


class TestTupleEquality:
    """Tests for EPSILON-tolerant comparison."""

    def test_equal_within_epsilon(self):
        from whitted.core.tuples import equal, point

        assert equal(point(1.0, 2.0, 3.0), point(1.0 + 5e-6, 2.0, 3.0 - 5e-6))

    def test_not_equal_beyond_epsilon(self):
        from whitted.core.tuples import equal, point

        assert not equal(point(1.0, 2.0, 3.0), point(1.0 + 2e-5, 2.0, 3.0))

    def test_point_never_equals_vector(self):
        from whitted.core.tuples import equal, point, vector

        assert not equal(point(1.0, 2.0, 3.0), vector(1.0, 2.0, 3.0))

    def test_color_never_equals_tuple(self):
        from whitted.core.tuples import color, equal, vector

        assert not equal(color(1.0, 2.0, 3.0), vector(1.0, 2.0, 3.0))

    def test_approx_equal_scalars(self):
        from whitted.core.tuples import approx_equal

        assert approx_equal(0.1 + 0.2, 0.3)
        assert not approx_equal(1.0, 1.001)


class TestTupleArithmetic:
    """Tests for arithmetic on homogeneous tuples."""

    def test_point_plus_vector_is_point(self):
        from whitted.core.tuples import equal, is_point, point, vector

        result = point(3.0, -2.0, 5.0) + vector(-2.0, 3.0, 1.0)
        assert equal(result, point(1.0, 1.0, 6.0))
        assert is_point(result)

    def test_point_minus_point_is_vector(self):
        from whitted.core.tuples import equal, point, vector

        result = point(3.0, 2.0, 1.0) - point(5.0, 6.0, 7.0)
        assert equal(result, vector(-2.0, -4.0, -6.0))

    def test_point_minus_vector_is_point(self):
        from whitted.core.tuples import equal, point, vector

        result = point(3.0, 2.0, 1.0) - vector(5.0, 6.0, 7.0)
        assert equal(result, point(-2.0, -4.0, -6.0))

    def test_negate_and_scale(self):
        from whitted.core.tuples import equal, make_tuple

        a = make_tuple(1.0, -2.0, 3.0, -4.0)
        assert equal(-a, make_tuple(-1.0, 2.0, -3.0, 4.0))
        assert equal(a * 0.5, make_tuple(0.5, -1.0, 1.5, -2.0))
        assert equal(a / 2.0, make_tuple(0.5, -1.0, 1.5, -2.0))


class TestVectorOperations:
    """Tests for magnitude, normalize, dot, cross and reflect."""

    def test_magnitude(self):
        from whitted.core.tuples import magnitude, vector

        assert magnitude(vector(1.0, 0.0, 0.0)) == 1.0
        assert abs(magnitude(vector(1.0, 2.0, 3.0)) - math.sqrt(14.0)) < 1e-12
        assert abs(magnitude(vector(-1.0, -2.0, -3.0)) - math.sqrt(14.0)) < 1e-12

    def test_normalize(self):
        from whitted.core.tuples import equal, magnitude, normalize, vector

        assert equal(normalize(vector(4.0, 0.0, 0.0)), vector(1.0, 0.0, 0.0))
        n = normalize(vector(1.0, 2.0, 3.0))
        assert equal(n, vector(0.26726, 0.53452, 0.80178))
        assert abs(magnitude(n) - 1.0) < 1e-12

    def test_normalize_zero_vector_does_not_produce_nan(self):
        from whitted.core.tuples import normalize, vector

        result = normalize(vector(0.0, 0.0, 0.0))
        assert not np.any(np.isnan(result))

    def test_dot(self):
        from whitted.core.tuples import dot, vector

        assert dot(vector(1.0, 2.0, 3.0), vector(2.0, 3.0, 4.0)) == 20.0

    def test_cross(self):
        from whitted.core.tuples import cross, equal, vector

        a = vector(1.0, 2.0, 3.0)
        b = vector(2.0, 3.0, 4.0)
        assert equal(cross(a, b), vector(-1.0, 2.0, -1.0))
        assert equal(cross(b, a), vector(1.0, -2.0, 1.0))

    def test_reflect_at_45_degrees(self):
        from whitted.core.tuples import equal, reflect, vector

        r = reflect(vector(1.0, -1.0, 0.0), vector(0.0, 1.0, 0.0))
        assert equal(r, vector(1.0, 1.0, 0.0))

    def test_reflect_off_slanted_surface(self):
        from whitted.core.tuples import equal, reflect, vector

        h = math.sqrt(2.0) / 2.0
        r = reflect(vector(0.0, -1.0, 0.0), vector(h, h, 0.0))
        assert equal(r, vector(1.0, 0.0, 0.0))


class TestColors:
    """Tests for color arithmetic."""

    def test_add_subtract_scale(self):
        from whitted.core.tuples import color, equal

        c1 = color(0.9, 0.6, 0.75)
        c2 = color(0.7, 0.1, 0.25)
        assert equal(c1 + c2, color(1.6, 0.7, 1.0))
        assert equal(c1 - c2, color(0.2, 0.5, 0.5))
        assert equal(color(0.2, 0.3, 0.4) * 2.0, color(0.4, 0.6, 0.8))

    def test_hadamard(self):
        from whitted.core.tuples import color, equal, hadamard

        result = hadamard(color(1.0, 0.2, 0.4), color(0.9, 1.0, 0.1))
        assert equal(result, color(0.9, 0.2, 0.04))
