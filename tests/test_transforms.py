"""Unit tests for affine and view transforms."""

import math

import pytest

H = math.sqrt(2.0) / 2.0


class TestTranslationAndScaling:
    """Tests for translation and scaling matrices."""

    def test_translation_moves_points(self):
        from whitted.core.transforms import translation
        from whitted.core.tuples import equal, point

        assert equal(translation(5.0, -3.0, 2.0) @ point(-3.0, 4.0, 5.0), point(2.0, 1.0, 7.0))

    def test_inverse_translation(self):
        from whitted.core.matrix import inverse
        from whitted.core.transforms import translation
        from whitted.core.tuples import equal, point

        inv = inverse(translation(5.0, -3.0, 2.0))
        assert equal(inv @ point(-3.0, 4.0, 5.0), point(-8.0, 7.0, 3.0))

    def test_translation_ignores_vectors(self):
        from whitted.core.transforms import translation
        from whitted.core.tuples import equal, vector

        v = vector(-3.0, 4.0, 5.0)
        assert equal(translation(5.0, -3.0, 2.0) @ v, v)

    def test_scaling(self):
        from whitted.core.matrix import inverse
        from whitted.core.transforms import scaling
        from whitted.core.tuples import equal, point, vector

        s = scaling(2.0, 3.0, 4.0)
        assert equal(s @ point(-4.0, 6.0, 8.0), point(-8.0, 18.0, 32.0))
        assert equal(s @ vector(-4.0, 6.0, 8.0), vector(-8.0, 18.0, 32.0))
        assert equal(inverse(s) @ vector(-4.0, 6.0, 8.0), vector(-2.0, 2.0, 2.0))

    def test_reflection_is_negative_scaling(self):
        from whitted.core.transforms import scaling
        from whitted.core.tuples import equal, point

        assert equal(scaling(-1.0, 1.0, 1.0) @ point(2.0, 3.0, 4.0), point(-2.0, 3.0, 4.0))


class TestRotation:
    """Tests for rotations about each axis."""

    def test_rotation_x(self):
        from whitted.core.transforms import rotation_x
        from whitted.core.tuples import equal, point

        p = point(0.0, 1.0, 0.0)
        assert equal(rotation_x(math.pi / 4.0) @ p, point(0.0, H, H))
        assert equal(rotation_x(math.pi / 2.0) @ p, point(0.0, 0.0, 1.0))

    def test_rotation_y(self):
        from whitted.core.transforms import rotation_y
        from whitted.core.tuples import equal, point

        p = point(0.0, 0.0, 1.0)
        assert equal(rotation_y(math.pi / 4.0) @ p, point(H, 0.0, H))
        assert equal(rotation_y(math.pi / 2.0) @ p, point(1.0, 0.0, 0.0))

    def test_rotation_z(self):
        from whitted.core.transforms import rotation_z
        from whitted.core.tuples import equal, point

        p = point(0.0, 1.0, 0.0)
        assert equal(rotation_z(math.pi / 4.0) @ p, point(-H, H, 0.0))
        assert equal(rotation_z(math.pi / 2.0) @ p, point(-1.0, 0.0, 0.0))


class TestShearing:
    """Tests for shearing."""

    @pytest.mark.parametrize(
        "args, expected",
        [
            ((1, 0, 0, 0, 0, 0), (5.0, 3.0, 4.0)),
            ((0, 1, 0, 0, 0, 0), (6.0, 3.0, 4.0)),
            ((0, 0, 1, 0, 0, 0), (2.0, 5.0, 4.0)),
            ((0, 0, 0, 1, 0, 0), (2.0, 7.0, 4.0)),
            ((0, 0, 0, 0, 1, 0), (2.0, 3.0, 6.0)),
            ((0, 0, 0, 0, 0, 1), (2.0, 3.0, 7.0)),
        ],
    )
    def test_shearing_moves_each_component(self, args, expected):
        from whitted.core.transforms import shearing
        from whitted.core.tuples import equal, point

        assert equal(shearing(*args) @ point(2.0, 3.0, 4.0), point(*expected))


class TestChaining:
    """Tests for composing transforms."""

    def test_chained_transforms_apply_in_reverse_order(self):
        from whitted.core.transforms import rotation_x, scaling, translation
        from whitted.core.tuples import equal, point

        a = rotation_x(math.pi / 2.0)
        b = scaling(5.0, 5.0, 5.0)
        c = translation(10.0, 5.0, 7.0)
        assert equal((c @ b @ a) @ point(1.0, 0.0, 1.0), point(15.0, 0.0, 7.0))


class TestViewTransform:
    """Tests for the camera view transform."""

    def test_default_orientation_is_identity(self):
        from whitted.core.matrix import identity, matrices_equal
        from whitted.core.transforms import view_transform
        from whitted.core.tuples import point, vector

        t = view_transform(point(0, 0, 0), point(0, 0, -1), vector(0, 1, 0))
        assert matrices_equal(t, identity(4))

    def test_looking_in_positive_z(self):
        from whitted.core.matrix import matrices_equal
        from whitted.core.transforms import scaling, view_transform
        from whitted.core.tuples import point, vector

        t = view_transform(point(0, 0, 0), point(0, 0, 1), vector(0, 1, 0))
        assert matrices_equal(t, scaling(-1.0, 1.0, -1.0))

    def test_moves_the_world(self):
        from whitted.core.matrix import matrices_equal
        from whitted.core.transforms import translation, view_transform
        from whitted.core.tuples import point, vector

        t = view_transform(point(0, 0, 8), point(0, 0, 0), vector(0, 1, 0))
        assert matrices_equal(t, translation(0.0, 0.0, -8.0))

    def test_arbitrary_view(self):
        from whitted.core.matrix import make_matrix, matrices_equal
        from whitted.core.transforms import view_transform
        from whitted.core.tuples import point, vector

        t = view_transform(point(1, 3, 2), point(4, -2, 8), vector(1, 1, 0))
        expected = make_matrix(
            [
                [-0.50709, 0.50709, 0.67612, -2.36643],
                [0.76772, 0.60609, 0.12122, -2.82843],
                [-0.35857, 0.59761, -0.71714, 0.00000],
                [0.00000, 0.00000, 0.00000, 1.00000],
            ]
        )
        assert matrices_equal(t, expected)
