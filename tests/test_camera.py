"""Unit tests for the camera.

Tests cover:
- Canvas geometry from field of view and aspect ratio
- Rays through the center and corner of the canvas
- Rays from a transformed camera
- Rendering with both backends and progress callbacks
"""

import math

import pytest

H = math.sqrt(2.0) / 2.0


def _default_camera(size=11):
    from whitted.camera.camera import Camera
    from whitted.core.transforms import view_transform
    from whitted.core.tuples import point, vector

    camera = Camera(size, size, math.pi / 2.0)
    camera.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
    return camera


class TestCameraGeometry:
    """Tests for camera construction."""

    def test_construct(self):
        from whitted.camera.camera import Camera
        from whitted.core.matrix import identity, matrices_equal

        c = Camera(160, 120, math.pi / 2.0)
        assert c.hsize == 160
        assert c.vsize == 120
        assert c.field_of_view == math.pi / 2.0
        assert matrices_equal(c.transform, identity(4))

    def test_pixel_size_horizontal_canvas(self):
        from whitted.camera.camera import Camera

        assert abs(Camera(200, 125, math.pi / 2.0).pixel_size - 0.01) < 1e-9

    def test_pixel_size_vertical_canvas(self):
        from whitted.camera.camera import Camera

        assert abs(Camera(125, 200, math.pi / 2.0).pixel_size - 0.01) < 1e-9

    @pytest.mark.parametrize(
        "args",
        [(0, 10, 1.0), (10, -1, 1.0), (10, 10, 0.0), (10, 10, math.pi)],
    )
    def test_invalid_arguments(self, args):
        from whitted.camera.camera import Camera

        with pytest.raises(ValueError):
            Camera(*args)

    def test_singular_transform(self):
        from whitted.camera.camera import Camera
        from whitted.core.matrix import SingularMatrixError
        from whitted.core.transforms import scaling

        c = Camera(10, 10, 1.0)
        with pytest.raises(SingularMatrixError):
            c.transform = scaling(0.0, 1.0, 1.0)


class TestRayForPixel:
    """Tests for Camera.ray_for_pixel."""

    def test_center_of_canvas(self):
        from whitted.camera.camera import Camera
        from whitted.core.tuples import equal, point, vector

        r = Camera(201, 101, math.pi / 2.0).ray_for_pixel(100, 50)
        assert equal(r.origin, point(0, 0, 0))
        assert equal(r.direction, vector(0, 0, -1))

    def test_corner_of_canvas(self):
        from whitted.camera.camera import Camera
        from whitted.core.tuples import equal, point, vector

        r = Camera(201, 101, math.pi / 2.0).ray_for_pixel(0, 0)
        assert equal(r.origin, point(0, 0, 0))
        assert equal(r.direction, vector(0.66519, 0.33259, -0.66851))

    def test_transformed_camera(self):
        from whitted.camera.camera import Camera
        from whitted.core.transforms import rotation_y, translation
        from whitted.core.tuples import equal, point, vector

        c = Camera(201, 101, math.pi / 2.0)
        c.transform = rotation_y(math.pi / 4.0) @ translation(0.0, -2.0, 5.0)
        r = c.ray_for_pixel(100, 50)
        assert equal(r.origin, point(0, 2, -5))
        assert equal(r.direction, vector(H, 0, -H))


class TestCameraRender:
    """Tests for Camera.render."""

    def test_python_backend(self):
        from whitted.scene.world import default_world

        canvas = _default_camera().render(default_world(), backend="python")
        assert canvas.width == 11
        assert canvas.height == 11
        p = canvas.pixel_at(5, 5)
        assert abs(p[0] - 0.38066) < 1e-4
        assert abs(p[1] - 0.47583) < 1e-4
        assert abs(p[2] - 0.2855) < 1e-4

    def test_taichi_backend(self):
        from whitted.scene.world import default_world

        canvas = _default_camera().render(default_world(), backend="taichi")
        p = canvas.pixel_at(5, 5)
        assert abs(p[0] - 0.38066) < 1e-3
        assert abs(p[1] - 0.47583) < 1e-3
        assert abs(p[2] - 0.2855) < 1e-3

    def test_progress_callback(self):
        from whitted.scene.world import default_world

        calls = []
        _default_camera().render(
            default_world(),
            backend="python",
            rows_per_batch=4,
            callback=lambda done, total: calls.append((done, total)),
        )
        assert calls == [(4, 11), (8, 11), (11, 11)]

    def test_taichi_progress_callback(self):
        from whitted.scene.world import default_world

        calls = []
        _default_camera().render(
            default_world(),
            backend="taichi",
            rows_per_batch=4,
            callback=lambda done, total: calls.append((done, total)),
        )
        assert calls == [(4, 11), (8, 11), (11, 11)]

    def test_unknown_backend(self):
        from whitted.scene.world import default_world

        with pytest.raises(ValueError, match="backend"):
            _default_camera().render(default_world(), backend="cuda")

    @pytest.mark.parametrize("backend", ["python", "taichi"])
    @pytest.mark.parametrize("depth", [-1, 17])
    def test_out_of_range_depth(self, backend, depth):
        from whitted.scene.world import default_world

        with pytest.raises(ValueError, match="max_depth"):
            _default_camera().render(default_world(), backend=backend, max_depth=depth)

    def test_world_without_light(self):
        from whitted.scene.world import default_world

        w = default_world()
        w.light = None
        with pytest.raises(RuntimeError, match="no light"):
            _default_camera().render(w, backend="python")
