"""Unit tests for tone mapping, gamma and image export.

Tests cover:
- Reinhard and exposure tone mapping
- Gamma correction and its validation
- The display pipeline
- PNG/PPM export and RMSE comparison
"""

import numpy as np
import pytest


class TestToneMapping:
    """Tests for tone mapping functions."""

    def test_reinhard(self):
        from whitted.preview.display import tone_map_reinhard

        image = np.array([[[0.0, 1.0, 3.0]]])
        result = tone_map_reinhard(image)
        assert result.dtype == np.float32
        np.testing.assert_allclose(result[0, 0], [0.0, 0.5, 0.75], atol=1e-6)

    def test_reinhard_clamps_negative(self):
        from whitted.preview.display import tone_map_reinhard

        result = tone_map_reinhard(np.array([[[-1.0, 0.0, 0.0]]]))
        assert result[0, 0, 0] == 0.0

    def test_exposure(self):
        from whitted.preview.display import tone_map_exposure

        result = tone_map_exposure(np.array([[[1.0, 0.0, 2.0]]]), exposure=1.0)
        np.testing.assert_allclose(result[0, 0], [1.0 - np.exp(-1.0), 0.0, 1.0 - np.exp(-2.0)], atol=1e-6)


class TestGamma:
    """Tests for apply_gamma."""

    def test_gamma_one_is_identity(self):
        from whitted.preview.display import apply_gamma

        image = np.array([[[0.25, 1.5, -0.5]]])
        np.testing.assert_allclose(apply_gamma(image, 1.0), image.astype(np.float32))

    def test_gamma_two(self):
        from whitted.preview.display import apply_gamma

        result = apply_gamma(np.array([[[0.25, 1.0, 0.0]]]), 2.0)
        np.testing.assert_allclose(result[0, 0], [0.5, 1.0, 0.0], atol=1e-6)

    def test_invalid_gamma(self):
        from whitted.preview.display import apply_gamma

        with pytest.raises(ValueError, match="Gamma"):
            apply_gamma(np.zeros((1, 1, 3)), 0.0)


class TestDisplayPipeline:
    """Tests for process_image_for_display."""

    def test_output_is_clamped(self):
        from whitted.preview.display import process_image_for_display

        result = process_image_for_display(np.array([[[2.0, -1.0, 0.5]]]), gamma=1.0)
        np.testing.assert_allclose(result[0, 0], [1.0, 0.0, 0.5], atol=1e-6)

    def test_unknown_tone_map(self):
        from whitted.preview.display import process_image_for_display

        with pytest.raises(ValueError, match="Unknown tone mapping"):
            process_image_for_display(np.zeros((1, 1, 3)), tone_map="filmic")


class TestExport:
    """Tests for image export."""

    def test_image_to_uint8_truncates(self):
        from whitted.preview.export import image_to_uint8

        result = image_to_uint8(np.array([[[0.5, 1.0, 2.0]]]), gamma=1.0)
        assert result.dtype == np.uint8
        assert result[0, 0].tolist() == [127, 255, 255]

    def test_save_png(self, tmp_path):
        from PIL import Image

        from whitted.core.tuples import color
        from whitted.preview.canvas import Canvas
        from whitted.preview.export import save_png

        c = Canvas(4, 3)
        c.write_pixel(1, 2, color(1.0, 0.0, 0.0))
        path = tmp_path / "out.png"
        save_png(c, path, gamma=1.0)

        with Image.open(path) as img:
            assert img.size == (4, 3)
            assert img.getpixel((1, 2))[:3] == (255, 0, 0)
            assert img.getpixel((0, 0))[:3] == (0, 0, 0)

    def test_save_image_picks_format(self, tmp_path):
        from whitted.preview.canvas import Canvas
        from whitted.preview.export import save_image

        c = Canvas(3, 2)
        save_image(c, tmp_path / "a.ppm")
        save_image(c, tmp_path / "b.png")
        assert (tmp_path / "a.ppm").read_text(encoding="ascii").startswith("P3\n3 2\n255\n")
        assert (tmp_path / "b.png").exists()

    def test_save_image_unknown_extension(self, tmp_path):
        from whitted.preview.canvas import Canvas
        from whitted.preview.export import save_image

        with pytest.raises(ValueError, match="Unsupported image format"):
            save_image(Canvas(2, 2), tmp_path / "out.bmp")

    def test_rmse(self):
        from whitted.preview.export import compute_rmse

        a = np.zeros((2, 2, 3))
        b = np.full((2, 2, 3), 0.5)
        assert compute_rmse(a, a) == 0.0
        assert abs(compute_rmse(a, b) - 0.5) < 1e-12

    def test_rmse_shape_mismatch(self):
        from whitted.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))


class TestDisplaySettings:
    """Tests for the canvas display pipeline and the Matplotlib preview."""

    def test_canvas_for_display_defaults(self):
        from whitted.core.tuples import color
        from whitted.preview.canvas import Canvas
        from whitted.preview.display import canvas_for_display

        c = Canvas(2, 1)
        c.write_pixel(0, 0, color(0.25, 2.0, -1.0))
        image = canvas_for_display(c)
        assert image.shape == (1, 2, 3)
        np.testing.assert_allclose(image[0, 0], [0.25 ** (1 / 2.2), 1.0, 0.0], atol=1e-6)

    def test_canvas_for_display_reinhard(self):
        from whitted.core.tuples import color
        from whitted.preview.canvas import Canvas
        from whitted.preview.display import DisplaySettings, canvas_for_display

        c = Canvas(1, 1)
        c.write_pixel(0, 0, color(1.0, 3.0, 0.0))
        image = canvas_for_display(c, DisplaySettings(tone_map="reinhard", gamma=1.0))
        np.testing.assert_allclose(image[0, 0], [0.5, 0.75, 0.0], atol=1e-6)

    def test_show_preview_with_reference(self, monkeypatch):
        pytest.importorskip("matplotlib")
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from whitted.preview.canvas import Canvas
        from whitted.preview.display import show_preview

        shown = []
        monkeypatch.setattr(plt, "show", lambda block=True: shown.append(block))
        show_preview(Canvas(4, 3), reference=Canvas(4, 3), block=False)
        assert shown == [False]
        assert len(plt.gcf().axes) == 3
        plt.close("all")

    def test_show_preview_reference_size_mismatch(self):
        pytest.importorskip("matplotlib")
        import matplotlib

        matplotlib.use("Agg")

        from whitted.preview.canvas import Canvas
        from whitted.preview.display import show_preview

        with pytest.raises(ValueError, match="Reference"):
            show_preview(Canvas(4, 3), reference=Canvas(3, 3), block=False)
