"""Tests for quantisation, PPM writing and image export."""

import io

import numpy as np
import pytest


class TestToRgb8:
    """Tests for gamma-2 quantisation."""

    def test_gamma_two_quantisation(self):
        """Test sqrt, scale by 255.999 and truncation."""
        from spheretrace.output.ppm import to_rgb8

        image = np.array([[[0.25, 1.0, 0.0]]], dtype=np.float32)
        assert to_rgb8(image)[0, 0].tolist() == [127, 255, 0]

    def test_clips_and_replaces_nan(self):
        """Test that out-of-range values are clipped and NaN becomes 0."""
        from spheretrace.output.ppm import to_rgb8

        image = np.array([[[np.nan, 4.0, -1.0], [np.inf, 0.5, 1e-6]]], dtype=np.float32)
        result = to_rgb8(image)

        assert result.dtype == np.uint8
        assert result[0, 0].tolist() == [0, 255, 0]
        assert result[0, 1, 0] == 255
        assert result[0, 1, 1] == int(np.sqrt(0.5) * 255.999)

    def test_monotonic(self):
        """Test that brighter linear values never quantise darker."""
        from spheretrace.output.ppm import to_rgb8

        ramp = np.linspace(0.0, 1.0, 1001, dtype=np.float32)
        image = np.stack([ramp, ramp, ramp], axis=-1)[None, :, :]
        values = to_rgb8(image)[0, :, 0].astype(int)
        assert (np.diff(values) >= 0).all()
        assert values[0] == 0
        assert values[-1] == 255


class TestPpm:
    """Tests for the PPM pixel sink."""

    def test_iter_pixels_row_major_top_first(self):
        """Test pixel order: rows top to bottom, columns left to right."""
        from spheretrace.output.ppm import iter_pixels

        rgb8 = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
        pixels = list(iter_pixels(rgb8))
        assert pixels[0] == (0, 1, 2)
        assert pixels[2] == (6, 7, 8)
        assert pixels[3] == (9, 10, 11)
        assert len(pixels) == 6

    def test_write_ppm_format(self):
        """Test the P3 header and one line per pixel."""
        from spheretrace.output.ppm import write_ppm

        stream = io.StringIO()
        write_ppm(stream, 2, 1, [(255, 0, 0), (0, 128, 255)])
        assert stream.getvalue() == "P3\n2 1\n255\n255 0 0\n0 128 255\n"

    def test_write_ppm_count_mismatch(self):
        """Test that a wrong number of pixels is rejected."""
        from spheretrace.output.ppm import write_ppm

        with pytest.raises(ValueError, match="Expected 4 pixels"):
            write_ppm(io.StringIO(), 2, 2, [(0, 0, 0)] * 3)

    @pytest.mark.parametrize("count", [3, 5])
    def test_write_ppm_count_mismatch_writes_nothing(self, count):
        """Test that neither header nor pixels reach the stream on a bad count."""
        from spheretrace.output.ppm import write_ppm

        stream = io.StringIO()
        with pytest.raises(ValueError, match=f"got {count}"):
            write_ppm(stream, 2, 2, [(0, 0, 0)] * count)
        assert stream.getvalue() == ""

    def test_save_ppm_rejects_bad_shape_before_opening(self, tmp_path):
        """Test that an array without three channels leaves no file behind."""
        from spheretrace.output.ppm import save_ppm

        path = tmp_path / "bad.ppm"
        with pytest.raises(ValueError, match="shape"):
            save_ppm(path, np.zeros((2, 2, 4), dtype=np.uint8))
        assert not path.exists()

    def test_save_ppm(self, tmp_path):
        """Test writing a file from an 8-bit image."""
        from spheretrace.output.ppm import save_ppm

        rgb8 = np.zeros((2, 2, 3), dtype=np.uint8)
        rgb8[0, 1] = (10, 20, 30)
        path = tmp_path / "out.ppm"
        save_ppm(path, rgb8)

        lines = path.read_text().splitlines()
        assert lines[:3] == ["P3", "2 2", "255"]
        assert lines[3:] == ["0 0 0", "10 20 30", "0 0 0", "0 0 0"]


class TestExport:
    """Tests for format selection and PNG export."""

    def test_save_image_png(self, tmp_path):
        """Test that a .png path writes a PNG with quantised pixels."""
        from PIL import Image as PILImage

        from spheretrace.output.export import save_image

        image = np.full((3, 5, 3), 0.25, dtype=np.float32)
        path = tmp_path / "out.png"
        save_image(path, image)

        with PILImage.open(path) as png:
            assert png.format == "PNG"
            assert png.size == (5, 3)
            assert np.asarray(png.convert("RGB"))[0, 0].tolist() == [127, 127, 127]

    def test_save_image_ppm(self, tmp_path):
        """Test that a .ppm path writes plain PPM."""
        from spheretrace.output.export import save_image

        path = tmp_path / "out.PPM"
        save_image(path, np.ones((1, 1, 3), dtype=np.float32))
        assert path.read_text() == "P3\n1 1\n255\n255 255 255\n"

    def test_save_image_unknown_suffix(self, tmp_path):
        """Test that unsupported suffixes are rejected."""
        from spheretrace.output.export import save_image

        with pytest.raises(ValueError, match="Unsupported image format"):
            save_image(tmp_path / "out.jpg", np.zeros((1, 1, 3), dtype=np.float32))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
