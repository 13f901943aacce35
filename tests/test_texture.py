"""Tests for image textures and environment mapping."""

import math

import numpy as np
import pytest
from PIL import Image as PILImage

from pathtracer.scene.texture import ImageTexture, load_texture, texture_direction_uv


class TestImageTexture:
    """Tests for bilinear texture sampling."""

    def test_rejects_bad_shapes(self):
        """Test that non-RGB or empty arrays are rejected."""
        with pytest.raises(ValueError, match="shape"):
            ImageTexture(np.zeros((4, 4)))
        with pytest.raises(ValueError, match="shape"):
            ImageTexture(np.zeros((0, 4, 3)))

    def test_rejects_non_finite(self):
        """Test that NaN data is rejected."""
        data = np.zeros((2, 2, 3))
        data[0, 0, 0] = np.nan
        with pytest.raises(ValueError, match="finite"):
            ImageTexture(data)

    def test_rejects_negative(self):
        """Test that negative radiance is rejected."""
        data = np.full((2, 2, 3), 0.5)
        data[1, 0, 2] = -1.0
        with pytest.raises(ValueError, match="non-negative"):
            ImageTexture(data)

    def test_v_zero_is_bottom_row(self):
        """Test the vertical orientation of texture coordinates."""
        data = np.zeros((2, 1, 3))
        data[0] = (1.0, 0.0, 0.0)
        data[1] = (0.0, 1.0, 0.0)
        texture = ImageTexture(data)
        np.testing.assert_allclose(texture.sample(0.0, 0.0), [0.0, 1.0, 0.0])
        np.testing.assert_allclose(texture.sample(0.0, 0.999999), [1.0, 0.0, 0.0], atol=1e-5)

    def test_bilinear_midpoint(self):
        """Test that sampling between two texels blends them."""
        data = np.zeros((1, 2, 3))
        data[0, 1] = (1.0, 1.0, 1.0)
        texture = ImageTexture(data)
        np.testing.assert_allclose(texture.sample(0.5, 0.5), [0.5, 0.5, 0.5])

    def test_coordinates_wrap(self):
        """Test that coordinates outside [0, 1) wrap around."""
        data = np.random.default_rng(0).random((4, 4, 3))
        texture = ImageTexture(data)
        np.testing.assert_allclose(texture.sample(1.25, -0.75), texture.sample(0.25, 0.25))


class TestDirectionUV:
    """Tests for the equirectangular direction mapping."""

    def test_up_and_down(self):
        """Test that straight up/down map to the top and bottom."""
        assert texture_direction_uv(np.array([0.0, 1.0, 0.0]))[1] == pytest.approx(1.0)
        assert texture_direction_uv(np.array([0.0, -1.0, 0.0]))[1] == pytest.approx(0.0)

    def test_angle_rotates_longitude(self):
        """Test that the angle offsets u by angle / (2 pi)."""
        d = np.array([1.0, 0.0, 0.0])
        u0, _ = texture_direction_uv(d)
        u1, _ = texture_direction_uv(d, angle=math.pi / 2.0)
        assert u1 - u0 == pytest.approx(0.25)


class TestLoadTexture:
    """Tests for loading textures from image files."""

    def test_load_png_linearizes(self, tmp_path):
        """Test that 8-bit values are decoded with gamma 2.2."""
        path = tmp_path / "tex.png"
        pixels = np.full((2, 3, 3), 128, dtype=np.uint8)
        PILImage.fromarray(pixels).save(path)

        texture = load_texture(path)
        assert (texture.width, texture.height) == (3, 2)
        np.testing.assert_allclose(texture.data, (128 / 255) ** 2.2)

    def test_missing_file_raises(self, tmp_path):
        """Test that a missing file raises an OSError."""
        with pytest.raises(OSError):
            load_texture(tmp_path / "missing.png")
