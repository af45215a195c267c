"""Tests for raster input helpers."""

import numpy as np
import pytest
from PIL import Image

from swatchcut.raster import (
    Region,
    compute_scale_ratio,
    crop_pixels,
    get_pixels,
    load_image,
    pack_argb,
    scale_down,
    scale_region,
)
from swatchcut.types import PaletteError


class TestRegion:
    """Test cases for rectangles."""

    def test_size(self):
        """Test width and height."""
        region = Region(2, 3, 10, 7)
        assert region.width == 8
        assert region.height == 4
        assert not region.is_empty()

    def test_intersect(self):
        """Test the overlap of two rectangles."""
        assert Region(0, 0, 10, 10).intersect(Region(5, -5, 20, 5)) == Region(5, 0, 10, 5)

    def test_disjoint(self):
        """Test that touching rectangles do not intersect."""
        assert Region(0, 0, 10, 10).intersect(Region(10, 0, 20, 10)) is None


class TestScaling:
    """Test cases for down-scaling."""

    def test_area_ratio(self):
        """Test scaling by area."""
        assert compute_scale_ratio(200, 100, 12544, -1) == pytest.approx(0.79196, abs=1e-5)

    def test_small_image_not_scaled(self):
        """Test that images within the area keep their size."""
        assert compute_scale_ratio(100, 100, 20000, -1) == -1

    def test_max_dimension_ratio(self):
        """Test scaling by the longest side."""
        assert compute_scale_ratio(400, 200, -1, 100) == pytest.approx(0.25)

    def test_area_takes_precedence(self):
        """Test that a positive area wins over the max dimension."""
        assert compute_scale_ratio(400, 200, 20000, 100) == pytest.approx(0.5)

    def test_disabled(self):
        """Test that non-positive options disable scaling."""
        assert compute_scale_ratio(400, 200, 0, 0) == -1

    def test_scale_down(self):
        """Test the resized image size."""
        image = Image.new("RGB", (400, 200))
        scaled, ratio = scale_down(image, -1, 100)
        assert scaled.size == (100, 50)
        assert ratio == pytest.approx(0.25)

    def test_scale_down_unchanged(self):
        """Test that an unscaled image is returned as is."""
        image = Image.new("RGB", (10, 10))
        scaled, ratio = scale_down(image, 12544)
        assert scaled is image
        assert ratio == -1

    def test_scale_region(self):
        """Test mapping a region onto a scaled image."""
        assert scale_region(Region(10, 10, 50, 50), 0.5, 30, 30) == Region(5, 5, 25, 25)
        assert scale_region(Region(3, 3, 99, 99), 0.5, 40, 40) == Region(1, 1, 40, 40)


class TestPixels:
    """Test cases for pixel packing and cropping."""

    def test_pack_rgb(self):
        """Test that RGB arrays become opaque colors."""
        array = np.array([[[1, 2, 3], [255, 0, 128]]], dtype=np.uint8)
        np.testing.assert_array_equal(pack_argb(array), [[0xFF010203, 0xFFFF0080]])

    def test_pack_rgba(self):
        """Test that alpha is kept."""
        array = np.array([[[1, 2, 3, 0x80]]], dtype=np.uint8)
        assert pack_argb(array)[0, 0] == 0x80010203

    def test_pack_grayscale(self):
        """Test that grayscale is replicated into RGB."""
        array = np.array([[0x40]], dtype=np.uint8)
        assert pack_argb(array)[0, 0] == 0xFF404040

    def test_pack_invalid_shape(self):
        """Test that unexpected channel counts raise ValueError."""
        with pytest.raises(ValueError):
            pack_argb(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_crop_pixels(self):
        """Test cropping a flat buffer."""
        pixels = np.arange(12)
        np.testing.assert_array_equal(crop_pixels(pixels, 4, 3, Region(1, 1, 3, 3)), [5, 6, 9, 10])
        assert len(crop_pixels(pixels, 4, 3, None)) == 12

    def test_crop_pixels_size_mismatch(self):
        """Test that a buffer of the wrong size raises ValueError."""
        with pytest.raises(ValueError):
            crop_pixels(np.arange(10), 4, 3, None)

    def test_get_pixels(self, split_image):
        """Test flattening an image into packed colors."""
        pixels = get_pixels(split_image)
        assert pixels.shape == (200 * 100,)
        assert pixels[0] == 0xFFE02020
        assert pixels[-1] == 0xFF2040C0

    def test_get_pixels_region(self, split_image):
        """Test flattening part of an image."""
        pixels = get_pixels(split_image, Region(150, 10, 160, 20))
        assert pixels.shape == (100,)
        assert set(pixels.tolist()) == {0xFF2040C0}


class TestLoadImage:
    """Test cases for image loading."""

    def test_load(self, split_image_path):
        """Test loading a PNG as RGBA."""
        image = load_image(split_image_path)
        assert image.mode == "RGBA"
        assert image.size == (200, 100)

    def test_missing(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")

    def test_directory(self, tmp_path):
        """Test that a directory raises PaletteError."""
        with pytest.raises(PaletteError):
            load_image(tmp_path)

    def test_not_an_image(self, tmp_path):
        """Test that undecodable data raises PaletteError."""
        path = tmp_path / "bad.png"
        path.write_text("not an image")
        with pytest.raises(PaletteError):
            load_image(path)
