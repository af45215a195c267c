"""Pytest configuration and fixtures."""

import numpy as np
import pytest
from PIL import Image

# 24 pixels built to reproduce a known reference result: five quantized buckets
# with populations 1, 1, 10, 8 and 4. Variants of a bucket only differ in the
# 3 low bits of each channel, which quantization drops.
PIXELS_24 = (
    [0xFF306890]
    + [0xFF386090]
    + [0xFF386890] * 6
    + [0xFF3A6B93, 0xFF3F6F97, 0xFF396A91, 0xFF3C6C94]
    + [0xFF407098] * 5
    + [0xFF437299, 0xFF47779F, 0xFF41719C]
    + [0xFF4878A0] * 2
    + [0xFF4A7AA3, 0xFF4F7FA7]
)

PIXELS_24_SWATCHES = {
    (0xFF306890, 1),
    (0xFF386090, 1),
    (0xFF386890, 10),
    (0xFF407098, 8),
    (0xFF4878A0, 4),
}


@pytest.fixture
def pixels24():
    """Flat ARGB pixel buffer of a 6x4 image."""
    return np.array(PIXELS_24, dtype=np.int64)


@pytest.fixture
def pixels24_swatches():
    """Expected (rgb, population) pairs for ``pixels24``."""
    return set(PIXELS_24_SWATCHES)


@pytest.fixture
def random_pixels():
    """Pixels drawn from thousands of distinct colors."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 1 << 24, size=5000, dtype=np.int64) | 0xFF000000


@pytest.fixture
def split_image():
    """200x100 RGB image, left half red and right half blue."""
    image = np.zeros((100, 200, 3), dtype=np.uint8)
    image[:, :100] = [0xE0, 0x20, 0x20]
    image[:, 100:] = [0x20, 0x40, 0xC0]
    return Image.fromarray(image)


@pytest.fixture
def split_image_path(tmp_path, split_image):
    """Path to ``split_image`` saved as PNG."""
    path = tmp_path / "split.png"
    split_image.save(path)
    return path
