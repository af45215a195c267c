"""Raster input: image loading, down-scaling, regions and ARGB pixel packing."""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from .types import PaletteError, PixelArray


@dataclass(frozen=True)
class Region:
    """Rectangle with exclusive right/bottom edges, in pixel coordinates."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def is_empty(self) -> bool:
        return self.left >= self.right or self.top >= self.bottom

    def intersect(self, other: "Region") -> Optional["Region"]:
        """Return the overlap with ``other``, or None if they do not intersect."""
        result = Region(
            max(self.left, other.left),
            max(self.top, other.top),
            min(self.right, other.right),
            min(self.bottom, other.bottom),
        )
        return None if result.is_empty() else result


def load_image(path: Union[str, Path]) -> Image.Image:
    """Load an image file as RGBA.

    Raises:
        FileNotFoundError: If the file doesn't exist
        PaletteError: If the file can not be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise PaletteError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)
            return img.convert("RGBA")
    except (IOError, OSError) as e:
        raise PaletteError(f"Failed to load image {path}: {e}") from e


def compute_scale_ratio(width: int, height: int, resize_area: int, resize_max_dimension: int) -> float:
    """Return the down-scaling ratio for an image, or -1 when no scaling is needed.

    ``resize_area`` takes precedence; values <= 0 disable either option.
    """
    if resize_area > 0:
        bitmap_area = width * height
        if bitmap_area > resize_area:
            return math.sqrt(resize_area / bitmap_area)
    elif resize_max_dimension > 0:
        max_dimension = max(width, height)
        if max_dimension > resize_max_dimension:
            return resize_max_dimension / max_dimension
    return -1.0


def scale_down(
    image: Image.Image, resize_area: int, resize_max_dimension: int = -1
) -> Tuple[Image.Image, float]:
    """Scale an image down if it exceeds the configured area or dimension.

    Returns:
        Tuple of (image, scale_ratio); the ratio is -1 when the image is unchanged
    """
    width, height = image.size
    scale_ratio = compute_scale_ratio(width, height, resize_area, resize_max_dimension)

    if scale_ratio <= 0:
        # Scaling disabled or not needed
        return image, scale_ratio

    new_size = (
        max(1, int(math.ceil(width * scale_ratio))),
        max(1, int(math.ceil(height * scale_ratio))),
    )
    return image.resize(new_size, Image.Resampling.NEAREST), scale_ratio


def scale_region(region: Region, scale: float, width: int, height: int) -> Region:
    """Map a region onto an image scaled by ``scale`` with size ``width`` x ``height``."""
    return Region(
        int(math.floor(region.left * scale)),
        int(math.floor(region.top * scale)),
        min(int(math.ceil(region.right * scale)), width),
        min(int(math.ceil(region.bottom * scale)), height),
    )


def pack_argb(array: np.ndarray) -> np.ndarray:
    """Pack an image array into ARGB ints.

    Args:
        array: uint8 array of shape (H, W), (H, W, 3) or (H, W, 4) in RGB(A) order

    Returns:
        int64 array of shape (H, W)
    """
    if array.ndim == 2:
        # Grayscale - replicate into RGB
        array = np.stack([array] * 3, axis=-1)

    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3) or (H, W, 4) array, got shape {array.shape}")

    channels = array.astype(np.int64)
    if channels.shape[2] == 4:
        a = channels[..., 3]
    else:
        a = np.full(channels.shape[:2], 0xFF, dtype=np.int64)

    return (a << 24) | (channels[..., 0] << 16) | (channels[..., 1] << 8) | channels[..., 2]


def crop_pixels(pixels: PixelArray, width: int, height: int, region: Optional[Region]) -> np.ndarray:
    """Return the flat row-major pixels of ``region`` from a flat pixel buffer."""
    pixels = np.asarray(pixels, dtype=np.int64).ravel()
    if pixels.size != width * height:
        raise ValueError(f"Expected {width * height} pixels for {width}x{height}, got {pixels.size}")

    if region is None:
        return pixels

    grid = pixels.reshape(height, width)
    return grid[region.top:region.bottom, region.left:region.right].ravel()


def get_pixels(image: Image.Image, region: Optional[Region] = None) -> np.ndarray:
    """Return an image's pixels as a flat row-major array of packed ARGB ints."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    array = np.array(image)
    if region is not None:
        array = array[region.top:region.bottom, region.left:region.right]
    return pack_argb(array).ravel()
