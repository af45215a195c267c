"""Common types, configuration and exceptions for swatchcut."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

# Type aliases
ColorInt = int  # packed A<<24 | R<<16 | G<<8 | B
HSL = Tuple[float, float, float]
PixelArray = np.ndarray
Filter = Callable[[ColorInt, Sequence[float]], bool]

DEFAULT_RESIZE_BITMAP_AREA = 112 * 112
DEFAULT_CALCULATE_NUMBER_COLORS = 16


@dataclass
class PaletteConfig:
    """Configuration for palette generation."""

    # Quantization
    max_colors: int = DEFAULT_CALCULATE_NUMBER_COLORS

    # Resizing (area wins when both are positive)
    resize_area: int = DEFAULT_RESIZE_BITMAP_AREA
    resize_max_dimension: int = -1

    # Exclusion filters, applied to every histogram bucket and averaged box.
    # None means the default filter; an empty list disables filtering.
    filters: Optional[List[Filter]] = None

    # Sub-region of the image as (left, top, right, bottom)
    region: Optional[Tuple[int, int, int, int]] = None


class PaletteError(Exception):
    """Base exception for palette generation errors."""

    pass


class QuantizationError(PaletteError):
    """Exception raised during color quantization."""

    pass
