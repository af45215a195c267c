"""Color-cut quantization of packed pixel colors.

A quantizer based on the median-cut algorithm, but tuned for picking out
distinct colors rather than representative ones.

The color space is a 3-dimensional cube with one dimension per RGB component.
The cube is repeatedly divided until the color space has been reduced to the
requested number of colors, and an average color is generated from each box.

Unlike median-cut, which divides boxes so that they hold roughly equal
populations, this quantizer always divides the box with the largest color
volume. The color space is therefore divided into distinct colors instead of
representative ones.
"""

import heapq
import itertools
import logging
import math
from typing import Iterable, List, Optional, Tuple

import numpy as np

from . import colors
from .filters import is_allowed
from .swatch import Swatch
from .types import ColorInt, Filter, PixelArray, QuantizationError

logger = logging.getLogger(__name__)

COMPONENT_RED = -3
COMPONENT_GREEN = -2
COMPONENT_BLUE = -1

QUANTIZE_WORD_WIDTH = 5
QUANTIZE_WORD_MASK = (1 << QUANTIZE_WORD_WIDTH) - 1
HISTOGRAM_SIZE = 1 << (QUANTIZE_WORD_WIDTH * 3)


def modify_word_width(value, current_width: int, target_width: int):
    """Change the bit depth of a channel value.

    Widening shifts up; narrowing keeps the most significant bits. Works on
    ints and on numpy integer arrays alike.
    """
    if target_width > current_width:
        new_value = value << (target_width - current_width)
    else:
        new_value = value >> (current_width - target_width)
    return new_value & ((1 << target_width) - 1)


def quantized_red(color):
    """Red component of a quantized color."""
    return (color >> (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK


def quantized_green(color):
    """Green component of a quantized color."""
    return (color >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK


def quantized_blue(color):
    """Blue component of a quantized color."""
    return color & QUANTIZE_WORD_MASK


def quantize_from_rgb888(color):
    """Reduce a packed RGB888 color (or array of them) to a 15-bit key."""
    r = modify_word_width((color >> 16) & 0xFF, 8, QUANTIZE_WORD_WIDTH)
    g = modify_word_width((color >> 8) & 0xFF, 8, QUANTIZE_WORD_WIDTH)
    b = modify_word_width(color & 0xFF, 8, QUANTIZE_WORD_WIDTH)
    return (r << (QUANTIZE_WORD_WIDTH + QUANTIZE_WORD_WIDTH)) | (g << QUANTIZE_WORD_WIDTH) | b


def approximate_to_rgb888(r: int, g: int, b: int) -> ColorInt:
    """Expand quantized components back to an opaque RGB888 color."""
    return colors.rgb(
        modify_word_width(r, QUANTIZE_WORD_WIDTH, 8),
        modify_word_width(g, QUANTIZE_WORD_WIDTH, 8),
        modify_word_width(b, QUANTIZE_WORD_WIDTH, 8),
    )


def approximate_key_to_rgb888(color: int) -> ColorInt:
    return approximate_to_rgb888(
        quantized_red(color), quantized_green(color), quantized_blue(color)
    )


def modify_significant_octet(colors_: np.ndarray, dimension: int, lower: int, upper: int) -> None:
    """Rotate channels of ``colors_[lower:upper + 1]`` in place.

    Moves ``dimension`` into the most significant position so a plain ascending
    sort orders the range by that component. Applying the same call again
    restores RGB packing.
    """
    if dimension == COMPONENT_RED:
        # Already in RGB
        return

    view = colors_[lower:upper + 1]
    r = quantized_red(view)
    g = quantized_green(view)
    b = quantized_blue(view)

    if dimension == COMPONENT_GREEN:
        # RGB <-> GRB
        view[:] = (g << (QUANTIZE_WORD_WIDTH * 2)) | (r << QUANTIZE_WORD_WIDTH) | b
    elif dimension == COMPONENT_BLUE:
        # RGB <-> BGR
        view[:] = (b << (QUANTIZE_WORD_WIDTH * 2)) | (g << QUANTIZE_WORD_WIDTH) | r


def build_histogram(pixels: PixelArray) -> np.ndarray:
    """Count pixels per quantized color. Alpha is ignored.

    Args:
        pixels: Packed ARGB colors, any shape

    Returns:
        Array of ``HISTOGRAM_SIZE`` counts indexed by quantized color
    """
    keys = quantize_from_rgb888(np.asarray(pixels, dtype=np.int64).ravel())
    return np.bincount(keys, minlength=HISTOGRAM_SIZE).astype(np.int64)


class Vbox:
    """A tightly fitting box around a contiguous range of the color arena.

    The box owns no colors: it is a view of ``colors[lower_index:upper_index + 1]``
    (both ends inclusive) of the quantizer's distinct-color array.
    """

    __slots__ = (
        "_colors", "_histogram", "lower_index", "upper_index", "population",
        "min_red", "max_red", "min_green", "max_green", "min_blue", "max_blue",
    )

    def __init__(self, colors_: np.ndarray, histogram: np.ndarray, lower_index: int, upper_index: int):
        if lower_index > upper_index:
            raise QuantizationError(f"Empty box range [{lower_index}, {upper_index}]")
        self._colors = colors_
        self._histogram = histogram
        self.lower_index = lower_index
        self.upper_index = upper_index
        self.fit()

    @property
    def volume(self) -> int:
        return (
            (self.max_red - self.min_red + 1)
            * (self.max_green - self.min_green + 1)
            * (self.max_blue - self.min_blue + 1)
        )

    @property
    def color_count(self) -> int:
        return 1 + self.upper_index - self.lower_index

    def can_split(self) -> bool:
        return self.color_count > 1

    def fit(self) -> None:
        """Recompute the bounds and population to tightly fit the box's colors."""
        box_colors = self._colors[self.lower_index:self.upper_index + 1]
        r = quantized_red(box_colors)
        g = quantized_green(box_colors)
        b = quantized_blue(box_colors)

        self.min_red, self.max_red = int(r.min()), int(r.max())
        self.min_green, self.max_green = int(g.min()), int(g.max())
        self.min_blue, self.max_blue = int(b.min()), int(b.max())
        self.population = int(self._histogram[box_colors].sum())

    def longest_color_dimension(self) -> int:
        """Return the component this box is longest in. Ties favor red, then green."""
        red_length = self.max_red - self.min_red
        green_length = self.max_green - self.min_green
        blue_length = self.max_blue - self.min_blue

        if red_length >= green_length and red_length >= blue_length:
            return COMPONENT_RED
        elif green_length >= red_length and green_length >= blue_length:
            return COMPONENT_GREEN
        else:
            return COMPONENT_BLUE

    def find_split_point(self) -> int:
        """Find the index within this box to split at.

        Sorts the box's range along its longest dimension, then walks it until
        half of the box's population has been seen.
        """
        dimension = self.longest_color_dimension()
        lower, upper = self.lower_index, self.upper_index

        # The sort key is whichever component sits in the most significant bits
        modify_significant_octet(self._colors, dimension, lower, upper)
        self._colors[lower:upper + 1].sort()
        modify_significant_octet(self._colors, dimension, lower, upper)

        mid_point = self.population // 2
        running = np.cumsum(self._histogram[self._colors[lower:upper + 1]])
        i = lower + int(np.argmax(running >= mid_point))

        # Never split on the upper index, that would reproduce the same box
        return min(upper - 1, i)

    def split(self) -> Tuple["Vbox", "Vbox"]:
        """Split this box at the population midpoint of its longest dimension.

        Returns:
            Tuple of (lower box, upper box), both freshly fitted

        Raises:
            QuantizationError: If the box holds a single color
        """
        if not self.can_split():
            raise QuantizationError("Can not split a box with only 1 color")

        split_point = self.find_split_point()
        lower_box = Vbox(self._colors, self._histogram, self.lower_index, split_point)
        upper_box = Vbox(self._colors, self._histogram, split_point + 1, self.upper_index)
        return lower_box, upper_box

    def average_color(self) -> Swatch:
        """Return the population-weighted mean color of this box as a swatch."""
        box_colors = self._colors[self.lower_index:self.upper_index + 1]
        populations = self._histogram[box_colors]
        total_population = int(populations.sum())
        if total_population == 0:
            raise QuantizationError("Can not average a box with no population")

        red_sum = int((populations * quantized_red(box_colors)).sum())
        green_sum = int((populations * quantized_green(box_colors)).sum())
        blue_sum = int((populations * quantized_blue(box_colors)).sum())

        red_mean = _round_half_up(red_sum / total_population)
        green_mean = _round_half_up(green_sum / total_population)
        blue_mean = _round_half_up(blue_sum / total_population)

        color = approximate_to_rgb888(red_mean, green_mean, blue_mean)
        return Swatch(color, total_population)

    def __repr__(self):
        return (
            f"Vbox([{self.lower_index}, {self.upper_index}], population={self.population}, "
            f"volume={self.volume})"
        )


def _round_half_up(value: float) -> int:
    return min(QUANTIZE_WORD_MASK, max(0, int(math.floor(value + 0.5))))


class ColorCutQuantizer:
    """Reduce a pixel population to at most ``max_colors`` swatches.

    Args:
        pixels: Packed ARGB pixel colors
        max_colors: Maximum number of swatches to produce
        filters: Optional exclusion filters, each ``(rgb, hsl) -> bool``
    """

    def __init__(self, pixels: PixelArray, max_colors: int, filters: Optional[Iterable[Filter]] = None):
        if max_colors < 1:
            raise ValueError(f"max_colors must be >= 1, got {max_colors}")

        self.filters: Optional[List[Filter]] = list(filters) if filters else None

        histogram = build_histogram(pixels)

        # Zero out filtered buckets so population accounting stays consistent
        for color in np.flatnonzero(histogram):
            if self._should_ignore_key(int(color)):
                histogram[color] = 0

        self.histogram = histogram
        # Ascending quantized colors with population; sorted in place during splits
        self.colors = np.flatnonzero(histogram).astype(np.int64)
        self.distinct_color_count = len(self.colors)

        if self.distinct_color_count <= max_colors:
            # Fewer colors than requested, so use them directly
            self.quantized_colors: List[Swatch] = [
                Swatch(approximate_key_to_rgb888(int(color)), int(histogram[color]))
                for color in self.colors
            ]
        else:
            self.quantized_colors = self._quantize_pixels(max_colors)

        logger.debug(
            f"Quantized {self.distinct_color_count} distinct colors "
            f"into {len(self.quantized_colors)} swatches (max_colors={max_colors})"
        )

    def _quantize_pixels(self, max_colors: int) -> List[Swatch]:
        # Start with one box holding every color
        boxes = self._split_boxes(
            Vbox(self.colors, self.histogram, 0, self.distinct_color_count - 1), max_colors
        )
        return self._generate_average_colors(boxes)

    def _split_boxes(self, initial: Vbox, max_size: int) -> List[Vbox]:
        """Split the largest-volume box until ``max_size`` boxes exist.

        Stops as soon as the largest box can not be split.
        """
        counter = itertools.count()
        queue = [(-initial.volume, next(counter), initial)]

        while len(queue) < max_size:
            _, _, vbox = heapq.heappop(queue)
            if not vbox.can_split():
                # No more boxes to split
                heapq.heappush(queue, (-vbox.volume, next(counter), vbox))
                break

            for half in vbox.split():
                heapq.heappush(queue, (-half.volume, next(counter), half))

        return [vbox for _, _, vbox in sorted(queue)]

    def _generate_average_colors(self, boxes: List[Vbox]) -> List[Swatch]:
        swatches = []
        for vbox in boxes:
            swatch = vbox.average_color()
            # An average can still land on a color the filters reject
            if not self._should_ignore_swatch(swatch):
                swatches.append(swatch)
        return swatches

    def _should_ignore_key(self, color: int) -> bool:
        rgb = approximate_key_to_rgb888(color)
        return self._should_ignore(rgb, colors.color_to_hsl(rgb))

    def _should_ignore_swatch(self, swatch: Swatch) -> bool:
        return self._should_ignore(swatch.rgb, swatch.hsl)

    def _should_ignore(self, rgb: ColorInt, hsl) -> bool:
        return not is_allowed(self.filters, rgb, hsl)
