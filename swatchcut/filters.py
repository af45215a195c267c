"""Exclusion filters for quantized colors.

A filter is any callable taking ``(rgb, hsl)`` and returning True when the
color may appear in the palette.
"""

from typing import Iterable, Optional, Sequence

from .types import ColorInt, Filter

BLACK_MAX_LIGHTNESS = 0.05
WHITE_MIN_LIGHTNESS = 0.95


def is_black(hsl: Sequence[float]) -> bool:
    """Return True if the color is close to black."""
    return hsl[2] <= BLACK_MAX_LIGHTNESS


def is_white(hsl: Sequence[float]) -> bool:
    """Return True if the color is close to white."""
    return hsl[2] >= WHITE_MIN_LIGHTNESS


def is_near_red_i_line(hsl: Sequence[float]) -> bool:
    """Return True if the color lies close to the red side of the I line."""
    return 10.0 <= hsl[0] <= 37.0 and hsl[1] <= 0.82


def default_filter(rgb: ColorInt, hsl: Sequence[float]) -> bool:
    """Reject near-white, near-black and skin-tone-like colors."""
    return not is_white(hsl) and not is_black(hsl) and not is_near_red_i_line(hsl)


def is_allowed(filters: Optional[Iterable[Filter]], rgb: ColorInt, hsl: Sequence[float]) -> bool:
    """Return False if any filter rejects the color."""
    if not filters:
        return True
    return all(f(rgb, hsl) for f in filters)
