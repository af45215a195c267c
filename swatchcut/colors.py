"""Packed ARGB color helpers and color science.

Colors are plain ints packed as ``A << 24 | R << 16 | G << 8 | B``. This module
covers the conversions the palette needs: HSL for target scoring, XYZ for
luminance, WCAG contrast ratios and the minimum-alpha search used for text
colors.
"""

import math
from typing import Optional, Sequence, Tuple

from .types import ColorInt, HSL

WHITE: ColorInt = 0xFFFFFFFF
BLACK: ColorInt = 0xFF000000

MIN_ALPHA_SEARCH_MAX_ITERATIONS = 10
MIN_ALPHA_SEARCH_PRECISION = 1


def alpha(color: ColorInt) -> int:
    """Return the alpha byte of a packed color."""
    return (color >> 24) & 0xFF


def red(color: ColorInt) -> int:
    """Return the red byte of a packed color."""
    return (color >> 16) & 0xFF


def green(color: ColorInt) -> int:
    """Return the green byte of a packed color."""
    return (color >> 8) & 0xFF


def blue(color: ColorInt) -> int:
    """Return the blue byte of a packed color."""
    return color & 0xFF


def rgb(r: int, g: int, b: int) -> ColorInt:
    """Pack an opaque color from its red, green and blue bytes."""
    return 0xFF000000 | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def argb(a: int, r: int, g: int, b: int) -> ColorInt:
    """Pack a color from its alpha, red, green and blue bytes."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def to_hex_string(color: ColorInt) -> str:
    """Format a packed color as eight uppercase hex digits (AARRGGBB)."""
    return f"{color & 0xFFFFFFFF:08X}"


def to_rgb_hex(color: ColorInt) -> str:
    """Format the RGB part of a packed color as six uppercase hex digits."""
    return f"{color & 0xFFFFFF:06X}"


def _constrain(amount, low, high):
    return low if amount < low else (high if amount > high else amount)


def rgb_to_hsl(r: int, g: int, b: int) -> HSL:
    """Convert RGB components to HSL.

    Args:
        r: Red component [0..255]
        g: Green component [0..255]
        b: Blue component [0..255]

    Returns:
        Tuple of (hue [0, 360), saturation [0, 1], lightness [0, 1])
    """
    rf = r / 255.0
    gf = g / 255.0
    bf = b / 255.0

    max_c = max(rf, gf, bf)
    min_c = min(rf, gf, bf)
    delta = max_c - min_c

    lightness = (max_c + min_c) / 2.0

    if max_c == min_c:
        # Monochromatic
        hue = saturation = 0.0
    else:
        if max_c == rf:
            hue = math.fmod((gf - bf) / delta, 6.0)
        elif max_c == gf:
            hue = ((bf - rf) / delta) + 2.0
        else:
            hue = ((rf - gf) / delta) + 4.0

        saturation = delta / (1.0 - abs(2.0 * lightness - 1.0))

    hue = math.fmod(hue * 60.0, 360.0)
    if hue < 0:
        hue += 360.0

    return (
        _constrain(hue, 0.0, 360.0),
        _constrain(saturation, 0.0, 1.0),
        _constrain(lightness, 0.0, 1.0),
    )


def color_to_hsl(color: ColorInt) -> HSL:
    """Convert a packed color to HSL. The alpha byte is ignored."""
    return rgb_to_hsl(red(color), green(color), blue(color))


def hsl_to_color(hsl: Sequence[float]) -> ColorInt:
    """Convert HSL components to an opaque packed color.

    Out of range components are pinned rather than rejected.

    Raises:
        ValueError: If ``hsl`` does not hold exactly three components
    """
    if len(hsl) != 3:
        raise ValueError(f"hsl must have a length of 3, got {len(hsl)}")

    h, s, l = hsl
    c = (1.0 - abs(2.0 * l - 1.0)) * s
    m = l - 0.5 * c
    x = c * (1.0 - abs(math.fmod(h / 60.0, 2.0) - 1.0))

    segment = int(h) // 60

    if segment == 0:
        rf, gf, bf = c + m, x + m, m
    elif segment == 1:
        rf, gf, bf = x + m, c + m, m
    elif segment == 2:
        rf, gf, bf = m, c + m, x + m
    elif segment == 3:
        rf, gf, bf = m, x + m, c + m
    elif segment == 4:
        rf, gf, bf = x + m, m, c + m
    elif segment in (5, 6):
        rf, gf, bf = c + m, m, x + m
    else:
        rf = gf = bf = 0.0

    r = _constrain(int(round(255 * rf)), 0, 255)
    g = _constrain(int(round(255 * gf)), 0, 255)
    b = _constrain(int(round(255 * bf)), 0, 255)
    return rgb(r, g, b)


def _linearize(channel: int) -> float:
    value = channel / 255.0
    return value / 12.92 if value < 0.04045 else ((value + 0.055) / 1.055) ** 2.4


def rgb_to_xyz(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """Convert RGB components to CIE XYZ (D65, 2 degree observer).

    Returns:
        Tuple of (X [0, 95.047), Y [0, 100), Z [0, 108.883))
    """
    sr = _linearize(r)
    sg = _linearize(g)
    sb = _linearize(b)

    return (
        100.0 * (sr * 0.4124 + sg * 0.3576 + sb * 0.1805),
        100.0 * (sr * 0.2126 + sg * 0.7152 + sb * 0.0722),
        100.0 * (sr * 0.0193 + sg * 0.1192 + sb * 0.9505),
    )


def color_to_xyz(color: ColorInt) -> Tuple[float, float, float]:
    """Convert a packed color to CIE XYZ. The alpha byte is ignored."""
    return rgb_to_xyz(red(color), green(color), blue(color))


def calculate_luminance(color: ColorInt) -> float:
    """Return the relative luminance of a color in [0, 1] (the Y of XYZ)."""
    return color_to_xyz(color)[1] / 100.0


def set_alpha_component(color: ColorInt, alpha_value: int) -> ColorInt:
    """Return ``color`` with its alpha byte replaced.

    Raises:
        ValueError: If ``alpha_value`` is outside [0, 255]
    """
    if alpha_value < 0 or alpha_value > 255:
        raise ValueError(f"alpha must be between 0 and 255, got {alpha_value}")
    return (color & 0x00FFFFFF) | (alpha_value << 24)


def _composite_alpha(foreground_alpha: int, background_alpha: int) -> int:
    return 0xFF - (((0xFF - background_alpha) * (0xFF - foreground_alpha)) // 0xFF)


def _composite_component(fg_c: int, fg_a: int, bg_c: int, bg_a: int, a: int) -> int:
    if a == 0:
        return 0
    return ((0xFF * fg_c * fg_a) + (bg_c * bg_a * (0xFF - fg_a))) // (a * 0xFF)


def composite_colors(foreground: ColorInt, background: ColorInt) -> ColorInt:
    """Composite two potentially translucent colors over each other."""
    bg_alpha = alpha(background)
    fg_alpha = alpha(foreground)
    a = _composite_alpha(fg_alpha, bg_alpha)

    r = _composite_component(red(foreground), fg_alpha, red(background), bg_alpha, a)
    g = _composite_component(green(foreground), fg_alpha, green(background), bg_alpha, a)
    b = _composite_component(blue(foreground), fg_alpha, blue(background), bg_alpha, a)

    return argb(a, r, g, b)


def _require_opaque(background: ColorInt) -> None:
    if alpha(background) != 255:
        raise ValueError(f"background can not be translucent: #{to_hex_string(background)}")


def calculate_contrast(foreground: ColorInt, background: ColorInt) -> float:
    """Return the WCAG contrast ratio between two colors.

    A translucent foreground is composited over the background first.

    Raises:
        ValueError: If ``background`` is not fully opaque
    """
    _require_opaque(background)
    if alpha(foreground) < 255:
        foreground = composite_colors(foreground, background)

    luminance1 = calculate_luminance(foreground) + 0.05
    luminance2 = calculate_luminance(background) + 0.05

    return max(luminance1, luminance2) / min(luminance1, luminance2)


def calculate_minimum_alpha(
    foreground: ColorInt, background: ColorInt, min_contrast_ratio: float
) -> Optional[int]:
    """Find the minimum alpha for ``foreground`` to reach a contrast ratio.

    Args:
        foreground: Foreground color; its own alpha is ignored
        background: Opaque background color
        min_contrast_ratio: Contrast ratio the result must reach

    Returns:
        Alpha in [0, 255], or None if even an opaque foreground falls short

    Raises:
        ValueError: If ``background`` is not fully opaque
    """
    _require_opaque(background)

    test_foreground = set_alpha_component(foreground, 255)
    if calculate_contrast(test_foreground, background) < min_contrast_ratio:
        return None

    num_iterations = 0
    min_alpha = 0
    max_alpha = 255

    while (
        num_iterations <= MIN_ALPHA_SEARCH_MAX_ITERATIONS
        and (max_alpha - min_alpha) > MIN_ALPHA_SEARCH_PRECISION
    ):
        test_alpha = (min_alpha + max_alpha) // 2

        test_foreground = set_alpha_component(foreground, test_alpha)
        if calculate_contrast(test_foreground, background) < min_contrast_ratio:
            min_alpha = test_alpha
        else:
            max_alpha = test_alpha

        num_iterations += 1

    # The high bound is known to pass
    return max_alpha
