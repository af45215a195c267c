"""Tests for color utilities."""

import pytest

from swatchcut import colors


class TestPacking:
    """Test cases for channel accessors and packing."""

    def test_accessors(self):
        """Test reading channels from a packed color."""
        color = 0x80336699
        assert colors.alpha(color) == 0x80
        assert colors.red(color) == 0x33
        assert colors.green(color) == 0x66
        assert colors.blue(color) == 0x99

    def test_rgb_is_opaque(self):
        """Test that rgb() always produces an opaque color."""
        assert colors.rgb(0x12, 0x34, 0x56) == 0xFF123456
        assert colors.argb(0x40, 0x12, 0x34, 0x56) == 0x40123456

    def test_hex_strings(self):
        """Test hex formatting with and without alpha."""
        assert colors.to_hex_string(colors.WHITE) == "FFFFFFFF"
        assert colors.to_hex_string(0x0A0B0C0D) == "0A0B0C0D"
        assert colors.to_rgb_hex(0xFF00FF00) == "00FF00"


class TestHSL:
    """Test cases for RGB <-> HSL conversion."""

    @pytest.mark.parametrize(
        "rgb, expected",
        [
            ((255, 0, 0), (0.0, 1.0, 0.5)),
            ((0, 255, 0), (120.0, 1.0, 0.5)),
            ((0, 0, 255), (240.0, 1.0, 0.5)),
            ((255, 255, 255), (0.0, 0.0, 1.0)),
            ((0, 0, 0), (0.0, 0.0, 0.0)),
        ],
    )
    def test_rgb_to_hsl(self, rgb, expected):
        """Test conversion of primaries and extremes."""
        assert colors.rgb_to_hsl(*rgb) == pytest.approx(expected)

    def test_gray_has_no_saturation(self):
        """Test that grays have zero hue and saturation."""
        h, s, l = colors.rgb_to_hsl(128, 128, 128)
        assert h == 0.0
        assert s == 0.0
        assert l == pytest.approx(128 / 255)

    def test_hsl_ranges(self):
        """Test that HSL components stay in range for arbitrary colors."""
        for color in (0xFF306890, 0xFFE02020, 0xFF80C0FF, 0xFF010203, 0xFFFEFDFC):
            h, s, l = colors.color_to_hsl(color)
            assert 0.0 <= h < 360.0
            assert 0.0 <= s <= 1.0
            assert 0.0 <= l <= 1.0

    @pytest.mark.parametrize(
        "hsl, expected",
        [
            ((0.0, 1.0, 0.5), 0xFFFF0000),
            ((120.0, 1.0, 0.5), 0xFF00FF00),
            ((240.0, 1.0, 0.5), 0xFF0000FF),
            ((0.0, 0.0, 1.0), 0xFFFFFFFF),
            ((0.0, 0.0, 0.0), 0xFF000000),
        ],
    )
    def test_hsl_to_color(self, hsl, expected):
        """Test conversion of primaries and extremes back to RGB."""
        assert colors.hsl_to_color(hsl) == expected

    def test_hsl_to_color_round_trip(self):
        """Test that converting to HSL and back lands within one step per channel."""
        for color in (0xFF306890, 0xFFE02020, 0xFF80C0FF, 0xFF4878A0):
            back = colors.hsl_to_color(colors.color_to_hsl(color))
            assert abs(colors.red(back) - colors.red(color)) <= 1
            assert abs(colors.green(back) - colors.green(color)) <= 1
            assert abs(colors.blue(back) - colors.blue(color)) <= 1

    def test_hsl_to_color_requires_three_components(self):
        """Test that a malformed HSL sequence raises ValueError."""
        with pytest.raises(ValueError):
            colors.hsl_to_color((0.0, 1.0))


class TestLuminance:
    """Test cases for luminance and contrast."""

    def test_luminance_extremes(self):
        """Test luminance of black and white."""
        assert colors.calculate_luminance(colors.BLACK) == pytest.approx(0.0)
        assert colors.calculate_luminance(colors.WHITE) == pytest.approx(1.0, abs=1e-3)

    def test_black_on_white_contrast(self):
        """Test the maximum contrast ratio."""
        assert colors.calculate_contrast(colors.BLACK, colors.WHITE) == pytest.approx(21.0, abs=0.05)

    def test_contrast_is_symmetric_for_opaque_colors(self):
        """Test that swapping opaque colors keeps the ratio."""
        pairs = [(0xFF306890, 0xFFFFFFFF), (0xFFE02020, 0xFF202020), (0xFF80C0FF, 0xFF4878A0)]
        for a, b in pairs:
            assert colors.calculate_contrast(a, b) == pytest.approx(colors.calculate_contrast(b, a))

    def test_contrast_at_least_one(self):
        """Test that a color against itself has a ratio of 1."""
        assert colors.calculate_contrast(0xFF306890, 0xFF306890) == pytest.approx(1.0)

    def test_translucent_background_rejected(self):
        """Test that a translucent background raises ValueError."""
        with pytest.raises(ValueError, match="translucent"):
            colors.calculate_contrast(colors.BLACK, 0x80FFFFFF)

    def test_translucent_foreground_is_composited(self):
        """Test that a transparent foreground takes the background's contrast."""
        assert colors.calculate_contrast(0x00000000, colors.WHITE) == pytest.approx(1.0)


class TestAlpha:
    """Test cases for alpha manipulation and compositing."""

    def test_set_alpha_component(self):
        """Test replacing the alpha channel."""
        assert colors.set_alpha_component(0xFF123456, 0x40) == 0x40123456

    @pytest.mark.parametrize("value", [-1, 256])
    def test_set_alpha_out_of_range(self, value):
        """Test that alpha outside [0, 255] raises ValueError."""
        with pytest.raises(ValueError):
            colors.set_alpha_component(colors.WHITE, value)

    def test_composite_opaque_foreground(self):
        """Test that an opaque foreground hides the background."""
        assert colors.composite_colors(0xFF306890, 0xFFFFFFFF) == 0xFF306890

    def test_composite_transparent_foreground(self):
        """Test that a transparent foreground shows the background."""
        assert colors.composite_colors(0x00306890, 0xFF4878A0) == 0xFF4878A0

    def test_composite_half_alpha(self):
        """Test compositing a half-transparent black over white."""
        result = colors.composite_colors(0x80000000, colors.WHITE)
        assert colors.alpha(result) == 0xFF
        assert 0x70 <= colors.red(result) <= 0x80


class TestMinimumAlpha:
    """Test cases for the minimum alpha search."""

    def test_unreachable_contrast_returns_none(self):
        """Test that white text on white can never reach a contrast."""
        assert colors.calculate_minimum_alpha(colors.WHITE, colors.WHITE, 4.5) is None

    def test_result_reaches_contrast(self):
        """Test that the returned alpha meets the requested ratio."""
        for background in (colors.WHITE, 0xFFE0E0E0, 0xFF80C0FF):
            alpha = colors.calculate_minimum_alpha(colors.BLACK, background, 4.5)
            assert alpha is not None
            assert 0 <= alpha <= 255
            foreground = colors.set_alpha_component(colors.BLACK, alpha)
            assert colors.calculate_contrast(foreground, background) >= 4.5

    def test_higher_ratio_needs_more_alpha(self):
        """Test that the result grows with the requested contrast."""
        for background in (colors.WHITE, 0xFFE0E0E0, 0xFF80C0FF):
            title = colors.calculate_minimum_alpha(colors.BLACK, background, 3.0)
            body = colors.calculate_minimum_alpha(colors.BLACK, background, 4.5)
            assert title <= body

    def test_foreground_alpha_is_ignored(self):
        """Test that the foreground's own alpha does not change the result."""
        assert colors.calculate_minimum_alpha(
            0x10000000, colors.WHITE, 4.5
        ) == colors.calculate_minimum_alpha(colors.BLACK, colors.WHITE, 4.5)

    def test_translucent_background_rejected(self):
        """Test that a translucent background raises ValueError."""
        with pytest.raises(ValueError):
            colors.calculate_minimum_alpha(colors.BLACK, 0x00FFFFFF, 4.5)
