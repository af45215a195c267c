"""Swatch: a representative color with its population and text colors."""

from typing import Optional, Sequence

from . import colors
from .types import ColorInt, HSL

MIN_CONTRAST_TITLE_TEXT = 3.0
MIN_CONTRAST_BODY_TEXT = 4.5


class Swatch:
    """A color swatch generated from an image's palette.

    The HSL values and the title/body text colors are derived lazily and
    computed at most once. Two swatches are equal when both their RGB color
    and their population match.
    """

    __slots__ = ("red", "green", "blue", "rgb", "population", "_hsl", "_title_text_color", "_body_text_color")

    def __init__(self, color: ColorInt, population: int):
        self.red = colors.red(color)
        self.green = colors.green(color)
        self.blue = colors.blue(color)
        self.rgb = colors.rgb(self.red, self.green, self.blue)
        self.population = population

        self._hsl: Optional[HSL] = None
        self._title_text_color: Optional[ColorInt] = None
        self._body_text_color: Optional[ColorInt] = None

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int, population: int) -> "Swatch":
        return cls(colors.rgb(red, green, blue), population)

    @classmethod
    def from_hsl(cls, hsl: Sequence[float], population: int) -> "Swatch":
        return cls(colors.hsl_to_color(hsl), population)

    @property
    def hsl(self) -> HSL:
        """Hue [0, 360), saturation [0, 1] and lightness [0, 1]."""
        if self._hsl is None:
            self._hsl = colors.rgb_to_hsl(self.red, self.green, self.blue)
        return self._hsl

    @property
    def hex_rgb(self) -> str:
        return colors.to_rgb_hex(self.rgb)

    @property
    def title_text_color(self) -> ColorInt:
        """A white or black color, with alpha, usable for title text over this swatch."""
        self._ensure_text_colors_generated()
        return self._title_text_color

    @property
    def body_text_color(self) -> ColorInt:
        """A white or black color, with alpha, usable for body text over this swatch."""
        self._ensure_text_colors_generated()
        return self._body_text_color

    def _ensure_text_colors_generated(self) -> None:
        if self._body_text_color is not None:
            return

        # White first, as most colors will be dark
        light_body_alpha = colors.calculate_minimum_alpha(
            colors.WHITE, self.rgb, MIN_CONTRAST_BODY_TEXT
        )
        light_title_alpha = colors.calculate_minimum_alpha(
            colors.WHITE, self.rgb, MIN_CONTRAST_TITLE_TEXT
        )

        if light_body_alpha is not None and light_title_alpha is not None:
            self._set_text_colors(
                colors.set_alpha_component(colors.WHITE, light_title_alpha),
                colors.set_alpha_component(colors.WHITE, light_body_alpha),
            )
            return

        dark_body_alpha = colors.calculate_minimum_alpha(
            colors.BLACK, self.rgb, MIN_CONTRAST_BODY_TEXT
        )
        dark_title_alpha = colors.calculate_minimum_alpha(
            colors.BLACK, self.rgb, MIN_CONTRAST_TITLE_TEXT
        )

        if dark_body_alpha is not None and dark_title_alpha is not None:
            self._set_text_colors(
                colors.set_alpha_component(colors.BLACK, dark_title_alpha),
                colors.set_alpha_component(colors.BLACK, dark_body_alpha),
            )
            return

        # No single lightness works for both, fall back to mismatched values
        if light_body_alpha is not None:
            body = colors.set_alpha_component(colors.WHITE, light_body_alpha)
        else:
            body = colors.set_alpha_component(colors.BLACK, dark_body_alpha)

        if light_title_alpha is not None:
            title = colors.set_alpha_component(colors.WHITE, light_title_alpha)
        else:
            title = colors.set_alpha_component(colors.BLACK, dark_title_alpha)

        self._set_text_colors(title, body)

    def _set_text_colors(self, title: ColorInt, body: ColorInt) -> None:
        self._title_text_color = title
        self._body_text_color = body

    def __eq__(self, other):
        if not isinstance(other, Swatch):
            return NotImplemented
        return self.rgb == other.rgb and self.population == other.population

    def __hash__(self):
        return hash((self.rgb, self.population))

    def __repr__(self):
        return (
            f"Swatch(#{self.hex_rgb}, population={self.population}, "
            f"hsl=({self.hsl[0]:.1f}, {self.hsl[1]:.3f}, {self.hsl[2]:.3f}))"
        )
