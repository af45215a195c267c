"""Scoring targets used to pick swatches from a palette.

A target describes the ideal saturation and lightness for a color role, the
acceptable ranges around them, and how much saturation, lightness and
population each weigh in the final score.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import List, Optional

TARGET_DARK_LUMA = 0.26
MAX_DARK_LUMA = 0.45

MIN_LIGHT_LUMA = 0.55
TARGET_LIGHT_LUMA = 0.74

MIN_NORMAL_LUMA = 0.3
TARGET_NORMAL_LUMA = 0.5
MAX_NORMAL_LUMA = 0.7

TARGET_MUTED_SATURATION = 0.3
MAX_MUTED_SATURATION = 0.4

TARGET_VIBRANT_SATURATION = 1.0
MIN_VIBRANT_SATURATION = 0.35

WEIGHT_SATURATION = 0.24
WEIGHT_LUMA = 0.52
WEIGHT_POPULATION = 0.24


@dataclass(eq=False)
class Target:
    """A weighted saturation/lightness profile for one color role.

    Targets compare and hash by identity, so two targets with the same values
    still receive separate selections in a palette.
    """

    minimum_saturation: float = 0.0
    target_saturation: float = 0.5
    maximum_saturation: float = 1.0

    minimum_lightness: float = 0.0
    target_lightness: float = 0.5
    maximum_lightness: float = 1.0

    saturation_weight: float = WEIGHT_SATURATION
    lightness_weight: float = WEIGHT_LUMA
    population_weight: float = WEIGHT_POPULATION

    # An exclusive target's swatch can not be picked by later targets
    exclusive: bool = True

    name: Optional[str] = field(default=None, compare=False)

    def normalize_weights(self) -> None:
        """Scale the positive weights so they sum to 1. Zero weights stay zero."""
        weights = [self.saturation_weight, self.lightness_weight, self.population_weight]
        total = sum(w for w in weights if w > 0)
        if total != 0:
            self.saturation_weight, self.lightness_weight, self.population_weight = (
                w / total if w > 0 else w for w in weights
            )

    def copy(self, **overrides) -> "Target":
        """Return a new target with this one's values and ``overrides`` applied."""
        return dataclasses.replace(self, **overrides)

    def __repr__(self):
        label = self.name or f"0x{id(self):x}"
        return (
            f"Target({label}, saturation=[{self.minimum_saturation}, {self.target_saturation}, "
            f"{self.maximum_saturation}], lightness=[{self.minimum_lightness}, "
            f"{self.target_lightness}, {self.maximum_lightness}], exclusive={self.exclusive})"
        )


def _preset(name: str, lightness: dict, saturation: dict) -> Target:
    return Target(name=name, **lightness, **saturation)


_LIGHT = {"minimum_lightness": MIN_LIGHT_LUMA, "target_lightness": TARGET_LIGHT_LUMA}
_NORMAL = {
    "minimum_lightness": MIN_NORMAL_LUMA,
    "target_lightness": TARGET_NORMAL_LUMA,
    "maximum_lightness": MAX_NORMAL_LUMA,
}
_DARK = {"target_lightness": TARGET_DARK_LUMA, "maximum_lightness": MAX_DARK_LUMA}

_VIBRANT = {"minimum_saturation": MIN_VIBRANT_SATURATION, "target_saturation": TARGET_VIBRANT_SATURATION}
_MUTED = {"target_saturation": TARGET_MUTED_SATURATION, "maximum_saturation": MAX_MUTED_SATURATION}

LIGHT_VIBRANT = _preset("light_vibrant", _LIGHT, _VIBRANT)
VIBRANT = _preset("vibrant", _NORMAL, _VIBRANT)
DARK_VIBRANT = _preset("dark_vibrant", _DARK, _VIBRANT)
LIGHT_MUTED = _preset("light_muted", _LIGHT, _MUTED)
MUTED = _preset("muted", _NORMAL, _MUTED)
DARK_MUTED = _preset("dark_muted", _DARK, _MUTED)

DEFAULT_TARGETS: List[Target] = [
    LIGHT_VIBRANT,
    VIBRANT,
    DARK_VIBRANT,
    LIGHT_MUTED,
    MUTED,
    DARK_MUTED,
]
