"""Palette generation: quantize an image, then pick a swatch per target."""

import dataclasses
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Union

from PIL import Image

from . import target as targets
from .filters import default_filter
from .quantize import ColorCutQuantizer
from .raster import Region, crop_pixels, get_pixels, load_image, scale_down, scale_region
from .swatch import Swatch
from .target import Target
from .types import ColorInt, Filter, PaletteConfig, PixelArray

logger = logging.getLogger(__name__)


class Palette:
    """The swatches of an image and the swatch chosen for each target.

    Build one with :class:`PaletteBuilder`, or directly from swatches followed
    by :meth:`generate`. Once generated the palette does not change.
    """

    def __init__(self, swatches: Sequence[Swatch], targets_: Sequence[Target]):
        self._swatches = tuple(swatches)
        self._targets = tuple(targets_)
        self._selected: Dict[Target, Optional[Swatch]] = {}
        self._generated = False
        self.dominant_swatch = self._find_dominant_swatch()

    @staticmethod
    def from_image(image: Union[Image.Image, str, Path]) -> "PaletteBuilder":
        """Start building a palette from an image or image path."""
        return PaletteBuilder.from_image(image)

    @staticmethod
    def from_swatches(swatches: Sequence[Swatch]) -> "PaletteBuilder":
        return PaletteBuilder.from_swatches(swatches)

    @property
    def swatches(self) -> List[Swatch]:
        return list(self._swatches)

    @property
    def targets(self) -> List[Target]:
        return list(self._targets)

    @property
    def selected_swatches(self) -> Mapping[Target, Optional[Swatch]]:
        return MappingProxyType(self._selected)

    def generate(self) -> "Palette":
        """Select the best swatch for every target, in target order.

        Exclusive targets remove their pick from consideration by the targets
        that follow them.
        """
        if self._generated:
            return self

        used_colors: Set[ColorInt] = set()
        for target in self._targets:
            target.normalize_weights()
            swatch = self._max_scored_swatch_for_target(target, used_colors)
            if swatch is not None and target.exclusive:
                used_colors.add(swatch.rgb)
            self._selected[target] = swatch
            logger.debug(f"Selected {swatch} for {target.name or target}")

        self._generated = True
        return self

    def get_swatch_for_target(self, target: Target) -> Optional[Swatch]:
        """Return the swatch selected for ``target``, or None if none qualified."""
        return self._selected.get(target)

    def get_color_for_target(self, target: Target, default: ColorInt) -> ColorInt:
        swatch = self.get_swatch_for_target(target)
        return swatch.rgb if swatch is not None else default

    @property
    def vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(targets.VIBRANT)

    @property
    def light_vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(targets.LIGHT_VIBRANT)

    @property
    def dark_vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(targets.DARK_VIBRANT)

    @property
    def muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(targets.MUTED)

    @property
    def light_muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(targets.LIGHT_MUTED)

    @property
    def dark_muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(targets.DARK_MUTED)

    def get_vibrant_color(self, default: ColorInt) -> ColorInt:
        return self.get_color_for_target(targets.VIBRANT, default)

    def get_light_vibrant_color(self, default: ColorInt) -> ColorInt:
        return self.get_color_for_target(targets.LIGHT_VIBRANT, default)

    def get_dark_vibrant_color(self, default: ColorInt) -> ColorInt:
        return self.get_color_for_target(targets.DARK_VIBRANT, default)

    def get_muted_color(self, default: ColorInt) -> ColorInt:
        return self.get_color_for_target(targets.MUTED, default)

    def get_light_muted_color(self, default: ColorInt) -> ColorInt:
        return self.get_color_for_target(targets.LIGHT_MUTED, default)

    def get_dark_muted_color(self, default: ColorInt) -> ColorInt:
        return self.get_color_for_target(targets.DARK_MUTED, default)

    def get_dominant_color(self, default: ColorInt) -> ColorInt:
        return self.dominant_swatch.rgb if self.dominant_swatch is not None else default

    def _max_scored_swatch_for_target(self, target: Target, used_colors: Set[ColorInt]) -> Optional[Swatch]:
        max_score = 0.0
        max_score_swatch = None
        for swatch in self._swatches:
            if self._should_be_scored_for_target(swatch, target, used_colors):
                score = self._generate_score(swatch, target)
                if max_score_swatch is None or score > max_score:
                    max_score_swatch = swatch
                    max_score = score
        return max_score_swatch

    @staticmethod
    def _should_be_scored_for_target(swatch: Swatch, target: Target, used_colors: Set[ColorInt]) -> bool:
        _, saturation, lightness = swatch.hsl
        return (
            target.minimum_saturation <= saturation <= target.maximum_saturation
            and target.minimum_lightness <= lightness <= target.maximum_lightness
            and swatch.rgb not in used_colors
        )

    def _generate_score(self, swatch: Swatch, target: Target) -> float:
        _, saturation, lightness = swatch.hsl
        max_population = 1
        if self.dominant_swatch is not None and self.dominant_swatch.population > 0:
            max_population = self.dominant_swatch.population

        saturation_score = 0.0
        lightness_score = 0.0
        population_score = 0.0

        if target.saturation_weight > 0:
            saturation_score = target.saturation_weight * (1 - abs(saturation - target.target_saturation))
        if target.lightness_weight > 0:
            lightness_score = target.lightness_weight * (1 - abs(lightness - target.target_lightness))
        if target.population_weight > 0:
            population_score = target.population_weight * (swatch.population / max_population)

        return saturation_score + lightness_score + population_score

    def _find_dominant_swatch(self) -> Optional[Swatch]:
        max_swatch = None
        for swatch in self._swatches:
            if max_swatch is None or swatch.population > max_swatch.population:
                max_swatch = swatch
        return max_swatch

    def __repr__(self):
        return f"Palette(swatches={len(self._swatches)}, targets={len(self._targets)})"


class PaletteBuilder:
    """Collects the options for one palette generation run.

    Exactly one source is used: an image, a packed pixel buffer, or a list of
    ready-made swatches. Setters return the builder so calls can be chained.
    """

    def __init__(
        self,
        image: Optional[Image.Image] = None,
        pixels: Optional[PixelArray] = None,
        size: Optional[tuple] = None,
        swatches: Optional[Sequence[Swatch]] = None,
        config: Optional[PaletteConfig] = None,
    ):
        config = config or PaletteConfig()
        # Setters mutate this copy, never the caller's config
        filters = [default_filter] if config.filters is None else list(config.filters)
        self.config = dataclasses.replace(config, filters=filters)
        self._image = image
        self._pixels = pixels
        self._size = size
        self._swatches = list(swatches) if swatches is not None else None
        self._region: Optional[Region] = None
        if self.config.region is not None:
            self.set_region(*self.config.region)

        if self._swatches is None:
            self._targets: List[Target] = list(targets.DEFAULT_TARGETS)
        else:
            self._targets = []

    @classmethod
    def from_image(cls, image: Union[Image.Image, str, Path], config: Optional[PaletteConfig] = None) -> "PaletteBuilder":
        if not isinstance(image, Image.Image):
            image = load_image(image)
        return cls(image=image, config=config)

    @classmethod
    def from_pixels(
        cls, pixels: PixelArray, width: int, height: int, config: Optional[PaletteConfig] = None
    ) -> "PaletteBuilder":
        """Use a flat row-major buffer of packed ARGB pixels.

        The buffer is used at its given size; resize options only apply to
        image sources.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"width and height must be positive, got {width}x{height}")
        return cls(pixels=pixels, size=(width, height), config=config)

    @classmethod
    def from_swatches(cls, swatches: Sequence[Swatch]) -> "PaletteBuilder":
        """Use a fixed list of swatches. No targets are added by default."""
        if not swatches:
            raise ValueError("List of Swatches is not valid")
        return cls(swatches=swatches)

    @property
    def targets(self) -> List[Target]:
        return list(self._targets)

    def maximum_color_count(self, colors: int) -> "PaletteBuilder":
        """Set the maximum number of colors used in the quantization step."""
        if colors < 1:
            raise ValueError(f"colors must be >= 1, got {colors}")
        self.config.max_colors = colors
        return self

    def resize_bitmap_area(self, area: int) -> "PaletteBuilder":
        """Scale images larger than ``area`` pixels down to that area. <= 0 disables."""
        self.config.resize_area = area
        self.config.resize_max_dimension = -1
        return self

    def resize_max_dimension(self, max_dimension: int) -> "PaletteBuilder":
        """Scale images whose longest side exceeds ``max_dimension`` down. <= 0 disables."""
        self.config.resize_max_dimension = max_dimension
        self.config.resize_area = -1
        return self

    def clear_filters(self) -> "PaletteBuilder":
        """Remove all filters, including the default one."""
        self.config.filters.clear()
        return self

    def add_filter(self, color_filter: Filter) -> "PaletteBuilder":
        self.config.filters.append(color_filter)
        return self

    def set_region(self, left: int, top: int, right: int, bottom: int) -> "PaletteBuilder":
        """Restrict quantization to a rectangle of the source image.

        Ignored for swatch sources.

        Raises:
            ValueError: If the rectangle does not intersect the image bounds
        """
        bounds = self._source_bounds()
        if bounds is None:
            return self

        region = bounds.intersect(Region(left, top, right, bottom))
        if region is None:
            raise ValueError("The given region must intersect with the image's dimensions.")
        self._region = region
        self.config.region = (region.left, region.top, region.right, region.bottom)
        return self

    def clear_region(self) -> "PaletteBuilder":
        self._region = None
        self.config.region = None
        return self

    def add_target(self, target: Target) -> "PaletteBuilder":
        """Add a target to be selected, unless it is already present."""
        if not any(t is target for t in self._targets):
            self._targets.append(target)
        return self

    def clear_targets(self) -> "PaletteBuilder":
        """Remove all targets, including the default ones."""
        self._targets.clear()
        return self

    def generate(self) -> Palette:
        """Generate the palette synchronously."""
        if self._swatches is not None:
            swatches = list(self._swatches)
        else:
            quantizer = ColorCutQuantizer(
                self._collect_pixels(),
                self.config.max_colors,
                self.config.filters or None,
            )
            swatches = quantizer.quantized_colors

        palette = Palette(swatches, self._targets).generate()
        logger.info(f"Generated palette with {len(swatches)} swatches and {len(self._targets)} targets")
        return palette

    def generate_async(
        self,
        callback: Callable[[Palette], None],
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> Future:
        """Generate the palette on a worker thread.

        ``callback`` is invoked exactly once with the palette when generation
        succeeds. The returned future carries the palette or the error.
        """
        owns_executor = executor is None
        if owns_executor:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="swatchcut")

        future = executor.submit(self.generate)

        def _deliver(done: Future) -> None:
            error = done.exception()
            if error is not None:
                logger.error(f"Palette generation failed: {error}")
                return
            callback(done.result())

        future.add_done_callback(_deliver)
        if owns_executor:
            executor.shutdown(wait=False)
        return future

    def _source_bounds(self) -> Optional[Region]:
        if self._image is not None:
            width, height = self._image.size
            return Region(0, 0, width, height)
        if self._size is not None:
            width, height = self._size
            return Region(0, 0, width, height)
        return None

    def _collect_pixels(self):
        if self._pixels is not None:
            width, height = self._size
            return crop_pixels(self._pixels, width, height, self._region)

        original = self._image
        image, scale = scale_down(original, self.config.resize_area, self.config.resize_max_dimension)
        logger.debug(f"Processing {image.size[0]}x{image.size[1]} image (scale={scale:.3f})")

        region = self._region
        if region is not None and scale > 0:
            # The region has to follow the image down to its new scale
            region = scale_region(region, image.size[0] / original.size[0], *image.size)

        return get_pixels(image, region)
