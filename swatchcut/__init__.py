"""swatchcut: color-cut quantization and swatch selection for images.

A Python module for reducing an image to a handful of representative colors,
picking vibrant and muted swatches from them, and deriving readable text
colors for each swatch.
"""

__version__ = "0.1.0"
__all__ = ["colors", "quantize", "swatch", "target", "filters", "palette", "raster", "cli"]
