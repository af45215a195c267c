"""Command-line interface for swatchcut."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import colors
from .palette import Palette, PaletteBuilder
from .swatch import Swatch
from .types import DEFAULT_CALCULATE_NUMBER_COLORS, DEFAULT_RESIZE_BITMAP_AREA


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="swatchcut",
        description="Extract color swatches and vibrant/muted picks from an image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  swatchcut photo.jpg
  swatchcut photo.jpg --colors 24 --resize-area 40000
  swatchcut photo.jpg --region 0 0 200 100 --json
        """,
    )

    parser.add_argument("input", help="Input image file path")

    parser.add_argument(
        "--colors",
        "-c",
        type=int,
        default=DEFAULT_CALCULATE_NUMBER_COLORS,
        help=f"Maximum number of colors for quantization (default: {DEFAULT_CALCULATE_NUMBER_COLORS})",
    )

    resize = parser.add_mutually_exclusive_group()
    resize.add_argument(
        "--resize-area",
        type=int,
        default=None,
        help=f"Scale the image down to this many pixels, <= 0 disables (default: {DEFAULT_RESIZE_BITMAP_AREA})",
    )
    resize.add_argument(
        "--max-dimension",
        type=int,
        default=None,
        help="Scale the image down so its longest side is at most this many pixels",
    )

    parser.add_argument(
        "--region",
        type=int,
        nargs=4,
        metavar=("LEFT", "TOP", "RIGHT", "BOTTOM"),
        default=None,
        help="Only use this rectangle of the image",
    )

    parser.add_argument(
        "--no-filters",
        action="store_true",
        help="Keep near-white, near-black and skin-tone colors",
    )

    parser.add_argument("--json", action="store_true", help="Print the palette as JSON")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser


def swatch_to_dict(swatch: Swatch) -> dict:
    h, s, l = swatch.hsl
    return {
        "rgb": f"#{swatch.hex_rgb}",
        "population": swatch.population,
        "hsl": [round(h, 2), round(s, 4), round(l, 4)],
        "title_text_color": f"#{colors.to_hex_string(swatch.title_text_color)}",
        "body_text_color": f"#{colors.to_hex_string(swatch.body_text_color)}",
    }


def palette_to_dict(palette: Palette) -> dict:
    selected = {}
    for target in palette.targets:
        swatch = palette.get_swatch_for_target(target)
        selected[target.name or repr(target)] = swatch_to_dict(swatch) if swatch is not None else None
    return {
        "swatches": [swatch_to_dict(s) for s in palette.swatches],
        "targets": selected,
    }


def print_palette(palette: Palette) -> None:
    print(f"Swatches: {len(palette.swatches)}")
    for swatch in sorted(palette.swatches, key=lambda s: -s.population):
        h, s, l = swatch.hsl
        print(f"  #{swatch.hex_rgb}  population={swatch.population:<6d} hsl=({h:.1f}, {s:.3f}, {l:.3f})")

    print("Targets:")
    for target in palette.targets:
        swatch = palette.get_swatch_for_target(target)
        label = target.name or repr(target)
        if swatch is None:
            print(f"  {label:<14s} -")
        else:
            print(
                f"  {label:<14s} #{swatch.hex_rgb}  "
                f"title=#{colors.to_hex_string(swatch.title_text_color)}  "
                f"body=#{colors.to_hex_string(swatch.body_text_color)}"
            )


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        builder = PaletteBuilder.from_image(Path(parsed.input)).maximum_color_count(parsed.colors)

        if parsed.resize_area is not None:
            builder.resize_bitmap_area(parsed.resize_area)
        elif parsed.max_dimension is not None:
            builder.resize_max_dimension(parsed.max_dimension)

        if parsed.region is not None:
            builder.set_region(*parsed.region)

        if parsed.no_filters:
            builder.clear_filters()

        palette = builder.generate()

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1

    if parsed.json:
        print(json.dumps(palette_to_dict(palette), indent=2))
    else:
        print_palette(palette)

    return 0


if __name__ == "__main__":
    sys.exit(main())
