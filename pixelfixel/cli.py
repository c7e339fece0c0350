"""Command-line interface for pixelfixel."""

import argparse
import sys
from pathlib import Path

from .core import fix_pixel_art
from .palette import MAX_AUTO_COLORS
from .presets import palette_info
from .raster import PixelFixelError


def _scale(value: str) -> int | str:
    if value == "auto":
        return value
    try:
        scale = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer or 'auto', got {value!r}") from None
    if scale < 1:
        raise argparse.ArgumentTypeError(f"scale must be >= 1, got {scale}")
    return scale


def _positive(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recover the true resolution of upscaled pixel art and reduce its palette"
    )
    parser.add_argument("input", nargs="?", help="Input image path")
    parser.add_argument("-o", "--output", help="Output image path (default: input_fixed.png)")
    choice = parser.add_mutually_exclusive_group()
    choice.add_argument("-c", "--colors", type=_positive, help="Use exactly this many colors (median cut)")
    choice.add_argument("-p", "--palette", help="Map onto a preset palette (see --list-palettes)")
    parser.add_argument("--max-colors", type=_positive, default=MAX_AUTO_COLORS,
                        help=f"Upper bound for automatic color count (default: {MAX_AUTO_COLORS})")
    parser.add_argument("--no-quantize", action="store_true", help="Stop after downscaling, keep all colors")
    parser.add_argument("--scale", type=_scale, default=1,
                        help="Upscale the saved image by an integer factor, or 'auto' (default: 1)")
    parser.add_argument("--list-palettes", action="store_true", help="List preset palettes and exit")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output")
    parser.add_argument("--debug", action="store_true", help="Save debug image with the detected grid")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_palettes:
        for key, name, count in palette_info():
            print(f"{key:<14} {name} ({count} colors)")
        return

    if args.input is None:
        parser.error("the following arguments are required: input")

    # Default output path
    if args.output is None:
        input_path = Path(args.input)
        args.output = input_path.parent / f"{input_path.stem}_fixed.png"

    try:
        fix_pixel_art(
            args.input,
            args.output,
            colors=args.colors,
            palette=args.palette,
            max_colors=args.max_colors,
            quantize=not args.no_quantize,
            scale=args.scale,
            debug=args.debug,
            verbose=not args.quiet,
        )
    except (PixelFixelError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
