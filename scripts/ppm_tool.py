#!/usr/bin/env python3
"""Command-line front-end over the compositor for ASCII pixmap files.

Usage:
    python scripts/ppm_tool.py info in.ppm
    python scripts/ppm_tool.py invert in.ppm --out inverted.ppm
    python scripts/ppm_tool.py flip in.ppm --axis vertical --out flipped.ppm
    python scripts/ppm_tool.py scale in.ppm --factor 4 --out big.ppm
    python scripts/ppm_tool.py crop in.ppm --box 2 2 8 8 --out part.ppm
    python scripts/ppm_tool.py tile in.ppm --axis horizontal --count 3 --out row.ppm
    python scripts/ppm_tool.py beside a.ppm b.ppm --out ab.ppm
    python scripts/ppm_tool.py above a.ppm b.ppm --out ab.ppm
    python scripts/ppm_tool.py blend a.ppm b.ppm --out mix.ppm
    python scripts/ppm_tool.py png in.ppm --out preview.png

Exit codes:
    0 success, 1 unreadable/invalid input or incompatible operands
"""

import argparse
import logging
import sys
from typing import List, Optional

from src.pixmap import codec, compositor
from src.pixmap.buffer import PixelBuffer
from src.pixmap.errors import PixmapError
from src.utils import color, fs, logging_config

logger = logging.getLogger(__name__)

_UNARY = ("info", "invert", "flip", "scale", "crop", "tile", "png")
_BINARY = ("beside", "above", "blend")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Transform ASCII pixmap files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('command', choices=_UNARY + _BINARY, help='Operation to apply')
    parser.add_argument('inputs', nargs='+', help='Input pixmap file(s)')
    parser.add_argument('--out', type=str, default=None, help='Output path')
    parser.add_argument(
        '--axis',
        choices=['horizontal', 'vertical'],
        default='horizontal',
        help='Axis for flip/tile, default: horizontal'
    )
    parser.add_argument('--factor', type=int, default=2, help='Scale factor, default: 2')
    parser.add_argument('--count', type=int, default=2, help='Tile count, default: 2')
    parser.add_argument(
        '--box',
        type=int,
        nargs=4,
        metavar=('X', 'Y', 'W', 'H'),
        help='Crop rectangle'
    )
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    return parser.parse_args(argv)


def describe(buffer: PixelBuffer) -> str:
    return f"{buffer.width}x{buffer.height} max_value={buffer.max_value} pixels={len(buffer)}"


def apply_command(args: argparse.Namespace, images: List[PixelBuffer]) -> PixelBuffer:
    """Run the selected compositor operation."""
    cmd = args.command
    if cmd in _BINARY:
        a, b = images
        return getattr(compositor, cmd)(a, b)

    img = images[0]
    if cmd == "invert":
        return compositor.invert(img)
    if cmd == "flip":
        if args.axis == "horizontal":
            return compositor.flip_horizontal(img)
        return compositor.flip_vertical(img)
    if cmd == "scale":
        return compositor.scale(img, args.factor)
    if cmd == "crop":
        if args.box is None:
            raise ValueError("crop requires --box X Y W H")
        return compositor.crop(img, *args.box)
    if cmd == "tile":
        if args.axis == "horizontal":
            return compositor.tile_horizontal(img, args.count)
        return compositor.tile_vertical(img, args.count)
    # info / png operate on the input as-is
    return img


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging_config.setup_logging(log_level="DEBUG" if args.verbose else "INFO",
                                 context={"app": "ppm_tool"})

    expected = 2 if args.command in _BINARY else 1
    if len(args.inputs) != expected:
        logger.error(f"{args.command} expects {expected} input file(s), got {len(args.inputs)}")
        return 1
    if args.command != "info" and not args.out:
        logger.error(f"{args.command} requires --out")
        return 1

    try:
        images = [codec.load(path) for path in args.inputs]
        result = apply_command(args, images)
    except (FileNotFoundError, PixmapError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.command == "info":
        print(describe(result))
        return 0

    try:
        if args.command == "png":
            fs.atomic_save_image(color.to_uint8_array(result), args.out)
        else:
            codec.save(result, args.out)
    except (RuntimeError, ValueError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"{args.command}: {describe(result)} → {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
