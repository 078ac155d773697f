#!/usr/bin/env python3
"""
Convert a 24-bit BMP into a CSV of RGB values for the 320 LEDs of a HERA
display.

The image is block-averaged to a 43x42 grid, every LED takes the mean of
its four grid cells, and one "index, red, green, blue" line is written
per LED.

Example:
    ledcsv photo.bmp leds.csv --scaled temp.bmp --preview leds.png
    ledcsv --check-layout --layout my_layout.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config
from .errors import ConfigError, FormatError, InvalidDimensionsError, TableIntegrityError, TruncatedDataError
from .layout import load_layout
from .pipeline import convert_file
from .preview import preview_format

logger = logging.getLogger("ledcsv")

EXIT_USAGE = 1
EXIT_INPUT = 2
EXIT_OUTPUT = 3
EXIT_FORMAT = 5
EXIT_INVALID = 6


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ledcsv",
        description="Convert a 24-bit BMP image into per-LED RGB values for a HERA display.",
    )
    parser.add_argument("input_bmp", nargs="?", help="24-bit uncompressed BMP image.")
    parser.add_argument("output_csv", nargs="?", help="CSV file to write (one 'index, r, g, b' line per LED).")
    parser.add_argument("--scaled", metavar="PATH", help="Also write the downscaled grid as a BMP (e.g. temp.bmp).")
    parser.add_argument("--layout", metavar="PATH", help="Grid-to-LED layout JSON (default: packaged HERA layout).")
    parser.add_argument("--preview", metavar="PATH", help="Also render the LED colors to an image (PNG, BMP, ...).")
    parser.add_argument(
        "--preview-scale", type=int, default=None, help="Pixels per grid cell in the preview (default: 10)."
    )
    parser.add_argument("--config", metavar="PATH", help="JSON settings file (default: ledcsv.json if present).")
    parser.add_argument(
        "--check-layout",
        action="store_true",
        help="Only validate the layout and report its size.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        setup_logging("INFO")
        logger.error(str(e))
        return EXIT_USAGE

    setup_logging("DEBUG" if args.verbose else config.log_level)

    layout_path = args.layout or config.layout_path
    led_map = None
    if args.check_layout or layout_path:
        try:
            led_map = load_layout(layout_path)
        except (TableIntegrityError, OSError) as e:
            logger.error(f"Layout check failed: {e}")
            return EXIT_INVALID

    if args.check_layout:
        logger.info(
            f"Layout {led_map.name!r} OK: {led_map.led_count} LEDs, "
            f"{led_map.mapped_cell_count} of {led_map.width * led_map.height} cells mapped"
        )
        return 0

    if not args.input_bmp or not args.output_csv:
        logger.error("Usage: ledcsv <bmp image (input)> <csv file (output)>")
        return EXIT_USAGE

    preview_scale = args.preview_scale if args.preview_scale is not None else config.preview_scale
    if preview_scale < 1:
        logger.error("--preview-scale must be at least 1")
        return EXIT_USAGE

    preview_path = args.preview or config.preview_path
    if preview_path is not None:
        try:
            preview_format(preview_path)
        except ValueError as e:
            logger.error(str(e))
            return EXIT_USAGE

    try:
        with open(args.input_bmp, "rb"):
            pass
    except OSError as e:
        logger.error(f"Could not open {args.input_bmp}: {e}")
        return EXIT_INPUT

    try:
        convert_file(
            args.input_bmp,
            args.output_csv,
            scaled_path=args.scaled or config.scaled_path,
            preview_path=preview_path,
            preview_scale=preview_scale,
            led_map=led_map,
        )
    except FormatError as e:
        logger.error(f"Unsupported input file format, needs a 24-bit uncompressed BMP: {e}")
        return EXIT_FORMAT
    except (InvalidDimensionsError, TableIntegrityError) as e:
        logger.error(str(e))
        return EXIT_INVALID
    except TruncatedDataError as e:
        logger.error(f"Input file {args.input_bmp} is truncated: {e}")
        return EXIT_INPUT
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return EXIT_OUTPUT
    except ValueError as e:
        logger.error(f"Preview could not be rendered: {e}")
        return EXIT_USAGE

    return 0


if __name__ == "__main__":
    sys.exit(main())
