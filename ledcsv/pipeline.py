"""
End-to-end conversion:

    bitmap bytes -> PixelGrid -> 43x42 PixelGrid -> 320 LED colors -> CSV

Every stage consumes the complete output of the previous one. Files are
only written after all stages succeeded, including the preview
rendering, so a failed run leaves no partial CSV or bitmap behind.
"""

import io
import logging
from typing import List, NamedTuple, Optional

from .aggregate import aggregate_led_colors
from .bitmap import encode_bitmap, parse_headers, read_pixels
from .downscale import downscale_grid
from .export import write_led_csv
from .grid import RGB, PixelGrid
from .layout import LedMap, default_led_map, load_layout
from .preview import preview_format, render_led_preview, save_preview

logger = logging.getLogger(__name__)


class ConversionResult(NamedTuple):
    led_colors: List[RGB]
    scaled: PixelGrid
    scaled_bitmap: Optional[bytes]


def convert(source: bytes, led_map: Optional[LedMap] = None, keep_scaled: bool = True) -> ConversionResult:
    """
    Convert raw bitmap bytes into per-LED colors.

    With keep_scaled the downscaled grid is also encoded back into a
    bitmap so it can be inspected on its own.
    """
    led_map = led_map or default_led_map()

    stream = io.BytesIO(source)
    info = parse_headers(stream)
    grid = read_pixels(stream, info)
    logger.debug("Decoded %dx%d source image", grid.width, grid.height)

    scaled = downscale_grid(grid, led_map.width, led_map.height, bottom_up=not info.top_down)

    colors = aggregate_led_colors(scaled, led_map)
    scaled_bitmap = encode_bitmap(scaled, info.resolution) if keep_scaled else None
    return ConversionResult(colors, scaled, scaled_bitmap)


def convert_file(
    input_path: str,
    output_path: str,
    scaled_path: Optional[str] = None,
    layout_path: Optional[str] = None,
    preview_path: Optional[str] = None,
    preview_scale: int = 10,
    led_map: Optional[LedMap] = None,
) -> ConversionResult:
    """
    Convert `input_path` and write the CSV plus the optional scaled bitmap
    and preview. Everything that can fail short of the writes themselves,
    including the preview format lookup and rendering, runs first.
    """
    if led_map is None:
        led_map = load_layout(layout_path) if layout_path else default_led_map()

    # unknown extension -> ValueError before anything is read or written
    preview_fmt = preview_format(preview_path) if preview_path is not None else None

    with open(input_path, "rb") as f:
        source = f.read()

    result = convert(source, led_map, keep_scaled=scaled_path is not None)
    preview = render_led_preview(result.led_colors, led_map, preview_scale) if preview_path is not None else None

    if scaled_path is not None:
        with open(scaled_path, "wb") as f:
            f.write(result.scaled_bitmap)
        logger.info(f"Scaled {result.scaled.width}x{result.scaled.height} bitmap written to {scaled_path}")

    if preview is not None:
        save_preview(preview_path, preview, preview_fmt)

    write_led_csv(output_path, result.led_colors)
    logger.info(f"Wrote {len(result.led_colors)} LED colors to {output_path}")
    return result
