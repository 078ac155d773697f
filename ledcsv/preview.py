"""Render LED colors back onto the logical grid as a Pillow image."""

import logging
import os
from typing import Optional, Sequence

from PIL import Image

from .grid import RGB
from .layout import LedMap, default_led_map

logger = logging.getLogger(__name__)


def render_led_preview(colors: Sequence[RGB], led_map: Optional[LedMap] = None, scale: int = 10) -> Image.Image:
    """
    Paint every LED footprint with its color on a black canvas the size
    of the logical grid, then enlarge by `scale` without smoothing.
    """
    led_map = led_map or default_led_map()
    if len(colors) != led_map.led_count:
        raise ValueError(f"Expected {led_map.led_count} colors, got {len(colors)}")
    if scale < 1:
        raise ValueError(f"Scale must be >= 1, got {scale}")

    img = Image.new("RGB", (led_map.width, led_map.height), (0, 0, 0))
    pixels = img.load()
    for index, color in enumerate(colors):
        for x, y in led_map.cells_for(index):
            pixels[x, y] = tuple(color)

    if scale > 1:
        img = img.resize((led_map.width * scale, led_map.height * scale), Image.Resampling.NEAREST)
    return img


def preview_format(path: str) -> str:
    """Pillow format name for the extension of `path`, or ValueError if Pillow cannot write it."""
    ext = os.path.splitext(path)[1].lower()
    fmt = Image.registered_extensions().get(ext)
    if fmt is None or fmt not in Image.SAVE:
        raise ValueError(f"Unknown preview file extension {ext!r} in {path}")
    return fmt


def save_preview(path: str, img: Image.Image, fmt: Optional[str] = None) -> None:
    img.save(path, format=fmt or preview_format(path))
    logger.info(f"Preview written to {path} ({img.width}x{img.height})")
