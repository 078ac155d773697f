"""
Block-average an image down to the fixed logical LED grid.

Each output cell is the truncated mean of a px_columns x px_rows block of
source pixels, where

    px_columns = source.width  // width
    px_rows    = source.height // height

Blocks are laid out in file storage order, starting from the first
stored pixel. Columns past px_columns * width (right edge) are dropped.
The remainder rows are dropped at the end of storage: the top strip of
the image for a bottom-up bitmap, the bottom strip for a top-down one.
Dropped pixels are not redistributed.
"""

import logging
from typing import List

from .errors import InvalidDimensionsError
from .grid import GRID_HEIGHT, GRID_WIDTH, RGB, PixelGrid

logger = logging.getLogger(__name__)


def block_size(source_width: int, source_height: int, width: int = GRID_WIDTH, height: int = GRID_HEIGHT):
    """Return (px_columns, px_rows) or raise if the source is too small."""
    if source_width <= 0 or source_height <= 0:
        raise InvalidDimensionsError(f"Source dimensions must be positive, got {source_width}x{source_height}")
    if source_width < width or source_height < height:
        raise InvalidDimensionsError(
            f"Source image {source_width}x{source_height} is smaller than the {width}x{height} target grid"
        )
    return source_width // width, source_height // height


def downscale_grid(
    source: PixelGrid, width: int = GRID_WIDTH, height: int = GRID_HEIGHT, bottom_up: bool = True
) -> PixelGrid:
    """
    Downscale a top-down grid. `bottom_up` tells how the source was stored
    on disk, which decides whether the leftover rows come off the top
    (bottom-up, the usual BMP layout) or the bottom (top-down).
    """
    px_columns, px_rows = block_size(source.width, source.height, width, height)
    samples = px_columns * px_rows

    dropped_columns = source.width - px_columns * width
    dropped_rows = source.height - px_rows * height
    row_start = dropped_rows if bottom_up else 0
    if dropped_columns or dropped_rows:
        logger.warning(
            "Source %dx%d is not a multiple of %dx%d: dropping %d right column(s) and %d %s row(s)",
            source.width,
            source.height,
            width,
            height,
            dropped_columns,
            dropped_rows,
            "top" if bottom_up else "bottom",
        )
    logger.debug(
        "Downscaling %dx%d -> %dx%d with %dx%d blocks", source.width, source.height, width, height, px_columns, px_rows
    )

    used_columns = px_columns * width
    pixels: List[RGB] = []

    for out_y in range(height):
        red = [0] * width
        green = [0] * width
        blue = [0] * width

        first = row_start + out_y * px_rows
        for src_y in range(first, first + px_rows):
            row = source.row(src_y)
            for src_x in range(used_columns):
                r, g, b = row[src_x]
                x = src_x // px_columns
                red[x] += r
                green[x] += g
                blue[x] += b

        for x in range(width):
            pixels.append((red[x] // samples, green[x] // samples, blue[x] // samples))

    return PixelGrid(width, height, pixels)
