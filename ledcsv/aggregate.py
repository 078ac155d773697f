import logging
from typing import List, Optional

from .errors import InvalidDimensionsError, TableIntegrityError
from .grid import RGB, PixelGrid
from .layout import CELLS_PER_LED, LedMap, default_led_map

logger = logging.getLogger(__name__)


def aggregate_led_colors(grid: PixelGrid, led_map: Optional[LedMap] = None) -> List[RGB]:
    """
    Average the grid cells assigned to each LED.

    Every cell is looked up once. Sums are divided by the fixed
    CELLS_PER_LED, so a layout that feeds an LED any other number of
    cells is rejected before a single color is produced.
    """
    led_map = led_map or default_led_map()
    if (grid.width, grid.height) != (led_map.width, led_map.height):
        raise InvalidDimensionsError(
            f"Grid is {grid.width}x{grid.height}, layout {led_map.name!r} expects {led_map.width}x{led_map.height}"
        )

    red = [0] * led_map.led_count
    green = [0] * led_map.led_count
    blue = [0] * led_map.led_count
    counts = [0] * led_map.led_count

    for y in range(grid.height):
        for x in range(grid.width):
            index = led_map.map_cell(x, y)
            if index is None:
                continue
            r, g, b = grid.pixel(x, y)
            red[index] += r
            green[index] += g
            blue[index] += b
            counts[index] += 1

    bad = [(i, n) for i, n in enumerate(counts) if n != CELLS_PER_LED]
    if bad:
        detail = ", ".join(f"LED {i}: {n}" for i, n in bad[:10])
        raise TableIntegrityError(f"{len(bad)} LED(s) sampled a cell count other than {CELLS_PER_LED} ({detail})")

    logger.debug("Aggregated %d LEDs from %d mapped cells", led_map.led_count, sum(counts))
    return [
        (red[i] // CELLS_PER_LED, green[i] // CELLS_PER_LED, blue[i] // CELLS_PER_LED)
        for i in range(led_map.led_count)
    ]
