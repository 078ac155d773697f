"""
Grid-to-LED layout: which cells of the logical grid feed which LED.

The layout is data, not code. It is read from JSON into an LedLayout
model, checked by validate_layout() and then flattened into an
LedMap, a height x width lookup table of Optional[int]:

    lookup[y][x] -> LED index, or None for cells without an LED

Every LED must own exactly CELLS_PER_LED distinct cells, because the
aggregator divides by that constant instead of by a per-LED count.
"""

import json
import logging
import os
from typing import Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from .errors import TableIntegrityError
from .model import LedLayout

logger = logging.getLogger(__name__)

LED_COUNT = 320
CELLS_PER_LED = 4

DEFAULT_LAYOUT_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "hera_layout.json")

Cell = Tuple[int, int]


def validate_layout(layout: LedLayout) -> None:
    """
    Check the layout and raise TableIntegrityError listing every problem.

    Rules:
      - grid dimensions and LED count are positive
      - each LED index is in [0, led_count) and appears once
      - no index in [0, led_count) is missing
      - each footprint has exactly CELLS_PER_LED distinct cells
      - every cell lies inside the grid
      - no cell belongs to two LEDs
    """
    problems: List[str] = []

    if layout.grid_width <= 0 or layout.grid_height <= 0:
        problems.append(f"grid size {layout.grid_width}x{layout.grid_height} is not positive")
    if layout.led_count <= 0:
        problems.append(f"led_count {layout.led_count} is not positive")

    seen: Set[int] = set()
    owner: Dict[Cell, int] = {}

    for led in layout.leds:
        if not 0 <= led.index < layout.led_count:
            problems.append(f"LED {led.index} is outside [0, {layout.led_count})")
        if led.index in seen:
            problems.append(f"LED {led.index} is listed more than once")
        seen.add(led.index)

        cells = set(led.cells)
        if len(cells) != CELLS_PER_LED:
            problems.append(f"LED {led.index} has {len(cells)} distinct cells, expected {CELLS_PER_LED}")

        for x, y in sorted(cells):
            if not (0 <= x < layout.grid_width and 0 <= y < layout.grid_height):
                problems.append(f"LED {led.index} cell ({x},{y}) is outside the grid")
                continue
            other = owner.get((x, y))
            if other is not None and other != led.index:
                problems.append(f"cell ({x},{y}) is claimed by LED {other} and LED {led.index}")
            owner[(x, y)] = led.index

    missing = [i for i in range(layout.led_count) if i not in seen]
    if missing:
        preview = ", ".join(str(i) for i in missing[:10])
        more = f" (+{len(missing) - 10} more)" if len(missing) > 10 else ""
        problems.append(f"{len(missing)} LED index(es) have no cells: {preview}{more}")

    if problems:
        for p in problems:
            logger.debug("Layout %r: %s", layout.name, p)
        raise TableIntegrityError(f"Layout {layout.name!r} is invalid: " + "; ".join(problems))


class LedMap:
    """Validated, immutable lookup from grid cell to LED index."""

    def __init__(self, layout: LedLayout):
        validate_layout(layout)
        self.name = layout.name
        self.width = layout.grid_width
        self.height = layout.grid_height
        self.led_count = layout.led_count

        lookup: List[List[Optional[int]]] = [[None for _ in range(self.width)] for _ in range(self.height)]
        cells: Dict[int, Tuple[Cell, ...]] = {}
        for led in layout.leds:
            footprint = tuple(sorted(set(led.cells), key=lambda c: (c[1], c[0])))
            cells[led.index] = footprint
            for x, y in footprint:
                lookup[y][x] = led.index

        self._lookup = tuple(tuple(row) for row in lookup)
        self._cells = cells

    def map_cell(self, x: int, y: int) -> Optional[int]:
        """LED index for grid cell (x, y), or None if the cell has no LED."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self._lookup[y][x]
        return None

    def cells_for(self, index: int) -> Tuple[Cell, ...]:
        return self._cells.get(index, ())

    def inverted(self) -> Dict[int, List[Cell]]:
        """Group mapped cells by LED index by scanning the whole grid."""
        groups: Dict[int, List[Cell]] = {}
        for y in range(self.height):
            for x in range(self.width):
                index = self._lookup[y][x]
                if index is not None:
                    groups.setdefault(index, []).append((x, y))
        return groups

    @property
    def mapped_cell_count(self) -> int:
        return sum(1 for row in self._lookup for index in row if index is not None)

    def __repr__(self) -> str:
        return f"LedMap({self.name!r}, {self.width}x{self.height}, leds={self.led_count})"


def parse_layout(data: dict) -> LedLayout:
    try:
        return LedLayout(**data)
    except (TypeError, ValidationError) as e:
        raise TableIntegrityError(f"Malformed layout data: {e}") from e


def load_layout(path: Optional[str] = None) -> LedMap:
    """Load and validate a layout JSON file (default: the packaged HERA layout)."""
    file_path = path or DEFAULT_LAYOUT_PATH
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise TableIntegrityError(f"Layout file {file_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise TableIntegrityError(f"Layout file {file_path} must contain a JSON object")

    led_map = LedMap(parse_layout(data))
    logger.debug(
        "Loaded layout %r from %s: %d LEDs, %d mapped cells",
        led_map.name,
        file_path,
        led_map.led_count,
        led_map.mapped_cell_count,
    )
    return led_map


_default_map: Optional[LedMap] = None


def default_led_map() -> LedMap:
    global _default_map
    if _default_map is None:
        _default_map = load_layout()
    return _default_map
