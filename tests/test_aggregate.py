import json

import pytest

from ledcsv.aggregate import aggregate_led_colors
from ledcsv.errors import InvalidDimensionsError, TableIntegrityError
from ledcsv.grid import PixelGrid
from ledcsv.layout import DEFAULT_LAYOUT_PATH, LED_COUNT, LedMap, default_led_map, parse_layout
from tests.conftest import gradient_grid, small_layout


def test_solid_grid_gives_solid_leds():
    colors = aggregate_led_colors(PixelGrid.solid(43, 42, (17, 34, 51)))
    assert len(colors) == LED_COUNT
    assert set(colors) == {(17, 34, 51)}


def test_each_led_averages_its_own_cells():
    grid = gradient_grid(43, 42)
    colors = aggregate_led_colors(grid)
    led_map = default_led_map()

    # LED 0 covers x 29..30, y 40..41
    assert colors[0] == ((29 + 30 + 29 + 30) // 4, (40 + 40 + 41 + 41) // 4, (69 + 70 + 70 + 71) // 4)
    for index in (0, 117, 220, 319):
        cells = led_map.cells_for(index)
        expected = tuple(sum(grid.pixel(x, y)[c] for x, y in cells) // 4 for c in range(3))
        assert colors[index] == expected


def test_unmapped_cells_do_not_contribute():
    led_map = default_led_map()
    pixels = [
        (0, 0, 0) if led_map.map_cell(x, y) is not None else (255, 255, 255) for y in range(42) for x in range(43)
    ]
    colors = aggregate_led_colors(PixelGrid(43, 42, pixels))
    assert set(colors) == {(0, 0, 0)}


def test_average_truncates():
    led_map = LedMap(small_layout())
    grid = PixelGrid.from_rows(
        [
            [(255, 1, 0), (0, 1, 0), (9, 9, 9), (9, 9, 9)],
            [(0, 1, 0), (0, 0, 3), (9, 9, 9), (9, 9, 10)],
        ]
    )
    assert aggregate_led_colors(grid, led_map) == [(63, 0, 0), (9, 9, 9)]


def test_grid_size_must_match_layout():
    with pytest.raises(InvalidDimensionsError):
        aggregate_led_colors(PixelGrid.solid(44, 42, (0, 0, 0)))


class DroppingMap(LedMap):
    """Map that hides one cell of LED 0 from the aggregator."""

    def map_cell(self, x, y):
        if (x, y) == (29, 40):
            return None
        return super().map_cell(x, y)


def test_wrong_sample_count_is_reported():
    with open(DEFAULT_LAYOUT_PATH, "r", encoding="utf-8") as f:
        broken = DroppingMap(parse_layout(json.load(f)))
    with pytest.raises(TableIntegrityError, match="LED 0: 3"):
        aggregate_led_colors(PixelGrid.solid(43, 42, (1, 1, 1)), broken)
