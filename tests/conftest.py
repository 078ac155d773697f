import struct
from typing import Callable, Optional

import pytest

from ledcsv.grid import PixelGrid
from ledcsv.layout import parse_layout
from ledcsv.model import LedLayout


def build_bmp(
    grid: PixelGrid,
    top_down: bool = False,
    signature: bytes = b"BM",
    offset: int = 54,
    info_size: int = 40,
    bit_count: int = 24,
    compression: int = 0,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> bytes:
    """Hand-assemble a bitmap; header fields can be overridden to make broken files."""
    w = grid.width if width is None else width
    h = grid.height if height is None else height
    padding = (4 - (grid.width * 3) % 4) % 4
    rows = []
    for y in range(grid.height):
        row = b"".join(bytes((b, g, r)) for r, g, b in grid.row(y)) + b"\x00" * padding
        rows.append(row)
    if not top_down:
        rows.reverse()
    pixel_data = b"".join(rows)

    file_header = struct.pack("<2sIHHI", signature, 54 + len(pixel_data), 0, 0, offset)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        info_size,
        w,
        -h if top_down else h,
        1,
        bit_count,
        compression,
        len(pixel_data),
        2835,
        2835,
        0,
        0,
    )
    return file_header + info_header + pixel_data


def small_layout(**overrides) -> LedLayout:
    """Two LEDs side by side on a 4x2 grid."""
    data = {
        "name": "small",
        "grid_width": 4,
        "grid_height": 2,
        "led_count": 2,
        "leds": [
            {"index": 0, "cells": [[0, 0], [1, 0], [0, 1], [1, 1]]},
            {"index": 1, "cells": [[2, 0], [3, 0], [2, 1], [3, 1]]},
        ],
    }
    data.update(overrides)
    return parse_layout(data)


def gradient_grid(width: int, height: int) -> PixelGrid:
    return PixelGrid(width, height, [(x % 256, y % 256, (x + y) % 256) for y in range(height) for x in range(width)])


@pytest.fixture
def bmp_builder() -> Callable[..., bytes]:
    return build_bmp


@pytest.fixture
def solid_bmp() -> Callable[..., bytes]:
    def factory(width: int, height: int, color=(10, 20, 30)) -> bytes:
        return build_bmp(PixelGrid.solid(width, height, color))

    return factory
