from typing import Iterable, List, Sequence, Tuple

# Logical grid the source image is reduced to
GRID_WIDTH = 43
GRID_HEIGHT = 42

RGB = Tuple[int, int, int]


class PixelGrid:
    """
    Dense row-major grid of (r, g, b) triples.

    Row 0 is the top of the image regardless of how the rows were stored
    on disk. The pixel sequence is frozen into a tuple on construction.
    """

    __slots__ = ("width", "height", "pixels")

    def __init__(self, width: int, height: int, pixels: Iterable[RGB]):
        self.width = width
        self.height = height
        self.pixels: Tuple[RGB, ...] = tuple(pixels)
        if len(self.pixels) != width * height:
            raise ValueError(f"Expected {width * height} pixels for {width}x{height} grid, got {len(self.pixels)}")

    @classmethod
    def solid(cls, width: int, height: int, color: RGB) -> "PixelGrid":
        return cls(width, height, [tuple(color)] * (width * height))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[RGB]]) -> "PixelGrid":
        height = len(rows)
        width = len(rows[0]) if rows else 0
        pixels: List[RGB] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} pixels, expected {width}")
            pixels.extend(tuple(p) for p in row)
        return cls(width, height, pixels)

    def pixel(self, x: int, y: int) -> RGB:
        return self.pixels[y * self.width + x]

    def row(self, y: int) -> Tuple[RGB, ...]:
        start = y * self.width
        return self.pixels[start : start + self.width]

    def rows(self) -> List[Tuple[RGB, ...]]:
        return [self.row(y) for y in range(self.height)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (self.width, self.height, self.pixels) == (other.width, other.height, other.pixels)

    def __repr__(self) -> str:
        return f"PixelGrid({self.width}x{self.height})"
