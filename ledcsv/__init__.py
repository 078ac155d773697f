"""Convert 24-bit BMP images into per-LED RGB CSV files."""

from .errors import (
    BitmapFormatError,
    ConfigError,
    CsvFormatError,
    FormatError,
    InvalidDimensionsError,
    LedCsvError,
    TableIntegrityError,
    TruncatedDataError,
)
from .grid import GRID_HEIGHT, GRID_WIDTH, PixelGrid
from .layout import CELLS_PER_LED, LED_COUNT, LedMap, load_layout
from .pipeline import ConversionResult, convert, convert_file

__version__ = "1.0.0"
