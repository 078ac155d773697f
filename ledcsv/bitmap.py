"""
Reader and writer for the one bitmap flavour the converter accepts:

- 14-byte BITMAPFILEHEADER starting with the "BM" tag,
- 40-byte BITMAPINFOHEADER directly after it (pixel data at offset 54),
- 24 bits per pixel, no compression, no palette.

Pixel rows are stored as B, G, R bytes and padded with zero bytes to a
multiple of 4. A positive height means rows are stored bottom-up, a
negative height means top-down. Decoded grids are always top-down.
"""

import io
import logging
import struct
from typing import BinaryIO, List, NamedTuple, Tuple

from .errors import BitmapFormatError, InvalidDimensionsError, TruncatedDataError
from .grid import RGB, PixelGrid

logger = logging.getLogger(__name__)

SIGNATURE = b"BM"
FILE_HEADER = struct.Struct("<2sIHHI")
INFO_HEADER = struct.Struct("<IiiHHIIiiII")
HEADER_SIZE = FILE_HEADER.size + INFO_HEADER.size  # 54
BITS_PER_PIXEL = 24
BYTES_PER_PIXEL = 3
COMPRESSION_NONE = 0


class BitmapInfo(NamedTuple):
    width: int
    height: int
    top_down: bool
    x_pixels_per_meter: int = 0
    y_pixels_per_meter: int = 0

    @property
    def resolution(self) -> Tuple[int, int]:
        return self.x_pixels_per_meter, self.y_pixels_per_meter


def row_padding(width: int) -> int:
    """Number of zero bytes appended to a scanline of `width` pixels."""
    return (4 - (width * BYTES_PER_PIXEL) % 4) % 4


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise TruncatedDataError(f"Unexpected end of stream while reading {what}: wanted {size} bytes, got {len(data)}")
    return data


def parse_headers(stream: BinaryIO) -> BitmapInfo:
    """
    Read and validate the file and info headers.

    The checks run in a fixed order and the first failing one raises
    BitmapFormatError:

      signature == "BM"
      pixel data offset == 54
      info header size == 40
      bits per pixel == 24
      compression == 0
    """
    signature, _file_size, _res1, _res2, offset = FILE_HEADER.unpack(
        _read_exact(stream, FILE_HEADER.size, "file header")
    )
    if signature != SIGNATURE:
        raise BitmapFormatError(f"Bad signature {signature!r}, expected {SIGNATURE!r}")
    if offset != HEADER_SIZE:
        raise BitmapFormatError(f"Pixel data offset is {offset}, expected {HEADER_SIZE}")

    (
        info_size,
        width,
        height,
        _planes,
        bit_count,
        compression,
        _image_size,
        x_ppm,
        y_ppm,
        _colors_used,
        _colors_important,
    ) = INFO_HEADER.unpack(_read_exact(stream, INFO_HEADER.size, "info header"))

    if info_size != INFO_HEADER.size:
        raise BitmapFormatError(f"Info header size is {info_size}, expected {INFO_HEADER.size}")
    if bit_count != BITS_PER_PIXEL:
        raise BitmapFormatError(f"Bit depth is {bit_count}, expected {BITS_PER_PIXEL}")
    if compression != COMPRESSION_NONE:
        raise BitmapFormatError(f"Compression is {compression}, expected {COMPRESSION_NONE} (none)")

    if width <= 0 or height == 0:
        raise InvalidDimensionsError(f"Invalid bitmap dimensions {width}x{height}")

    info = BitmapInfo(width, abs(height), height < 0, x_ppm, y_ppm)
    logger.debug(
        "Bitmap header: %dx%d, %s, padding=%d",
        info.width,
        info.height,
        "top-down" if info.top_down else "bottom-up",
        row_padding(info.width),
    )
    return info


def _decode_row(data: bytes, width: int) -> List[RGB]:
    end = width * BYTES_PER_PIXEL
    # B, G, R on disk
    return list(zip(data[2:end:3], data[1:end:3], data[0:end:3]))


def read_pixels(stream: BinaryIO, info: BitmapInfo) -> PixelGrid:
    """Read the pixel rows that follow the headers described by `info`."""
    stride = info.width * BYTES_PER_PIXEL + row_padding(info.width)

    rows: List[List[RGB]] = []
    for i in range(info.height):
        data = _read_exact(stream, stride, f"pixel row {i}")
        rows.append(_decode_row(data, info.width))

    if not info.top_down:
        rows.reverse()

    pixels: List[RGB] = []
    for row in rows:
        pixels.extend(row)
    return PixelGrid(info.width, info.height, pixels)


def decode_bitmap(stream: BinaryIO) -> PixelGrid:
    """
    Decode a bitmap from a binary stream into a top-down PixelGrid.

    The stream is left positioned after the last pixel row and is not
    closed.
    """
    return read_pixels(stream, parse_headers(stream))


def decode_bitmap_bytes(data: bytes) -> PixelGrid:
    return decode_bitmap(io.BytesIO(data))


def read_bitmap(path: str) -> PixelGrid:
    with open(path, "rb") as f:
        return decode_bitmap(f)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_bitmap(grid: PixelGrid, resolution: Tuple[int, int] = (0, 0)) -> bytes:
    """
    Serialize a grid into the same 54-byte-header 24-bit format.

    Rows are written bottom-up (positive height). The image size and file
    size fields are recomputed from the grid dimensions.
    """
    padding = bytes(row_padding(grid.width))
    image_size = (grid.width * BYTES_PER_PIXEL + len(padding)) * grid.height

    out = bytearray()
    out += FILE_HEADER.pack(SIGNATURE, HEADER_SIZE + image_size, 0, 0, HEADER_SIZE)
    out += INFO_HEADER.pack(
        INFO_HEADER.size,
        grid.width,
        grid.height,
        1,  # planes
        BITS_PER_PIXEL,
        COMPRESSION_NONE,
        image_size,
        resolution[0],
        resolution[1],
        0,
        0,
    )
    for y in range(grid.height - 1, -1, -1):
        for r, g, b in grid.row(y):
            out += bytes((b, g, r))
        out += padding
    return bytes(out)


def write_bitmap(path: str, grid: PixelGrid, resolution: Tuple[int, int] = (0, 0)) -> None:
    data = encode_bitmap(grid, resolution)
    with open(path, "wb") as f:
        f.write(data)
