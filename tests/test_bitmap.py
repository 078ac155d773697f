import io
import struct

import pytest
from PIL import Image

from ledcsv.bitmap import (
    HEADER_SIZE,
    decode_bitmap,
    decode_bitmap_bytes,
    encode_bitmap,
    parse_headers,
    read_bitmap,
    row_padding,
    write_bitmap,
)
from ledcsv.errors import BitmapFormatError, FormatError, InvalidDimensionsError, TruncatedDataError
from ledcsv.grid import PixelGrid
from tests.conftest import build_bmp, gradient_grid


@pytest.mark.parametrize("width,padding", [(1, 1), (2, 2), (3, 3), (4, 0), (43, 3), (86, 2)])
def test_row_padding(width, padding):
    assert row_padding(width) == padding


def test_decode_reads_bgr_bottom_up():
    grid = PixelGrid.from_rows(
        [
            [(1, 2, 3), (4, 5, 6), (7, 8, 9)],
            [(10, 11, 12), (13, 14, 15), (16, 17, 18)],
        ]
    )
    data = build_bmp(grid)

    # first stored row is the bottom one, blue byte first
    assert data[HEADER_SIZE : HEADER_SIZE + 3] == bytes((12, 11, 10))

    decoded = decode_bitmap_bytes(data)
    assert decoded == grid
    assert decoded.pixel(0, 0) == (1, 2, 3)
    assert decoded.pixel(2, 1) == (16, 17, 18)


def test_decode_top_down_matches_bottom_up():
    grid = gradient_grid(5, 4)
    assert decode_bitmap_bytes(build_bmp(grid, top_down=True)) == decode_bitmap_bytes(build_bmp(grid))


def test_parse_headers_reports_orientation_and_resolution():
    info = parse_headers(io.BytesIO(build_bmp(gradient_grid(5, 4), top_down=True)))
    assert (info.width, info.height, info.top_down) == (5, 4, True)
    assert info.resolution == (2835, 2835)


def test_decode_leaves_stream_after_pixels():
    stream = io.BytesIO(build_bmp(gradient_grid(3, 3)) + b"trailer")
    decode_bitmap(stream)
    assert stream.read() == b"trailer"


@pytest.mark.parametrize(
    "override",
    [
        {"signature": b"MB"},
        {"offset": 138},
        {"info_size": 124},
        {"bit_count": 32},
        {"bit_count": 8},
        {"compression": 1},
    ],
)
def test_header_violations_raise_format_error(override):
    with pytest.raises(BitmapFormatError):
        decode_bitmap_bytes(build_bmp(gradient_grid(4, 4), **override))


def test_wrong_signature_on_short_file_is_format_error():
    with pytest.raises(FormatError):
        decode_bitmap_bytes(b"XX" + bytes(12))


@pytest.mark.parametrize("width,height", [(0, 4), (-3, 4), (4, 0)])
def test_non_positive_dimensions(width, height):
    with pytest.raises(InvalidDimensionsError):
        decode_bitmap_bytes(build_bmp(gradient_grid(4, 4), width=width, height=height))


def test_truncated_pixel_data_raises_ioerror():
    data = build_bmp(gradient_grid(43, 42))
    with pytest.raises(IOError):
        decode_bitmap_bytes(data[:-1])


def test_truncated_header_raises_ioerror():
    with pytest.raises(TruncatedDataError):
        decode_bitmap_bytes(build_bmp(gradient_grid(4, 4))[:30])


def test_missing_row_padding_is_truncation():
    # 3 pixels wide needs 3 padding bytes per row
    data = build_bmp(gradient_grid(3, 2))
    with pytest.raises(IOError):
        decode_bitmap_bytes(data[:-3])


def test_encode_header_fields():
    data = encode_bitmap(PixelGrid.solid(43, 42, (1, 2, 3)), resolution=(3780, 3780))
    signature, file_size, _, _, offset = struct.unpack_from("<2sIHHI", data, 0)
    info = struct.unpack_from("<IiiHHIIiiII", data, 14)

    stride = 43 * 3 + 3
    assert signature == b"BM"
    assert offset == 54
    assert file_size == len(data) == 54 + stride * 42
    assert info[:7] == (40, 43, 42, 1, 24, 0, stride * 42)
    assert info[7:9] == (3780, 3780)


def test_encode_decode_round_trip():
    grid = gradient_grid(7, 5)
    assert decode_bitmap_bytes(encode_bitmap(grid)) == grid


def test_encoded_bitmap_readable_by_pillow():
    grid = gradient_grid(43, 42)
    img = Image.open(io.BytesIO(encode_bitmap(grid)))
    assert img.size == (43, 42)
    assert img.mode == "RGB"
    for x, y in [(0, 0), (42, 0), (0, 41), (17, 23), (42, 41)]:
        assert img.getpixel((x, y)) == grid.pixel(x, y)


def test_decode_pillow_written_bitmap(tmp_path):
    grid = gradient_grid(45, 44)
    img = Image.new("RGB", (grid.width, grid.height))
    img.putdata(list(grid.pixels))
    path = tmp_path / "pillow.bmp"
    img.save(path, "BMP")

    assert read_bitmap(str(path)) == grid


def test_write_bitmap(tmp_path):
    grid = gradient_grid(6, 3)
    path = tmp_path / "out.bmp"
    write_bitmap(str(path), grid)
    assert path.read_bytes() == encode_bitmap(grid)
