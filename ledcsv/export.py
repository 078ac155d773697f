"""
LED color CSV.

One record per LED in ascending index order, no header, comma-space
separated, no newline after the last record:

    0, 12, 34, 56
    1, 12, 34, 56
    ...
    319, 0, 0, 0
"""

import io
from typing import List, Sequence, TextIO, Union

from .errors import CsvFormatError
from .grid import RGB

SEPARATOR = ", "


def format_led_record(index: int, color: RGB) -> str:
    r, g, b = color
    return SEPARATOR.join(str(v) for v in (index, r, g, b))


def format_led_csv(colors: Sequence[RGB]) -> str:
    return "\n".join(format_led_record(i, color) for i, color in enumerate(colors))


def write_led_csv(target: Union[str, TextIO], colors: Sequence[RGB]) -> None:
    """Write the CSV to a path or an open text stream."""
    text = format_led_csv(colors)
    if isinstance(target, str):
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    else:
        target.write(text)


def parse_led_csv(text: str) -> List[RGB]:
    """
    Parse CSV text back into colors.

    Records must be in ascending index order starting at 0 and every
    channel must be in 0..255. Blank lines are ignored.
    """
    colors: List[RGB] = []
    for line_no, raw_line in enumerate(io.StringIO(text), start=1):
        line = raw_line.strip()
        if not line:
            continue
        fields = [f.strip() for f in line.split(",")]
        if len(fields) != 4:
            raise CsvFormatError(f"Line {line_no}: expected 4 fields, got {len(fields)}")
        try:
            index, r, g, b = (int(f) for f in fields)
        except ValueError:
            raise CsvFormatError(f"Line {line_no}: non-integer field in {line!r}") from None
        if index != len(colors):
            raise CsvFormatError(f"Line {line_no}: expected LED index {len(colors)}, got {index}")
        if not all(0 <= v <= 255 for v in (r, g, b)):
            raise CsvFormatError(f"Line {line_no}: channel value out of range in {line!r}")
        colors.append((r, g, b))
    return colors


def read_led_csv(source: Union[str, TextIO]) -> List[RGB]:
    if isinstance(source, str):
        with open(source, "r", encoding="utf-8") as f:
            return parse_led_csv(f.read())
    return parse_led_csv(source.read())
