"""Exceptions raised by the ledcsv conversion pipeline."""


class LedCsvError(Exception):
    """Base class for conversion failures."""


class FormatError(LedCsvError):
    """Input does not follow the file format the reader expects."""


class BitmapFormatError(FormatError):
    """Input is not a 24-bit uncompressed bitmap with the fixed 54-byte header."""


class CsvFormatError(FormatError):
    """An LED CSV file has a malformed record, an index out of order or a channel outside 0..255."""


class InvalidDimensionsError(LedCsvError):
    """Image dimensions are non-positive or smaller than the target grid."""


class TableIntegrityError(LedCsvError):
    """The grid-to-LED layout does not map every LED to exactly four cells."""


class ConfigError(LedCsvError):
    """The JSON configuration file could not be parsed."""


class TruncatedDataError(IOError):
    """The byte stream ended before the header or pixel data was complete."""
