"""
cpihex.errors - exception classes

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""


class CPIError(Exception):
    """Base class for all cpihex errors."""


class FileFormatError(CPIError):
    """Incorrect file format."""


class UnsupportedFormat(FileFormatError):
    """Leading signature byte is not a known CPI variant."""


class UnexpectedEOF(FileFormatError):
    """Record or bitmap extends beyond the end of the file."""


class InputOpenFailure(CPIError):
    """Input file could not be opened."""


class OutputOpenFailure(CPIError):
    """Output file could not be created."""


class RangeError(CPIError, ValueError):
    """Invalid character range specification."""


class MalformedRange(RangeError):
    """Range token could not be parsed."""


class InvalidRangeOrder(RangeError):
    """Range ends before it starts."""
