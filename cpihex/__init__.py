"""
cpihex - extract bitmap fonts from DOS codepage information files

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import sys as _sys
assert _sys.version_info >= (3, 8)

__version__ = '0.3.0'

from .errors import (
    CPIError, FileFormatError, UnsupportedFormat, UnexpectedEOF,
    InputOpenFailure, OutputOpenFailure,
    RangeError, MalformedRange, InvalidRangeOrder,
)
from .streams import Stream
from .headers import read_header, CPIHeader
from .ranges import parse_ranges, select_ranges, count_glyphs, iter_indices
from .cpi import (
    Options, DEFAULT_OPTIONS, FontBitmap, CodePage,
    extract, iter_info, read_codepages,
)
from .sink import CCodeWriter, write_c_source, write_binaries
