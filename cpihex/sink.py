"""
cpihex.sink - write extracted bitmaps as C source or raw binary

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import io
import logging
from pathlib import Path

from .errors import OutputOpenFailure


DEFAULT_OUTFILE = 'font.h'


class CCodeWriter:
    """C source code, one const byte array per font."""

    delimiters = '{}'
    indent = '\t'
    assign_template = 'const unsigned char {identifier}[{bytesize}] = '
    separator = ';\n\n'

    @classmethod
    def encode_int(cls, value):
        """Output hex number in C format."""
        return f'0x{value:02X}'

    @classmethod
    def encode_array(cls, data, bytes_per_line):
        """Encode bytes to array literal."""
        start_delimiter, end_delimiter = cls.delimiters
        # grouper
        lines = [
            ', '.join(cls.encode_int(_b) for _b in data[_i : _i+bytes_per_line])
            for _i in range(0, len(data), bytes_per_line)
        ]
        body = ''.join(
            f'{cls.indent}{_line},\n' if _i < len(lines) - 1 else f'{cls.indent}{_line}\n'
            for _i, _line in enumerate(lines)
        )
        return f'{start_delimiter}\n{body}{end_delimiter}'

    @classmethod
    def encode_declaration(cls, bitmap):
        """Encode a FontBitmap as array declaration, one glyph per line."""
        assignment = cls.assign_template.format(
            identifier=bitmap.name, bytesize=bitmap.bytesize
        )
        # glyphs with zero height have nothing to group
        array = cls.encode_array(bitmap.data, max(1, bitmap.height))
        return f'{assignment}{array}{cls.separator}'


def _open_output(path, mode):
    logging.debug("Opening file `%s` for mode '%s'.", path, mode)
    try:
        return io.open(path, mode)
    except OSError as e:
        raise OutputOpenFailure(f'Could not open output file {path}: {e}') from e


def write_c_source(bitmaps, outfile=DEFAULT_OUTFILE):
    """Append array declarations for extracted bitmaps to a C source file."""
    for bitmap in bitmaps:
        logging.info('Writing `%s` to `%s`.', bitmap.name, outfile)
        with _open_output(outfile, 'a') as outstream:
            outstream.write(CCodeWriter.encode_declaration(bitmap))


def binary_path(bitmap, directory='.'):
    """Output path for the raw binary of a font."""
    return Path(directory) / f'{bitmap.name}.bin'


def write_binaries(bitmaps, directory='.'):
    """Write each extracted bitmap to its own raw binary file."""
    paths = []
    for bitmap in bitmaps:
        path = binary_path(bitmap, directory)
        logging.info('Writing `%s` to `%s`.', bitmap.name, path)
        with _open_output(path, 'wb') as outstream:
            outstream.write(bitmap.data)
        paths.append(path)
    return paths


def remove_output(outfile=DEFAULT_OUTFILE):
    """Remove an earlier C source output, as declarations are appended."""
    try:
        Path(outfile).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise OutputOpenFailure(f'Could not replace output file {outfile}: {e}') from e
