"""
cpihex.streams - seekable input cursor

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import io
import logging
from pathlib import Path

from .errors import FileFormatError, UnexpectedEOF, InputOpenFailure


class Stream:
    """Single-cursor reader over a seekable binary file."""

    def __init__(self, file, *, name=''):
        """
        Open or wrap a binary input stream.
            file: readable, seekable binary stream, string or path-like object
            name: name to use in messages
        """
        if not file:
            raise ValueError('No file name, path or stream provided.')
        # if a path is provided, open a binary stream
        if isinstance(file, (str, Path)):
            self._stream = self._open_path(file)
            self._owned = True
            name = name or str(file)
        else:
            # don't close externally provided stream
            self._stream = file
            self._owned = False
        self.name = name or get_name(self._stream)
        self.closed = False
        self._ensure_readable()

    @staticmethod
    def _open_path(file):
        """Open a raw stream on the filesystem."""
        logging.debug("Opening file `%s` for reading.", file)
        try:
            return io.open(file, 'rb')
        except OSError as e:
            raise InputOpenFailure(f'Could not open file {file}: {e}') from e

    def _ensure_readable(self):
        """Ensure we have a readable, seekable, binary stream."""
        if not self._stream.readable():
            raise FileFormatError('Expected readable stream, got writable.')
        if not self._stream.seekable():
            raise FileFormatError('CPI input must be seekable.')
        if not isinstance(self._stream.read(0), bytes):
            raise FileFormatError('Expected binary stream, got text.')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        """String representation."""
        return (
            f"<{type(self).__name__} name='{self.name}' at {self.tell()}"
            f"{' [closed]' if self.closed else ''}>"
        )

    def close(self):
        if self._owned and not self.closed:
            self._stream.close()
        self.closed = True

    def tell(self):
        """Current cursor position, from start of file."""
        return self._stream.tell()

    def seek(self, offset):
        """Move the cursor to an absolute position."""
        if offset < 0:
            raise FileFormatError(
                f'Cannot seek to negative offset {offset} in `{self.name}`.'
            )
        return self._stream.seek(offset, io.SEEK_SET)

    def seek_relative(self, base, offset):
        """Move the cursor to an offset relative to a base position."""
        return self.seek(base + offset)

    def skip(self, size):
        """Move the cursor forward without reading."""
        return self._stream.seek(size, io.SEEK_CUR)

    def read(self, size):
        """Read exactly `size` bytes."""
        offset = self.tell()
        data = self._stream.read(size)
        if len(data) < size:
            raise UnexpectedEOF(
                f'Expected {size} bytes at offset {offset} in `{self.name}`, '
                f'got {len(data)}.'
            )
        return data


def get_name(stream):
    """Get stream name, if available."""
    try:
        return stream.name
    except AttributeError:
        # not all streams have one (e.g. BytesIO)
        return ''
