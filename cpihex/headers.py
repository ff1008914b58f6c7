"""
cpihex.headers - CPI file structures and header reader

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
from collections import namedtuple

from .struct import little_endian as le
from .errors import UnsupportedFormat

# https://www.seasip.info/DOS/CPI/cpi.html


# signature byte
ID0_STANDARD = 0xff
ID0_EXTENDED = 0x7f

# format ids
ID_MS = b'FONT   '
ID_NT = b'FONT.NT'
ID_DR = b'DRFONT '

# device types
DT_SCREEN = 1
DT_PRINTER = 2


FONT_FILE_HEADER = le.Struct(
    # 0xff for FONT and FONT.NT, 0x7f for DRFONT
    id0='byte',
    # space padded format name
    id='7s',
    reserved='8s',
    # number of pointers and pointer type; 1 in all known files
    pnum='short',
    ptyp='byte',
    # absolute offset of the FontInfoHeader
    fih_offset='dword',
)

FONT_INFO_HEADER = le.Struct(
    num_codepages='word',
)

CODEPAGE_ENTRY_HEADER = le.Struct(
    # size of this record; the reader always consumes the full 28 bytes
    cpeh_size='word',
    # absolute; relative to the start of this record in FONT.NT files
    next_cpeh_offset='dword',
    device_type='word',
    device_name='8s',
    codepage='word',
    reserved='6s',
    cpih_offset='dword',
)

CODEPAGE_INFO_HEADER = le.Struct(
    version='word',
    num_fonts='word',
    # byte count of the font data that follows; informational only
    size='word',
)

SCREEN_FONT_HEADER = le.Struct(
    height='byte',
    width='byte',
    yaspect='byte',
    xaspect='byte',
    num_chars='word',
)

# DRDOS extended font file header, read in two steps as its size depends on the count
DRDOS_FONT_COUNT = le.Struct(
    num_fonts_per_codepage='byte',
)

def drdos_font_tables(num_fonts_per_codepage=0):
    return le.Struct(
        font_cellsize=le.uint8 * num_fonts_per_codepage,
        dfd_offset=le.uint32 * num_fonts_per_codepage,
    )

# DRFONT character index table
CHARACTER_INDEX_TABLE = le.Struct(
    FontIndex=le.int16 * 256,
)


class CPIHeader(namedtuple(
        'CPIHeader',
        'id0 format pnum ptyp fih_offset cell_sizes dfd_offsets num_codepages'
    )):
    """File-level headers of a CPI file."""

    @property
    def extended(self):
        """File is in DRFONT format, with bitmaps addressed through index tables."""
        return self.id0 == ID0_EXTENDED

    @property
    def relative_offsets(self):
        """Codepage entry offsets are relative to the entry (FONT.NT)."""
        return self.format == ID_NT

    @property
    def num_fonts_per_codepage(self):
        return len(self.cell_sizes)


def read_header(stream):
    """
    Read the file header and the font info header.

    Leaves the stream positioned at the first codepage entry header.
    """
    ffh = FONT_FILE_HEADER.read_from(stream, 0)
    if ffh.id0 not in (ID0_STANDARD, ID0_EXTENDED):
        raise UnsupportedFormat(
            f'Not a CPI file: unsupported signature byte 0x{ffh.id0:02X}.'
        )
    # ctypes strips trailing nulls from char arrays
    format = ffh.id.ljust(7, b'\0')
    logging.debug(
        'FontFileHeader: id0=0x%02X id=%r pnum=%d ptyp=%d fih_offset=0x%X',
        ffh.id0, format, ffh.pnum, ffh.ptyp, ffh.fih_offset
    )
    cell_sizes, dfd_offsets = (), ()
    if ffh.id0 == ID0_EXTENDED:
        cell_sizes, dfd_offsets = read_extended_header(stream)
    fih = FONT_INFO_HEADER.read_from(stream, ffh.fih_offset)
    logging.debug('FontInfoHeader: num_codepages=%d', fih.num_codepages)
    return CPIHeader(
        id0=ffh.id0,
        format=format,
        pnum=ffh.pnum,
        ptyp=ffh.ptyp,
        fih_offset=ffh.fih_offset,
        cell_sizes=cell_sizes,
        dfd_offsets=dfd_offsets,
        num_codepages=fih.num_codepages,
    )


def read_extended_header(stream):
    """Read the DRDOS extended font file header following the file header."""
    num_fonts = DRDOS_FONT_COUNT.read_from(stream).num_fonts_per_codepage
    # all cell sizes, then all offsets
    tables = drdos_font_tables(num_fonts).read_from(stream)
    cell_sizes = tuple(tables.font_cellsize)
    dfd_offsets = tuple(tables.dfd_offset)
    logging.debug('DRDOSExtendedFontFileHeader: %d fonts', num_fonts)
    for size, offset in zip(cell_sizes, dfd_offsets):
        logging.debug('    cell size %d at offset 0x%X', size, offset)
    return cell_sizes, dfd_offsets
