"""
cpihex test suite
testing utilities
"""

import io
import tempfile
import unittest
import logging
from pathlib import Path
from itertools import accumulate
from types import SimpleNamespace

from cpihex.headers import (
    FONT_FILE_HEADER, FONT_INFO_HEADER, CODEPAGE_ENTRY_HEADER,
    CODEPAGE_INFO_HEADER, SCREEN_FONT_HEADER, CHARACTER_INDEX_TABLE,
    DRDOS_FONT_COUNT, drdos_font_tables,
    ID_MS, ID_NT, ID_DR, ID0_STANDARD, ID0_EXTENDED, DT_SCREEN, DT_PRINTER,
)


def make_glyphs(num_chars, height, seed=0):
    """Bitmap of num_chars glyphs with distinguishable rows."""
    return bytes(
        (seed * 31 + _c * 7 + _r * 3) % 256
        for _c in range(num_chars)
        for _r in range(height)
    )


def glyph(data, index, height):
    """Rows of one glyph in a bitmap."""
    return data[index*height : (index+1)*height]


def screen_font(width=8, height=16, num_chars=256, seed=0):
    """Font record for the fixture builder."""
    return SimpleNamespace(
        width=width, height=height, num_chars=num_chars,
        bitmap=make_glyphs(num_chars, height, seed),
    )


def codepage_entry(codepage, fonts=(), device_type=DT_SCREEN, device_name=b'EGA     ', payload=None):
    """Codepage record for the fixture builder."""
    return SimpleNamespace(
        codepage=codepage, fonts=fonts,
        device_type=device_type, device_name=device_name, payload=payload,
    )


def _codepage_body(entry):
    """CodePageInfoHeader and fonts, or raw payload for printer entries."""
    if entry.payload is not None:
        return entry.payload
    fonts = b''.join(
        bytes(SCREEN_FONT_HEADER(
            height=_f.height, width=_f.width, num_chars=_f.num_chars,
        )) + _f.bitmap
        for _f in entry.fonts
    )
    cpih = CODEPAGE_INFO_HEADER(version=1, num_fonts=len(entry.fonts), size=len(fonts))
    return bytes(cpih) + fonts


def build_cpi(entries, format=ID_MS):
    """Build a FONT or FONT.NT file with codepage entries in sequence."""
    fih_offset = FONT_FILE_HEADER.size
    offset = fih_offset + FONT_INFO_HEADER.size
    blocks = []
    for entry in entries:
        body = _codepage_body(entry)
        start = offset
        offset = start + CODEPAGE_ENTRY_HEADER.size + len(body)
        if format == ID_NT:
            next_offset, cpih_offset = offset - start, CODEPAGE_ENTRY_HEADER.size
        else:
            next_offset, cpih_offset = offset, start + CODEPAGE_ENTRY_HEADER.size
        cpeh = CODEPAGE_ENTRY_HEADER(
            cpeh_size=CODEPAGE_ENTRY_HEADER.size,
            next_cpeh_offset=next_offset,
            device_type=entry.device_type,
            device_name=entry.device_name,
            codepage=entry.codepage,
            cpih_offset=cpih_offset,
        )
        blocks.append(bytes(cpeh) + body)
    ffh = FONT_FILE_HEADER(
        id0=ID0_STANDARD, id=format, pnum=1, ptyp=1, fih_offset=fih_offset,
    )
    fih = FONT_INFO_HEADER(num_codepages=len(entries))
    return bytes(ffh) + bytes(fih) + b''.join(blocks)


def build_drfont(codepages, cell_sizes, font_index=None, num_glyphs=256):
    """
    Build a DRFONT file; all codepages share one bitmap block per cell size.

    Returns the file data and the bitmap blocks.
    """
    if font_index is None:
        font_index = tuple(range(256))
    num_fonts = len(cell_sizes)
    tables_type = drdos_font_tables(num_fonts)
    fih_offset = FONT_FILE_HEADER.size + DRDOS_FONT_COUNT.size + tables_type.size
    offset = fih_offset + FONT_INFO_HEADER.size
    entry_size = (
        CODEPAGE_ENTRY_HEADER.size + CODEPAGE_INFO_HEADER.size
        + SCREEN_FONT_HEADER.size * num_fonts + CHARACTER_INDEX_TABLE.size
    )
    bitmap_start = offset + entry_size * len(codepages)
    blocks = [
        make_glyphs(num_glyphs, _size, seed=_i)
        for _i, _size in enumerate(cell_sizes)
    ]
    dfd_offsets = tuple(accumulate(
        (len(_b) for _b in blocks[:-1]), initial=bitmap_start
    ))
    index_array = CHARACTER_INDEX_TABLE.element_types['FontIndex']._ctype(*font_index)
    entries = []
    for codepage in codepages:
        cpeh = CODEPAGE_ENTRY_HEADER(
            cpeh_size=CODEPAGE_ENTRY_HEADER.size,
            next_cpeh_offset=offset + entry_size,
            device_type=DT_SCREEN,
            device_name=b'EGA     ',
            codepage=codepage,
            cpih_offset=offset + CODEPAGE_ENTRY_HEADER.size,
        )
        cpih = CODEPAGE_INFO_HEADER(
            version=2, num_fonts=num_fonts,
            size=SCREEN_FONT_HEADER.size * num_fonts,
        )
        fhs = b''.join(
            bytes(SCREEN_FONT_HEADER(height=_size, width=8, num_chars=256))
            for _size in cell_sizes
        )
        entries.append(
            bytes(cpeh) + bytes(cpih) + fhs
            + bytes(CHARACTER_INDEX_TABLE(FontIndex=index_array))
        )
        offset += entry_size
    ffh = FONT_FILE_HEADER(
        id0=ID0_EXTENDED, id=ID_DR, pnum=1, ptyp=1, fih_offset=fih_offset,
    )
    count = DRDOS_FONT_COUNT(num_fonts_per_codepage=num_fonts)
    tables = tables_type(
        font_cellsize=tables_type.element_types['font_cellsize']._ctype(*cell_sizes),
        dfd_offset=tables_type.element_types['dfd_offset']._ctype(*dfd_offsets),
    )
    fih = FONT_INFO_HEADER(num_codepages=len(codepages))
    data = (
        bytes(ffh) + bytes(count) + bytes(tables) + bytes(fih)
        + b''.join(entries) + b''.join(blocks)
    )
    return data, blocks


class BaseTester(unittest.TestCase):
    """Base class for testers."""

    logging.basicConfig(level=logging.WARNING)

    def setUp(self):
        """Setup ahead of each test."""
        bar = '-' * 20
        logging.debug('%s %s %s', bar, self.id(), bar)
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

    def tearDown(self):
        """Clean up after each test."""
        self.temp_dir.cleanup()

    def save_fixture(self, data, name='test.cpi'):
        """Write fixture data to the temporary directory."""
        path = self.temp_path / name
        path.write_bytes(data)
        return path

    @staticmethod
    def stream(data):
        return io.BytesIO(data)
