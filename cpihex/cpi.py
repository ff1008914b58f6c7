"""
cpihex.cpi - extract bitmap fonts from DOS Codepage Information files

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import logging
from collections import namedtuple

from .streams import Stream
from .errors import RangeError
from .ranges import select_ranges, count_glyphs, iter_indices, LAST_INDEX
from .headers import (
    read_header, DT_PRINTER,
    CODEPAGE_ENTRY_HEADER, CODEPAGE_INFO_HEADER, SCREEN_FONT_HEADER,
    CHARACTER_INDEX_TABLE,
)


class Options(namedtuple(
        'Options', 'info binary codepage ranges',
        defaults=(False, False, 0, ()),
    )):
    """
    Extraction settings.

    info: only report structure, don't extract bitmaps
    binary: bitmaps are meant for raw binary files rather than source code
    codepage: only extract this codepage (0 for all)
    ranges: sequence of inclusive (start, end) character index pairs; empty for all
    """

DEFAULT_OPTIONS = Options()


class FontBitmap(namedtuple('FontBitmap', 'name data codepage width height')):
    """Selected glyph bitmaps of one font, one byte per pixel row."""

    @property
    def bytesize(self):
        return len(self.data)


# one surviving codepage entry, with its font headers and extracted bitmaps
CodePage = namedtuple('CodePage', 'entry info fonts bitmaps')


def symbol_name(codepage, width, height):
    """Identifier for the bitmap of a codepage font."""
    return f'CP{codepage}_{width}x{height}__1bpp'


###############################################################################
# public interface

def extract(instream, options=DEFAULT_OPTIONS):
    """
    Extract selected glyph bitmaps from a CPI file.

    instream: binary seekable stream, or path to CPI file
    options: Options record
    Returns a list of FontBitmap records, one per extracted font.
    """
    return [
        _bitmap
        for _codepage in read_codepages(instream, options)
        for _bitmap in _codepage.bitmaps
    ]


def iter_info(instream, options=DEFAULT_OPTIONS):
    """Iterate over the codepages in a CPI file, without extracting bitmaps."""
    yield from read_codepages(instream, options._replace(info=True))


def read_codepages(instream, options=DEFAULT_OPTIONS):
    """Walk the codepage entries of a CPI file, extracting fonts as we go."""
    if isinstance(instream, Stream):
        yield from _read_cpi(instream, options)
    else:
        with Stream(instream) as stream:
            yield from _read_cpi(stream, options)


def _read_cpi(stream, options):
    header = read_header(stream)
    yield from walk_codepages(stream, header, options)


###############################################################################
# codepage walker

def walk_codepages(stream, header, options):
    """
    Follow the linked list of codepage entry headers.

    The stream must be positioned at the first entry header.
    """
    for _ in range(header.num_codepages):
        # FONT.NT offsets are relative to the start of the entry
        cpeh_start = stream.tell()
        cpeh = CODEPAGE_ENTRY_HEADER.read_from(stream)
        if cpeh.device_type == DT_PRINTER:
            logging.info(
                'Printer font for codepage %d, skipping.', cpeh.codepage
            )
            stream.seek(cpeh.next_cpeh_offset)
            continue
        if options.codepage and options.codepage != cpeh.codepage:
            logging.debug('Skipping codepage %d.', cpeh.codepage)
            stream.seek(cpeh.next_cpeh_offset)
            continue
        logging.debug(
            'CodePageEntryHeader at 0x%X: size=0x%X device_type=%d '
            'device_name=%r codepage=%d next=0x%X',
            cpeh_start, cpeh.cpeh_size, cpeh.device_type,
            cpeh.device_name, cpeh.codepage, cpeh.next_cpeh_offset,
        )
        # the info header is read in sequence, cpih_offset is not followed
        cpih = CODEPAGE_INFO_HEADER.read_from(stream)
        logging.debug(
            'CodePageInfoHeader: version=%d num_fonts=%d size=0x%X',
            cpih.version, cpih.num_fonts, cpih.size,
        )
        fonts, bitmaps = [], []
        for _ in range(cpih.num_fonts):
            fh = SCREEN_FONT_HEADER.read_from(stream)
            logging.debug(
                'ScreenFontHeader: height=%d width=%d num_chars=%d',
                fh.height, fh.width, fh.num_chars,
            )
            fonts.append(fh)
            # DRFONT bitmaps are not stored after the font header
            if header.extended:
                continue
            bitmap = extract_font(stream, cpeh.codepage, fh, options)
            if bitmap is not None:
                bitmaps.append(bitmap)
        if header.extended and not options.info:
            bitmaps.extend(extract_drfont(stream, header, cpeh.codepage, options))
        if header.relative_offsets:
            stream.seek_relative(cpeh_start, cpeh.next_cpeh_offset)
        else:
            stream.seek(cpeh.next_cpeh_offset)
        yield CodePage(
            entry=cpeh, info=cpih, fonts=tuple(fonts), bitmaps=tuple(bitmaps)
        )


###############################################################################
# font extractors

def extract_font(stream, codepage, fh, options):
    """
    Read the bitmap following a FONT or FONT.NT screen font header.

    Returns a FontBitmap with the selected glyphs, or None in info mode.
    """
    data_length = fh.num_chars * fh.height
    logging.debug('Bitmap length: 0x%X', data_length)
    if options.info:
        stream.skip(data_length)
        return None
    data = stream.read(data_length)
    ranges = select_ranges(options.ranges, fh.num_chars - 1)
    for _, end in ranges:
        if end >= fh.num_chars:
            logging.debug(
                'Codepage %d font %dx%d has %d characters, range ends at %d.',
                codepage, fh.width, fh.height, fh.num_chars, end,
            )
            raise RangeError(
                f'Character {end} selected from a font with '
                f'{fh.num_chars} characters.'
            )
    height = fh.height
    logging.debug('Selected %d glyphs.', count_glyphs(ranges))
    glyphs = b''.join(
        data[_index*height : _index*height + height]
        for _index in iter_indices(ranges)
    )
    return FontBitmap(
        name=symbol_name(codepage, fh.width, height),
        data=glyphs, codepage=codepage, width=fh.width, height=height,
    )


def extract_drfont(stream, header, codepage, options):
    """
    Read the glyphs of a DRFONT codepage through its character index table.

    The stream must be positioned at the character index table.
    Returns a list of FontBitmap records, one per font size in the file.
    """
    cit = CHARACTER_INDEX_TABLE.read_from(stream)
    font_index = cit.FontIndex
    ranges = select_ranges(options.ranges, LAST_INDEX)
    logging.debug('Selected %d glyphs per font.', count_glyphs(ranges))
    bitmaps = []
    for cell_size, dfd_offset in zip(header.cell_sizes, header.dfd_offsets):
        glyphs = []
        for index in iter_indices(ranges):
            stream.seek(font_index[index] * cell_size + dfd_offset)
            glyphs.append(stream.read(cell_size))
        # DRFONT only holds 8-pixel wide fonts
        bitmaps.append(FontBitmap(
            name=symbol_name(codepage, 8, cell_size),
            data=b''.join(glyphs), codepage=codepage, width=8, height=cell_size,
        ))
    return bitmaps
