"""
cpihex.ranges - character range selection

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import re

from .errors import MalformedRange, InvalidRangeOrder


# character indices are single bytes
FIRST_INDEX = 0
LAST_INDEX = 255
# maximum number of ranges in one selection
MAX_RANGES = 20
# signed decimal start, optionally followed by a dash and a signed end
_RANGE_RE = re.compile(r"([+-]?\d+)(?:-([+-]?\d+)?)?")


def parse_ranges(rangestr):
    """
    Convert a range specification such as `32-167,57,2-4` to (start, end) pairs.

    A single number n is taken as the range n-n. Values are clamped to 0--255.
    Ranges are kept in the order given; overlaps are not merged.
    """
    ranges = tuple(
        _parse_range(_item)
        for _item in rangestr.split(',')
    )
    if len(ranges) > MAX_RANGES:
        raise MalformedRange(
            f'At most {MAX_RANGES} ranges can be given, got {len(ranges)}.'
        )
    return ranges


def _parse_range(item):
    """
    Convert `start-end` or `start` to a clamped (start, end) pair.

    A missing end after the dash is taken as `start`; signed values are clamped.
    """
    match = _RANGE_RE.fullmatch(item.strip())
    if not match:
        raise MalformedRange(f"Invalid range '{item}'.")
    startstr, endstr = match.groups()
    start = _clamp(int(startstr))
    end = _clamp(int(endstr)) if endstr else start
    if end < start:
        raise InvalidRangeOrder(
            f"Ending range can not be smaller than starting range in '{item}'."
        )
    return start, end


def _clamp(index):
    return max(FIRST_INDEX, min(index, LAST_INDEX))


def select_ranges(ranges, default_end):
    """Use the given ranges, or all indices up to default_end if none given."""
    if ranges:
        return tuple(ranges)
    return ((FIRST_INDEX, default_end),)


def count_glyphs(ranges):
    """Number of glyphs selected, counting overlaps repeatedly."""
    return sum(_end - _start + 1 for _start, _end in ranges)


def iter_indices(ranges):
    """Iterate over selected indices, in range order."""
    for start, end in ranges:
        yield from range(start, end + 1)
