"""
fields.py

Field and hour extraction over a single record span.

Nothing here copies bytes: every helper takes (data, start, end) and returns
bounds into the same buffer. Failures are reported as None and mean
"record malformed, skip it".
"""

from __future__ import annotations

from typing import Optional, Tuple

from trip_zones.layout import ColumnLayout, DEFAULT_LAYOUT
from trip_zones.reader import Buffer


Bounds = Tuple[int, int]
RecordFields = Tuple[Bounds, Bounds, Bounds]  # identifier, zone, timestamp

UTF8_BOM = b"\xef\xbb\xbf"
_SPACE = 0x20  # any byte <= 0x20 counts as whitespace
_ZERO = 0x30


def clean_bounds(data: Buffer, start: int, end: int, quote: int = 0x22) -> Bounds:
    """
    Trim whitespace from both ends; if what is left is wrapped in one pair of
    quote bytes, drop the pair and trim once more.
    """
    while start < end and data[start] <= _SPACE:
        start += 1
    while end > start and data[end - 1] <= _SPACE:
        end -= 1
    if end - start >= 2 and data[start] == quote and data[end - 1] == quote:
        start += 1
        end -= 1
        while start < end and data[start] <= _SPACE:
            start += 1
        while end > start and data[end - 1] <= _SPACE:
            end -= 1
    return start, end


def lstrip_bounds(data: Buffer, start: int, end: int) -> int:
    while start < end and data[start] <= _SPACE:
        start += 1
    return start


def strip_bom(data: Buffer, start: int, end: int) -> int:
    if end - start >= 3 and data[start:start + 3] == UTF8_BOM:
        return start + 3
    return start


def _split_unquoted(data: Buffer, start: int, end: int, layout: ColumnLayout) -> Optional[list]:
    delim = layout.delimiter
    last = layout.last_col
    bounds = []
    field_start = start
    for _ in range(last):
        d = data.find(delim, field_start, end)
        if d < 0:
            return None
        bounds.append((field_start, d))
        field_start = d + 1
    d = data.find(delim, field_start, end)
    bounds.append((field_start, end if d < 0 else d))
    return bounds


def _split_quoted(data: Buffer, start: int, end: int, layout: ColumnLayout) -> Optional[list]:
    quote = layout.quote[0]
    delim = layout.delimiter[0]
    last = layout.last_col
    bounds = []
    field_start = start
    in_quote = False

    for p in range(start, end):
        c = data[p]
        if c == quote:
            in_quote = not in_quote
        elif c == delim and not in_quote:
            bounds.append((field_start, p))
            if len(bounds) > last:
                return bounds
            field_start = p + 1

    if in_quote:
        # unbalanced quoting swallowed a needed field
        return None
    bounds.append((field_start, end))
    if len(bounds) <= last:
        return None
    return bounds


def extract_fields(
    data: Buffer,
    start: int,
    end: int,
    layout: ColumnLayout = DEFAULT_LAYOUT,
) -> Optional[RecordFields]:
    """
    Locate the identifier, zone and timestamp fields of one record.

    Records without a quote byte are split with bytes.find; quoted records are
    scanned byte by byte so a delimiter inside quotes stays part of its field.
    Returned bounds are raw (not trimmed).
    """
    if data.find(layout.quote, start, end) < 0:
        bounds = _split_unquoted(data, start, end, layout)
    else:
        bounds = _split_quoted(data, start, end, layout)
    if bounds is None:
        return None
    return bounds[layout.id_col], bounds[layout.zone_col], bounds[layout.time_col]


def extract_hour(
    data: Buffer,
    start: int,
    end: int,
    layout: ColumnLayout = DEFAULT_LAYOUT,
) -> Optional[int]:
    """
    Read the hour (0-23) at a fixed offset of a 'YYYY-MM-DD HH...' timestamp.

    No date parsing happens: two ASCII digits at layout.hour_offset are the
    whole check.
    """
    start, end = clean_bounds(data, start, end, layout.quote[0])
    off = start + layout.hour_offset
    if end - off < 2:
        return None
    h1 = data[off] - _ZERO
    h2 = data[off + 1] - _ZERO
    if not (0 <= h1 <= 9 and 0 <= h2 <= 9):
        return None
    hour = h1 * 10 + h2
    if hour > 23:
        return None
    return hour
