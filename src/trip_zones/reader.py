"""
reader.py

Chunked binary reading and record splitting.

ChunkReader owns one fixed-size buffer that is refilled in place for every
read. iter_records() walks that buffer and yields (data, start, end) spans, one
per newline-terminated record. A record cut by a chunk boundary is reassembled
in a carry buffer, so the output does not depend on the chunk size.

A yielded span is only valid until the generator is resumed: resuming may
refill the chunk buffer (or clear the carry buffer) the span points into.
Copy anything you keep.
"""

from __future__ import annotations

from typing import BinaryIO, Iterator, Tuple, Union

from trip_zones.layout import DEFAULT_CHUNK_SIZE, validate_chunk_size


Buffer = Union[bytes, bytearray]
RecordSpan = Tuple[Buffer, int, int]

_NL = b"\n"
_CR = 0x0D


class ChunkReader:
    """
    Reads up to chunk_size bytes at a time from a binary stream into a
    reusable buffer. read_chunk() returns 0 at end of stream.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE):
        validate_chunk_size(chunk_size)
        self.stream = stream
        self.chunk_size = chunk_size
        self.buffer = bytearray(chunk_size)
        self.view = memoryview(self.buffer)
        self.bytes_read = 0
        self._readinto = getattr(stream, "readinto", None)

    def read_chunk(self) -> int:
        if self._readinto is not None:
            n = self._readinto(self.view)
        else:
            data = self.stream.read(self.chunk_size)
            n = len(data)
            self.view[:n] = data
        if not n:
            return 0
        self.bytes_read += n
        return n


def _strip_cr(data: Buffer, start: int, end: int) -> int:
    if end > start and data[end - 1] == _CR:
        return end - 1
    return end


def iter_records(reader: ChunkReader) -> Iterator[RecordSpan]:
    """
    Yield one (data, start, end) span per non-empty record, trailing CR removed.

    End of stream terminates a final record that has no newline.
    """
    buf = reader.buffer
    carry = bytearray()

    while True:
        n = reader.read_chunk()
        if n == 0:
            break

        pos = 0
        while pos < n:
            nl = buf.find(_NL, pos, n)
            if nl < 0:
                # unterminated tail: wait for the next chunk
                carry += reader.view[pos:n]
                break

            if carry:
                carry += reader.view[pos:nl]
                data, start, end = carry, 0, len(carry)
            else:
                data, start, end = buf, pos, nl

            end = _strip_cr(data, start, end)
            if end > start:
                yield data, start, end

            if carry:
                carry.clear()
            pos = nl + 1

    if carry:
        end = _strip_cr(carry, 0, len(carry))
        if end > 0:
            yield carry, 0, end
