"""
layout.py

Column layout of the trip CSV and the validation helpers shared by the
analyzer and the CLI.

Supported layouts:
  trips6: identifier,zone,secondaryZone,timestamp,distance,fare   (default)
  trips3: identifier,zone,timestamp

The layout is a fixed choice per analyzer; it is never inferred from the data.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional


DEFAULT_CHUNK_SIZE = 1 << 22  # 4 MiB
DEFAULT_K = 10

# Minimum timestamp length is hour_offset + 2 (two hour digits).
# "YYYY-MM-DD HH" / "YYYY-MM-DDTHH" -> offset 11
DEFAULT_HOUR_OFFSET = 11


@dataclass(frozen=True)
class ColumnLayout:
    name: str
    id_col: int
    zone_col: int
    time_col: int
    delimiter: bytes = b","
    quote: bytes = b'"'
    header_token: bytes = b"TripID"
    hour_offset: int = DEFAULT_HOUR_OFFSET

    @property
    def last_col(self) -> int:
        return max(self.id_col, self.zone_col, self.time_col)

    def with_header_token(self, token: Optional[str]) -> "ColumnLayout":
        if token is None:
            return self
        return replace(self, header_token=token.encode("utf-8"))


LAYOUTS: Dict[str, ColumnLayout] = {
    "trips6": ColumnLayout(name="trips6", id_col=0, zone_col=1, time_col=3),
    "trips3": ColumnLayout(name="trips3", id_col=0, zone_col=1, time_col=2),
}
DEFAULT_LAYOUT = LAYOUTS["trips6"]


# -----------------------------
# INPUT VALIDATION
# -----------------------------
def validate_layout(layout: ColumnLayout) -> None:
    """
    Validate a column layout before it is used for ingestion.

    Raises:
        ValueError: If columns collide, are negative, or the delimiter/quote
            bytes are not single distinct non-whitespace bytes.
    """
    cols = (layout.id_col, layout.zone_col, layout.time_col)
    if any(c < 0 for c in cols):
        raise ValueError(
            f"Column indices must be >= 0 (layout '{layout.name}').\n"
            f"Received: id={layout.id_col} zone={layout.zone_col} time={layout.time_col}"
        )
    if len(set(cols)) != 3:
        raise ValueError(
            f"Identifier, zone and timestamp columns must be distinct (layout '{layout.name}').\n"
            f"Received: id={layout.id_col} zone={layout.zone_col} time={layout.time_col}"
        )

    for label, b in (("delimiter", layout.delimiter), ("quote", layout.quote)):
        if len(b) != 1:
            raise ValueError(f"{label} must be exactly one byte, got {b!r}")
        if b[0] <= 0x20 or b in (b"\n", b"\r"):
            raise ValueError(f"{label} cannot be whitespace or a line terminator, got {b!r}")
    if layout.delimiter == layout.quote:
        raise ValueError(f"delimiter and quote must differ, both are {layout.delimiter!r}")

    if layout.hour_offset < 0:
        raise ValueError(f"hour_offset must be >= 0, got {layout.hour_offset}")


def validate_chunk_size(chunk_size: int) -> None:
    """
    Raises:
        ValueError: If chunk_size is not a positive integer.
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
        raise ValueError(
            f"Chunk size must be a positive number of bytes: {chunk_size!r}\n"
            f"Default is {DEFAULT_CHUNK_SIZE:,} bytes."
        )


def validate_k(k: int) -> None:
    """
    CLI-side check for --k. The analyzer itself accepts any int (k <= 0 -> []).

    Raises:
        ValueError: If k is not a positive integer.
    """
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"--k must be a positive integer, got {k!r}")


def get_layout(name: str) -> ColumnLayout:
    """
    Raises:
        ValueError: If name is not a known preset.
    """
    key = name.strip().lower()
    if key not in LAYOUTS:
        raise ValueError(
            f"Invalid layout: '{name}'. Must be one of: {', '.join(sorted(LAYOUTS))}"
        )
    return LAYOUTS[key]
