"""
analyzer.py

TripAnalyzer: one streaming pass over a trip CSV -> per-zone / per-hour counts
-> ranked top-K summaries.

Pipeline (single pass, no re-scan):
  ChunkReader -> iter_records -> extract_fields -> extract_hour -> Aggregator.record

Dirty input never raises:
- a missing/unreadable file leaves the aggregate empty
- a read error mid-file keeps whatever was counted so far
- a malformed record is skipped (too few fields, unbalanced quotes,
  empty identifier/zone, bad or out-of-range hour)

Every ingest starts from an empty aggregate; nothing accumulates across calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Tuple, Union

from trip_zones.aggregate import Aggregator, ZoneStats
from trip_zones.fields import clean_bounds, extract_fields, extract_hour, lstrip_bounds, strip_bom
from trip_zones.layout import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_K,
    DEFAULT_LAYOUT,
    ColumnLayout,
    validate_chunk_size,
    validate_layout,
)
from trip_zones.reader import ChunkReader, iter_records
from trip_zones.topk import SlotCount, ZoneCount, top_busy_slots, top_zones


PathLike = Union[str, Path]


@dataclass(frozen=True)
class IngestSummary:
    path: Optional[str]
    opened: bool
    bytes_read: int = 0
    records_seen: int = 0
    records_counted: int = 0
    records_skipped: int = 0
    header_skipped: bool = False
    io_error: Optional[str] = None


class TripAnalyzer:
    """
    Streaming trip-file analyzer.

    Usage:
        analyzer = TripAnalyzer()
        analyzer.ingest_file("Trips.csv")
        analyzer.top_zones(10)       # [ZoneCount(zone=..., count=...), ...]
        analyzer.top_busy_slots(10)  # [SlotCount(zone=..., hour=..., count=...), ...]

    Not thread-safe: one ingest owns the aggregate for its whole duration.
    """

    def __init__(
        self,
        layout: ColumnLayout = DEFAULT_LAYOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        verbose: bool = False,
    ):
        validate_layout(layout)
        validate_chunk_size(chunk_size)
        self.layout = layout
        self.chunk_size = chunk_size
        self.verbose = verbose
        self._aggregate = Aggregator()
        self._last_ingest: Optional[IngestSummary] = None

    # -----------------------------
    # Ingestion
    # -----------------------------
    def ingest_file(self, path: PathLike) -> None:
        """Reset, then stream the file at path. Never raises for I/O problems."""
        self._aggregate.clear()
        name = str(path)
        try:
            f = open(path, "rb")
        except OSError as e:
            self._last_ingest = IngestSummary(path=name, opened=False, io_error=str(e))
            if self.verbose:
                print(f"WARNING: cannot open {name}: {e} (aggregate left empty)")
            return

        with f:
            self.ingest_stream(f, name=name)

    def ingest_stream(self, stream: BinaryIO, name: Optional[str] = None) -> None:
        """Reset, then stream an already-open binary stream."""
        agg = self._aggregate
        agg.clear()

        layout = self.layout
        quote = layout.quote[0]
        header_token = layout.header_token

        reader = ChunkReader(stream, self.chunk_size)
        seen = counted = skipped = 0
        bom_checked = False
        header_checked = False
        header_skipped = False
        io_error: Optional[str] = None

        try:
            for data, start, end in iter_records(reader):
                start = lstrip_bounds(data, start, end)
                if start == end:
                    continue
                if not bom_checked:
                    bom_checked = True
                    start = lstrip_bounds(data, strip_bom(data, start, end), end)
                    if start == end:
                        continue
                seen += 1

                fields = extract_fields(data, start, end, layout)
                if fields is None:
                    skipped += 1
                    continue
                (id_s, id_e), (zone_s, zone_e), (ts_s, ts_e) = fields

                id_s, id_e = clean_bounds(data, id_s, id_e, quote)
                if id_s == id_e:
                    skipped += 1
                    continue
                if not header_checked:
                    header_checked = True
                    if data[id_s:id_e] == header_token:
                        header_skipped = True
                        continue

                zone_s, zone_e = clean_bounds(data, zone_s, zone_e, quote)
                if zone_s == zone_e:
                    skipped += 1
                    continue

                hour = extract_hour(data, ts_s, ts_e, layout)
                if hour is None:
                    skipped += 1
                    continue

                agg.record(bytes(data[zone_s:zone_e]), hour)
                counted += 1
        except OSError as e:
            io_error = str(e)

        self._last_ingest = IngestSummary(
            path=name,
            opened=True,
            bytes_read=reader.bytes_read,
            records_seen=seen,
            records_counted=counted,
            records_skipped=skipped,
            header_skipped=header_skipped,
            io_error=io_error,
        )

        if self.verbose:
            label = name or "<stream>"
            print(
                f"Ingested {label}: {counted:,} trips counted, {skipped:,} skipped, "
                f"{len(agg):,} zones ({reader.bytes_read:,} bytes)"
            )
            if io_error:
                print(f"WARNING: read stopped early on {label}: {io_error}")

    # -----------------------------
    # Queries
    # -----------------------------
    def top_zones(self, k: int = DEFAULT_K) -> List[ZoneCount]:
        return top_zones(self._aggregate, k)

    def top_busy_slots(self, k: int = DEFAULT_K) -> List[SlotCount]:
        return top_busy_slots(self._aggregate, k)

    def zone_stats(self, zone: Union[str, bytes]) -> Optional[ZoneStats]:
        """Copy of one zone's counters, or None if the zone was never seen."""
        key = zone.encode("utf-8") if isinstance(zone, str) else bytes(zone)
        stats = self._aggregate.get(key)
        return stats.copy() if stats is not None else None

    def snapshot(self) -> Dict[bytes, Tuple[int, Tuple[int, ...]]]:
        """{raw zone key: (total, 24 hourly counts)} for comparing whole aggregates."""
        return {
            zone: (stats.total, tuple(int(c) for c in stats.by_hour))
            for zone, stats in self._aggregate.items()
        }

    @property
    def zone_count(self) -> int:
        return len(self._aggregate)

    @property
    def total_trips(self) -> int:
        return self._aggregate.total_trips

    @property
    def last_ingest(self) -> Optional[IngestSummary]:
        return self._last_ingest
