#!/usr/bin/env python3
"""
summarize.py

Busiest zones / busiest zone-hours from a trip CSV.

Outputs written to --out-dir (optional):
  - trip_zones_top_zones.csv     (rank, zone, trips, pct_of_trips)
  - trip_zones_top_slots.csv     (rank, zone, hour, trips, pct_of_trips)
  - summary_highlights.md        (unless --no-highlights)

With --format parquet the two tables are written as .parquet instead.

Design choices:
- One streaming pass over the CSV (TripAnalyzer); dirty rows are skipped, never fatal.
- A missing input file is a warning, not an error: outputs are written empty.
- Tables are written atomically (tmp file + os.replace).

Examples:
  python -m trip_zones.summarize --csv data/raw/Trips.csv --k 10
  trip-zones --csv data/raw/Trips.csv --k 20 --out-dir summaries/trips --format parquet
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from trip_zones.analyzer import TripAnalyzer
from trip_zones.layout import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_K,
    LAYOUTS,
    get_layout,
    validate_chunk_size,
    validate_k,
)
from trip_zones.topk import SlotCount, ZoneCount


ZONES_STEM = "trip_zones_top_zones"
SLOTS_STEM = "trip_zones_top_slots"


# -----------------------------
# Result tables
# -----------------------------
def zones_frame(rows: List[ZoneCount], total_trips: int) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in rows], columns=["zone", "count"])
    df = df.rename(columns={"count": "trips"})
    df.insert(0, "rank", list(range(1, len(df) + 1)))
    df["pct_of_trips"] = (df["trips"] / total_trips * 100.0) if total_trips else 0.0
    return df


def slots_frame(rows: List[SlotCount], total_trips: int) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in rows], columns=["zone", "hour", "count"])
    df = df.rename(columns={"count": "trips"})
    df.insert(0, "rank", list(range(1, len(df) + 1)))
    df["pct_of_trips"] = (df["trips"] / total_trips * 100.0) if total_trips else 0.0
    return df


def write_frame_atomic(df: pd.DataFrame, out_path: Path, fmt: str) -> None:
    """Write df to out_path via a tmp file in the same directory."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = out_path.parent / f"{out_path.name}.tmp.{os.getpid()}"
    try:
        if fmt == "parquet":
            pq.write_table(pa.Table.from_pandas(df, preserve_index=False), tmp_path)
        else:
            df.to_csv(tmp_path, index=False)
        os.replace(str(tmp_path), str(out_path))
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


# -----------------------------
# Highlights writer (terminal + markdown file)
# -----------------------------
def build_highlights_markdown(
    df_zones: pd.DataFrame,
    df_slots: pd.DataFrame,
    source: str,
    total_trips: int,
    k: int,
) -> List[str]:
    lines: List[str] = []
    lines.append("# Summary highlights")
    lines.append("")
    lines.append(f"- Source: `{source}`")
    lines.append(f"- Trips counted: {total_trips:,}")
    lines.append("")

    lines.append(f"## Top {k} zones")
    if df_zones.empty:
        lines.append("- (no trips counted)")
    for _, r in df_zones.iterrows():
        lines.append(f"- **{r['zone']}**: {int(r['trips']):,} trips ({float(r['pct_of_trips']):.2f}%)")
    lines.append("")

    lines.append(f"## Top {k} zone-hours")
    if df_slots.empty:
        lines.append("- (no trips counted)")
    for _, r in df_slots.iterrows():
        lines.append(
            f"- **{r['zone']} @ {int(r['hour']):02d}:00**: {int(r['trips']):,} trips "
            f"({float(r['pct_of_trips']):.2f}%)"
        )
    lines.append("")
    return lines


def write_lines(path: Path, lines: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def print_lines(lines: List[str]) -> None:
    for ln in lines:
        print(ln)


# -----------------------------
# Main
# -----------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Rank the busiest zones and zone-hours of a trip CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("--csv", required=True, type=Path, help="Trip CSV to ingest")
    ap.add_argument("--k", type=int, default=DEFAULT_K, help=f"How many entries per ranking (default: {DEFAULT_K})")
    ap.add_argument(
        "--layout",
        default="trips6",
        help=f"Column layout: {'|'.join(sorted(LAYOUTS))} (default: trips6)",
    )
    ap.add_argument("--header-token", default=None, help="Identifier text of the header row (default: TripID)")
    ap.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Read block size in bytes (default: {DEFAULT_CHUNK_SIZE:,})",
    )
    ap.add_argument("--out-dir", type=Path, default=None, help="Where to write ranking tables (optional)")
    ap.add_argument("--format", choices=["csv", "parquet"], default="csv", help="Table format for --out-dir")
    ap.add_argument("--no-print", action="store_true", help="Disable printing highlights to terminal")
    ap.add_argument("--no-highlights", action="store_true", help="Disable writing summary_highlights.md")

    args = ap.parse_args(argv)

    try:
        validate_k(args.k)
        validate_chunk_size(args.chunk_size)
        layout = get_layout(args.layout).with_header_token(args.header_token)
        analyzer = TripAnalyzer(layout=layout, chunk_size=args.chunk_size)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print("=" * 70)
    print("TRIP ZONE SUMMARY")
    print("=" * 70)
    print(f"Input:      {args.csv}")
    print(f"Layout:     {layout.name} (zone col {layout.zone_col}, timestamp col {layout.time_col})")
    print(f"Chunk size: {args.chunk_size:,} bytes")
    print(f"Top K:      {args.k}")
    print(f"Output dir: {args.out_dir or 'NONE'}")
    print()

    analyzer.ingest_file(args.csv)
    report = analyzer.last_ingest
    if report is not None and not report.opened:
        print(f"WARNING: could not open {args.csv} ({report.io_error}); results are empty.")
    elif report is not None:
        print(
            f"✓ {report.records_counted:,} trips counted, {report.records_skipped:,} rows skipped "
            f"({report.bytes_read:,} bytes, {analyzer.zone_count:,} zones)"
        )
        if report.header_skipped:
            print("✓ Header row skipped")
        if report.io_error:
            print(f"WARNING: read stopped early: {report.io_error}")
    print()

    total = analyzer.total_trips
    df_zones = zones_frame(analyzer.top_zones(args.k), total)
    df_slots = slots_frame(analyzer.top_busy_slots(args.k), total)

    if args.out_dir is not None:
        ext = "parquet" if args.format == "parquet" else "csv"
        for stem, df in ((ZONES_STEM, df_zones), (SLOTS_STEM, df_slots)):
            out_path = args.out_dir / f"{stem}.{ext}"
            write_frame_atomic(df, out_path, args.format)
            print(f"Saved -> {out_path} (rows={len(df):,})")

    highlights_lines = build_highlights_markdown(
        df_zones=df_zones,
        df_slots=df_slots,
        source=str(args.csv),
        total_trips=total,
        k=args.k,
    )

    if not args.no_print:
        terminal_lines = []
        for ln in highlights_lines:
            ln2 = ln.replace("## ", "").replace("# ", "").replace("**", "")
            terminal_lines.append(ln2)
        print_lines(terminal_lines)

    if args.out_dir is not None and not args.no_highlights:
        highlights_path = args.out_dir / "summary_highlights.md"
        write_lines(highlights_path, highlights_lines)
        print(f"Saved -> {highlights_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
