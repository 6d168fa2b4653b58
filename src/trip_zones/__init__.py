"""
trip_zones: streaming busiest-zone / busiest-hour summaries for trip CSVs.

Usage:
    from trip_zones import TripAnalyzer

    analyzer = TripAnalyzer()
    analyzer.ingest_file("Trips.csv")
    for zc in analyzer.top_zones(5):
        print(zc.zone, zc.count)
"""

from __future__ import annotations

from trip_zones.aggregate import Aggregator, ZoneStats
from trip_zones.analyzer import IngestSummary, TripAnalyzer
from trip_zones.layout import DEFAULT_CHUNK_SIZE, DEFAULT_K, DEFAULT_LAYOUT, LAYOUTS, ColumnLayout
from trip_zones.topk import SlotCount, ZoneCount

__all__ = [
    "Aggregator",
    "ColumnLayout",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_K",
    "DEFAULT_LAYOUT",
    "IngestSummary",
    "LAYOUTS",
    "SlotCount",
    "TripAnalyzer",
    "ZoneCount",
    "ZoneStats",
]
