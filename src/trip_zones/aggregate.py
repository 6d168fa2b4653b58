"""
aggregate.py

Per-zone trip counters built during one ingest.

Design:
- One mutable ZoneStats per zone key, created on first sight
- Aggregator.record() is the only mutation point during ingestion
- Keys are the raw zone bytes (no case folding, no normalization)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, ItemsView, Iterator, Optional

import numpy as np


HOURS_PER_DAY = 24


def _zero_hours() -> np.ndarray:
    return np.zeros(HOURS_PER_DAY, dtype=np.int64)


@dataclass(eq=False)
class ZoneStats:
    total: int = 0
    by_hour: np.ndarray = field(default_factory=_zero_hours)

    def add(self, hour: int) -> None:
        self.total += 1
        self.by_hour[hour] += 1

    def copy(self) -> "ZoneStats":
        return ZoneStats(total=self.total, by_hour=self.by_hour.copy())

    def is_consistent(self) -> bool:
        return self.total == int(self.by_hour.sum())


class Aggregator:
    """
    Mapping zone key -> ZoneStats for a single ingest.

    Usage:
        agg = Aggregator()
        agg.record(b"Z1", 8)
        agg.get(b"Z1").total  # 1
    """

    def __init__(self) -> None:
        self._zones: Dict[bytes, ZoneStats] = {}
        self.total_trips = 0

    def record(self, zone: bytes, hour: int) -> None:
        stats = self._zones.get(zone)
        if stats is None:
            stats = self._zones[zone] = ZoneStats()
        stats.add(hour)
        self.total_trips += 1

    def clear(self) -> None:
        self._zones.clear()
        self.total_trips = 0

    def get(self, zone: bytes) -> Optional[ZoneStats]:
        return self._zones.get(zone)

    def items(self) -> ItemsView[bytes, ZoneStats]:
        return self._zones.items()

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)
