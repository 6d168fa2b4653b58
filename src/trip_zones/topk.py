"""
topk.py

Bounded top-K selection over the final aggregate.

The result buffer never grows past k and is kept sorted by the ranking key,
so a candidate only costs a comparison against the current worst entry unless
it makes the cut. Worst case O(n * k), O(k) extra memory; the aggregate itself
is never sorted.

Ranking keys (smaller ranks first):
  zones: (-count, zone_bytes)
  slots: (-count, zone_bytes, hour)
"""

from __future__ import annotations

from bisect import insort
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple, TypeVar

import numpy as np

from trip_zones.aggregate import Aggregator


K = TypeVar("K")


@dataclass(frozen=True)
class ZoneCount:
    zone: str
    count: int


@dataclass(frozen=True)
class SlotCount:
    zone: str
    hour: int
    count: int


def decode_zone(zone: bytes) -> str:
    return zone.decode("utf-8", errors="replace")


def select_top_k(keys: Iterable[K], k: int) -> List[K]:
    """
    Return the k smallest keys in ascending order.

    A full buffer only admits a key that is strictly smaller than its last
    (worst) entry; that entry is dropped to make room.
    """
    if k <= 0:
        return []
    best: List[K] = []
    for key in keys:
        if len(best) < k:
            insort(best, key)
        elif key < best[-1]:
            best.pop()
            insort(best, key)
    return best


def _zone_keys(aggregate: Aggregator) -> Iterator[Tuple[int, bytes]]:
    for zone, stats in aggregate.items():
        yield -stats.total, zone


def _slot_keys(aggregate: Aggregator) -> Iterator[Tuple[int, bytes, int]]:
    for zone, stats in aggregate.items():
        by_hour = stats.by_hour
        for hour in np.flatnonzero(by_hour):
            yield -int(by_hour[hour]), zone, int(hour)


def top_zones(aggregate: Aggregator, k: int) -> List[ZoneCount]:
    """Busiest zones: count desc, then zone bytes asc."""
    return [
        ZoneCount(zone=decode_zone(zone), count=-neg)
        for neg, zone in select_top_k(_zone_keys(aggregate), k)
    ]


def top_busy_slots(aggregate: Aggregator, k: int) -> List[SlotCount]:
    """Busiest (zone, hour) pairs with a positive count: count desc, zone asc, hour asc."""
    return [
        SlotCount(zone=decode_zone(zone), hour=hour, count=-neg)
        for neg, zone, hour in select_top_k(_slot_keys(aggregate), k)
    ]
