from __future__ import annotations

from pathlib import Path

import pytest


HEADER = b"TripID,PickupZoneID,DropoffZoneID,PickupDateTime,DistanceKm,FareAmount\n"


def trip_row(trip_id: str, zone: str, ts: str, dropoff: str = "Z9") -> bytes:
    return f"{trip_id},{zone},{dropoff},{ts},3.2,12.50\n".encode("utf-8")


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write raw bytes to a file under tmp_path and return its path."""

    def _write(content: bytes, name: str = "trips.csv") -> Path:
        p = tmp_path / name
        p.write_bytes(content)
        return p

    return _write


@pytest.fixture
def example_csv(write_csv):
    """Three Z1 trips at 08h and one Z2 trip at 09h, with header."""
    rows = [
        HEADER,
        trip_row("1", "Z1", "2024-01-01 08:15:00"),
        trip_row("2", "Z1", "2024-01-01 08:15:00"),
        trip_row("3", "Z1", "2024-01-01 08:15:00"),
        trip_row("4", "Z2", "2024-01-01 09:00:00"),
    ]
    return write_csv(b"".join(rows))
