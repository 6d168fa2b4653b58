"""Tests for the trip-zones command line entry point."""

import pandas as pd
import pyarrow.parquet as pq

from trip_zones.summarize import main


class TestSummarizeCli:
    def test_writes_csv_outputs(self, example_csv, tmp_path, capsys):
        out_dir = tmp_path / "out"
        rc = main(["--csv", str(example_csv), "--k", "2", "--out-dir", str(out_dir)])
        assert rc == 0

        zones = pd.read_csv(out_dir / "trip_zones_top_zones.csv")
        assert zones["zone"].tolist() == ["Z1", "Z2"]
        assert zones["trips"].tolist() == [3, 1]
        assert zones["rank"].tolist() == [1, 2]
        assert zones["pct_of_trips"].tolist() == [75.0, 25.0]

        slots = pd.read_csv(out_dir / "trip_zones_top_slots.csv")
        assert list(zip(slots["zone"], slots["hour"], slots["trips"])) == [("Z1", 8, 3), ("Z2", 9, 1)]

        md = (out_dir / "summary_highlights.md").read_text(encoding="utf-8")
        assert "# Summary highlights" in md
        assert "**Z1 @ 08:00**: 3 trips" in md

        out = capsys.readouterr().out
        assert "4 trips counted" in out
        assert "Header row skipped" in out
        assert not list(out_dir.glob("*.tmp.*"))

    def test_writes_parquet(self, example_csv, tmp_path):
        out_dir = tmp_path / "pq"
        rc = main(["--csv", str(example_csv), "--out-dir", str(out_dir), "--format", "parquet", "--no-print"])
        assert rc == 0
        table = pq.read_table(out_dir / "trip_zones_top_zones.parquet")
        assert table.column("zone").to_pylist() == ["Z1", "Z2"]
        assert table.column("trips").to_pylist() == [3, 1]

    def test_missing_input_is_a_warning(self, tmp_path, capsys):
        out_dir = tmp_path / "out"
        rc = main(["--csv", str(tmp_path / "missing.csv"), "--out-dir", str(out_dir), "--no-highlights"])
        assert rc == 0
        assert "WARNING: could not open" in capsys.readouterr().out
        zones = pd.read_csv(out_dir / "trip_zones_top_zones.csv")
        assert zones.empty
        assert not (out_dir / "summary_highlights.md").exists()

    def test_invalid_k(self, example_csv, capsys):
        assert main(["--csv", str(example_csv), "--k", "0"]) == 2
        assert "ERROR:" in capsys.readouterr().err

    def test_invalid_layout(self, example_csv, capsys):
        assert main(["--csv", str(example_csv), "--layout", "trips9"]) == 2
        assert "Invalid layout" in capsys.readouterr().err

    def test_three_column_layout(self, write_csv, capsys):
        path = write_csv(b"TripID,Zone,Time\n1,Z7,2024-01-01 05:00:00\n", name="three.csv")
        assert main(["--csv", str(path), "--layout", "trips3"]) == 0
        assert "Z7 @ 05:00" in capsys.readouterr().out
