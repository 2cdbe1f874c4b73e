"""Load a snapshot directory of bar CSVs into one DataFrame."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

log = logging.getLogger(__name__)


def list_snapshot_files(snapshot_dir: str | Path) -> list[Path]:
    """Return the snapshot's CSV files in a stable (sorted) order."""
    snapshot_dir = Path(snapshot_dir)
    csv_files = sorted(snapshot_dir.glob("*.csv"))
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in {snapshot_dir}")
    return csv_files


def load_snapshot(csv_files: list[Path]) -> pd.DataFrame:
    """Concatenate bar CSVs in the given order.

    ``time`` is parsed as UTC. Files are expected to be in chronological
    order already; nothing is re-sorted.
    """
    frames = []
    for csv_file in csv_files:
        df_part = pd.read_csv(csv_file)
        frames.append(df_part)
        log.info("  Loaded %s  (%s rows)", csv_file.name, f"{len(df_part):,}")

    df = pd.concat(frames, ignore_index=True)
    log.info("Total raw rows: %s", f"{len(df):,}")

    if "time" in df.columns:
        df["time"] = pd.to_datetime(df["time"], utc=True)
    return df
