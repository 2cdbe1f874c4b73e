"""Reader for imported tick files.

Format::

    time,bid,ask,last
    20230927 09:00:00.123456789,15210.5,15211.0,15211.0

The header (any line starting with ``time``), blank lines, rows with fewer
than four fields and rows whose timestamp does not match
:data:`TICK_TIME_FORMAT` are dropped. Unparsable prices become ``0.0``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

log = logging.getLogger(__name__)

TICK_TIME_FORMAT = "%Y%m%d %H:%M:%S.%f"
TICK_COLUMNS: list[str] = ["time", "bid", "ask", "last"]


def split_tick_line(line: str) -> Optional[list[str]]:
    """Return the four raw fields of a data row, or ``None`` for a non-data line."""
    line = line.strip()
    if not line or line.lower().startswith("time"):
        return None
    parts = line.split(",")
    if len(parts) < 4:
        return None
    return [p.strip() for p in parts[:4]]


def parse_ticks(lines) -> pd.DataFrame:
    """Parse an iterable of raw lines into a ``time``/``bid``/``ask``/``last`` frame."""
    rows = []
    n_lines = 0
    for line in lines:
        n_lines += 1
        parts = split_tick_line(line)
        if parts is not None:
            rows.append(parts)

    df = pd.DataFrame(rows, columns=TICK_COLUMNS)
    df["time"] = pd.to_datetime(df["time"], format=TICK_TIME_FORMAT, utc=True, errors="coerce")
    df = df.dropna(subset=["time"])

    for col in ("bid", "ask", "last"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)

    n_dropped = n_lines - len(df)
    if n_dropped:
        log.debug("Skipped %s non-data or malformed tick lines", f"{n_dropped:,}")

    return df.reset_index(drop=True)


def read_tick_file(path: str | Path) -> pd.DataFrame:
    """Read a tick file from disk. See the module docstring for the format."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        df = parse_ticks(f)
    log.info("Loaded %s  (%s ticks)", path.name, f"{len(df):,}")
    return df
