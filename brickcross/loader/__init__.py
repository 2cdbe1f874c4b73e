"""
brickcross.loader — read market data into DataFrames for replay.

Two sources are supported:

* bar snapshots — a directory of OHLC CSVs with a ``time`` column;
* imported tick files — ``time,bid,ask,last`` rows (see :mod:`.ticks`).
"""

from .snapshots import list_snapshot_files, load_snapshot
from .ticks import TICK_COLUMNS, TICK_TIME_FORMAT, parse_ticks, read_tick_file, split_tick_line

__all__ = [
    "list_snapshot_files",
    "load_snapshot",
    "TICK_COLUMNS",
    "TICK_TIME_FORMAT",
    "parse_ticks",
    "read_tick_file",
    "split_tick_line",
]
