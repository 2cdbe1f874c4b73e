"""Date-window and resolution handling for observation frames.

Both parsers are lenient: an unparsable date means "no bound" and an
unknown resolution means minute bars, each with a warning.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import pandas as pd

log = logging.getLogger(__name__)


class Resolution(Enum):
    TICK = None
    SECOND = "1s"
    MINUTE = "1min"
    HOUR = "1h"
    DAILY = "1D"


_RESOLUTION_NAMES = {
    "tick": Resolution.TICK,
    "second": Resolution.SECOND,
    "minute": Resolution.MINUTE,
    "hour": Resolution.HOUR,
    "daily": Resolution.DAILY,
}


def parse_resolution(raw: Optional[str]) -> Resolution:
    """Map a config string to a :class:`Resolution`; blank or unknown → MINUTE."""
    if raw is None or not str(raw).strip():
        return Resolution.MINUTE
    res = _RESOLUTION_NAMES.get(str(raw).strip().lower())
    if res is None:
        log.warning("Unknown resolution %r; falling back to 'minute'", raw)
        return Resolution.MINUTE
    return res


def parse_iso_date(raw: object) -> Optional[pd.Timestamp]:
    """Parse an ISO date into a UTC midnight timestamp, or ``None``."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        ts = pd.Timestamp(raw)
    except (ValueError, TypeError):
        log.warning("Unparsable date %r; leaving the window open", raw)
        return None
    if ts is pd.NaT:
        return None
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    else:
        ts = ts.tz_convert("UTC")
    return ts.normalize()


def filter_window(
    frame: pd.DataFrame,
    start: Optional[pd.Timestamp],
    end: Optional[pd.Timestamp],
) -> pd.DataFrame:
    """Keep rows from ``start``'s day through the end of ``end``'s day."""
    mask = pd.Series(True, index=frame.index)
    if start is not None:
        mask &= frame["time"] >= start
    if end is not None:
        mask &= frame["time"] < end + pd.Timedelta(days=1)

    out = frame[mask].reset_index(drop=True)
    if len(out) != len(frame):
        log.info("Date window kept %s of %s observations", f"{len(out):,}", f"{len(frame):,}")
    return out


def resample_frame(frame: pd.DataFrame, resolution: Resolution) -> pd.DataFrame:
    """Downsample a ``time``/``price`` frame to the last observation per bucket.

    Each kept row carries its own timestamp, never the bucket's left edge,
    so nothing is replayed earlier than it was seen. ``TICK`` returns the
    frame unchanged and empty buckets produce no row.
    """
    if resolution is Resolution.TICK or frame.empty:
        return frame

    buckets = frame["time"].dt.floor(resolution.value)
    out = frame.groupby(buckets, sort=False).tail(1).reset_index(drop=True)
    log.info("Resampled %s → %s observations at %s",
             f"{len(frame):,}", f"{len(out):,}", resolution.name.lower())
    return out
