"""Fail-fast data-integrity checks for observation DataFrames."""

from __future__ import annotations

import pandas as pd


def validate_observations(df: pd.DataFrame) -> None:
    """Validate a raw observation DataFrame *before* any processing.

    Raises ``ValueError`` immediately on the first problem found so that
    out-of-order data never reaches the signal engines, which assume
    non-decreasing timestamps and do not re-sort.
    """

    # 1. Timestamp column exists with no nulls ──────────────────────────
    if "time" not in df.columns:
        raise ValueError("Missing 'time' column")
    if df["time"].isna().any():
        n = int(df["time"].isna().sum())
        raise ValueError(f"Null timestamps found: {n} rows")

    # 2. Non-decreasing time (ties allowed) ─────────────────────────────
    times = pd.to_datetime(df["time"], utc=True)
    if not times.is_monotonic_increasing:
        n_back = int((times.diff() < pd.Timedelta(0)).sum())
        raise ValueError(f"Timestamps not monotonic non-decreasing: {n_back} backward steps")

    # 3. No NaNs in OHLC fields ────────────────────────────────────────
    ohlc = ["open", "high", "low", "close"]
    present = [c for c in ohlc if c in df.columns]
    if present:
        na_cols = [c for c in present if df[c].isna().all()]
        if na_cols:
            raise ValueError(f"Columns entirely NaN: {na_cols}")

    # 4. Spread sanity ─────────────────────────────────────────────────
    if "spread" in df.columns:
        neg = int((df["spread"] < 0).sum())
        if neg > 0:
            raise ValueError(f"Negative spread found: {neg} rows")
