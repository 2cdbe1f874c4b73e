"""Tests for brickcross.replay validation, price selection and iteration."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from brickcross.replay.observations import (
    ObservationIterator,
    PriceObservation,
    select_prices,
    to_observation_frame,
)
from brickcross.replay.validation import validate_observations


# ── helpers ──────────────────────────────────────────────────────────────

def _good_df() -> pd.DataFrame:
    """Return a minimal valid bar DataFrame."""
    return pd.DataFrame({
        "time": pd.to_datetime([
            "2024-01-01 00:00:00+00:00",
            "2024-01-01 00:05:00+00:00",
            "2024-01-01 00:10:00+00:00",
        ]),
        "open":  [100.0, 101.0, 102.0],
        "high":  [101.0, 102.0, 103.0],
        "low":   [99.0,  100.0, 101.0],
        "close": [100.5, 101.5, 102.5],
        "spread": [2, 3, 2],
    })


# ── validation ───────────────────────────────────────────────────────────

def test_valid_df_passes():
    validate_observations(_good_df())   # should not raise


def test_tied_timestamps_allowed():
    df = _good_df()
    df.loc[2, "time"] = df.loc[1, "time"]
    validate_observations(df)


def test_missing_time_column():
    df = _good_df().drop(columns=["time"])
    with pytest.raises(ValueError, match="Missing 'time' column"):
        validate_observations(df)


def test_null_timestamps():
    df = _good_df()
    df.loc[1, "time"] = pd.NaT
    with pytest.raises(ValueError, match="Null timestamps found: 1"):
        validate_observations(df)


def test_out_of_order_rejected():
    df = _good_df()
    df.loc[0, "time"], df.loc[2, "time"] = df.loc[2, "time"], df.loc[0, "time"]
    with pytest.raises(ValueError, match="not monotonic non-decreasing"):
        validate_observations(df)


def test_negative_spread():
    df = _good_df()
    df.loc[1, "spread"] = -1
    with pytest.raises(ValueError, match="Negative spread found: 1"):
        validate_observations(df)


def test_all_nan_close_rejected():
    df = _good_df()
    df["close"] = np.nan
    with pytest.raises(ValueError, match="entirely NaN"):
        validate_observations(df)


# ── price selection ──────────────────────────────────────────────────────

def test_trade_close_preferred():
    df = _good_df()
    df["quote_close"] = 1.0
    assert select_prices(df).tolist() == [100.5, 101.5, 102.5]


def test_quote_close_fallback():
    df = _good_df()
    df.loc[1, "close"] = np.nan
    df["bid_close"] = [1.0, 200.0, 1.0]
    df["ask_close"] = [1.0, 202.0, 1.0]
    assert select_prices(df).tolist() == [100.5, 201.0, 102.5]


def test_tick_last_then_mid():
    df = pd.DataFrame({
        "time": pd.to_datetime(["2024-01-01 00:00:00"] * 3, utc=True),
        "bid": [10.0, 10.0, 0.0],
        "ask": [12.0, 12.0, 12.0],
        "last": [11.5, 0.0, 0.0],
    })
    prices = select_prices(df)
    assert prices.iloc[0] == 11.5
    assert prices.iloc[1] == 11.0
    assert np.isnan(prices.iloc[2])


def test_unpriced_rows_dropped():
    df = _good_df()
    df.loc[1, "close"] = np.nan
    frame = to_observation_frame(df)
    assert list(frame.columns) == ["time", "price"]
    assert frame["price"].tolist() == [100.5, 102.5]


# ── iteration ────────────────────────────────────────────────────────────

def test_iterator_yields_observations_in_order():
    obs = list(ObservationIterator(_good_df()))
    assert len(obs) == 3
    assert all(isinstance(o, PriceObservation) for o in obs)
    assert [o.price for o in obs] == [100.5, 101.5, 102.5]
    assert obs[0].timestamp == pd.Timestamp("2024-01-01 00:00:00", tz="UTC")


def test_iterator_accepts_prepared_frame():
    frame = to_observation_frame(_good_df())
    it = ObservationIterator(frame)
    assert len(it) == 3
    pd.testing.assert_frame_equal(it.frame, frame)


def test_iterator_is_repeatable():
    it = ObservationIterator(_good_df())
    assert list(it) == list(it)
