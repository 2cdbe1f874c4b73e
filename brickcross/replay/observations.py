"""Price observations and the deterministic iterator that yields them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generator

import numpy as np
import pandas as pd

from .validation import validate_observations

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceObservation:
    """One ``(timestamp, price)`` point handed to the signal engines."""

    timestamp: pd.Timestamp
    price: float


def _positive(s: pd.Series) -> pd.Series:
    return s.where(s > 0)


def select_prices(df: pd.DataFrame) -> pd.Series:
    """Pick one price per row.

    Preference order:
    1. trade-bar ``close``;
    2. quote-bar close — ``quote_close``, else the mid of ``bid_close``/``ask_close``;
    3. tick ``last`` when > 0, else the mid of ``bid``/``ask`` when both > 0.

    Rows with no usable price are NaN.
    """
    price = pd.Series(np.nan, index=df.index, dtype=float)

    if "close" in df.columns:
        price = price.fillna(pd.to_numeric(df["close"], errors="coerce"))
    if "quote_close" in df.columns:
        price = price.fillna(pd.to_numeric(df["quote_close"], errors="coerce"))
    if {"bid_close", "ask_close"}.issubset(df.columns):
        mid = (_positive(df["bid_close"]) + _positive(df["ask_close"])) / 2
        price = price.fillna(mid)
    if "last" in df.columns:
        price = price.fillna(_positive(df["last"]))
    if {"bid", "ask"}.issubset(df.columns):
        price = price.fillna((_positive(df["bid"]) + _positive(df["ask"])) / 2)

    return price


def to_observation_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Validate ``df`` and reduce it to a ``time``/``price`` frame.

    Rows without a usable price are dropped with a warning.
    """
    validate_observations(df)

    frame = pd.DataFrame({
        "time": pd.to_datetime(df["time"], utc=True),
        "price": select_prices(df),
    })

    n_missing = int(frame["price"].isna().sum())
    if n_missing:
        log.warning("Dropping %s rows with no usable price", f"{n_missing:,}")
        frame = frame.dropna(subset=["price"])

    return frame.reset_index(drop=True)


class ObservationIterator:
    """Yields :class:`PriceObservation` in the frame's (validated) order.

    Guarantees:
    - ``time`` is ``datetime64[ns, UTC]``
    - timestamps are non-decreasing (ties kept in input order)
    - every yielded price is a finite float
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        if "price" not in frame.columns:
            frame = to_observation_frame(frame)
        else:
            validate_observations(frame)
            frame = frame.dropna(subset=["price"]).reset_index(drop=True)
        self._frame = frame

        if len(frame):
            log.info(
                "ObservationIterator: %s observations, %s → %s",
                f"{len(frame):,}",
                frame["time"].iloc[0].isoformat(),
                frame["time"].iloc[-1].isoformat(),
            )

    # -- public API --------------------------------------------------------

    def __len__(self) -> int:
        return len(self._frame)

    def __iter__(self) -> Generator[PriceObservation, None, None]:
        for row in self._frame.itertuples(index=False):
            yield PriceObservation(timestamp=row.time, price=float(row.price))

    @property
    def frame(self) -> pd.DataFrame:
        """Return the validated ``time``/``price`` frame (read-only copy)."""
        return self._frame.copy()
