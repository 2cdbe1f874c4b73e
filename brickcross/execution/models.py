"""Execution-layer value objects: OrderIntent, Fill and Trade."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum

import pandas as pd


class OrderSide(Enum):
    ENTER_LONG = "enter_long"
    EXIT_LONG = "exit_long"


@dataclass(frozen=True)
class OrderIntent:
    """A market order the driver wants executed now.

    ``EXIT_LONG`` always means full liquidation of ``symbol``.
    """

    symbol: str
    side: OrderSide
    quantity: float
    price: float
    ts: pd.Timestamp
    reason: str = ""


@dataclass(frozen=True)
class Fill:
    """One executed market order — maps 1:1 to a fills.csv row."""

    ts: str
    symbol: str
    side: str  # "enter_long" or "exit_long"
    qty: float
    price: float
    reason: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Trade:
    """One closed long round trip — maps 1:1 to a trades.csv row."""

    entry_ts: str
    exit_ts: str
    symbol: str
    qty: float
    entry_price: float
    exit_price: float
    pnl: float

    def to_dict(self) -> dict:
        return asdict(self)
