"""Broker collaborator — the driver's only view of cash and positions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

from .models import Fill, OrderIntent, OrderSide, Trade

log = logging.getLogger(__name__)


@runtime_checkable
class Broker(Protocol):
    """Abstraction over order execution and portfolio state (paper, live)."""

    @property
    def cash(self) -> float: ...
    def position(self, symbol: str) -> float: ...
    def is_invested(self, symbol: str) -> bool: ...
    def submit(self, intent: OrderIntent) -> Fill: ...


@dataclass
class _Holding:
    qty: float
    avg_price: float
    entry_ts: str


class PaperBroker:
    """Fills every market order immediately at the intent price.

    Long-only: ``ENTER_LONG`` buys with cash (adding to any open holding at
    a volume-weighted entry price), ``EXIT_LONG`` sells the whole holding
    and records a :class:`Trade`.

    Parameters
    ----------
    starting_cash : float
        Initial cash balance.
    """

    def __init__(self, starting_cash: float) -> None:
        self.starting_cash = starting_cash
        self._cash = starting_cash
        self._holdings: dict[str, _Holding] = {}

        self.fills: list[Fill] = []
        self.trades: list[Trade] = []

    @property
    def cash(self) -> float:
        return self._cash

    def position(self, symbol: str) -> float:
        holding = self._holdings.get(symbol)
        return holding.qty if holding is not None else 0.0

    def is_invested(self, symbol: str) -> bool:
        return self.position(symbol) > 0

    def equity(self, prices: Mapping[str, float]) -> float:
        """Cash plus every holding marked at ``prices`` (entry price if missing)."""
        value = self._cash
        for symbol, holding in self._holdings.items():
            value += holding.qty * prices.get(symbol, holding.avg_price)
        return value

    def submit(self, intent: OrderIntent) -> Fill:
        ts = intent.ts.isoformat()
        if intent.side is OrderSide.ENTER_LONG:
            self._buy(intent, ts)
            qty = intent.quantity
        else:
            qty = self._liquidate(intent, ts)

        fill = Fill(
            ts=ts,
            symbol=intent.symbol,
            side=intent.side.value,
            qty=qty,
            price=intent.price,
            reason=intent.reason,
        )
        self.fills.append(fill)
        log.info("Fill %s %s x%s @ %s (%s)", fill.side, fill.symbol, fill.qty, fill.price, ts)
        return fill

    def _buy(self, intent: OrderIntent, ts: str) -> None:
        if intent.quantity <= 0:
            raise ValueError(f"Buy quantity must be > 0, got {intent.quantity}")
        cost = intent.quantity * intent.price
        # floor(cash / price) * price may overshoot cash by float rounding
        if cost > self._cash * (1 + 1e-12):
            raise ValueError(
                f"Insufficient cash for {intent.symbol}: need {cost:.2f}, have {self._cash:.2f}"
            )
        self._cash = max(self._cash - cost, 0.0)

        holding = self._holdings.get(intent.symbol)
        if holding is None:
            self._holdings[intent.symbol] = _Holding(intent.quantity, intent.price, ts)
            return
        total = holding.qty + intent.quantity
        holding.avg_price = (holding.avg_price * holding.qty + cost) / total
        holding.qty = total

    def _liquidate(self, intent: OrderIntent, ts: str) -> float:
        holding = self._holdings.pop(intent.symbol, None)
        if holding is None:
            raise ValueError(f"No open position in {intent.symbol} to liquidate")
        self._cash += holding.qty * intent.price
        pnl = (intent.price - holding.avg_price) * holding.qty
        self.trades.append(
            Trade(
                entry_ts=holding.entry_ts,
                exit_ts=ts,
                symbol=intent.symbol,
                qty=holding.qty,
                entry_price=holding.avg_price,
                exit_price=intent.price,
                pnl=pnl,
            )
        )
        return holding.qty
