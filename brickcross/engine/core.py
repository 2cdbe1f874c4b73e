"""TradingEngine — per-observation driver, mode-agnostic.

Orchestrates the per-observation pipeline:
  observation → signal engine (per symbol) → decision → order intent → broker

Backtests run it against :class:`~brickcross.execution.broker.PaperBroker`;
any object satisfying the :class:`~brickcross.execution.broker.Broker`
protocol can stand in for live execution.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from brickcross.execution.broker import Broker
from brickcross.execution.models import Fill, OrderIntent, OrderSide
from brickcross.replay.observations import PriceObservation
from brickcross.strategy.config import EngineConfig
from brickcross.strategy.engine import SignalEngine
from brickcross.strategy.signal import Decision

log = logging.getLogger(__name__)


class TradingEngine:
    """Drives one :class:`SignalEngine` per symbol against a broker.

    Parameters
    ----------
    config : EngineConfig
        Settings used for every symbol's signal engine.
    broker : Broker
        Cash/position owner and order sink.
    """

    def __init__(self, config: EngineConfig, broker: Broker) -> None:
        self.config = config
        self.broker = broker
        self._engines: dict[str, SignalEngine] = {}
        self._last_prices: dict[str, float] = {}

    def engine_for(self, symbol: str) -> SignalEngine:
        """Return the symbol's signal engine, creating it on first use."""
        engine = self._engines.get(symbol)
        if engine is None:
            engine = SignalEngine(self.config)
            self._engines[symbol] = engine
            log.info("Signal engine for %s: %s", symbol, self.config)
        return engine

    @property
    def last_prices(self) -> dict[str, float]:
        return dict(self._last_prices)

    def on_observation(self, symbol: str, obs: PriceObservation) -> Optional[Fill]:
        """Process one observation; return the resulting fill, if any."""
        if not obs.price > 0:
            log.debug("Ignoring non-positive price %s for %s at %s", obs.price, symbol, obs.timestamp)
            return None
        self._last_prices[symbol] = obs.price

        engine = self.engine_for(symbol)
        decision = engine.on_price(obs.price, obs.timestamp)
        log.debug("%s %s price=%s → %s (%s)",
                  obs.timestamp, symbol, obs.price, decision.value, engine.last_reason)

        intent = self._decide(symbol, decision, obs, engine.last_reason)
        if intent is None:
            return None
        return self.broker.submit(intent)

    def _decide(
        self,
        symbol: str,
        decision: Decision,
        obs: PriceObservation,
        reason: str,
    ) -> Optional[OrderIntent]:
        """Convert a Decision into an OrderIntent (cash sizing + position gate)."""
        if decision is Decision.ENTER_LONG:
            qty = math.floor(self.broker.cash / obs.price)
            if qty <= 0:
                return None
            return OrderIntent(
                symbol=symbol,
                side=OrderSide.ENTER_LONG,
                quantity=float(qty),
                price=obs.price,
                ts=obs.timestamp,
                reason=reason,
            )

        if decision is Decision.EXIT_LONG:
            if not self.broker.is_invested(symbol):
                return None
            return OrderIntent(
                symbol=symbol,
                side=OrderSide.EXIT_LONG,
                quantity=self.broker.position(symbol),
                price=obs.price,
                ts=obs.timestamp,
                reason=reason,
            )

        return None
