"""SignalEngine — per-instrument EMA crossover state machine.

Owns the fast/slow EMAs, the optional brick aggregator and the optional
volatility estimator for ONE instrument. Each call to :meth:`on_price`
advances the indicators and evaluates the crossover rule once.
"""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from brickcross.aggregation.renko import BrickAggregator
from brickcross.indicators.impl.ema import EMA
from brickcross.indicators.impl.volatility import RollingStd
from .config import EngineConfig, GateMode
from .signal import Decision

log = logging.getLogger(__name__)

# 0.1% band around the slow EMA a cross must clear
UPPER_BAND = 1.001
LOWER_BAND = 0.999


class SignalEngine:
    """EMA crossover with optional brick input, volatility gate and bias.

    Parameters
    ----------
    config : EngineConfig
        Periods, brick size and gate settings.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config
        self.fast = EMA(config.fast_period)
        self.slow = EMA(config.slow_period)
        self.aggregator: Optional[BrickAggregator] = (
            BrickAggregator(config.brick_size) if config.uses_bricks else None
        )
        self.volatility: Optional[RollingStd] = (
            RollingStd(config.vol_window) if config.uses_volatility else None
        )
        self.last_reason = ""

    @property
    def is_ready(self) -> bool:
        return self.fast.is_ready() and self.slow.is_ready()

    def on_price(self, price: float, timestamp: pd.Timestamp) -> Decision:
        """Ingest one raw observation and return the resulting Decision."""
        # volatility always tracks raw price, brick mode included
        if self.volatility is not None:
            self.volatility.update(price)

        if self.aggregator is not None:
            n_bricks = 0
            for brick in self.aggregator.on_observation(price, timestamp):
                self.fast.update(brick.close_price, brick.end_time)
                self.slow.update(brick.close_price, brick.end_time)
                n_bricks += 1
            if n_bricks == 0:
                return self._hold("no_brick")
        else:
            self.fast.update(price, timestamp)
            self.slow.update(price, timestamp)

        return self.evaluate()

    def evaluate(self) -> Decision:
        """Apply the gated crossover rule to the current indicator values."""
        if not self.is_ready:
            return self._hold("warmup")

        if self.volatility is not None:
            if not self.volatility.is_ready():
                return self._hold("vol_warmup")
            if (
                self.config.gate_mode is GateMode.VOL_GATE
                and self.volatility.current() > abs(self.config.vol_threshold)
            ):
                return self._hold("vol_gate")

        fast = self.fast.current()
        slow = self.slow.current()
        bias = self.config.effective_bias

        if fast > slow * (UPPER_BAND + bias):
            self.last_reason = "cross_above"
            return Decision.ENTER_LONG
        if fast < slow * (LOWER_BAND - bias):
            self.last_reason = "cross_below"
            return Decision.EXIT_LONG
        return self._hold("inside_band")

    def _hold(self, reason: str) -> Decision:
        self.last_reason = reason
        return Decision.HOLD
