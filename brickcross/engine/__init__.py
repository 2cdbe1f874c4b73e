"""Engine package — the per-observation driver and the backtest runner."""

from .core import TradingEngine

__all__ = ["TradingEngine"]
