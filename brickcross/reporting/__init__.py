"""Reporting package — run metrics and plots."""

from .metrics import TradeStats, compute_drawdown_pct, max_drawdown_pct, trade_stats

__all__ = ["TradeStats", "compute_drawdown_pct", "max_drawdown_pct", "trade_stats"]
