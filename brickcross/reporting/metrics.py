"""Run metrics — drawdown math and trade statistics. No I/O."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


def compute_drawdown_pct(peak: float, current: float) -> float:
    """Drawdown of *current* below the high-water mark *peak*, in percent.

    Zero when *peak* is not positive or *current* is at or above it.
    """
    if peak <= 0:
        return 0.0
    return max((peak - current) / peak * 100, 0.0)


def max_drawdown_pct(equity: pd.Series) -> float:
    """Largest peak-to-trough decline of an equity curve, in percent."""
    peaks = equity.cummax()
    return float(max(
        (compute_drawdown_pct(peak, value) for peak, value in zip(peaks, equity)),
        default=0.0,
    ))


@dataclass(frozen=True)
class TradeStats:
    n_trades: int
    total_pnl: float
    win_rate: float
    average_win: float
    average_loss: float


def trade_stats(trades_df: pd.DataFrame) -> TradeStats:
    """Summarise closed trades (a frame with a ``pnl`` column)."""
    if trades_df.empty:
        return TradeStats(0, 0.0, 0.0, 0.0, 0.0)

    pnl = trades_df["pnl"]
    wins = pnl[pnl > 0]
    losses = pnl[pnl < 0]
    return TradeStats(
        n_trades=int(len(pnl)),
        total_pnl=float(pnl.sum()),
        win_rate=float((pnl > 0).mean()),
        average_win=float(wins.mean()) if not wins.empty else 0.0,
        average_loss=float(losses.mean()) if not losses.empty else 0.0,
    )
