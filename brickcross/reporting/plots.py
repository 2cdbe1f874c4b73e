"""Plotting utilities for backtest reporting."""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

log = logging.getLogger(__name__)


def plot_price(
    obs_df: pd.DataFrame,
    fills_df: pd.DataFrame,
    out_path: str | Path,
    fast_period: int,
    slow_period: int,
) -> None:
    """Plot observed price with both EMAs and fill markers, save as PNG.

    Parameters
    ----------
    obs_df : pd.DataFrame
        Must contain ``time`` and ``price`` columns.
    fills_df : pd.DataFrame
        Fill rows (``ts``, ``side``, ``price``); may be empty.
    out_path : str | Path
        Destination file path (e.g. ``plots/price.png``).
    fast_period, slow_period : int
        EMA spans drawn over the raw price for reference.
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(14, 5))
    ax.plot(obs_df["time"], obs_df["price"], linewidth=0.5, color="#d4af37", label="price")
    for period, color in ((fast_period, "#1f77b4"), (slow_period, "#9467bd")):
        ema = obs_df["price"].ewm(span=period, adjust=False).mean()
        ax.plot(obs_df["time"], ema, linewidth=0.8, color=color, label=f"ema {period}")

    if not fills_df.empty:
        ts = pd.to_datetime(fills_df["ts"], utc=True)
        buys = fills_df["side"] == "enter_long"
        ax.scatter(ts[buys], fills_df.loc[buys, "price"], marker="^", color="green", s=30, zorder=3)
        ax.scatter(ts[~buys], fills_df.loc[~buys, "price"], marker="v", color="red", s=30, zorder=3)

    if not obs_df.empty:
        ax.set_title(f"Price  ({obs_df['time'].iloc[0].date()} → {obs_df['time'].iloc[-1].date()})")
    ax.set_xlabel("Time")
    ax.set_ylabel("Price")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(out_path, dpi=100)
    plt.close(fig)

    log.info("Saved price plot → %s", out_path)


def plot_equity(equity_df: pd.DataFrame, out_path: str | Path) -> None:
    """Plot the equity curve and save as PNG."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(14, 5))
    if not equity_df.empty:
        ax.plot(pd.to_datetime(equity_df["timestamp"], utc=True), equity_df["equity"],
                linewidth=0.8, color="#2ca02c")
    ax.set_title("Equity")
    ax.set_xlabel("Time")
    ax.set_ylabel("Equity")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(out_path, dpi=100)
    plt.close(fig)

    log.info("Saved equity plot → %s", out_path)
