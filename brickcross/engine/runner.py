"""Backtest runner — orchestrates load → replay → artifact generation."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import asdict, fields
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import yaml

from brickcross.engine.core import TradingEngine
from brickcross.engine.provenance import data_ref, get_git_info
from brickcross.execution.broker import PaperBroker
from brickcross.execution.models import Fill, Trade
from brickcross.loader.snapshots import list_snapshot_files, load_snapshot
from brickcross.loader.ticks import read_tick_file
from brickcross.replay.observations import ObservationIterator, to_observation_frame
from brickcross.replay.window import (
    Resolution,
    filter_window,
    parse_iso_date,
    parse_resolution,
    resample_frame,
)
from brickcross.reporting.metrics import max_drawdown_pct, trade_stats
from brickcross.reporting.plots import plot_equity, plot_price
from brickcross.strategy.config import EngineConfig

log = logging.getLogger(__name__)

# Repo root (two levels up from brickcross/engine/runner.py)
_REPO_ROOT = Path(__file__).resolve().parent.parent.parent

REQUIRED_KEYS = ("symbol", "starting_capital", "output_dir")
EQUITY_COLUMNS = ["timestamp", "price", "reason", "position", "cash", "equity"]


def load_config(config_path: str | Path) -> tuple[Path, dict]:
    """Resolve and parse a YAML run config; check required keys."""
    cfg_path = Path(config_path)
    if not cfg_path.is_absolute():
        cfg_path = _REPO_ROOT / cfg_path

    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Config {cfg_path} missing required keys: {missing}")
    if ("snapshot_dir" in cfg) == ("tick_file" in cfg):
        raise ValueError("Config must set exactly one of 'snapshot_dir' or 'tick_file'")
    return cfg_path, cfg


def load_observations(cfg: dict) -> tuple[pd.DataFrame, list[Path], str]:
    """Load the configured feed and return ``(time/price frame, files, source)``.

    Applies the optional ``start_date``/``end_date`` window and the
    ``resolution`` (absent = replay every row as-is).
    """
    if "tick_file" in cfg:
        tick_path = _REPO_ROOT / cfg["tick_file"]
        files = [tick_path]
        source = str(cfg["tick_file"])
        raw = read_tick_file(tick_path)
    else:
        files = list_snapshot_files(_REPO_ROOT / cfg["snapshot_dir"])
        source = str(cfg["snapshot_dir"])
        raw = load_snapshot(files)

    frame = to_observation_frame(raw)
    frame = filter_window(frame, parse_iso_date(cfg.get("start_date")), parse_iso_date(cfg.get("end_date")))

    resolution = parse_resolution(cfg["resolution"]) if "resolution" in cfg else Resolution.TICK
    frame = resample_frame(frame, resolution)

    if frame.empty:
        raise ValueError(f"No observations left to replay from {source}")
    return frame, files, source


def _new_run_dir(output_dir: Path) -> tuple[str, Path]:
    run_id = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    candidate, n = run_id, 1
    while (output_dir / candidate).exists():
        candidate = f"{run_id}_{n}"
        n += 1
    run_dir = output_dir / candidate
    run_dir.mkdir(parents=True)
    (run_dir / "plots").mkdir()
    (run_dir / "data_snapshot").mkdir()
    return candidate, run_dir


def _records_frame(records: list, columns: list[str]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([r.to_dict() for r in records], columns=columns)


def run_backtest(config_path: str) -> str:
    """Execute a deterministic backtest and write all run artifacts.

    Parameters
    ----------
    config_path : str
        Path to a YAML config file (relative to repo root or absolute).

    Returns
    -------
    str
        The generated ``run_id``.
    """
    cfg_path, cfg = load_config(config_path)

    symbol: str = cfg["symbol"]
    starting_capital = float(cfg["starting_capital"])
    output_dir = _REPO_ROOT / cfg["output_dir"]
    engine_cfg = EngineConfig.from_dict(cfg.get("strategy"))

    # ── Generate run_id ──────────────────────────────────────────────
    run_id, run_dir = _new_run_dir(output_dir)

    # ── Capture git state ────────────────────────────────────────────
    git = get_git_info(_REPO_ROOT)

    log.info("Run ID   : %s", run_id)
    log.info("Output   : %s", run_dir)
    log.info("Git      : %s (dirty=%s)", git["git_commit"][:8], git["git_dirty"])
    log.info("Strategy : %s", engine_cfg)

    # ── Load data ────────────────────────────────────────────────────
    frame, files, source = load_observations(cfg)
    observations = ObservationIterator(frame)

    # ── Replay loop ──────────────────────────────────────────────────
    broker = PaperBroker(starting_capital)
    engine = TradingEngine(engine_cfg, broker)
    signal_engine = engine.engine_for(symbol)

    log.info("Starting replay...")
    equity_records = []
    for obs in observations:
        engine.on_observation(symbol, obs)
        position = broker.position(symbol)
        equity_records.append({
            "timestamp": obs.timestamp.isoformat(),
            "price": obs.price,
            "reason": signal_engine.last_reason,
            "position": position,
            "cash": broker.cash,
            "equity": broker.cash + position * obs.price,
        })

    # ── Post-replay data construction ────────────────────────────────
    equity_df = pd.DataFrame(equity_records, columns=EQUITY_COLUMNS)
    fills_df = _records_frame(broker.fills, [f.name for f in fields(Fill)])
    trades_df = _records_frame(broker.trades, [f.name for f in fields(Trade)])

    # ── Write artifacts ──────────────────────────────────────────────
    # 1. config.yaml
    shutil.copy2(cfg_path, run_dir / "config.yaml")

    # 2. equity.csv / fills.csv / trades.csv
    equity_df.to_csv(run_dir / "equity.csv", index=False)
    log.info("Wrote equity.csv  (%s rows)", f"{len(equity_df):,}")
    fills_df.to_csv(run_dir / "fills.csv", index=False)
    log.info("Wrote fills.csv  (%s fills)", f"{len(fills_df):,}")
    trades_df.to_csv(run_dir / "trades.csv", index=False)
    log.info("Wrote trades.csv  (%s trades)", f"{len(trades_df):,}")

    # 3. metrics.json
    stats = trade_stats(trades_df)
    aggregator = signal_engine.aggregator
    metrics = {
        "run_id": run_id,
        "symbol": symbol,
        "source": source,
        "n_observations": len(observations),
        "start_ts": equity_df["timestamp"].iloc[0],
        "end_ts": equity_df["timestamp"].iloc[-1],
        "starting_capital": starting_capital,
        "ending_equity": float(equity_df["equity"].iloc[-1]),
        "n_bricks": aggregator.n_bricks if aggregator is not None else 0,
        "n_fills": len(fills_df),
        **asdict(stats),
        "max_drawdown_pct": max_drawdown_pct(equity_df["equity"]),
        "open_position": broker.position(symbol),
        "strategy": {**asdict(engine_cfg), "gate_mode": engine_cfg.gate_mode.value},
        "git_commit": git["git_commit"],
        "git_dirty": git["git_dirty"],
    }
    (run_dir / "metrics.json").write_text(
        json.dumps(metrics, indent=2), encoding="utf-8",
    )
    log.info("Wrote metrics.json")

    # 4. plots
    plot_price(frame, fills_df, run_dir / "plots" / "price.png",
               engine_cfg.fast_period, engine_cfg.slow_period)
    plot_equity(equity_df, run_dir / "plots" / "equity.png")

    # 5. data_snapshot/DATA_REF.json
    (run_dir / "data_snapshot" / "DATA_REF.json").write_text(
        json.dumps(data_ref(source, files, len(observations)), indent=2), encoding="utf-8",
    )
    log.info("Wrote DATA_REF.json")

    # 6. README.md
    readme_lines = [
        "EMA Crossover Backtest",
        f"Symbol: {symbol}  Source: {source}",
        f"Parameters: fast={engine_cfg.fast_period}, slow={engine_cfg.slow_period}, "
        f"brick_size={engine_cfg.brick_size}, gate_mode={engine_cfg.gate_mode.value}",
        f"Run ID: {run_id}",
        f"Trades: {stats.n_trades}, Total PnL: {stats.total_pnl:.2f}",
        f"Reproduce: python -m brickcross backtest --config {config_path}",
    ]
    (run_dir / "README.md").write_text(
        "\n".join(readme_lines) + "\n", encoding="utf-8",
    )
    log.info("Wrote README.md")

    log.info("✓ Run complete: %s", run_dir)
    return run_id
