"""Batch runner: runs every gate-mode / brick-size config and prints a comparison table."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pandas as pd

from brickcross.engine.runner import load_config, run_backtest

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).resolve().parent.parent

EXPERIMENT_CONFIGS = [
    "configs/ema_10_50.yaml",
    "configs/ema_10_50_renko.yaml",
    "configs/ema_10_50_vol_gate.yaml",
    "configs/ema_10_50_bias.yaml",
]

METRIC_COLS = [
    "config",
    "run_id",
    "n_observations",
    "n_bricks",
    "n_trades",
    "total_pnl",
    "win_rate",
    "max_drawdown_pct",
    "ending_equity",
]


def main() -> None:
    rows: list[dict] = []
    runs_dir = _REPO_ROOT / "runs"

    for config_path in EXPERIMENT_CONFIGS:
        config_name = Path(config_path).stem
        log.info("=" * 60)
        log.info("Running experiment: %s", config_name)
        log.info("=" * 60)

        try:
            _, cfg = load_config(config_path)
            run_id = run_backtest(config_path)
        except (OSError, ValueError):
            log.exception("Experiment %s FAILED", config_name)
            continue

        runs_dir = _REPO_ROOT / cfg["output_dir"]
        with open(runs_dir / run_id / "metrics.json", "r", encoding="utf-8") as f:
            metrics = json.load(f)

        rows.append({"config": config_name, **{k: metrics[k] for k in METRIC_COLS[1:]}})

    if not rows:
        log.error("No experiments completed successfully.")
        sys.exit(1)

    summary = pd.DataFrame(rows, columns=METRIC_COLS)

    print("\n" + "=" * 80)
    print("EXPERIMENT COMPARISON")
    print("=" * 80)
    print(summary.to_string(index=False))
    print("=" * 80 + "\n")

    out_path = runs_dir / "experiment_summary.csv"
    summary.to_csv(out_path, index=False)
    log.info("Summary saved to %s", out_path)


if __name__ == "__main__":
    main()
