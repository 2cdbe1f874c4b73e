import json

import pandas as pd
import pytest
import yaml

from brickcross.engine.runner import load_config, run_backtest


def _write_bars(data_dir):
    data_dir.mkdir()

    dates = pd.date_range("2024-01-01", periods=100, freq="1h", tz="UTC")
    df = pd.DataFrame({
        "time": dates,
        "open": 100.0,
        "high": 105.0,
        "low": 95.0,
        "close": 100.0,
        "volume": 1000.0,
    })

    # Fast EMA (period 2) vs slow EMA (period 5)
    # bar 10: price jumps to 110 -> fast rises faster -> cross above -> buy
    # bar 16: price falls back to 100 -> fast falls faster -> cross below -> sell
    df.loc[10:15, "close"] = 110.0
    df.loc[20:25, "close"] = 90.0

    df.to_csv(data_dir / "test.csv", index=False)


def _write_config(tmp_path, **overrides):
    config = {
        "symbol": "TEST",
        "snapshot_dir": str(tmp_path / "data"),
        "starting_capital": 10000.0,
        "output_dir": str(tmp_path / "runs"),
        "strategy": {
            "fast_period": 2,
            "slow_period": 5,
            "gate_mode": "off",
        },
    }
    config.update(overrides)

    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)
    return config_path


def test_ema_crossover_backtest_smoke(tmp_path):
    _write_bars(tmp_path / "data")
    config_path = _write_config(tmp_path)

    run_id = run_backtest(str(config_path))
    run_dir = tmp_path / "runs" / run_id

    for name in ("config.yaml", "equity.csv", "fills.csv", "trades.csv", "metrics.json", "README.md"):
        assert (run_dir / name).exists(), name
    assert (run_dir / "plots" / "equity.png").exists()
    assert (run_dir / "plots" / "price.png").exists()
    assert (run_dir / "data_snapshot" / "DATA_REF.json").exists()

    fills = pd.read_csv(run_dir / "fills.csv")
    assert fills["side"].tolist()[:2] == ["enter_long", "exit_long"]
    assert fills["qty"].iloc[0] == 90  # floor(10_000 / 110)

    trades = pd.read_csv(run_dir / "trades.csv")
    assert len(trades) >= 1
    # cross below fires on the first bar back at 100 (bar 16)
    assert trades["pnl"].iloc[0] == pytest.approx((100.0 - 110.0) * 90)

    metrics = json.loads((run_dir / "metrics.json").read_text(encoding="utf-8"))
    assert metrics["n_observations"] == 100
    assert metrics["n_bricks"] == 0
    assert metrics["n_trades"] == len(trades)
    assert metrics["strategy"]["gate_mode"] == "off"
    assert metrics["max_drawdown_pct"] > 0


def test_brick_mode_backtest(tmp_path):
    _write_bars(tmp_path / "data")
    config_path = _write_config(
        tmp_path,
        strategy={"fast_period": 2, "slow_period": 3, "brick_size": 5.0},
    )

    run_id = run_backtest(str(config_path))
    metrics = json.loads((tmp_path / "runs" / run_id / "metrics.json").read_text(encoding="utf-8"))

    # 100 → 110 → 100 → 90 → 100 with 5.0 bricks
    assert metrics["n_bricks"] == 8
    assert metrics["strategy"]["brick_size"] == 5.0


def test_date_window_limits_replay(tmp_path):
    _write_bars(tmp_path / "data")
    config_path = _write_config(tmp_path, start_date="2024-01-02", end_date="2024-01-02")

    run_id = run_backtest(str(config_path))
    metrics = json.loads((tmp_path / "runs" / run_id / "metrics.json").read_text(encoding="utf-8"))
    assert metrics["n_observations"] == 24
    assert metrics["start_ts"].startswith("2024-01-02T00:00:00")


def test_missing_required_key(tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(yaml.dump({"symbol": "X"}), encoding="utf-8")
    with pytest.raises(ValueError, match="missing required keys"):
        load_config(config_path)


def test_needs_exactly_one_source(tmp_path):
    config_path = _write_config(tmp_path, tick_file=str(tmp_path / "ticks.csv"))
    with pytest.raises(ValueError, match="exactly one of"):
        load_config(config_path)


def test_empty_snapshot_dir(tmp_path):
    (tmp_path / "data").mkdir()
    config_path = _write_config(tmp_path)
    with pytest.raises(FileNotFoundError, match="No CSV files"):
        run_backtest(str(config_path))


def test_tick_file_backtest(tmp_path):
    lines = ["time,bid,ask,last"]
    t0 = pd.Timestamp("2023-09-27 09:00:00")
    prices = [15200.0] * 20 + [15200.0 + 10 * i for i in range(1, 31)] + [15500.0 - 15 * i for i in range(1, 31)]
    for i, p in enumerate(prices):
        ts = (t0 + pd.Timedelta(seconds=i)).strftime("%Y%m%d %H:%M:%S") + ".000000000"
        lines.append(f"{ts},{p - 0.5},{p + 0.5},{p}")
    lines.append("this,is,not,a tick")
    tick_path = tmp_path / "ticks.csv"
    tick_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    config = {
        "symbol": "FDXM",
        "tick_file": str(tick_path),
        "starting_capital": 100000.0,
        "output_dir": str(tmp_path / "runs"),
        "strategy": {"fast_period": 3, "slow_period": 8, "brick_size": 10.0},
    }
    config_path = tmp_path / "ticks.yaml"
    config_path.write_text(yaml.dump(config), encoding="utf-8")

    run_id = run_backtest(str(config_path))
    run_dir = tmp_path / "runs" / run_id
    metrics = json.loads((run_dir / "metrics.json").read_text(encoding="utf-8"))

    assert metrics["n_observations"] == len(prices)
    assert metrics["n_bricks"] > 0
    assert metrics["n_fills"] >= 1
    ref = json.loads((run_dir / "data_snapshot" / "DATA_REF.json").read_text(encoding="utf-8"))
    assert ref["files"][0]["name"] == "ticks.csv"
