"""Unified entry point for brickcross commands."""

import argparse
import logging
import sys

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(message)s"


def _usage() -> None:
    log.error("Usage: python -m brickcross <command> [args...]")
    log.error("Available commands:")
    log.error("  backtest  - Run deterministic backtest")
    log.error("  ticks     - Summarise an imported tick file")


def _backtest(argv: list[str]) -> None:
    p = argparse.ArgumentParser(prog="brickcross backtest", description="Run deterministic backtest")
    p.add_argument("--config", required=True, help="Path to YAML config file")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every decision (DEBUG)")
    args = p.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    from brickcross.engine.runner import run_backtest
    run_id = run_backtest(args.config)
    log.info("Finished — run_id: %s", run_id)


def _ticks(argv: list[str]) -> None:
    p = argparse.ArgumentParser(prog="brickcross ticks", description="Summarise an imported tick file")
    p.add_argument("--file", required=True, help="Path to tick CSV")
    args = p.parse_args(argv)

    from brickcross.loader.ticks import read_tick_file
    df = read_tick_file(args.file)
    if df.empty:
        log.warning("No readable ticks in %s", args.file)
        return
    log.info("Ticks : %s", f"{len(df):,}")
    log.info("Range : %s → %s", df["time"].iloc[0].isoformat(), df["time"].iloc[-1].isoformat())
    log.info("Last  : min=%s max=%s zero=%s",
             df["last"].min(), df["last"].max(), int((df["last"] == 0).sum()))


COMMANDS = {
    "backtest": _backtest,
    "ticks": _ticks,
}


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt="%H:%M:%S")

    if not argv:
        _usage()
        sys.exit(1)

    command = COMMANDS.get(argv[0])
    if command is None:
        log.error("Unknown command: %s", argv[0])
        _usage()
        sys.exit(1)
    command(argv[1:])


if __name__ == "__main__":
    main()
