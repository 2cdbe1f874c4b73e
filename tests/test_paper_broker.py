import pandas as pd
import pytest

from brickcross.execution.broker import PaperBroker
from brickcross.execution.models import OrderIntent, OrderSide

TS = pd.Timestamp("2024-01-02 10:00:00", tz="UTC")


def _buy(qty, price, ts=TS):
    return OrderIntent("SPY", OrderSide.ENTER_LONG, qty, price, ts, "cross_above")


def _sell(price, ts=TS):
    return OrderIntent("SPY", OrderSide.EXIT_LONG, 0.0, price, ts, "cross_below")


def test_buy_debits_cash():
    broker = PaperBroker(1_000.0)
    fill = broker.submit(_buy(4, 200.0))
    assert broker.cash == pytest.approx(200.0)
    assert broker.position("SPY") == 4
    assert broker.is_invested("SPY")
    assert fill.ts == TS.isoformat()
    assert fill.reason == "cross_above"


def test_adding_uses_weighted_entry_price():
    broker = PaperBroker(1_000.0)
    broker.submit(_buy(2, 100.0))
    broker.submit(_buy(2, 200.0))
    broker.submit(_sell(150.0, TS + pd.Timedelta(hours=1)))

    trade = broker.trades[0]
    assert trade.qty == 4
    assert trade.entry_price == pytest.approx(150.0)
    assert trade.pnl == pytest.approx(0.0)
    assert trade.entry_ts == TS.isoformat()


def test_liquidation_records_trade():
    broker = PaperBroker(1_000.0)
    broker.submit(_buy(5, 100.0))
    fill = broker.submit(_sell(120.0))

    assert fill.qty == 5
    assert broker.cash == pytest.approx(1_100.0)
    assert not broker.is_invested("SPY")
    assert broker.trades[0].pnl == pytest.approx(100.0)


def test_equity_marks_to_market():
    broker = PaperBroker(1_000.0)
    broker.submit(_buy(5, 100.0))
    assert broker.equity({"SPY": 110.0}) == pytest.approx(1_050.0)
    assert broker.equity({}) == pytest.approx(1_000.0)


def test_insufficient_cash_rejected():
    broker = PaperBroker(100.0)
    with pytest.raises(ValueError, match="Insufficient cash"):
        broker.submit(_buy(2, 60.0))
    assert broker.cash == 100.0
    assert broker.fills == []


def test_float_rounding_on_full_cash_buy_accepted():
    broker = PaperBroker(100.0)
    broker.submit(_buy(1000, 0.1))
    assert broker.position("SPY") == 1000


def test_rounding_overshoot_leaves_cash_at_zero():
    broker = PaperBroker(0.3)
    broker.submit(_buy(3, 0.1))  # 3 * 0.1 == 0.30000000000000004
    assert broker.position("SPY") == 3
    assert broker.cash == 0.0


def test_liquidate_without_position_rejected():
    with pytest.raises(ValueError, match="No open position"):
        PaperBroker(100.0).submit(_sell(10.0))
