import pytest

from replen_sim.network.core import CashEvent, CashEventKind
from replen_sim.product.core import MonthlyPlanSlot
from replen_sim.simulation.ledger import CashLedger, ProfitLedger


def _event(day: int, amount: float, kind=CashEventKind.COLLECTION) -> CashEvent:
    return CashEvent(day, amount, kind, batch_index=0)


def test_events_post_on_their_day():
    cash = CashLedger(horizon_days=100)
    cash.schedule(_event(15, -700.0, CashEventKind.BALANCE))
    cash.schedule(_event(0, -300.0, CashEventKind.DEPOSIT))
    cash.schedule(_event(15, 50.0))

    assert [e.day for e in cash.post_due(0)] == [0]
    assert cash.balance == pytest.approx(-300.0)

    assert cash.post_due(14) == []
    due = cash.post_due(15)
    assert len(due) == 2
    assert cash.balance == pytest.approx(-950.0)
    assert cash.pending == 0


def test_same_day_events_keep_schedule_order():
    cash = CashLedger(horizon_days=100)
    cash.schedule(_event(5, 1.0))
    cash.schedule(_event(5, 2.0))
    cash.schedule(_event(5, 3.0))

    assert [e.delta_amount for e in cash.post_due(5)] == [1.0, 2.0, 3.0]


def test_events_past_horizon_are_dropped():
    cash = CashLedger(horizon_days=30)

    assert cash.schedule(_event(29, 10.0)) is True
    assert cash.schedule(_event(30, 10.0)) is False
    assert len(cash.dropped) == 1

    cash.post_due(1000)
    assert cash.balance == pytest.approx(10.0)


def test_balance_is_sum_of_posted_events():
    cash = CashLedger(horizon_days=50)
    for day in range(0, 50, 7):
        cash.schedule(_event(day, float(day)))

    for day in range(50):
        cash.post_due(day)
        expected = sum(e.delta_amount for e in cash.posted if e.day <= day)
        assert cash.balance == pytest.approx(expected)


def test_profit_accrues_on_sale():
    profit = ProfitLedger()
    revenue, unit_profit = profit.record_sale(10, MonthlyPlanSlot(50, 20.0, 25.0))

    assert revenue == pytest.approx(200.0)
    assert unit_profit == pytest.approx(50.0)
    assert profit.units_sold == 10


def test_loss_leader_profit_goes_negative():
    profit = ProfitLedger()
    profit.record_sale(50, MonthlyPlanSlot(50, 16.0, -25.0))

    assert profit.total_revenue == pytest.approx(800.0)
    assert profit.accrued_profit == pytest.approx(-200.0)
