import pytest

from replen_sim.network.core import Batch, CashEventKind
from replen_sim.product.core import ShippingMode
from replen_sim.simulation.logistics import LogisticsResolver
from replen_sim.simulation.scheduler import BatchScheduler

from conftest import build_config, sea_batch


def _scheduler(config) -> BatchScheduler:
    return BatchScheduler(config, LogisticsResolver(config))


def test_arrival_day_per_mode():
    config = build_config(
        batches=[
            Batch("S", ShippingMode.SEA, 100, 0),
            Batch("A", ShippingMode.AIR, 100, 7),
            Batch("E", ShippingMode.EXPRESS, 100, 20),
        ]
    )
    schedules = _scheduler(config).schedules

    for s in schedules:
        transit = config.freight[s.batch.shipping_mode].transit_days
        assert s.arrival_day == s.batch.order_offset_days + 15 + transit
    assert [s.arrival_day for s in schedules] == [50, 32, 40]


def test_per_batch_lead_time_override():
    config = build_config(
        batches=[Batch("B1", ShippingMode.SEA, 100, 10, production_lead_days=25)]
    )
    s = _scheduler(config).schedules[0]

    assert s.production_complete_day == 35
    assert s.arrival_day == 70


def test_supplier_and_freight_events():
    config = build_config(batches=[sea_batch("B1", 1000)], sea_cbm_price=450.0)
    events = _scheduler(config).cash_events(horizon_days=500)

    by_kind = {e.kind: e for e in events}
    assert by_kind[CashEventKind.DEPOSIT].day == 0
    assert by_kind[CashEventKind.DEPOSIT].delta_amount == pytest.approx(-3000.0)
    assert by_kind[CashEventKind.BALANCE].day == 15
    assert by_kind[CashEventKind.BALANCE].delta_amount == pytest.approx(-7000.0)
    assert by_kind[CashEventKind.FREIGHT].day == 50
    assert by_kind[CashEventKind.FREIGHT].delta_amount == pytest.approx(-2160.0)
    assert by_kind[CashEventKind.DEPOSIT].label == "#1 deposit"


def test_over_order_changes_quantity_and_cost():
    config = build_config(batches=[Batch("B1", ShippingMode.SEA, 1000, 0, extra_percent=10.0)])
    s = _scheduler(config).schedules[0]

    assert s.quantity == 1100
    assert s.batch_cost == pytest.approx(11000.0)
    assert s.deposit_amount + s.balance_amount == pytest.approx(11000.0)


def test_events_past_horizon_are_not_scheduled():
    config = build_config(batches=[sea_batch("B1", 100, 480)])
    scheduler = _scheduler(config)

    events = scheduler.cash_events(horizon_days=500)
    assert [e.kind for e in events] == [CashEventKind.DEPOSIT, CashEventKind.BALANCE]
    assert scheduler.arrivals(horizon_days=500) == []


def test_arrivals_ordered_by_day_then_entry():
    config = build_config(
        batches=[
            Batch("LATE", ShippingMode.SEA, 100, 10),  # arrives 60
            Batch("SEA", ShippingMode.SEA, 100, 0),  # arrives 50
            Batch("AIR", ShippingMode.AIR, 100, 25),  # arrives 50, entered later
        ]
    )
    arrivals = _scheduler(config).arrivals(horizon_days=500)

    assert [a.source_batch_id for a in arrivals] == ["SEA", "AIR", "LATE"]
    assert [a.arrival_day for a in arrivals] == [50, 50, 60]


def test_unit_landed_cost_includes_freight():
    config = build_config(batches=[sea_batch("B1", 100)], sea_cbm_price=450.0)
    record = _scheduler(config).arrivals(500)[0]

    assert record.unit_landed_cost == pytest.approx(10.0 + 2.16)
    assert record.quantity == 100
