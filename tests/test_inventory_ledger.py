import pytest

from replen_sim.network.core import InventoryLot
from replen_sim.simulation.inventory import InventoryLedger


def _lot(batch_index: int, arrival_day: int, qty: int) -> InventoryLot:
    return InventoryLot(
        source_batch_id=f"B{batch_index + 1}",
        batch_index=batch_index,
        arrival_day=arrival_day,
        remaining_quantity=qty,
        unit_landed_cost=10.0,
    )


@pytest.fixture
def ledger() -> InventoryLedger:
    ledger = InventoryLedger()
    # Pushed out of order on purpose
    ledger.push(_lot(2, 80, 300))
    ledger.push(_lot(0, 50, 100))
    ledger.push(_lot(1, 50, 200))
    return ledger


def test_push_keeps_fifo_order(ledger):
    assert [lot.batch_index for lot in ledger.lots] == [0, 1, 2]
    assert ledger.total_on_hand() == 600


def test_consume_takes_from_front(ledger):
    taken = ledger.consume(150)

    assert [(lot.batch_index, qty) for lot, qty in taken] == [(0, 100), (1, 50)]
    # Emptied lot leaves the queue, partly used lot stays at the front
    assert [lot.batch_index for lot in ledger.lots] == [1, 2]
    assert ledger.lots[0].remaining_quantity == 150
    assert ledger.total_on_hand() == 450


def test_lot_removed_exactly_when_empty(ledger):
    ledger.consume(99)
    assert ledger.lots[0].batch_index == 0
    assert ledger.lots[0].remaining_quantity == 1

    ledger.consume(1)
    assert ledger.lots[0].batch_index == 1


def test_consume_never_oversells(ledger):
    taken = ledger.consume(1000)

    assert sum(qty for _, qty in taken) == 600
    assert len(ledger) == 0
    assert ledger.consume(10) == []


def test_consume_zero_or_negative(ledger):
    assert ledger.consume(0) == []
    assert ledger.consume(-5) == []
    assert ledger.total_on_hand() == 600


def test_consumption_totals_per_batch(ledger):
    ledger.consume(250)
    ledger.consume(100)

    assert ledger.received == {0: 100, 1: 200, 2: 300}
    assert ledger.consumed == {0: 100, 1: 200, 2: 50}


def test_empty_lot_is_ignored():
    ledger = InventoryLedger()
    ledger.push(_lot(0, 10, 0))
    assert len(ledger) == 0
    assert ledger.received == {}
