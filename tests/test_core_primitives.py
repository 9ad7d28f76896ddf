import pytest

from replen_sim.network.core import (
    Batch,
    CashEvent,
    CashEventKind,
    InventoryLot,
    round_half_up,
)
from replen_sim.product.core import CartonSpec, MonthlyPlanSlot, ShippingMode


def test_carton_physics():
    carton = CartonSpec(
        length_cm=60,
        width_cm=40,
        height_cm=40,
        weight_kg=15.0,
        units_per_box=20,
    )
    assert carton.volume_m3 == pytest.approx(0.096)
    assert carton.dimensional_weight_kg(5000) == pytest.approx(19.2)
    assert carton.dimensional_weight_kg(0) == 0.0


def test_shipping_mode_parse():
    assert ShippingMode.parse("SEA") == ShippingMode.SEA
    assert ShippingMode.parse("exp") == ShippingMode.EXPRESS
    assert ShippingMode.parse(ShippingMode.AIR) == ShippingMode.AIR
    with pytest.raises(ValueError):
        ShippingMode.parse("rail")


def test_batch_creation():
    batch = Batch("B1", ShippingMode.SEA, quantity=1000, order_offset_days=30)
    assert batch.final_quantity == 1000
    assert batch.production_lead_days is None

    with pytest.raises(ValueError):
        Batch("", ShippingMode.SEA, quantity=10)


def test_batch_over_order():
    batch = Batch("B1", ShippingMode.AIR, quantity=1000, extra_percent=5.0)
    assert batch.final_quantity == 1050

    odd = Batch("B2", ShippingMode.AIR, quantity=10, extra_percent=5.0)
    assert odd.final_quantity == 11  # 10.5 rounds up


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(0.0) == 0
    assert round_half_up(-3.0) == 0


def test_loss_leader_slot_keeps_negative_margin():
    slot = MonthlyPlanSlot(daily_baseline_demand=40, price=16.0, margin_percent=-25.0)
    assert slot.unit_profit == pytest.approx(-4.0)


def test_cash_event_day_validation():
    event = CashEvent(3, -100.0, CashEventKind.DEPOSIT, batch_index=0)
    assert event.delta_amount == -100.0

    with pytest.raises(ValueError):
        CashEvent(-1, 10.0, CashEventKind.COLLECTION, batch_index=0)


def test_lot_sort_key():
    lot = InventoryLot("B2", batch_index=1, arrival_day=50, remaining_quantity=5, unit_landed_cost=12.0)
    assert lot.sort_key == (50, 1)
