import pytest

from replen_sim.product.core import CartonSpec, FreightRate, ShippingMode
from replen_sim.simulation.logistics import LogisticsResolver, quote_freight

from conftest import build_config


@pytest.fixture
def carton() -> CartonSpec:
    # 0.096 m3, 15 kg actual, 19.2 kg dimensional at /5000
    return CartonSpec(60, 40, 40, 15.0, 20)


def test_sea_billed_by_volume(carton):
    rate = FreightRate(ShippingMode.SEA, transit_days=35, price_per_kg=10.0, price_per_cbm=450.0)
    quote = quote_freight(carton, rate)

    assert quote.method == "volume"
    assert quote.per_box_cost == pytest.approx(43.2)
    assert quote.per_unit_cost == pytest.approx(2.16)
    assert quote.transit_days == 35


def test_air_uses_dimensional_weight(carton):
    rate = FreightRate(ShippingMode.AIR, transit_days=10, price_per_kg=42.0)
    quote = quote_freight(carton, rate)

    assert quote.method == "volume"
    assert quote.chargeable_weight_kg == pytest.approx(19.2)
    assert quote.per_unit_cost == pytest.approx(19.2 * 42.0 / 20)


def test_heavy_carton_billed_by_actual_weight():
    heavy = CartonSpec(30, 30, 30, 30.0, 10)
    rate = FreightRate(ShippingMode.AIR, transit_days=10, price_per_kg=40.0)
    quote = quote_freight(heavy, rate)

    assert quote.method == "weight"
    assert quote.chargeable_weight_kg == pytest.approx(30.0)
    assert quote.per_unit_cost == pytest.approx(120.0)


def test_mode_specific_divisor(carton):
    rate = FreightRate(ShippingMode.SEA, transit_days=35, price_per_kg=10.0, volumetric_divisor=4000.0)
    quote = quote_freight(carton, rate)

    assert quote.dimensional_weight_kg == pytest.approx(24.0)
    assert quote.per_box_cost == pytest.approx(240.0)


def test_carrier_minimum_weight(carton):
    rate = FreightRate(ShippingMode.EXPRESS, transit_days=5, price_per_kg=38.0, min_chargeable_kg=21.0)
    quote = quote_freight(carton, rate)

    assert quote.chargeable_weight_kg == pytest.approx(21.0)
    assert quote.per_unit_cost == pytest.approx(39.9)


def test_zero_units_per_box_is_guarded():
    empty = CartonSpec(60, 40, 40, 15.0, 0)
    rate = FreightRate(ShippingMode.AIR, transit_days=10, price_per_kg=42.0)
    quote = quote_freight(empty, rate)

    assert quote.per_unit_cost == 0.0
    assert quote.per_box_cost > 0


def test_resolver_covers_every_mode():
    config = build_config(sea_cbm_price=450.0)
    resolver = LogisticsResolver(config)

    assert set(resolver.quotes) == set(ShippingMode)
    assert resolver.transit_days(ShippingMode.SEA) == 35
    assert resolver.transit_days(ShippingMode.AIR) == 10
    assert resolver.transit_days(ShippingMode.EXPRESS) == 5
    assert resolver.per_unit_cost(ShippingMode.SEA) == pytest.approx(2.16)
    # Air and express are free in the test config
    assert resolver.cheapest_mode() == ShippingMode.AIR
