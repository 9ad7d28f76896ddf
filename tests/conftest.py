import datetime as dt

import pytest

from replen_sim.network.core import Batch
from replen_sim.product.core import CartonSpec, FreightRate, MonthlyPlanSlot, ShippingMode
from replen_sim.simulation.scenario import FinancialTerms, SimulationConfig


def build_config(
    batches=(),
    daily_demand=50.0,
    price=20.0,
    margin_percent=25.0,
    plan=None,
    seasonality=None,
    unit_cost=10.0,
    sea_cbm_price=None,
    units_per_box=20,
    start_date=dt.date(2025, 1, 1),
) -> SimulationConfig:
    """Single-SKU plan with zero freight unless a sea CBM price is given."""
    if plan is None:
        plan = [MonthlyPlanSlot(daily_demand, price, margin_percent)] * 6
    return SimulationConfig(
        carton=CartonSpec(60, 40, 40, 15.0, units_per_box),
        freight={
            ShippingMode.SEA: FreightRate(
                ShippingMode.SEA, transit_days=35, price_per_cbm=sea_cbm_price
            ),
            ShippingMode.AIR: FreightRate(ShippingMode.AIR, transit_days=10),
            ShippingMode.EXPRESS: FreightRate(ShippingMode.EXPRESS, transit_days=5),
        },
        terms=FinancialTerms(
            unit_purchase_cost=unit_cost,
            deposit_ratio=0.3,
            balance_ratio=0.7,
            production_lead_days=15,
        ),
        monthly_plan=tuple(plan),
        seasonality=tuple(seasonality or [1.0] * 12),
        batches=tuple(batches),
        start_date=start_date,
    )


def sea_batch(batch_id: str, quantity: int, offset: int = 0) -> Batch:
    return Batch(batch_id, ShippingMode.SEA, quantity, offset)


@pytest.fixture
def config_factory():
    return build_config


@pytest.fixture
def single_batch_config() -> SimulationConfig:
    """1000 units by sea ordered on day 0: arrives day 50."""
    return build_config(batches=[sea_batch("B1", 1000)])


@pytest.fixture
def two_batch_config() -> SimulationConfig:
    """Second batch ordered day 30 lands on day 80, after the first sells out on day 70."""
    return build_config(batches=[sea_batch("B1", 1000), sea_batch("B2", 1000, 30)])
