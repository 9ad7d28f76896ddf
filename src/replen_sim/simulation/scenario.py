"""
Immutable simulation configuration.

A SimulationConfig bundles everything one run needs: carton and freight
specs, the batch list, the 6-month sales plan, the 12-month seasonality
profile and the payment terms. It is built once from the nested
`simulation_parameters` document (see config/simulation_config.json) and is
never mutated by the engines.
"""

import datetime as dt
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from replen_sim.network.core import Batch
from replen_sim.product.core import (
    CartonSpec,
    FreightRate,
    MonthlyPlanSlot,
    ShippingMode,
)

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
PLAN_MONTHS = 6
DEFAULT_PRODUCTION_LEAD_DAYS = 15

DEFAULT_FREIGHT: dict[ShippingMode, FreightRate] = {
    ShippingMode.SEA: FreightRate(
        ShippingMode.SEA, transit_days=35, price_per_kg=10.0, price_per_cbm=450.0
    ),
    ShippingMode.AIR: FreightRate(ShippingMode.AIR, transit_days=10, price_per_kg=42.0),
    ShippingMode.EXPRESS: FreightRate(
        ShippingMode.EXPRESS, transit_days=5, price_per_kg=38.0
    ),
}


@dataclass(frozen=True)
class FinancialTerms:
    """Supplier payment terms and purchase cost, in the working currency."""

    unit_purchase_cost: float = 0.0
    deposit_ratio: float = 0.3
    balance_ratio: float = 0.7
    production_lead_days: int = DEFAULT_PRODUCTION_LEAD_DAYS


@dataclass(frozen=True)
class SimulationConfig:
    carton: CartonSpec
    freight: dict[ShippingMode, FreightRate]
    terms: FinancialTerms
    monthly_plan: tuple[MonthlyPlanSlot, ...]
    seasonality: tuple[float, ...] = (1.0,) * MONTHS_PER_YEAR
    batches: tuple[Batch, ...] = ()
    start_date: dt.date = field(default_factory=lambda: dt.date(2025, 1, 1))
    # Auditor settings, e.g. {"cash_tolerance": 1e-6}
    validation: dict[str, Any] = field(default_factory=dict)

    def freight_for(self, mode: ShippingMode) -> FreightRate:
        rate = self.freight.get(mode)
        if rate is None:
            return DEFAULT_FREIGHT[mode]
        return rate

    def plan_slot(self, month_index: int) -> MonthlyPlanSlot:
        """Plan slot for a selling month; reuses the last slot past the plan end."""
        if not self.monthly_plan:
            return MonthlyPlanSlot(0.0, 0.0, 0.0)
        idx = min(max(month_index, 0), len(self.monthly_plan) - 1)
        return self.monthly_plan[idx]

    def with_batches(self, batches: list[Batch]) -> "SimulationConfig":
        return SimulationConfig(
            carton=self.carton,
            freight=self.freight,
            terms=self.terms,
            monthly_plan=self.monthly_plan,
            seasonality=self.seasonality,
            batches=tuple(batches),
            start_date=self.start_date,
            validation=self.validation,
        )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "SimulationConfig":
        """
        Builds a config from the nested `simulation_parameters` document.
        Missing keys fall back to defaults and malformed values are clamped.
        """
        params = config.get("simulation_parameters", config)
        if not isinstance(params, dict):
            logger.warning("simulation_parameters is not an object, using defaults")
            params = {}

        calendar = _section(params, "calendar")
        start_date = _parse_date(calendar.get("start_date"))

        carton_cfg = _section(params, "carton")
        carton = CartonSpec(
            length_cm=_non_negative(carton_cfg.get("length_cm", 60.0)),
            width_cm=_non_negative(carton_cfg.get("width_cm", 40.0)),
            height_cm=_non_negative(carton_cfg.get("height_cm", 40.0)),
            weight_kg=_non_negative(carton_cfg.get("weight_kg", 15.0)),
            units_per_box=int(_non_negative(carton_cfg.get("units_per_box", 20))),
        )

        modes_cfg = _section(_section(params, "logistics"), "modes")
        freight: dict[ShippingMode, FreightRate] = {}
        for mode in ShippingMode:
            m_cfg = modes_cfg.get(mode.value)
            if not isinstance(m_cfg, dict):
                freight[mode] = DEFAULT_FREIGHT[mode]
                continue
            default = DEFAULT_FREIGHT[mode]
            cbm_price = m_cfg.get("price_per_cbm", default.price_per_cbm)
            freight[mode] = FreightRate(
                mode=mode,
                transit_days=int(_non_negative(m_cfg.get("transit_days", default.transit_days))),
                price_per_kg=_non_negative(m_cfg.get("price_per_kg", default.price_per_kg)),
                price_per_cbm=None if cbm_price is None else _non_negative(cbm_price),
                volumetric_divisor=_finite(m_cfg.get("volumetric_divisor", 5000.0)),
                min_chargeable_kg=_non_negative(m_cfg.get("min_chargeable_kg", 0.0)),
            )

        fin = _section(params, "financials")
        terms = FinancialTerms(
            unit_purchase_cost=_non_negative(fin.get("unit_purchase_cost", 0.0)),
            deposit_ratio=_non_negative(fin.get("deposit_ratio", 0.3)),
            balance_ratio=_non_negative(fin.get("balance_ratio", 0.7)),
            production_lead_days=int(
                _non_negative(fin.get("production_lead_days", DEFAULT_PRODUCTION_LEAD_DAYS))
            ),
        )
        if abs(terms.deposit_ratio + terms.balance_ratio - 1.0) > 1e-9:
            logger.warning(
                "Deposit ratio %.3f + balance ratio %.3f != 1; "
                "supplier payments will not match batch cost",
                terms.deposit_ratio,
                terms.balance_ratio,
            )

        demand_cfg = _section(params, "demand")
        plan = tuple(
            MonthlyPlanSlot(
                daily_baseline_demand=_non_negative(slot.get("daily_baseline_demand", 0.0)),
                price=_non_negative(slot.get("price", 0.0)),
                # Negative margins are loss-leader months and are kept as-is
                margin_percent=_finite(slot.get("margin_percent", 0.0)),
            )
            for slot in _entries(demand_cfg, "monthly_plan")[:PLAN_MONTHS]
        )
        if not plan:
            logger.warning("Monthly plan is empty; demand and price default to 0")

        seasonality = _normalize_seasonality(demand_cfg.get("seasonality"))

        batches = tuple(
            _parse_batch(b_cfg, i) for i, b_cfg in enumerate(_entries(params, "batches"))
        )

        return cls(
            carton=carton,
            freight=freight,
            terms=terms,
            monthly_plan=plan,
            seasonality=seasonality,
            batches=batches,
            start_date=start_date,
            validation=_section(params, "validation"),
        )


def _section(parent: dict[str, Any], key: str) -> dict[str, Any]:
    """Nested object under `key`; null or non-object values read as empty."""
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Config section %r is not an object, using defaults", key)
        return {}
    return value


def _entries(parent: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """Object entries of the list under `key`; anything else is skipped."""
    value = parent.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Config entry %r is not a list, ignoring it", key)
        return []
    entries = []
    for i, item in enumerate(value):
        if isinstance(item, dict):
            entries.append(item)
        else:
            logger.warning("Skipping %s[%d]: expected an object, got %r", key, i, item)
    return entries


def _parse_batch(b_cfg: dict[str, Any], index: int) -> Batch:
    raw_mode = b_cfg.get("shipping_mode", "sea")
    try:
        mode = ShippingMode.parse(raw_mode)
    except ValueError:
        logger.warning("Batch %d: unknown shipping mode %r, using sea", index, raw_mode)
        mode = ShippingMode.SEA

    lead = b_cfg.get("production_lead_days")
    return Batch(
        id=str(b_cfg.get("id") or f"B{index + 1}"),
        shipping_mode=mode,
        quantity=int(_non_negative(b_cfg.get("quantity", 0))),
        order_offset_days=int(_non_negative(b_cfg.get("order_offset_days", 0))),
        extra_percent=max(_finite(b_cfg.get("extra_percent", 0.0)), -100.0),
        production_lead_days=None if lead is None else int(_non_negative(lead)),
    )


def _normalize_seasonality(values: Any) -> tuple[float, ...]:
    if not isinstance(values, list) or not values:
        return (1.0,) * MONTHS_PER_YEAR
    coeffs = [_non_negative(v) for v in values[:MONTHS_PER_YEAR]]
    if len(coeffs) < MONTHS_PER_YEAR:
        logger.warning(
            "Seasonality has %d coefficients, padding with 1.0", len(coeffs)
        )
        coeffs.extend([1.0] * (MONTHS_PER_YEAR - len(coeffs)))
    return tuple(coeffs)


def _parse_date(value: str | None) -> dt.date:
    if not value:
        return dt.date.today()
    try:
        return dt.date.fromisoformat(str(value))
    except ValueError:
        logger.warning("Invalid start_date %r, using today", value)
        return dt.date.today()


def _non_negative(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _finite(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0
