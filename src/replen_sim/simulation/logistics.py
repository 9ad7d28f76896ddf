import logging
from dataclasses import dataclass

from replen_sim.product.core import CartonSpec, FreightRate, ShippingMode
from replen_sim.simulation.scenario import SimulationConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FreightQuote:
    """Resolved landed-freight figures for one shipping mode."""

    mode: ShippingMode
    transit_days: int
    per_box_cost: float
    per_unit_cost: float
    method: str  # "volume" or "weight"
    actual_weight_kg: float
    dimensional_weight_kg: float
    chargeable_weight_kg: float


def quote_freight(carton: CartonSpec, rate: FreightRate) -> FreightQuote:
    """
    Converts carton physics and a freight tariff into per-unit freight cost.

    Volume-billed modes (sea with a CBM price) charge carton m3 x price per
    CBM. Weight-billed modes charge the chargeable weight, i.e. the larger of
    actual weight, dimensional weight and the carrier minimum.
    A carton with no units yields a zero per-unit cost.
    """
    dim_weight = carton.dimensional_weight_kg(rate.volumetric_divisor)
    actual_weight = carton.weight_kg
    chargeable = max(actual_weight, dim_weight, rate.min_chargeable_kg)

    if rate.billed_by_volume:
        per_box = carton.volume_m3 * float(rate.price_per_cbm or 0.0)
        method = "volume"
    else:
        per_box = chargeable * rate.price_per_kg
        method = "volume" if dim_weight > actual_weight else "weight"

    if carton.units_per_box > 0:
        per_unit = per_box / carton.units_per_box
    else:
        logger.warning(
            "Carton has %d units per box; %s freight per unit set to 0",
            carton.units_per_box,
            rate.mode.value,
        )
        per_unit = 0.0

    return FreightQuote(
        mode=rate.mode,
        transit_days=rate.transit_days,
        per_box_cost=per_box,
        per_unit_cost=per_unit,
        method=method,
        actual_weight_kg=actual_weight,
        dimensional_weight_kg=dim_weight,
        chargeable_weight_kg=chargeable,
    )


class LogisticsResolver:
    """
    Resolves per-unit freight cost and transit days for every shipping mode.
    Stateless apart from the quotes cached at construction.
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        self.quotes: dict[ShippingMode, FreightQuote] = {
            mode: quote_freight(config.carton, config.freight_for(mode))
            for mode in ShippingMode
        }

    def per_unit_cost(self, mode: ShippingMode) -> float:
        return self.quotes[mode].per_unit_cost

    def transit_days(self, mode: ShippingMode) -> int:
        return self.quotes[mode].transit_days

    def cheapest_mode(self) -> ShippingMode:
        """Mode with the lowest per-unit freight; ties go to the slower mode."""
        return min(ShippingMode, key=lambda m: self.quotes[m].per_unit_cost)
