import logging

from replen_sim.network.core import Batch
from replen_sim.product.core import ShippingMode
from replen_sim.simulation.demand import PLAN_MONTH_DAYS, DemandForecaster
from replen_sim.simulation.logistics import LogisticsResolver
from replen_sim.simulation.milestones import SAFETY_STOCK_DAYS
from replen_sim.simulation.scenario import SimulationConfig

logger = logging.getLogger(__name__)

MAX_SELL_DAYS = 1000


class RelayPlanner:
    """
    Builds a "relay" of batches: each batch covers one selling month of
    forecast demand and is timed to land `safety_days` before the previous
    one sells out.

    The first batch is ordered on day 0. A later batch targets arrival at
    max(lead_time, sale_start - safety_days) and is ordered `lead_time` days
    before that, but never before the previous order.
    """

    def __init__(
        self,
        config: SimulationConfig,
        mode: ShippingMode = ShippingMode.SEA,
        cover_days: int = PLAN_MONTH_DAYS,
        safety_days: int = SAFETY_STOCK_DAYS,
    ) -> None:
        self.config = config
        self.mode = mode
        self.cover_days = max(1, cover_days)
        self.safety_days = max(0, safety_days)
        self.forecaster = DemandForecaster(config)
        resolver = LogisticsResolver(config)
        self.lead_time = config.terms.production_lead_days + resolver.transit_days(mode)

    def _sell_out_day(self, start_day: int, qty: int, anchor: int) -> int:
        """Day after the last unit of `qty` would sell, starting at `start_day`."""
        remaining = qty
        day = start_day
        while remaining > 0 and day < start_day + MAX_SELL_DAYS:
            remaining -= self.forecaster.daily_demand(day, anchor)
            if remaining > 0:
                day += 1
        return day + 1

    def plan(self, count: int = 6) -> list[Batch]:
        anchor = self.lead_time  # First arrival starts the sales plan
        sale_start = self.lead_time
        batches: list[Batch] = []

        for i in range(max(0, count)):
            qty = self.forecaster.window_demand(sale_start, anchor, self.cover_days)
            if qty <= 0:
                logger.warning(
                    "Relay stopped after %d batches: no forecast demand from day %d",
                    i,
                    sale_start,
                )
                break

            if i == 0:
                offset = 0
            else:
                target_arrival = max(self.lead_time, sale_start - self.safety_days)
                offset = max(
                    0, batches[-1].order_offset_days, target_arrival - self.lead_time
                )

            batches.append(
                Batch(
                    id=f"B{i + 1}",
                    shipping_mode=self.mode,
                    quantity=qty,
                    order_offset_days=offset,
                )
            )
            sale_start = self._sell_out_day(sale_start, qty, anchor)

        logger.debug(
            "Planned %d %s relay batches with a %d-day safety buffer",
            len(batches),
            self.mode.value,
            self.safety_days,
        )
        return batches


def plan_relay_batches(
    config: SimulationConfig,
    count: int = 6,
    mode: ShippingMode = ShippingMode.SEA,
    safety_days: int = SAFETY_STOCK_DAYS,
) -> list[Batch]:
    return RelayPlanner(config, mode=mode, safety_days=safety_days).plan(count)
