import datetime as dt

import numpy as np

from replen_sim.network.core import round_half_up
from replen_sim.product.core import MonthlyPlanSlot
from replen_sim.simulation.scenario import SimulationConfig

PLAN_MONTH_DAYS = 30


class DemandForecaster:
    """
    Daily demand from the 6-month sales plan weighted by calendar seasonality.

    The plan starts counting on the first day stock can sell (normally the
    first sale day) rather than at the simulation start, so launch timing does
    not shift the plan. The `first_sale_day` arguments below take that anchor.
    Seasonality follows the calendar: each 30-day selling month is weighted by
    the mean coefficient of the calendar days it covers.
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        self.start_date = config.start_date
        coeffs = list(config.seasonality)[:12]
        coeffs += [1.0] * (12 - len(coeffs))
        self.coefficients = np.maximum(np.asarray(coeffs, dtype=np.float64), 0.0)
        # (first_sale_day, window) -> mean coefficient
        self._window_cache: dict[tuple[int, int], float] = {}

    def month_window(self, day: int, first_sale_day: int) -> int:
        """Selling month containing `day`, not clamped to the plan length."""
        return max(0, (day - first_sale_day) // PLAN_MONTH_DAYS)

    def month_index(self, day: int, first_sale_day: int | None) -> int:
        """Plan slot for `day`; the last configured slot repeats indefinitely."""
        if first_sale_day is None or not self.config.monthly_plan:
            return 0
        window = self.month_window(day, first_sale_day)
        return min(window, len(self.config.monthly_plan) - 1)

    def plan_slot(self, day: int, first_sale_day: int | None) -> MonthlyPlanSlot:
        return self.config.plan_slot(self.month_index(day, first_sale_day))

    def calendar_month(self, day: int) -> int:
        """Zero-based calendar month of simulation day `day`."""
        return (self.start_date + dt.timedelta(days=day)).month - 1

    def seasonality_average(self, day: int, first_sale_day: int) -> float:
        window = self.month_window(day, first_sale_day)
        key = (first_sale_day, window)
        cached = self._window_cache.get(key)
        if cached is not None:
            return cached

        window_start = first_sale_day + window * PLAN_MONTH_DAYS
        months = [
            self.calendar_month(window_start + offset)
            for offset in range(PLAN_MONTH_DAYS)
        ]
        avg = float(np.mean(self.coefficients[months]))
        self._window_cache[key] = avg
        return avg

    def daily_demand(self, day: int, first_sale_day: int | None) -> int:
        """
        Units demanded on `day`. Zero before the first sale day; never negative.
        """
        if first_sale_day is None or day < first_sale_day:
            return 0
        slot = self.plan_slot(day, first_sale_day)
        raw = slot.daily_baseline_demand * self.seasonality_average(day, first_sale_day)
        return round_half_up(raw)

    def window_demand(self, start_day: int, first_sale_day: int, days: int) -> int:
        """Total forecast demand over `days` consecutive days from `start_day`."""
        return sum(
            self.daily_demand(d, first_sale_day)
            for d in range(start_day, start_day + days)
        )
