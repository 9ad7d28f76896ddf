import logging

import numpy as np

from replen_sim.network.core import CashEvent, CashEventKind
from replen_sim.simulation.demand import DemandForecaster
from replen_sim.simulation.inventory import InventoryLedger
from replen_sim.simulation.ledger import CashLedger, ProfitLedger
from replen_sim.simulation.logistics import LogisticsResolver
from replen_sim.simulation.milestones import (
    SalesPeriod,
    batch_segments,
    batch_summaries,
    collection_summaries,
    find_break_even_day,
    safety_stock_series,
    stockout_gaps,
)
from replen_sim.simulation.monitor import ConservationAuditor
from replen_sim.simulation.result import SegmentKind, SimulationResult
from replen_sim.simulation.scenario import SimulationConfig
from replen_sim.simulation.scheduler import BatchScheduler

logger = logging.getLogger(__name__)

HORIZON_DAYS = 500
REPORT_DAYS = 360
PAYMENT_DELAY_DAYS = 14


class TimelineSimulator:
    """The day-by-day time stepper for one replenishment plan."""

    def __init__(
        self,
        config: SimulationConfig,
        horizon_days: int = HORIZON_DAYS,
        report_days: int = REPORT_DAYS,
        payment_delay_days: int = PAYMENT_DELAY_DAYS,
    ) -> None:
        self.config = config
        self.horizon_days = max(0, horizon_days)
        self.report_days = max(0, min(report_days, self.horizon_days))
        self.payment_delay_days = max(0, payment_delay_days)

        # Static pre-processing (no day loop)
        self.resolver = LogisticsResolver(config)
        self.scheduler = BatchScheduler(config, self.resolver)
        self.forecaster = DemandForecaster(config)
        self.auditor = ConservationAuditor(self.resolver, config.validation)

    def run(self) -> SimulationResult:
        if not self.config.batches or self.horizon_days == 0:
            logger.debug("No batches to simulate; returning a flat result")
            return SimulationResult.empty(self.horizon_days, self.report_days)

        n = self.horizon_days
        inventory = InventoryLedger()
        cash = CashLedger(n)
        profit = ProfitLedger()

        for event in self.scheduler.cash_events(n):
            cash.schedule(event)
        arrivals = self.scheduler.arrivals(n)
        next_arrival = 0

        cash_series = np.zeros(n, dtype=np.float64)
        profit_series = np.zeros(n, dtype=np.float64)
        net_series = np.zeros(n, dtype=np.float64)
        inv_series = np.zeros(n, dtype=np.int64)
        demand_series = np.zeros(n, dtype=np.int64)
        sold_series = np.zeros(n, dtype=np.int64)
        stockout = np.zeros(n, dtype=bool)

        periods = {s.batch_index: SalesPeriod() for s in self.scheduler.schedules}
        first_sale_day: int | None = None
        plan_start_day: int | None = None
        net_position = 0.0
        min_cash = 0.0

        for day in range(n):
            # 1. Arrivals join the FIFO queue
            while next_arrival < len(arrivals) and arrivals[next_arrival].arrival_day == day:
                inventory.push(arrivals[next_arrival].to_lot())
                next_arrival += 1

            # 2. Supplier deposit/balance, freight and due payouts
            for event in cash.post_due(day):
                if event.kind != CashEventKind.COLLECTION:
                    net_position += event.delta_amount

            # 3. Demand; the plan clock starts on the first day stock can sell
            # and keeps running through months with no planned demand
            if plan_start_day is None and inventory.total_on_hand() > 0:
                plan_start_day = day
            demand = self.forecaster.daily_demand(day, plan_start_day)
            slot = self.forecaster.plan_slot(day, plan_start_day)

            # 4. FIFO consumption, revenue and accrued profit
            sold_today = 0
            for lot, taken in inventory.consume(demand):
                revenue, lot_profit = profit.record_sale(taken, slot)
                periods[lot.batch_index].record(day, taken, revenue, lot_profit)
                net_position += revenue
                sold_today += taken
                if revenue != 0:
                    cash.schedule(
                        CashEvent(
                            day=day + self.payment_delay_days,
                            delta_amount=revenue,
                            kind=CashEventKind.COLLECTION,
                            batch_index=lot.batch_index,
                            label=f"#{lot.batch_index + 1} collection",
                        )
                    )
            if sold_today > 0 and first_sale_day is None:
                first_sale_day = day
                logger.debug("First sale on day %d", day)
            # Same-day payouts when there is no payment delay
            cash.post_due(day)

            # 5. Unmet demand
            stockout[day] = demand > 0 and sold_today < demand

            # 6. Record
            cash_series[day] = cash.balance
            profit_series[day] = profit.accrued_profit
            net_series[day] = net_position
            inv_series[day] = inventory.total_on_hand()
            demand_series[day] = demand
            sold_series[day] = sold_today
            min_cash = min(min_cash, cash.balance)

        schedules = self.scheduler.schedules
        segments = batch_segments(schedules, periods)
        selling = [s for s in segments if s.kind == SegmentKind.SELLING]

        on_hand: dict[int, int] = {}
        for lot in inventory.lots:
            on_hand[lot.batch_index] = on_hand.get(lot.batch_index, 0) + lot.remaining_quantity

        violations = (
            self.auditor.check_arrival_days(schedules)
            + self.auditor.check_inventory_conservation(
                schedules, inventory.consumed, on_hand, n
            )
            + self.auditor.check_cash_conservation(cash_series, cash.posted)
        )
        for v in violations:
            logger.warning("Conservation violation: %s", v)
        if cash.dropped:
            logger.debug(
                "%d cash events fell past the %d-day horizon", len(cash.dropped), n
            )

        result = SimulationResult(
            horizon_days=n,
            report_days=self.report_days,
            cash=cash_series,
            profit=profit_series,
            net_position=net_series,
            inventory=inv_series,
            demand=demand_series,
            units_sold=sold_series,
            stockout=stockout,
            safety_stock=safety_stock_series(demand_series),
            min_cash=min_cash,
            final_cash=float(cash_series[-1]),
            total_accrued_profit=profit.accrued_profit,
            total_revenue=profit.total_revenue,
            total_sold_units=profit.units_sold,
            first_sale_day=first_sale_day,
            plan_start_day=plan_start_day,
            cash_break_even_day=find_break_even_day(cash_series),
            profit_break_even_day=find_break_even_day(profit_series),
            investment_recovery_day=find_break_even_day(net_series),
            schedules=tuple(schedules),
            cash_events=tuple(sorted(cash.posted, key=lambda e: e.day)),
            segments=tuple(segments),
            stockout_gaps=tuple(stockout_gaps(stockout, selling, self.report_days)),
            batch_summaries=tuple(
                batch_summaries(schedules, periods, self.payment_delay_days)
            ),
            collections=tuple(collection_summaries(cash.posted)),
            warnings=tuple(violations),
        )
        logger.debug(
            "Simulated %d batches: min_cash=%.2f, final_cash=%.2f, sold=%d",
            len(schedules),
            result.min_cash,
            result.final_cash,
            result.total_sold_units,
        )
        return result


def simulate(config: SimulationConfig) -> SimulationResult:
    """Runs one full simulation pass over an immutable configuration."""
    return TimelineSimulator(config).run()
