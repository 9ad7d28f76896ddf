import logging

from replen_sim.network.core import (
    ArrivalRecord,
    BatchSchedule,
    CashEvent,
    CashEventKind,
)
from replen_sim.simulation.logistics import LogisticsResolver
from replen_sim.simulation.scenario import SimulationConfig

logger = logging.getLogger(__name__)


class BatchScheduler:
    """
    Turns the batch list into static timelines, supplier/freight cash events
    and arrival records. No day loop: everything here is known up front.

        order_day               = order_offset_days
        production_complete_day = order_day + production_lead_days
        arrival_day             = production_complete_day + transit_days(mode)
    """

    def __init__(self, config: SimulationConfig, resolver: LogisticsResolver) -> None:
        self.config = config
        self.resolver = resolver
        self.schedules: list[BatchSchedule] = [
            self._schedule_batch(i) for i in range(len(config.batches))
        ]

    def _schedule_batch(self, index: int) -> BatchSchedule:
        batch = self.config.batches[index]
        terms = self.config.terms

        lead_days = batch.production_lead_days
        if lead_days is None:
            lead_days = terms.production_lead_days
        lead_days = max(0, lead_days)

        order_day = max(0, batch.order_offset_days)
        production_complete_day = order_day + lead_days
        arrival_day = production_complete_day + self.resolver.transit_days(
            batch.shipping_mode
        )

        quantity = max(0, batch.final_quantity)
        batch_cost = quantity * terms.unit_purchase_cost

        return BatchSchedule(
            batch=batch,
            batch_index=index,
            quantity=quantity,
            order_day=order_day,
            production_complete_day=production_complete_day,
            arrival_day=arrival_day,
            unit_purchase_cost=terms.unit_purchase_cost,
            unit_freight_cost=self.resolver.per_unit_cost(batch.shipping_mode),
            deposit_amount=batch_cost * terms.deposit_ratio,
            balance_amount=batch_cost * terms.balance_ratio,
        )

    def cash_events(self, horizon_days: int) -> list[CashEvent]:
        """
        Supplier deposit, supplier balance and freight outflows.
        Events that fall on or after the horizon are not scheduled.
        """
        events: list[CashEvent] = []
        for s in self.schedules:
            tag = f"#{s.batch_index + 1}"
            candidates = [
                (s.order_day, s.deposit_amount, CashEventKind.DEPOSIT),
                (s.production_complete_day, s.balance_amount, CashEventKind.BALANCE),
                (s.arrival_day, s.freight_cost, CashEventKind.FREIGHT),
            ]
            for day, amount, kind in candidates:
                if day >= horizon_days:
                    logger.debug(
                        "Batch %s %s on day %d is past the horizon, dropped",
                        s.batch.id,
                        kind.value,
                        day,
                    )
                    continue
                events.append(
                    CashEvent(
                        day=day,
                        delta_amount=-amount,
                        kind=kind,
                        batch_index=s.batch_index,
                        label=f"{tag} {kind.value}",
                    )
                )
        return events

    def arrivals(self, horizon_days: int) -> list[ArrivalRecord]:
        """Arrival records ordered by (arrival_day, batch insertion order)."""
        records = [
            s.arrival_record() for s in self.schedules if s.arrival_day < horizon_days
        ]
        records.sort(key=lambda r: (r.arrival_day, r.batch_index))
        return records
