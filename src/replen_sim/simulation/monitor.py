from typing import Any

import numpy as np

from replen_sim.network.core import BatchSchedule, CashEvent
from replen_sim.simulation.logistics import LogisticsResolver


class ConservationAuditor:
    """Enforces conservation laws on a finished run (units, cash, timing)."""

    def __init__(
        self, resolver: LogisticsResolver, validation: dict[str, Any] | None = None
    ):
        self.resolver = resolver
        self.config = validation or {}
        self.cash_tolerance = float(self.config.get("cash_tolerance", 1e-6))

    def check_arrival_days(self, schedules: list[BatchSchedule]) -> list[str]:
        violations: list[str] = []
        for s in schedules:
            expected = s.production_complete_day + self.resolver.transit_days(
                s.batch.shipping_mode
            )
            if s.arrival_day != expected:
                violations.append(
                    f"Batch {s.batch.id}: arrival_day={s.arrival_day}, "
                    f"expected {expected}"
                )
            if s.arrival_day < s.order_day:
                # No teleportation
                violations.append(
                    f"Batch {s.batch.id} arrives before it is ordered"
                )
        return violations

    def check_inventory_conservation(
        self,
        schedules: list[BatchSchedule],
        consumed: dict[int, int],
        on_hand: dict[int, int],
        horizon_days: int,
    ) -> list[str]:
        """Units sold plus units left never exceed, and for arrived batches equal, the batch quantity."""
        violations: list[str] = []
        for s in schedules:
            sold = consumed.get(s.batch_index, 0)
            left = on_hand.get(s.batch_index, 0)
            if sold > s.quantity:
                violations.append(
                    f"Batch {s.batch.id}: sold {sold} > quantity {s.quantity}"
                )
            arrived = s.arrival_day < horizon_days
            if arrived and sold + left != s.quantity:
                violations.append(
                    f"Batch {s.batch.id}: sold {sold} + on hand {left} "
                    f"!= quantity {s.quantity}"
                )
        return violations

    def check_cash_conservation(
        self, cash: np.ndarray, events: list[CashEvent]
    ) -> list[str]:
        """cash[d] must equal the sum of posted events with day <= d."""
        deltas = np.zeros(len(cash), dtype=np.float64)
        for e in events:
            if e.day < len(cash):
                deltas[e.day] += e.delta_amount
        expected = np.cumsum(deltas)
        drift = np.abs(expected - cash)
        if drift.size == 0:
            return []
        worst = int(np.argmax(drift))
        scale = max(1.0, float(np.max(np.abs(expected))))
        if drift[worst] > self.cash_tolerance * scale:
            return [
                f"Cash drift on day {worst}: ledger={cash[worst]:.2f}, "
                f"events={expected[worst]:.2f}"
            ]
        return []
