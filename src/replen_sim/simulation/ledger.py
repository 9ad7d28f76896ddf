"""
Cash and profit ledgers.

Two separate views of the same business:
- CashLedger is timing-accurate. Supplier payments, freight and marketplace
  payouts hit the balance on the day money actually moves.
- ProfitLedger recognizes profit on the sale day, whenever cash arrives.
"""

import heapq
import itertools

from replen_sim.network.core import CashEvent
from replen_sim.product.core import MonthlyPlanSlot


class CashLedger:
    """
    Running cash balance fed by a day-ordered queue of typed cash events.
    Balance at day d is the sum of every posted event with event.day <= d.
    """

    def __init__(self, horizon_days: int) -> None:
        self.horizon_days = horizon_days
        self.balance = 0.0
        self.posted: list[CashEvent] = []
        self.dropped: list[CashEvent] = []
        self._queue: list[tuple[int, int, CashEvent]] = []
        self._seq = itertools.count()

    def schedule(self, event: CashEvent) -> bool:
        """Queues an event; events on or after the horizon are dropped."""
        if event.day >= self.horizon_days:
            self.dropped.append(event)
            return False
        heapq.heappush(self._queue, (event.day, next(self._seq), event))
        return True

    def post_due(self, day: int) -> list[CashEvent]:
        """Applies every queued event due on or before `day`."""
        due: list[CashEvent] = []
        while self._queue and self._queue[0][0] <= day:
            _, _, event = heapq.heappop(self._queue)
            self.balance += event.delta_amount
            self.posted.append(event)
            due.append(event)
        return due

    @property
    def pending(self) -> int:
        return len(self._queue)


class ProfitLedger:
    """Accrued profit and revenue, recognized on the sale day."""

    def __init__(self) -> None:
        self.accrued_profit = 0.0
        self.total_revenue = 0.0
        self.units_sold = 0

    def record_sale(self, units: int, slot: MonthlyPlanSlot) -> tuple[float, float]:
        """Returns (revenue, profit) for the sale. Negative margins reduce profit."""
        revenue = units * slot.price
        profit = units * slot.unit_profit
        self.total_revenue += revenue
        self.accrued_profit += profit
        self.units_sold += units
        return revenue, profit
