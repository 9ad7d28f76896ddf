"""
Post-processing of the recorded day series: break-even milestones,
Gantt segments per batch and stockout gaps.
"""

from dataclasses import dataclass

import numpy as np

from replen_sim.network.core import BatchSchedule, CashEvent, CashEventKind
from replen_sim.simulation.result import (
    BatchSummary,
    CollectionSummary,
    Segment,
    SegmentKind,
)

# A crossing this early is the day-0 deposit, not a recovery
BREAK_EVEN_GRACE_DAYS = 10
MIN_STOCKOUT_GAP_DAYS = 0.5
COLLECTION_CHUNK_DAYS = 14
MIN_COLLECTION_AMOUNT = 10.0
UNSOLD_SETTLEMENT_DAYS = 60
SAFETY_STOCK_DAYS = 7


@dataclass
class SalesPeriod:
    """Per-batch sales accumulated by the simulator."""

    first_day: int | None = None
    last_day: int | None = None
    units: int = 0
    revenue: float = 0.0
    profit: float = 0.0

    def record(self, day: int, units: int, revenue: float, profit: float) -> None:
        if self.first_day is None:
            self.first_day = day
        self.last_day = day
        self.units += units
        self.revenue += revenue
        self.profit += profit

    @property
    def depletion_day(self) -> int | None:
        return None if self.last_day is None else self.last_day + 1


def find_break_even_day(
    series: np.ndarray, grace_days: int = BREAK_EVEN_GRACE_DAYS
) -> int | None:
    """
    First day d > grace_days where the series moves from negative to
    non-negative. The value before day 0 counts as 0.
    """
    if len(series) == 0:
        return None
    prev = np.concatenate(([0.0], series[:-1]))
    days = np.arange(len(series))
    crossings = np.flatnonzero((prev < 0) & (series >= 0) & (days > grace_days))
    if crossings.size == 0:
        return None
    return int(crossings[0])


def safety_stock_series(
    demand: np.ndarray, safety_days: int = SAFETY_STOCK_DAYS
) -> np.ndarray:
    """Units needed to cover the next `safety_days` days of demand, per day."""
    n = len(demand)
    csum = np.concatenate(([0], np.cumsum(demand, dtype=np.int64)))
    days = np.arange(n)
    start = np.minimum(days + 1, n)
    end = np.minimum(days + 1 + max(0, safety_days), n)
    return csum[end] - csum[start]


def batch_segments(
    schedules: list[BatchSchedule], periods: dict[int, SalesPeriod]
) -> list[Segment]:
    """Production, transit, holding and selling bars for every batch."""
    segments: list[Segment] = []
    for s in schedules:
        segments.append(
            Segment(
                SegmentKind.PRODUCTION,
                s.batch_index,
                s.order_day,
                s.production_complete_day,
                amount=s.batch_cost,
            )
        )
        segments.append(
            Segment(
                SegmentKind.TRANSIT,
                s.batch_index,
                s.production_complete_day,
                s.arrival_day,
                amount=s.freight_cost,
            )
        )

        period = periods.get(s.batch_index)
        if period is None or period.first_day is None:
            continue

        if period.first_day > s.arrival_day:
            segments.append(
                Segment(
                    SegmentKind.HOLDING,
                    s.batch_index,
                    s.arrival_day,
                    period.first_day,
                )
            )
        segments.append(
            Segment(
                SegmentKind.SELLING,
                s.batch_index,
                period.first_day,
                period.depletion_day or period.first_day + 1,
                amount=period.revenue,
            )
        )
    return segments


def stockout_gaps(
    stockout: np.ndarray, selling: list[Segment], report_days: int
) -> list[Segment]:
    """
    Contiguous stockout runs within the reporting window. A run still open at
    the window end is closed there. Each gap is labelled with the batch whose
    selling window most recently ended before it.
    """
    limit = min(report_days, len(stockout))
    gaps: list[Segment] = []
    run_start: int | None = None

    for d in range(limit + 1):
        is_out = d < limit and bool(stockout[d])
        if is_out and run_start is None:
            run_start = d
        elif not is_out and run_start is not None:
            if d - run_start > MIN_STOCKOUT_GAP_DAYS:
                gaps.append(
                    Segment(
                        SegmentKind.STOCKOUT,
                        _preceding_batch(selling, run_start),
                        run_start,
                        d,
                    )
                )
            run_start = None
    return gaps


def _preceding_batch(selling: list[Segment], gap_start: int) -> int:
    best_idx = 0
    best_end = -1
    for seg in selling:
        if seg.end_day <= gap_start + 1 and seg.end_day > best_end:
            best_end = seg.end_day
            best_idx = seg.batch_index
    return best_idx


def batch_summaries(
    schedules: list[BatchSchedule],
    periods: dict[int, SalesPeriod],
    payment_delay_days: int,
) -> list[BatchSummary]:
    summaries: list[BatchSummary] = []
    for s in schedules:
        period = periods.get(s.batch_index, SalesPeriod())
        depletion = period.depletion_day
        if depletion is not None:
            settlement = depletion + payment_delay_days
        else:
            settlement = s.arrival_day + UNSOLD_SETTLEMENT_DAYS
        summaries.append(
            BatchSummary(
                batch_id=s.batch.id,
                batch_index=s.batch_index,
                quantity=s.quantity,
                units_sold=period.units,
                revenue=period.revenue,
                accrued_profit=period.profit,
                total_cost=s.total_cost,
                first_sale_day=period.first_day,
                depletion_day=depletion,
                settlement_day=settlement,
            )
        )
    return summaries


def collection_summaries(
    events: list[CashEvent],
    chunk_days: int = COLLECTION_CHUNK_DAYS,
    min_amount: float = MIN_COLLECTION_AMOUNT,
) -> list[CollectionSummary]:
    """
    Groups each batch's payouts into chunks spanning at most `chunk_days`.
    Chunks below `min_amount` are dropped; each chunk is marked mid-way.
    """
    by_batch: dict[int, list[CashEvent]] = {}
    for e in events:
        if e.kind == CashEventKind.COLLECTION:
            by_batch.setdefault(e.batch_index, []).append(e)

    summaries: list[CollectionSummary] = []
    for b_idx in sorted(by_batch):
        batch_events = sorted(by_batch[b_idx], key=lambda e: e.day)
        chunk_start = batch_events[0].day
        chunk_amount = 0.0
        for e in batch_events:
            if e.day - chunk_start > chunk_days:
                _close_chunk(summaries, b_idx, chunk_start, chunk_amount, chunk_days, min_amount)
                chunk_start = e.day
                chunk_amount = 0.0
            chunk_amount += e.delta_amount
        _close_chunk(summaries, b_idx, chunk_start, chunk_amount, chunk_days, min_amount)
    return summaries


def _close_chunk(
    summaries: list[CollectionSummary],
    batch_index: int,
    start_day: int,
    amount: float,
    chunk_days: int,
    min_amount: float,
) -> None:
    if amount <= min_amount:
        return
    summaries.append(
        CollectionSummary(
            batch_index=batch_index,
            start_day=start_day,
            marker_day=start_day + chunk_days // 2,
            amount=amount,
            label=f"#{batch_index + 1} collection {amount / 1000:.1f}k",
        )
    )
