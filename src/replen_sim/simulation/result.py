import enum
from dataclasses import dataclass, field

import numpy as np

from replen_sim.network.core import BatchSchedule, CashEvent


class SegmentKind(enum.Enum):
    PRODUCTION = "production"
    TRANSIT = "transit"
    HOLDING = "holding"  # Arrived but waiting behind older stock
    SELLING = "selling"
    STOCKOUT = "stockout"


@dataclass(frozen=True)
class Segment:
    """
    One Gantt bar. Day range is half-open: [start_day, end_day).
    A selling segment ends on the day the batch is depleted.
    """

    kind: SegmentKind
    batch_index: int
    start_day: int
    end_day: int
    amount: float = 0.0  # Cost, freight or revenue attached to the bar

    @property
    def duration(self) -> int:
        return self.end_day - self.start_day


@dataclass(frozen=True)
class BatchSummary:
    batch_id: str
    batch_index: int
    quantity: int
    units_sold: int
    revenue: float
    accrued_profit: float
    total_cost: float
    first_sale_day: int | None
    depletion_day: int | None  # Day after the last unit was sold
    settlement_day: int  # Rough day the batch's payouts are all collected

    @property
    def is_profitable(self) -> bool:
        return self.revenue > self.total_cost

    @property
    def net_return(self) -> float:
        return self.revenue - self.total_cost


@dataclass(frozen=True)
class CollectionSummary:
    """Payouts of one batch grouped into a roughly two-week chunk."""

    batch_index: int
    start_day: int
    marker_day: int
    amount: float
    label: str


@dataclass(frozen=True)
class SimulationResult:
    """
    Value snapshot of one simulation run. Series cover the full horizon;
    the *_points helpers trim them to the reporting window for charts.
    """

    horizon_days: int
    report_days: int

    cash: np.ndarray
    profit: np.ndarray
    net_position: np.ndarray
    inventory: np.ndarray
    demand: np.ndarray
    units_sold: np.ndarray
    stockout: np.ndarray
    safety_stock: np.ndarray

    min_cash: float
    final_cash: float
    total_accrued_profit: float
    total_revenue: float
    total_sold_units: int
    first_sale_day: int | None
    plan_start_day: int | None  # First day stock was on hand; the plan clock starts here
    cash_break_even_day: int | None
    profit_break_even_day: int | None
    investment_recovery_day: int | None

    schedules: tuple[BatchSchedule, ...] = ()
    cash_events: tuple[CashEvent, ...] = ()
    segments: tuple[Segment, ...] = ()
    stockout_gaps: tuple[Segment, ...] = ()
    batch_summaries: tuple[BatchSummary, ...] = ()
    collections: tuple[CollectionSummary, ...] = ()
    warnings: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in (
            "cash",
            "profit",
            "net_position",
            "inventory",
            "demand",
            "units_sold",
            "stockout",
            "safety_stock",
        ):
            getattr(self, name).setflags(write=False)

    @classmethod
    def empty(cls, horizon_days: int, report_days: int) -> "SimulationResult":
        """Flat result: all series zero, no milestone reached."""
        return cls(
            horizon_days=horizon_days,
            report_days=report_days,
            cash=np.zeros(horizon_days, dtype=np.float64),
            profit=np.zeros(horizon_days, dtype=np.float64),
            net_position=np.zeros(horizon_days, dtype=np.float64),
            inventory=np.zeros(horizon_days, dtype=np.int64),
            demand=np.zeros(horizon_days, dtype=np.int64),
            units_sold=np.zeros(horizon_days, dtype=np.int64),
            stockout=np.zeros(horizon_days, dtype=bool),
            safety_stock=np.zeros(horizon_days, dtype=np.int64),
            min_cash=0.0,
            final_cash=0.0,
            total_accrued_profit=0.0,
            total_revenue=0.0,
            total_sold_units=0,
            first_sale_day=None,
            plan_start_day=None,
            cash_break_even_day=None,
            profit_break_even_day=None,
            investment_recovery_day=None,
        )

    @property
    def capital_required(self) -> float:
        return abs(self.min_cash)

    @property
    def roi(self) -> float:
        if self.min_cash == 0:
            return 0.0
        return abs(self.total_accrued_profit / self.min_cash)

    @property
    def turnover(self) -> float:
        if self.min_cash == 0:
            return 0.0
        return abs(self.total_revenue / self.min_cash)

    @property
    def total_stockout_days(self) -> int:
        return sum(gap.duration for gap in self.stockout_gaps)

    @property
    def cash_recovered(self) -> bool:
        return self.cash_break_even_day is not None

    def segments_of(self, kind: SegmentKind) -> list[Segment]:
        return [s for s in self.segments if s.kind == kind]

    def _points(self, series: np.ndarray) -> list[tuple[int, float]]:
        n = min(self.report_days, len(series))
        return [(d, float(series[d])) for d in range(n)]

    def cash_points(self) -> list[tuple[int, float]]:
        return self._points(self.cash)

    def profit_points(self) -> list[tuple[int, float]]:
        return self._points(self.profit)

    def inventory_points(self) -> list[tuple[int, float]]:
        return self._points(self.inventory)

    def safety_stock_points(self) -> list[tuple[int, float]]:
        return self._points(self.safety_stock)
