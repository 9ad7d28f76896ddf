import enum
from dataclasses import dataclass

from replen_sim.product.core import ShippingMode


@dataclass(frozen=True)
class Batch:
    """
    One purchase order of the SKU, shipped via a single mode.
    """

    id: str
    shipping_mode: ShippingMode
    quantity: int
    order_offset_days: int = 0

    # Over-order on top of the nominal quantity (percent)
    extra_percent: float = 0.0
    # Overrides the configured production lead time when set
    production_lead_days: int | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Batch ID cannot be empty")

    @property
    def final_quantity(self) -> int:
        """Quantity actually produced and shipped, including the over-order."""
        return round_half_up(self.quantity * (1 + self.extra_percent / 100.0))


class CashEventKind(enum.Enum):
    DEPOSIT = "deposit"
    BALANCE = "balance"
    FREIGHT = "freight"
    COLLECTION = "collection"  # Marketplace payout for a sale


@dataclass(frozen=True)
class CashEvent:
    day: int
    delta_amount: float  # Signed; outflows are negative
    kind: CashEventKind
    batch_index: int
    label: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.day, int) or self.day < 0:
            raise ValueError(f"Cash event day must be a non-negative int, got {self.day!r}")


@dataclass
class InventoryLot:
    """
    Arrived, not yet sold units of one batch.
    Only the inventory ledger mutates remaining_quantity.
    """

    source_batch_id: str
    batch_index: int  # Insertion order of the source batch, FIFO tie-break
    arrival_day: int
    remaining_quantity: int
    unit_landed_cost: float

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.arrival_day, self.batch_index)


@dataclass(frozen=True)
class ArrivalRecord:
    """Lot to be pushed into the inventory ledger on arrival_day."""

    source_batch_id: str
    batch_index: int
    arrival_day: int
    quantity: int
    unit_landed_cost: float

    def to_lot(self) -> InventoryLot:
        return InventoryLot(
            source_batch_id=self.source_batch_id,
            batch_index=self.batch_index,
            arrival_day=self.arrival_day,
            remaining_quantity=self.quantity,
            unit_landed_cost=self.unit_landed_cost,
        )


@dataclass(frozen=True)
class BatchSchedule:
    """Static timeline and costs of one batch, derived before the day loop."""

    batch: Batch
    batch_index: int
    quantity: int
    order_day: int
    production_complete_day: int
    arrival_day: int

    # Financials (working currency)
    unit_purchase_cost: float
    unit_freight_cost: float
    deposit_amount: float
    balance_amount: float

    @property
    def batch_cost(self) -> float:
        return self.quantity * self.unit_purchase_cost

    @property
    def freight_cost(self) -> float:
        return self.quantity * self.unit_freight_cost

    @property
    def unit_landed_cost(self) -> float:
        return self.unit_purchase_cost + self.unit_freight_cost

    @property
    def total_cost(self) -> float:
        return self.deposit_amount + self.balance_amount + self.freight_cost

    def arrival_record(self) -> ArrivalRecord:
        return ArrivalRecord(
            source_batch_id=self.batch.id,
            batch_index=self.batch_index,
            arrival_day=self.arrival_day,
            quantity=self.quantity,
            unit_landed_cost=self.unit_landed_cost,
        )


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for non-negative values (not banker's rounding)."""
    if value <= 0:
        return 0
    return int(value + 0.5)
