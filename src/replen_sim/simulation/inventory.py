import bisect

from replen_sim.network.core import InventoryLot


class InventoryLedger:
    """
    FIFO queue of arrived lots, ordered by (arrival_day, batch insertion order).
    A lot leaves the queue in the same call that empties it.
    """

    def __init__(self) -> None:
        self.lots: list[InventoryLot] = []
        # batch_index -> units ever received / consumed
        self.received: dict[int, int] = {}
        self.consumed: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.lots)

    def push(self, lot: InventoryLot) -> None:
        if lot.remaining_quantity <= 0:
            return
        bisect.insort_right(self.lots, lot, key=lambda x: x.sort_key)
        self.received[lot.batch_index] = (
            self.received.get(lot.batch_index, 0) + lot.remaining_quantity
        )

    def consume(self, requested_qty: int) -> list[tuple[InventoryLot, int]]:
        """
        Takes up to `requested_qty` units from the front of the queue.
        Returns the (lot, taken) pairs actually consumed; never oversells.
        """
        taken_pairs: list[tuple[InventoryLot, int]] = []
        remaining = max(0, requested_qty)

        while remaining > 0 and self.lots:
            lot = self.lots[0]
            take = min(remaining, lot.remaining_quantity)
            lot.remaining_quantity -= take
            remaining -= take
            self.consumed[lot.batch_index] = self.consumed.get(lot.batch_index, 0) + take
            taken_pairs.append((lot, take))

            if lot.remaining_quantity == 0:
                self.lots.pop(0)

        return taken_pairs

    def total_on_hand(self) -> int:
        return sum(lot.remaining_quantity for lot in self.lots)
