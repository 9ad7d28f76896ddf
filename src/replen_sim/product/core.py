from dataclasses import dataclass
import enum


class ShippingMode(enum.Enum):
    SEA = "sea"  # Slow, cheap, usually billed per CBM
    AIR = "air"
    EXPRESS = "express"  # Fastest, billed on chargeable weight

    @classmethod
    def parse(cls, value: "str | ShippingMode") -> "ShippingMode":
        if isinstance(value, ShippingMode):
            return value
        key = str(value).strip().lower()
        # Short alias accepted in plan files
        if key == "exp":
            key = "express"
        return cls(key)


@dataclass(frozen=True)
class CartonSpec:
    """
    Physical description of one shipping carton (box) of the SKU.
    """

    length_cm: float
    width_cm: float
    height_cm: float
    weight_kg: float
    units_per_box: int

    @property
    def volume_m3(self) -> float:
        """Calculates volume in cubic meters."""
        return (self.length_cm * self.width_cm * self.height_cm) / 1_000_000

    def dimensional_weight_kg(self, divisor: float) -> float:
        """Volumetric weight using the carrier's L x W x H / divisor rule."""
        if divisor <= 0:
            return 0.0
        return (self.length_cm * self.width_cm * self.height_cm) / divisor


@dataclass(frozen=True)
class FreightRate:
    """
    Freight tariff and transit time for one shipping mode.

    When price_per_cbm is set the mode is billed by volume, otherwise by
    chargeable weight at price_per_kg.
    """

    mode: ShippingMode
    transit_days: int
    price_per_kg: float = 0.0
    price_per_cbm: float | None = None
    volumetric_divisor: float = 5000.0
    min_chargeable_kg: float = 0.0

    @property
    def billed_by_volume(self) -> bool:
        return self.price_per_cbm is not None and self.price_per_cbm > 0


@dataclass(frozen=True)
class MonthlyPlanSlot:
    """Sales assumptions for one 30-day selling month."""

    daily_baseline_demand: float
    price: float
    # Percent of price, e.g. 20.0 for 20%. May be negative for loss-leader months.
    margin_percent: float

    @property
    def unit_profit(self) -> float:
        return self.price * (self.margin_percent / 100.0)
