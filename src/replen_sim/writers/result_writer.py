"""Result writer for dumping a simulation run to CSV and JSON."""

import json
from typing import Any

from replen_sim.simulation.result import SimulationResult
from replen_sim.writers.base import BaseWriter


class ResultWriter(BaseWriter):
    """Writes the reporting window of a SimulationResult to an output directory."""

    def write(self, data: Any, destination: str) -> None:
        """Writes every artifact of `data` under output_dir/destination."""
        if not isinstance(data, SimulationResult):
            raise TypeError(f"Expected SimulationResult, got {type(data)}")
        target = ResultWriter(str(self.output_dir / destination))
        target.write_all(data)

    def write_all(self, result: SimulationResult) -> None:
        self.write_daily_series(result)
        self.write_segments(result)
        self.write_cash_events(result)
        self.write_summary(result)

    def write_daily_series(self, result: SimulationResult) -> None:
        """Write cash, profit and inventory per day to daily_series.csv."""
        n = min(result.report_days, len(result.cash))
        rows = [
            {
                "day": d,
                "cash": round(float(result.cash[d]), 2),
                "accrued_profit": round(float(result.profit[d]), 2),
                "net_position": round(float(result.net_position[d]), 2),
                "on_hand": int(result.inventory[d]),
                "demand": int(result.demand[d]),
                "units_sold": int(result.units_sold[d]),
                "stockout": bool(result.stockout[d]),
                "safety_stock": int(result.safety_stock[d]),
            }
            for d in range(n)
        ]
        self._write_csv(
            "daily_series.csv",
            [
                "day",
                "cash",
                "accrued_profit",
                "net_position",
                "on_hand",
                "demand",
                "units_sold",
                "stockout",
                "safety_stock",
            ],
            rows,
        )

    def write_segments(self, result: SimulationResult) -> None:
        """Write Gantt bars (batch phases and stockout gaps) to segments.csv."""
        rows = [
            {
                "kind": seg.kind.value,
                "batch_index": seg.batch_index,
                "start_day": seg.start_day,
                "end_day": seg.end_day,
                "amount": round(seg.amount, 2),
            }
            for seg in list(result.segments) + list(result.stockout_gaps)
        ]
        self._write_csv(
            "segments.csv",
            ["kind", "batch_index", "start_day", "end_day", "amount"],
            rows,
        )

    def write_cash_events(self, result: SimulationResult) -> None:
        rows = [
            {
                "day": e.day,
                "kind": e.kind.value,
                "batch_index": e.batch_index,
                "amount": round(e.delta_amount, 2),
                "label": e.label,
            }
            for e in result.cash_events
        ]
        self._write_csv(
            "cash_events.csv",
            ["day", "kind", "batch_index", "amount", "label"],
            rows,
        )

    def write_summary(self, result: SimulationResult) -> None:
        with open(self.output_dir / "summary.json", "w", encoding="utf-8") as f:
            json.dump(summarize(result), f, indent=2)


def summarize(result: SimulationResult) -> dict[str, Any]:
    """Headline figures of a run as a JSON-friendly dict."""
    return {
        "capital_required": round(result.capital_required, 2),
        "min_cash": round(result.min_cash, 2),
        "final_cash": round(result.final_cash, 2),
        "total_revenue": round(result.total_revenue, 2),
        "total_accrued_profit": round(result.total_accrued_profit, 2),
        "total_sold_units": result.total_sold_units,
        "total_stockout_days": result.total_stockout_days,
        "roi": round(result.roi, 4),
        "turnover": round(result.turnover, 4),
        "first_sale_day": result.first_sale_day,
        "plan_start_day": result.plan_start_day,
        "cash_break_even_day": result.cash_break_even_day,
        "profit_break_even_day": result.profit_break_even_day,
        "investment_recovery_day": result.investment_recovery_day,
        "batches": [
            {
                "id": b.batch_id,
                "quantity": b.quantity,
                "units_sold": b.units_sold,
                "revenue": round(b.revenue, 2),
                "total_cost": round(b.total_cost, 2),
                "profitable": b.is_profitable,
                "settlement_day": b.settlement_day,
            }
            for b in result.batch_summaries
        ],
        "warnings": list(result.warnings),
    }
