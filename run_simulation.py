"""
Replenishment Cash-Flow Simulation Runner.

Usage:
    python run_simulation.py                        # Packaged example plan
    python run_simulation.py --config plan.json     # Custom plan
    python run_simulation.py --relay 6 --mode sea   # Auto-planned relay batches
    python run_simulation.py --no-export            # Report only
"""

import argparse
import logging
import os
import time

from replen_sim.agents.replenishment import plan_relay_batches
from replen_sim.config.loader import load_scenario
from replen_sim.product.core import ShippingMode
from replen_sim.simulation.logistics import LogisticsResolver
from replen_sim.simulation.milestones import SAFETY_STOCK_DAYS
from replen_sim.simulation.orchestrator import TimelineSimulator
from replen_sim.simulation.result import SimulationResult
from replen_sim.writers.result_writer import ResultWriter


def _fmt_day(day: int | None, missing: str) -> str:
    return missing if day is None else f"day {day}"


def generate_cash_report(result: SimulationResult, resolver: LogisticsResolver) -> str:
    """Capital, profit and stock headline report for one run."""
    freight_lines = [
        f"  {mode.value:<8} {q.transit_days:>3} days  {q.per_unit_cost:>8.2f} /unit ({q.method})"
        for mode, q in resolver.quotes.items()
    ]
    summary = [
        "==================================================",
        "        REPLENISHMENT CASH-FLOW REPORT            ",
        "==================================================",
        f"1. CAPITAL (Peak exposure):     {result.capital_required:,.2f}",
        f"   Cash break-even:             {_fmt_day(result.cash_break_even_day, 'not recovered')}",
        f"   Final cash:                  {result.final_cash:,.2f}",
        f"2. PROFIT (Accrued):            {result.total_accrued_profit:,.2f}",
        f"   Profit break-even:           {_fmt_day(result.profit_break_even_day, 'not reached')}",
        f"   Revenue:                     {result.total_revenue:,.2f}",
        f"   ROI / Turnover:              {result.roi:.2f}x / {result.turnover:.2f}x",
        f"3. STOCK (Units sold):          {result.total_sold_units:,}",
        f"   First sale:                  {_fmt_day(result.first_sale_day, 'none')}",
        f"   Stockout days:               {result.total_stockout_days}",
        "--------------------------------------------------",
        "Freight per unit:",
        *freight_lines,
        f"  cheapest: {resolver.cheapest_mode().value}",
        "--------------------------------------------------",
    ]
    for b in result.batch_summaries:
        status = "PROFIT" if b.is_profitable else "LOSS"
        summary.append(
            f"Batch {b.batch_id:<6} qty={b.quantity:>6} sold={b.units_sold:>6} "
            f"net={b.net_return:>12,.2f} {status:<6} settles {_fmt_day(b.settlement_day, '-')}"
        )
    if result.warnings:
        summary.append("--------------------------------------------------")
        summary.extend(f"WARNING: {w}" for w in result.warnings)
    summary.append("==================================================")
    return "\n".join(summary)


def main() -> None:
    """Run the replenishment cash-flow simulation."""
    parser = argparse.ArgumentParser(
        description="Replenishment Cash-Flow Simulation Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_simulation.py --no-export            # Fast check
  python run_simulation.py --relay 6 --mode air   # Air relay plan
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a plan JSON file (default: packaged simulation_config.json)",
    )
    parser.add_argument(
        "--relay",
        type=int,
        default=0,
        help="Replace the configured batches with N auto-planned relay batches",
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=[m.value for m in ShippingMode],
        default=ShippingMode.SEA.value,
        help="Shipping mode for relay batches (default: sea)",
    )
    parser.add_argument(
        "--safety-days",
        type=int,
        default=SAFETY_STOCK_DAYS,
        help="Days relay batches land before the previous batch sells out (default: 7)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/output",
        help="Directory for output artifacts",
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Skip CSV/JSON export",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_scenario(args.config)
    if args.relay > 0:
        batches = plan_relay_batches(
            config,
            count=args.relay,
            mode=ShippingMode.parse(args.mode),
            safety_days=args.safety_days,
        )
        config = config.with_batches(batches)
        print(f"Planned {len(batches)} relay batches ({args.mode}).")

    print(f"Simulating {len(config.batches)} batches from {config.start_date}...")
    start_time = time.time()

    sim = TimelineSimulator(config)
    result = sim.run()

    duration = time.time() - start_time
    print(f"Simulation completed in {duration:.3f} seconds.")

    report = generate_cash_report(result, sim.resolver)
    print("\n" + report + "\n")

    if not args.no_export:
        writer = ResultWriter(args.output_dir)
        writer.write_all(result)
        report_path = os.path.join(str(writer.output_dir), "cash_report.txt")
        with open(report_path, "w") as f:
            f.write(report)
        print(f"Artifacts saved to {writer.output_dir}")


if __name__ == "__main__":
    main()
