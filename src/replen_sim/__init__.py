"""Replenishment cash-flow and inventory simulation."""

from replen_sim.simulation.orchestrator import TimelineSimulator, simulate
from replen_sim.simulation.result import SimulationResult
from replen_sim.simulation.scenario import SimulationConfig

__all__ = ["SimulationConfig", "SimulationResult", "TimelineSimulator", "simulate"]
