"""Writers module for exporting simulation results."""

from replen_sim.writers.base import BaseWriter
from replen_sim.writers.result_writer import ResultWriter

__all__ = ["BaseWriter", "ResultWriter"]
