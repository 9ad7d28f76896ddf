"""Base classes for result writers."""

import csv
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class BaseWriter(ABC):
    """
    Abstract base class for writers that dump simulation output as files
    under a single output directory.
    """

    def __init__(self, output_dir: str) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def write(self, data: Any, destination: str) -> None:
        """Write data to the specified destination."""
        pass

    def _write_csv(
        self, filename: str, fieldnames: list[str], rows: list[dict[str, Any]]
    ) -> Path:
        filepath = self.output_dir / filename
        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
        return filepath
