import json
from pathlib import Path
from typing import Any

from replen_sim.simulation.scenario import SimulationConfig


def load_simulation_config(config_path: str | None = None) -> dict[str, Any]:
    """
    Loads the replenishment plan configuration.
    If no path is provided, looks for simulation_config.json in the config directory.
    """
    if config_path is None:
        # Default to the file next to this script
        final_path = Path(__file__).parent / "simulation_config.json"
    else:
        final_path = Path(config_path)

    with open(final_path) as f:
        data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError(f"Expected dict from {final_path}, got {type(data)}")
        return data


def load_scenario(config_path: str | None = None) -> SimulationConfig:
    """Loads the configuration file and builds an immutable SimulationConfig."""
    return SimulationConfig.from_dict(load_simulation_config(config_path))
