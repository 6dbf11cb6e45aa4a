"""Configuration management."""

import json
from dataclasses import asdict, dataclass
from pathlib import Path

import yaml

from . import constants as C


@dataclass
class SimulationConfig:
    """Run configuration."""
    method: str = "verlet"
    total_steps: int = 10000
    step_size: float = 0.5  # days

    # Initial conditions
    initial_conditions: str = "api.json"
    year: int = C.DEFAULT_EPOCH_YEAR

    # Output
    output: str = "trajectory.json"


def _is_yaml(path: Path) -> bool:
    return path.suffix in (".yaml", ".yml")


def load_config(config_path: str) -> SimulationConfig:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        SimulationConfig object
    """
    config_path = Path(config_path)

    with open(config_path, "r") as f:
        if _is_yaml(config_path):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    return SimulationConfig(**data)


def save_config(config: SimulationConfig, output_path: str):
    """Save configuration to file (.json or .yaml)."""
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, "w") as f:
        if _is_yaml(output_path):
            yaml.safe_dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
