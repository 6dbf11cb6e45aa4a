"""Command line entry point for running a simulation from fetched initial conditions."""

import argparse
import dataclasses
import logging
import sys

from .config import SimulationConfig, load_config
from .exceptions import SimulationError
from .simulation import Simulation
from .state_io import load_initial_conditions, save_trajectory


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Integrate the solar system")
    parser.add_argument("--config", help="JSON or YAML config file")
    parser.add_argument("--method", help="euler, verlet, rk4 or pefrl")
    parser.add_argument("--steps", dest="total_steps", type=int, help="Number of steps")
    parser.add_argument("--step-size", dest="step_size", type=float, help="Step size in days")
    parser.add_argument(
        "--initial-conditions",
        dest="initial_conditions",
        help="Horizons JSON file produced by solarsim-fetch",
    )
    parser.add_argument("--year", type=int, help="Epoch year to start from")
    parser.add_argument("--output", help="Trajectory output (.json or .npy)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    """Merge command line overrides into the (optional) config file."""
    config = load_config(args.config) if args.config else SimulationConfig()
    overrides = {
        field.name: getattr(args, field.name)
        for field in dataclasses.fields(SimulationConfig)
        if getattr(args, field.name, None) is not None
    }
    return dataclasses.replace(config, **overrides)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = resolve_config(args)
    try:
        system = load_initial_conditions(config.initial_conditions, config.year)
    except (OSError, KeyError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        with Simulation(system) as sim:
            trajectory = sim.run(config.method, config.total_steps, config.step_size)
            path = save_trajectory(config.output, trajectory)
    except SimulationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(
        f"Simulated {len(system)} bodies for {config.total_steps} steps "
        f"({config.method}) -> {path}"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - manual tool
    raise SystemExit(main())
