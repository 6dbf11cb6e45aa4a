"""Solar-system N-body integration utilities."""

from importlib.metadata import PackageNotFoundError, version

from .bodies import Body, BodySystem
from .forces import compute_accelerations
from .integrators import Method, euler_step, verlet_step, rk4_step, pefrl_step, derivative
from .buffers import BufferState, RK4Workspace, TrajectoryBuffer
from .simulation import Simulation
from .analysis import system_energy, total_momentum, center_of_mass, EnergyMonitor
from .exceptions import (
    SimulationError,
    UnknownMethodError,
    AllocationError,
    BufferLifecycleError,
    HorizonsError,
)
from .constants import G_REAL, G_ACC, AU, DAY

from .state_io import save_state, load_state, load_initial_conditions, save_trajectory
try:
    __version__ = version("solarsim")
except PackageNotFoundError:
    # Fallback when package metadata is unavailable (e.g. running from source)
    __version__ = "0.0.0"

__all__ = [
    "Body",
    "BodySystem",
    "compute_accelerations",
    "Method",
    "euler_step",
    "verlet_step",
    "rk4_step",
    "pefrl_step",
    "derivative",
    "BufferState",
    "RK4Workspace",
    "TrajectoryBuffer",
    "Simulation",
    "system_energy",
    "total_momentum",
    "center_of_mass",
    "EnergyMonitor",
    "SimulationError",
    "UnknownMethodError",
    "AllocationError",
    "BufferLifecycleError",
    "HorizonsError",
    "G_REAL",
    "G_ACC",
    "AU",
    "DAY",
    "__version__",
    "save_state",
    "load_state",
    "load_initial_conditions",
    "save_trajectory",
]
