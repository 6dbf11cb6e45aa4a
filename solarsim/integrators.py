"""Time-stepping schemes for the N-body system.

Every stepper advances a :class:`~solarsim.bodies.BodySystem` by one step of
``step`` days, mutating its positions and velocities in place.
"""
import enum

import numpy as np

from . import constants as C
from .buffers import RK4Workspace
from .exceptions import UnknownMethodError
from .forces import compute_accelerations

__all__ = [
    "Method",
    "compute_accelerations",
    "euler_step",
    "verlet_step",
    "derivative",
    "rk4_step",
    "pefrl_step",
    "PEFRL_SEQUENCE",
]


class Method(enum.IntEnum):
    """Integrator selector."""

    EULER = 0
    VERLET = 1
    RK4 = 2
    PEFRL = 3

    @classmethod
    def parse(cls, value) -> "Method":
        """Return the method for an enum member, integer code or name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise UnknownMethodError(value) from None
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                raise UnknownMethodError(value) from None
        raise UnknownMethodError(value)


def euler_step(system, step: float) -> None:
    """Explicit Euler: kick with the current force, then drift with the new velocity."""
    acc = system.update_accelerations()
    system.velocities += step * acc
    system.positions += step * system.velocities


def verlet_step(system, step: float) -> None:
    """Velocity Verlet in drift-kick-drift form (one force evaluation)."""
    system.positions += 0.5 * step * system.velocities
    acc = system.update_accelerations()
    system.velocities += step * acc
    system.positions += 0.5 * step * system.velocities


def derivative(state: np.ndarray, masses: np.ndarray, out: np.ndarray = None) -> np.ndarray:
    """Time derivative of a full ``(N, 6)`` state.

    Columns 0-2 of the result are the input velocities (dx/dt = v) and
    columns 3-5 the accelerations at the input positions.  Neither ``state``
    nor any body store is modified.
    """
    state = np.asarray(state, dtype=np.float64)
    if out is None:
        out = np.empty_like(state)
    out[:, :3] = state[:, 3:]
    compute_accelerations(state[:, :3], masses, out=out[:, 3:])
    return out


def rk4_step(system, step: float, workspace: RK4Workspace = None) -> None:
    """Classical fourth-order Runge-Kutta step.

    The four stage states and their derivatives live in ``workspace``, which
    is allocated on first use and reused afterwards.  Only the final combine
    writes back into ``system``.
    """
    if workspace is None:
        workspace = RK4Workspace()
    workspace.ensure_allocated(len(system))

    y, k, y_next = workspace.stages, workspace.slopes, workspace.output
    masses = system.masses

    y[0, :, :3] = system.positions
    y[0, :, 3:] = system.velocities

    derivative(y[0], masses, out=k[0])
    np.add(y[0], (0.5 * step) * k[0], out=y[1])

    derivative(y[1], masses, out=k[1])
    np.add(y[0], (0.5 * step) * k[1], out=y[2])

    derivative(y[2], masses, out=k[2])
    np.add(y[0], step * k[2], out=y[3])

    derivative(y[3], masses, out=k[3])

    np.add(y[0], (step / 6.0) * (k[0] + 2.0 * k[1] + 2.0 * k[2] + k[3]), out=y_next)

    system.positions[:] = y_next[:, :3]
    system.velocities[:] = y_next[:, 3:]


# (kind, coefficient) phases of one PEFRL step; time-symmetric
PEFRL_SEQUENCE = (
    ("drift", C.XI),
    ("kick", C.P1),
    ("drift", C.CHI),
    ("kick", C.LAMBDA),
    ("drift", C.P2),
    ("kick", C.LAMBDA),
    ("drift", C.CHI),
    ("kick", C.P1),
    ("drift", C.XI),
)


def pefrl_step(system, step: float) -> None:
    """Position-extended Forest-Ruth-like symplectic step.

    Four force evaluations per step.  Drifts move positions with the current
    velocities; each kick recomputes accelerations first and then updates the
    velocities.
    """
    for kind, coeff in PEFRL_SEQUENCE:
        if kind == "drift":
            system.positions += (coeff * step) * system.velocities
        else:
            acc = system.update_accelerations()
            system.velocities += (coeff * step) * acc
