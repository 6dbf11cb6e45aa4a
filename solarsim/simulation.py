"""Simulation driver: integrator selection, run loop and buffer ownership."""
import logging

import numpy as np

from .bodies import BodySystem
from .buffers import RK4Workspace, TrajectoryBuffer
from .exceptions import AllocationError
from .integrators import Method, euler_step, pefrl_step, rk4_step, verlet_step

logger = logging.getLogger(__name__)


class Simulation:
    """Advance a :class:`BodySystem` and record its trajectory.

    The simulation exclusively owns the trajectory buffer and the RK4 scratch
    buffers.  It is not reentrant: one simulation drives one body system from
    a single thread.

    Example
    -------
    >>> with Simulation(system) as sim:          # doctest: +SKIP
    ...     history = sim.run("pefrl", 3650, 0.5)
    """

    def __init__(self, system: BodySystem):
        self.system = system
        self.trajectory = TrajectoryBuffer()
        self.rk4_workspace = RK4Workspace()
        self.steps_taken = 0
        self.time = 0.0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    # ------------------------------------------------------------------
    def step(self, method, step_size: float) -> None:
        """Advance the system by one step of ``step_size`` days."""
        self._advance(Method.parse(method), step_size)

    def _advance(self, method: Method, step_size: float) -> None:
        if method is Method.EULER:
            euler_step(self.system, step_size)
        elif method is Method.VERLET:
            verlet_step(self.system, step_size)
        elif method is Method.RK4:
            rk4_step(self.system, step_size, self.rk4_workspace)
        else:
            pefrl_step(self.system, step_size)
        self.steps_taken += 1
        self.time += step_size

    # ------------------------------------------------------------------
    def run(self, method, total_steps: int, step_size: float) -> np.ndarray:
        """Run ``total_steps`` steps and return the recorded positions.

        Parameters
        ----------
        method : Method, int or str
            Integrator to use. Unknown values raise
            :class:`~solarsim.exceptions.UnknownMethodError` before anything
            is allocated or moved.
        total_steps : int
            Number of integration steps.
        step_size : float
            Step length in days.

        Returns
        -------
        ndarray, shape (total_steps + 1, N, 3)
            Positions in AU; slot 0 is the initial condition.
        """
        method = Method.parse(method)
        total_steps = int(total_steps)
        if total_steps < 0:
            raise ValueError(f"total_steps must be non-negative, got {total_steps}")

        fresh = not self.trajectory.ready
        self.trajectory.ensure_allocated(total_steps, len(self.system))
        if method is Method.RK4:
            try:
                self.rk4_workspace.ensure_allocated(len(self.system))
            except AllocationError:
                if fresh:
                    self.trajectory.release()
                raise

        logger.info(
            "Running %d steps of %g days with %s", total_steps, step_size, method.name
        )
        self.trajectory.record(0, self.system.positions)
        for t in range(1, total_steps + 1):
            self._advance(method, step_size)
            self.trajectory.record(t, self.system.positions)
            logger.debug("Moved to step %d", t)

        logger.info(
            "Simulation completed with %d steps using method %s",
            total_steps + 1,
            method.name,
        )
        return self.trajectory.data

    def release(self) -> None:
        """Free the trajectory and RK4 buffers so a fresh run can start."""
        self.trajectory.release()
        self.rk4_workspace.release()
