"""Scratch and trajectory buffers with an explicit allocation lifecycle.

Both buffers move through ``UNINITIALIZED -> READY -> RELEASED``.  They are
sized once from the body count (and, for the trajectory, the run length) and
reused until released; a released buffer can be allocated again for a fresh
run.
"""
import enum
import logging
from typing import Iterator, Optional

import numpy as np

from .exceptions import AllocationError, BufferLifecycleError

logger = logging.getLogger(__name__)

STATE_WIDTH = 6  # x, y, z, vx, vy, vz
RK4_STAGES = 4


class BufferState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RELEASED = "released"


def _allocate(shape) -> np.ndarray:
    try:
        return np.empty(shape, dtype=np.float64)
    except (MemoryError, ValueError) as exc:
        raise AllocationError(f"No more memory to allocate buffer of shape {shape}") from exc


class RK4Workspace:
    """Stage snapshots and derivative buffers for the RK4 integrator.

    ``stages[s]`` holds the full state (positions and velocities, one row of
    six values per body) at which stage ``s`` is sampled, ``slopes[s]`` the
    derivative evaluated there and ``output`` the combined next state.
    """

    def __init__(self):
        self.state = BufferState.UNINITIALIZED
        self.n_bodies: Optional[int] = None
        self.stages: Optional[np.ndarray] = None
        self.slopes: Optional[np.ndarray] = None
        self.output: Optional[np.ndarray] = None

    @property
    def ready(self) -> bool:
        return self.state is BufferState.READY

    def ensure_allocated(self, n_bodies: int) -> "RK4Workspace":
        """Allocate the buffers on first use; later calls reuse them."""
        if self.ready:
            if n_bodies != self.n_bodies:
                raise BufferLifecycleError(
                    f"RK4 workspace sized for {self.n_bodies} bodies, got {n_bodies}"
                )
            return self

        try:
            stages = _allocate((RK4_STAGES, n_bodies, STATE_WIDTH))
            slopes = _allocate((RK4_STAGES, n_bodies, STATE_WIDTH))
            output = _allocate((n_bodies, STATE_WIDTH))
        except AllocationError:
            # drop any partial allocation
            self._clear()
            raise

        self.stages, self.slopes, self.output = stages, slopes, output
        self.n_bodies = n_bodies
        self.state = BufferState.READY
        logger.debug("Allocated RK4 workspace for %d bodies", n_bodies)
        return self

    def release(self) -> None:
        if self.ready:
            logger.debug("Released RK4 workspace")
        self._clear()
        self.state = BufferState.RELEASED

    def _clear(self):
        self.stages = self.slopes = self.output = None
        self.n_bodies = None


class TrajectoryBuffer:
    """Position history for every body at every step of a run.

    The array has shape ``(total_steps + 1, n_bodies, 3)``; slot 0 holds the
    initial condition.  The buffer cannot grow, so the run length must be known
    when it is allocated.
    """

    def __init__(self):
        self.state = BufferState.UNINITIALIZED
        self.data: Optional[np.ndarray] = None
        self.recorded = 0

    @property
    def ready(self) -> bool:
        return self.state is BufferState.READY

    @property
    def shape(self):
        return None if self.data is None else self.data.shape

    @property
    def flat(self) -> np.ndarray:
        """Flat ``(steps * bodies * 3)`` view of the position samples."""
        self._require_ready()
        return self.data.reshape(-1)

    def ensure_allocated(self, total_steps: int, n_bodies: int) -> np.ndarray:
        shape = (total_steps + 1, n_bodies, 3)
        if self.ready:
            if self.data.shape != shape:
                raise BufferLifecycleError(
                    f"Trajectory buffer allocated with shape {self.data.shape}, "
                    f"requested {shape}; release it first"
                )
            return self.data

        try:
            self.data = _allocate(shape)
        except AllocationError:
            self.data = None
            raise
        self.recorded = 0
        self.state = BufferState.READY
        logger.debug("Allocated trajectory buffer %s", shape)
        return self.data

    def record(self, step: int, positions: np.ndarray) -> None:
        self._require_ready()
        self.data[step] = positions
        self.recorded = max(self.recorded, step + 1)

    def samples(self) -> Iterator[tuple]:
        """Yield ``(step, body, x, y, z)`` for every recorded slot."""
        self._require_ready()
        for step in range(self.recorded):
            for body, (x, y, z) in enumerate(self.data[step]):
                yield step, body, float(x), float(y), float(z)

    def release(self) -> None:
        if self.ready:
            logger.debug("Released trajectory buffer %s", self.data.shape)
        self.data = None
        self.recorded = 0
        self.state = BufferState.RELEASED

    def _require_ready(self):
        if not self.ready:
            raise BufferLifecycleError(f"Trajectory buffer is {self.state.value}")
