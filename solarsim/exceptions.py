"""Exception types raised by the simulation core and its collaborators."""


class SimulationError(Exception):
    """Base class for all solarsim errors."""


class UnknownMethodError(SimulationError, ValueError):
    """Integrator selector outside the known methods."""

    def __init__(self, method):
        self.method = method
        super().__init__(f"Unknown method {method!r}")


class AllocationError(SimulationError, MemoryError):
    """A scratch or trajectory buffer could not be allocated."""


class BufferLifecycleError(SimulationError, RuntimeError):
    """A buffer was reused with a shape it was not allocated for."""


class HorizonsError(SimulationError):
    """Initial conditions could not be fetched or parsed."""
