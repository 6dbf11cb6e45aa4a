"""Body state store.

:class:`Body` is a lightweight value object used to describe one point mass.
:class:`BodySystem` is the store the integrators actually work on: fixed-size
arrays of masses, positions, velocities and accelerations indexed ``0..N-1``.
"""
import math
from typing import Iterable, Optional

import numpy as np

from .forces import compute_accelerations


def _as_vector(value) -> np.ndarray:
    v = np.asarray(value, dtype=float).reshape(-1)
    if v.size < 3:
        v = np.pad(v, (0, 3 - v.size))
    return v[:3].copy()


def _check_mass(mass) -> float:
    mass = float(mass)
    if not math.isfinite(mass) or mass <= 0.0:
        raise ValueError(f"Body mass must be positive and finite, got {mass}")
    return mass


class Body:
    """Simple body representation for physics computations."""

    def __init__(self, mass, pos, vel, name: Optional[str] = None):
        """Create a body storing position and velocity as 3-D vectors.

        Parameters
        ----------
        mass : float
            Mass of the body in kilograms.
        pos : array-like
            Initial position in AU. Values with fewer than three components
            are padded with zeros.
        vel : array-like
            Initial velocity in AU/day, padded like ``pos``.
        name : str, optional
            Display name.
        """
        self.mass = _check_mass(mass)
        self.pos = _as_vector(pos)
        self.vel = _as_vector(vel)
        self.name = name

    def __repr__(self):
        return (
            f"Body(mass={self.mass}, pos={self.pos.tolist()}, "
            f"vel={self.vel.tolist()}, name={self.name!r})"
        )


class BodySystem:
    """Fixed-size collection of bodies stored as contiguous arrays.

    The body count is set at construction and never changes.  Masses are
    written only by :meth:`init_body`; integrators mutate ``positions`` and
    ``velocities`` in place, and ``accelerations`` is rewritten on every force
    evaluation.
    """

    def __init__(self, n_bodies: int):
        n_bodies = int(n_bodies)
        if n_bodies < 1:
            raise ValueError("A body system needs at least one body")
        self.masses = np.zeros(n_bodies, dtype=np.float64)
        self.positions = np.zeros((n_bodies, 3), dtype=np.float64)
        self.velocities = np.zeros((n_bodies, 3), dtype=np.float64)
        self.accelerations = np.zeros((n_bodies, 3), dtype=np.float64)
        self.names: list[Optional[str]] = [None] * n_bodies

    @classmethod
    def from_bodies(cls, bodies: Iterable[Body]) -> "BodySystem":
        bodies = list(bodies)
        system = cls(len(bodies))
        for i, b in enumerate(bodies):
            system.init_body(i, b.mass, b.pos, b.vel, name=b.name)
        return system

    def __len__(self):
        return len(self.masses)

    def __repr__(self):
        return f"BodySystem(n_bodies={len(self)})"

    def init_body(self, index: int, mass, pos, vel, name: Optional[str] = None):
        """Set the mass and initial state of body ``index``."""
        if not 0 <= index < len(self):
            raise IndexError(f"Body index {index} out of range for {len(self)} bodies")
        self.masses[index] = _check_mass(mass)
        self.positions[index] = _as_vector(pos)
        self.velocities[index] = _as_vector(vel)
        self.accelerations[index] = 0.0
        self.names[index] = name

    def update_accelerations(self) -> np.ndarray:
        """Recompute accelerations from the current positions."""
        compute_accelerations(self.positions, self.masses, out=self.accelerations)
        return self.accelerations

    # Accessors -----------------------------------------------------------
    def position(self, index: int) -> np.ndarray:
        return self.positions[index].copy()

    def velocity(self, index: int) -> np.ndarray:
        return self.velocities[index].copy()

    def get_x(self, index: int) -> float:
        return float(self.positions[index, 0])

    def get_y(self, index: int) -> float:
        return float(self.positions[index, 1])

    def get_z(self, index: int) -> float:
        return float(self.positions[index, 2])

    def body(self, index: int) -> Body:
        return Body(
            self.masses[index],
            self.positions[index],
            self.velocities[index],
            name=self.names[index],
        )

    def bodies(self) -> list[Body]:
        return [self.body(i) for i in range(len(self))]

    def copy(self) -> "BodySystem":
        other = BodySystem(len(self))
        other.masses[:] = self.masses
        other.positions[:] = self.positions
        other.velocities[:] = self.velocities
        other.accelerations[:] = self.accelerations
        other.names = list(self.names)
        return other
