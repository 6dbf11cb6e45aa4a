import csv
import os
from collections import deque

import numpy as np

from . import constants as C


def system_energy(system, g_constant=C.G_REAL):
    """Return kinetic, potential and total energy in joules."""
    vel_m_s = system.velocities * C.AU_PER_DAY
    kinetic = 0.5 * float(np.sum(system.masses * np.einsum("ij,ij->i", vel_m_s, vel_m_s)))

    potential = 0.0
    n = len(system)
    for i in range(n):
        for j in range(i + 1, n):
            r = np.linalg.norm(system.positions[j] - system.positions[i]) * C.AU
            potential -= g_constant * system.masses[i] * system.masses[j] / r
    return kinetic, potential, kinetic + potential


def total_momentum(system):
    """Total linear momentum in kg·AU/day."""
    return np.sum(system.masses[:, None] * system.velocities, axis=0)


def center_of_mass(system):
    """计算系统的质心位置和速度。"""
    total_mass = float(np.sum(system.masses))
    com_pos = np.sum(system.masses[:, None] * system.positions, axis=0) / total_mass
    com_vel = np.sum(system.masses[:, None] * system.velocities, axis=0) / total_mass
    return com_pos, com_vel


class EnergyMonitor:
    """Track the relative drift of total energy over a run."""

    def __init__(self, max_points=500):
        self.history = deque(maxlen=max_points)
        self.initial_energy = None

    def set_initial_energy(self, system):
        _, _, self.initial_energy = system_energy(system)
        self.history.clear()

    def update(self, system):
        if self.initial_energy is None or self.initial_energy == 0:
            return
        _, _, current_energy = system_energy(system)
        drift = ((current_energy - self.initial_energy) / self.initial_energy) * 100
        self.history.append(drift)

    @property
    def max_drift(self):
        return max((abs(d) for d in self.history), default=0.0)

    def export_csv(self, file, delimiter=","):
        """Export the recorded energy drift history to a CSV file.

        Parameters
        ----------
        file : str or file-like
            Destination filename or open file object.
        delimiter : str, optional
            Delimiter used between columns (default is ',').
        """
        close = False
        if isinstance(file, (str, bytes, os.PathLike)):
            f = open(file, "w", newline="")
            close = True
        else:
            f = file
        try:
            writer = csv.writer(f, delimiter=delimiter)
            writer.writerow(["step", "energy_drift_percent"])
            for i, drift in enumerate(self.history):
                writer.writerow([i, drift])
        finally:
            if close:
                f.close()
