from pathlib import Path
import json
from typing import Sequence

import numpy as np

from . import constants as C
from .bodies import Body, BodySystem


def save_state(filepath: str, system: BodySystem):
    """Serialize bodies to a JSON file."""
    data = []
    for b in system.bodies():
        data.append({
            "mass": b.mass,
            "pos": b.pos.tolist(),
            "vel": b.vel.tolist(),
            "name": b.name,
        })
    with open(filepath, "w") as f:
        json.dump(data, f)


def load_state(filepath: str) -> BodySystem:
    """Load bodies from a JSON file."""
    with open(filepath) as f:
        data = json.load(f)
    bodies = []
    for item in data:
        bodies.append(
            Body(
                item["mass"],
                item.get("pos", [0, 0, 0]),
                item.get("vel", [0, 0, 0]),
                name=item.get("name"),
            )
        )
    return BodySystem.from_bodies(bodies)


def load_initial_conditions(
    filepath: str,
    year: int = C.DEFAULT_EPOCH_YEAR,
    masses: Sequence[float] = C.SOLAR_SYSTEM_MASSES,
    names: Sequence[str] = C.BODY_NAMES,
) -> BodySystem:
    """Build a system from a Horizons fetch file (``{year: [[x, y, z, vx, vy, vz], ...]}``)."""
    with open(filepath) as f:
        data = json.load(f)
    key = str(year)
    if key not in data:
        raise KeyError(f"Year {year} not found in {filepath}")
    rows = data[key]
    if len(rows) > len(masses):
        raise ValueError(f"{len(rows)} bodies in {filepath} but only {len(masses)} masses")

    system = BodySystem(len(rows))
    for i, row in enumerate(rows):
        name = names[i] if i < len(names) else None
        system.init_body(i, masses[i], row[:3], row[3:6], name=name)
    return system


def save_trajectory(filepath: str, trajectory: np.ndarray) -> Path:
    """Write a ``(steps, bodies, 3)`` trajectory as ``.npy`` or JSON."""
    path = Path(filepath)
    trajectory = np.asarray(trajectory)
    if path.suffix == ".npy":
        np.save(path, trajectory)
    else:
        steps, bodies, _ = trajectory.shape
        path.write_text(json.dumps({
            "steps": steps,
            "bodies": bodies,
            "positions": trajectory.tolist(),
        }))
    return path
