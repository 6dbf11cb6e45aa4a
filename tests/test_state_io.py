import json

import numpy as np
import pytest

from solarsim import Body, BodySystem
from solarsim.constants import SOLAR_SYSTEM_MASSES
from solarsim.state_io import load_initial_conditions, load_state, save_state, save_trajectory


def _write_api_json(path):
    data = {
        "2000": [
            [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
            [0.3, 0.1, 0.0, -0.01, 0.02, 0.001],
            [-0.7, 0.2, 0.01, -0.005, -0.019, 0.0],
        ],
        "2001": [[1.0] * 6, [2.0] * 6, [3.0] * 6],
    }
    path.write_text(json.dumps(data))
    return data


def test_state_round_trip(tmp_path):
    system = BodySystem.from_bodies([
        Body(1.989e30, [0, 0, 0], [0, 0, 0], name="Sun"),
        Body(5.972e24, [1, 0, 0], [0, 0.0172, 0], name="Earth"),
    ])
    path = tmp_path / "state.json"
    save_state(path, system)
    loaded = load_state(path)

    assert len(loaded) == 2
    assert np.array_equal(loaded.masses, system.masses)
    assert np.array_equal(loaded.positions, system.positions)
    assert np.array_equal(loaded.velocities, system.velocities)
    assert loaded.names == ["Sun", "Earth"]


def test_load_initial_conditions(tmp_path):
    path = tmp_path / "api.json"
    data = _write_api_json(path)

    system = load_initial_conditions(path, 2000)

    assert len(system) == 3
    assert system.masses.tolist() == list(SOLAR_SYSTEM_MASSES[:3])
    assert system.position(1).tolist() == data["2000"][1][:3]
    assert system.velocity(2).tolist() == data["2000"][2][3:]
    assert system.names == ["Sun", "Mercury", "Venus"]


def test_load_initial_conditions_missing_year(tmp_path):
    path = tmp_path / "api.json"
    _write_api_json(path)
    with pytest.raises(KeyError):
        load_initial_conditions(path, 1999)


def test_load_initial_conditions_needs_enough_masses(tmp_path):
    path = tmp_path / "api.json"
    _write_api_json(path)
    with pytest.raises(ValueError):
        load_initial_conditions(path, 2000, masses=[1.0, 2.0])


def test_save_trajectory_json_and_npy(tmp_path):
    traj = np.arange(2 * 3 * 3, dtype=float).reshape(2, 3, 3)

    json_path = save_trajectory(tmp_path / "traj.json", traj)
    payload = json.loads(json_path.read_text())
    assert payload["steps"] == 2
    assert payload["bodies"] == 3
    assert np.array_equal(np.array(payload["positions"]), traj)

    npy_path = save_trajectory(tmp_path / "traj.npy", traj)
    assert np.array_equal(np.load(npy_path), traj)
