import numpy as np
import pytest

from solarsim import BodySystem, Method, UnknownMethodError, compute_accelerations
from solarsim.buffers import BufferState, RK4Workspace
from solarsim.constants import AU, G_ACC, SOLAR_MASS
from solarsim.integrators import (
    PEFRL_SEQUENCE,
    derivative,
    euler_step,
    pefrl_step,
    rk4_step,
    verlet_step,
)


def _circular_pair(separation=1.0, mass=SOLAR_MASS):
    """Two equal masses on a circular mutual orbit; returns (system, period)."""
    mu = G_ACC * mass / AU**2  # AU^3/day^2
    v = np.sqrt(mu / (2.0 * separation))
    system = BodySystem(2)
    system.init_body(0, mass, [-0.5 * separation, 0.0, 0.0], [0.0, -v, 0.0])
    system.init_body(1, mass, [0.5 * separation, 0.0, 0.0], [0.0, v, 0.0])
    period = np.pi * separation / v
    return system, period


def test_method_parse_accepts_members_codes_and_names():
    assert Method.parse(Method.RK4) is Method.RK4
    assert Method.parse(0) is Method.EULER
    assert Method.parse(np.int64(3)) is Method.PEFRL
    assert Method.parse("verlet") is Method.VERLET
    assert Method.parse(" PEFRL ") is Method.PEFRL


@pytest.mark.parametrize("bad", [4, -1, "leapfrog", None, 1.0, True])
def test_method_parse_rejects_unknown(bad):
    with pytest.raises(UnknownMethodError):
        Method.parse(bad)


def test_euler_single_step_value():
    # unit masses, 1 AU apart; acceleration is tiny but exactly reproducible
    v0 = np.array([0.0, 1e-3, 0.0])
    system = BodySystem(2)
    system.init_body(0, 1.0, [0.0, 0.0, 0.0], v0)
    system.init_body(1, 1.0, [1.0, 0.0, 0.0], -v0)
    a0 = compute_accelerations(system.positions, system.masses)[0]
    dt = 0.25

    euler_step(system, dt)

    assert np.isclose(a0[0], G_ACC * 1.0 / AU**2, rtol=1e-14)
    assert np.array_equal(system.velocities[0], v0 + dt * a0)
    assert np.array_equal(system.positions[0], dt * (v0 + dt * a0))


def test_euler_writes_accelerations_into_store():
    system, _ = _circular_pair()
    euler_step(system, 0.1)
    assert np.any(system.accelerations != 0.0)


def test_verlet_matches_drift_kick_drift():
    system, _ = _circular_pair()
    h = 0.5
    x = system.positions.copy()
    v = system.velocities.copy()

    x_half = x + 0.5 * h * v
    a = compute_accelerations(x_half, system.masses)
    v_new = v + h * a
    x_new = x_half + 0.5 * h * v_new

    verlet_step(system, h)
    assert np.array_equal(system.velocities, v_new)
    assert np.array_equal(system.positions, x_new)


def test_derivative_is_pure():
    system, _ = _circular_pair()
    state = np.hstack([system.positions, system.velocities])
    state_before = state.copy()
    positions_before = system.positions.copy()

    d = derivative(state, system.masses)

    assert np.array_equal(state, state_before)
    assert np.array_equal(system.positions, positions_before)
    assert np.array_equal(d[:, :3], state[:, 3:])
    assert np.array_equal(d[:, 3:], compute_accelerations(state[:, :3], system.masses))


def test_rk4_matches_textbook_combination():
    system, _ = _circular_pair()
    h = 2.0
    y = np.hstack([system.positions, system.velocities])

    def f(s):
        return derivative(s, system.masses)

    k1 = f(y)
    k2 = f(y + 0.5 * h * k1)
    k3 = f(y + 0.5 * h * k2)
    k4 = f(y + h * k3)
    expected = y + (h / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)

    rk4_step(system, h, RK4Workspace())
    assert np.allclose(system.positions, expected[:, :3], rtol=1e-14, atol=0.0)
    assert np.allclose(system.velocities, expected[:, 3:], rtol=1e-14, atol=1e-20)


def test_rk4_workspace_is_allocated_once_and_reused():
    system, _ = _circular_pair()
    ws = RK4Workspace()
    assert ws.state is BufferState.UNINITIALIZED

    rk4_step(system, 0.1, ws)
    stages, slopes, output = ws.stages, ws.slopes, ws.output
    assert ws.state is BufferState.READY
    assert stages.shape == (4, 2, 6)
    assert slopes.shape == (4, 2, 6)
    assert output.shape == (2, 6)

    rk4_step(system, 0.1, ws)
    assert ws.stages is stages and ws.slopes is slopes and ws.output is output


def test_pefrl_sequence_is_symmetric():
    assert PEFRL_SEQUENCE == tuple(reversed(PEFRL_SEQUENCE))
    assert sum(1 for kind, _ in PEFRL_SEQUENCE if kind == "kick") == 4


@pytest.mark.parametrize("step", [euler_step, verlet_step, rk4_step, pefrl_step])
def test_lone_body_moves_in_a_straight_line(step):
    system = BodySystem(1)
    system.init_body(0, 1e24, [1.0, 2.0, 3.0], [0.01, -0.02, 0.0])
    for _ in range(10):
        step(system, 1.0)
    assert np.allclose(system.positions[0], [1.1, 1.8, 3.0], rtol=1e-12)
    assert np.array_equal(system.velocities[0], [0.01, -0.02, 0.0])


def _return_error(step, *args):
    system, period = _circular_pair()
    start = system.positions.copy()
    n = 2000
    h = period / n
    for _ in range(n):
        step(system, h, *args)
    return np.max(np.linalg.norm(system.positions - start, axis=1))


def test_circular_orbit_returns_to_start_verlet():
    assert _return_error(verlet_step) < 1e-4


def test_circular_orbit_returns_to_start_rk4():
    assert _return_error(rk4_step, RK4Workspace()) < 1e-6


def test_circular_orbit_returns_to_start_pefrl():
    assert _return_error(pefrl_step) < 1e-6


def test_circular_orbit_euler_drifts_more():
    euler = _return_error(euler_step)
    assert euler > 1.5 * _return_error(verlet_step)
    assert euler > 10 * _return_error(rk4_step, RK4Workspace())
    assert euler > 10 * _return_error(pefrl_step)
