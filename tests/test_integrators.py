"""Tests for numerical integrators."""

import numpy as np
import pytest
from star_sim.errors import ConfigurationError
from star_sim.physics import diagnostics
from star_sim.physics.force import ForceCalculator
from star_sim.physics.integrators import (
    EulerIntegrator,
    RK4Integrator,
    VerletIntegrator,
    get_integrator,
)
from star_sim.physics.state import SimulationState
from star_sim.presets.three_body import FigureEightThreeBody
from star_sim.physics.body import bodies_to_arrays

ALL_INTEGRATORS = [EulerIntegrator, VerletIntegrator, RK4Integrator]


def two_body_state():
    positions = [[-1.0, 0.0], [1.0, 0.0]]
    velocities = [[0.0, 0.0], [0.0, 0.0]]
    return SimulationState(positions, velocities), np.array([1.0, 1.0])


def closed_system(seed=3, n=6):
    """Well separated bodies with random velocities, no anchor."""
    rng = np.random.default_rng(seed)
    angles = np.linspace(0.0, 2 * np.pi, n, endpoint=False)
    positions = np.column_stack([np.cos(angles), np.sin(angles)]) * 5.0
    positions += rng.uniform(-0.5, 0.5, positions.shape)
    velocities = rng.uniform(-0.3, 0.3, (n, 2))
    masses = rng.uniform(0.5, 1.5, n)
    return SimulationState(positions, velocities), masses


def test_integrator_metadata():
    """Names, orders and force cost per step."""
    assert EulerIntegrator().name == "euler"
    assert EulerIntegrator().order == 1
    assert VerletIntegrator().name == "verlet"
    assert VerletIntegrator().order == 2
    assert RK4Integrator().name == "rk4"
    assert RK4Integrator().order == 4
    assert RK4Integrator().force_evaluations_per_step == 4
    assert VerletIntegrator().force_evaluations_per_step == 1


def test_get_integrator():
    assert isinstance(get_integrator("RK4"), RK4Integrator)
    with pytest.raises(ConfigurationError):
        get_integrator("leapfrog")


def test_euler_step_formula():
    """Drift uses the pre-kick velocity averaged with the kick."""
    state = SimulationState([[0.0, 0.0], [2.0, 0.0]], [[0.0, 1.0], [0.0, 0.0]])
    masses = np.array([4.0, 4.0])
    dt = 0.5
    # a_0 = G*m/r^2 = 1 along +x, a_1 = 1 along -x
    new = EulerIntegrator().step(state, masses, dt, ForceCalculator(G=1.0))

    kick0 = np.array([0.5, 0.0])
    expected_x0 = np.array([0.0, 0.0]) + ((np.array([0.0, 1.0]) + kick0) / 2.0) * dt
    assert np.allclose(new.positions[0], expected_x0)
    assert np.allclose(new.velocities[0], [0.5, 1.0])
    assert np.allclose(new.velocities[1], [-0.5, 0.0])


def test_euler_free_body_drifts_at_half_speed():
    """With no force a body moves v/2 per unit time under Euler-average."""
    state = SimulationState([[0.0, 0.0]], [[2.0, -4.0]])
    masses = np.array([1.0])
    new = EulerIntegrator().step(state, masses, 0.5, ForceCalculator(G=1.0))
    assert np.allclose(new.positions[0], [0.5, -1.0])
    assert np.allclose(new.velocities[0], [2.0, -4.0])

    verlet = VerletIntegrator().step(state, masses, 0.5, ForceCalculator(G=1.0))
    assert np.allclose(verlet.positions[0], [1.0, -2.0])


def test_verlet_step_formula():
    """x + v*dt + a*dt^2/2 and v + a*dt from the pre-step acceleration."""
    state = SimulationState([[0.0, 0.0], [2.0, 0.0]], [[0.0, 1.0], [0.0, 0.0]])
    masses = np.array([4.0, 4.0])
    dt = 0.5
    new = VerletIntegrator().step(state, masses, dt, ForceCalculator(G=1.0))

    assert np.allclose(new.positions[0], [0.125, 0.5])
    assert np.allclose(new.positions[1], [2.0 - 0.125, 0.0])
    assert np.allclose(new.velocities[0], [0.5, 1.0])


@pytest.mark.parametrize("integrator_class", ALL_INTEGRATORS)
def test_step_does_not_mutate_input(integrator_class):
    """Integrators are pure functions of the pre-step state."""
    state, masses = closed_system()
    before_positions = state.positions.copy()
    before_velocities = state.velocities.copy()

    new = integrator_class().step(state, masses, 0.01, ForceCalculator(G=1.0))

    assert np.array_equal(state.positions, before_positions)
    assert np.array_equal(state.velocities, before_velocities)
    assert not np.allclose(new.positions, state.positions)


@pytest.mark.parametrize("method", ["vectorized", "direct"])
def test_rk4_does_four_force_sweeps(method):
    """RK4 re-evaluates forces at every stage."""
    state, masses = closed_system()
    calculator = ForceCalculator(G=1.0, method=method)
    RK4Integrator().step(state, masses, 0.01, calculator)
    assert calculator.evaluations == 4

    calculator.reset_count()
    VerletIntegrator().step(state, masses, 0.01, calculator)
    assert calculator.evaluations == 1


@pytest.mark.parametrize("integrator_class", [VerletIntegrator, RK4Integrator])
def test_momentum_conservation(integrator_class):
    """Total momentum of a closed system stays put."""
    state, masses = closed_system()
    calculator = ForceCalculator(G=1.0)
    integrator = integrator_class()

    p0 = diagnostics.total_momentum(state, masses)
    scale = diagnostics.momentum_scale(state, masses)
    for _ in range(200):
        state = integrator.step(state, masses, 0.01, calculator)
        drift = np.linalg.norm(diagnostics.total_momentum(state, masses) - p0) / scale
        assert drift < 1e-6


def test_rk4_time_reversal():
    """Forward then backward on the figure eight returns to the start."""
    bodies = FigureEightThreeBody().generate()
    positions, velocities, masses = bodies_to_arrays(bodies)
    initial = SimulationState(positions, velocities)
    calculator = ForceCalculator(G=1.0)
    integrator = RK4Integrator()
    dt = 1e-3
    n_steps = 500

    state = initial
    for _ in range(n_steps):
        state = integrator.step(state, masses, dt, calculator)
    assert not np.allclose(state.positions, initial.positions, atol=1e-3)

    state = state.reversed_time()
    for _ in range(n_steps):
        state = integrator.step(state, masses, dt, calculator)

    assert np.allclose(state.positions, initial.positions, atol=1e-8)
    assert np.allclose(state.velocities, -initial.velocities, atol=1e-8)


def test_rk4_figure_eight_conserves_energy():
    """The periodic orbit keeps its energy to high accuracy."""
    bodies = FigureEightThreeBody().generate()
    positions, velocities, masses = bodies_to_arrays(bodies)
    state = SimulationState(positions, velocities)
    calculator = ForceCalculator(G=1.0)
    E0 = diagnostics.total_energy(state, masses, G=1.0)
    for _ in range(1000):
        state = RK4Integrator().step(state, masses, 1e-3, calculator)
    E1 = diagnostics.total_energy(state, masses, G=1.0)
    assert abs(E1 - E0) / abs(E0) < 1e-7


@pytest.mark.parametrize("integrator_class", ALL_INTEGRATORS)
def test_symmetry_preserved(integrator_class):
    """Equal masses released symmetrically stay mirror images."""
    state, masses = two_body_state()
    calculator = ForceCalculator(G=1.0)
    integrator = integrator_class()
    for _ in range(100):
        state = integrator.step(state, masses, 0.01, calculator)
        assert np.allclose(state.positions[0], -state.positions[1], atol=1e-12)
        assert np.allclose(state.velocities[0], -state.velocities[1], atol=1e-12)
    # They have moved towards each other
    assert state.positions[0][0] > -1.0


@pytest.mark.parametrize("integrator_class", ALL_INTEGRATORS)
def test_body_falls_towards_attractor(integrator_class):
    """A resting body accelerates monotonically towards a heavy neighbour."""
    state = SimulationState([[0.0, 0.0], [10.0, 0.0]], [[0.0, 0.0], [0.0, 0.0]])
    masses = np.array([1.0, 1000.0])
    calculator = ForceCalculator(G=1.0)
    integrator = integrator_class()

    distance = 10.0
    speed = 0.0
    for _ in range(50):
        state = integrator.step(state, masses, 0.01, calculator)
        new_distance = state.positions[1][0] - state.positions[0][0]
        new_speed = state.velocities[0][0]
        assert new_distance < distance
        assert new_speed > speed
        assert abs(state.positions[0][1]) < 1e-12
        distance, speed = new_distance, new_speed


def test_euler_and_verlet_diverge():
    """The two single-sweep schemes produce different trajectories."""
    state, masses = SimulationState([[0.0, 0.0], [1.0, 0.0]], [[0.0, -0.5], [0.0, 0.5]]), np.array([1.0, 1.0])
    calculator = ForceCalculator(G=1.0)
    euler_state = state
    verlet_state = state
    for _ in range(100):
        euler_state = EulerIntegrator().step(euler_state, masses, 0.01, calculator)
        verlet_state = VerletIntegrator().step(verlet_state, masses, 0.01, calculator)
    assert not np.allclose(euler_state.positions, verlet_state.positions, rtol=0.0, atol=1e-6)
