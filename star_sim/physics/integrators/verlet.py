"""Velocity-Verlet-style explicit integrator (second order in position)."""

from star_sim.physics.force import ForceCalculator
from star_sim.physics.integrators.base import Integrator
from star_sim.physics.state import SimulationState


class VerletIntegrator(Integrator):
    """Explicit update from the pre-step acceleration.

        x_new = x + v*dt + 0.5*a*dt^2
        v_new = v + a*dt

    One force sweep per step. Unlike canonical velocity Verlet, the velocity
    update does not average in the post-step acceleration.
    """

    @property
    def name(self) -> str:
        return "verlet"

    @property
    def order(self) -> int:
        return 2

    def step(self, state: SimulationState, masses, dt: float, force_calculator: ForceCalculator) -> SimulationState:
        accelerations = force_calculator.compute_accelerations(state.positions, masses)

        new_positions = state.positions + state.velocities * dt + accelerations * (0.5 * dt * dt)
        new_velocities = state.velocities + accelerations * dt

        return SimulationState(new_positions, new_velocities)
