"""Runge-Kutta 4th order integrator (high accuracy, O(h^4))."""

from star_sim.physics.force import ForceCalculator, state_derivative
from star_sim.physics.integrators.base import Integrator
from star_sim.physics.state import SimulationState


class RK4Integrator(Integrator):
    """Classic four-stage Runge-Kutta on the (position, velocity) system.

    For ds/dt = f(s) with f(x, v) = (v, a(x)):

        k1 = f(s)
        k2 = f(s + k1*dt/2)
        k3 = f(s + k2*dt/2)
        k4 = f(s + k3*dt)
        s_new = s + (k1 + 2*k2 + 2*k3 + k4)*dt/6

    Every stage does a full O(N^2) force sweep against its intermediate
    state, so a step costs four times the force work of Euler or Verlet.
    Intermediate states are new objects; s is never modified.
    """

    @property
    def name(self) -> str:
        return "rk4"

    @property
    def order(self) -> int:
        return 4

    @property
    def force_evaluations_per_step(self) -> int:
        return 4

    def step(self, state: SimulationState, masses, dt: float, force_calculator: ForceCalculator) -> SimulationState:
        k1 = state_derivative(state, masses, force_calculator)
        k2 = state_derivative(state + (k1 * (0.5 * dt)).to_state(), masses, force_calculator)
        k3 = state_derivative(state + (k2 * (0.5 * dt)).to_state(), masses, force_calculator)
        k4 = state_derivative(state + (k3 * dt).to_state(), masses, force_calculator)

        blended = (k1 + k2 * 2.0 + k3 * 2.0 + k4) * (1.0 / 6.0)
        return state + (blended * dt).to_state()
