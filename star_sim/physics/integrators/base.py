"""Abstract base class for numerical integrators."""

from abc import ABC, abstractmethod

from star_sim.physics.force import ForceCalculator
from star_sim.physics.state import SimulationState


class Integrator(ABC):
    """Advances a whole system state by one timestep.

    Implementations are pure: they never mutate the input state, and every
    body's update reads only pre-step values of the other bodies.
    """

    @abstractmethod
    def step(self, state: SimulationState, masses, dt: float, force_calculator: ForceCalculator) -> SimulationState:
        """Perform one integration step.

        Args:
            state: Current state
            masses: (n,) masses, paired with state by index
            dt: Time step
            force_calculator: Evaluates accelerations for a set of positions

        Returns:
            The next state
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (e.g., 1 for Euler, 2 for Verlet, 4 for RK4)."""
        pass

    @property
    def force_evaluations_per_step(self) -> int:
        """Number of full O(N^2) force sweeps one step costs."""
        return 1
