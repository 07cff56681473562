"""Simulation state container and stepping controller."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from star_sim.errors import ConfigurationError, NumericalInstabilityError
from star_sim.physics.body import Body, bodies_from_arrays, bodies_to_arrays
from star_sim.physics.domain import SimulationDomain
from star_sim.physics.force import ForceCalculator
from star_sim.physics.integrators import Integrator, get_integrator
from star_sim.physics.integrators.euler import EulerIntegrator
from star_sim.physics.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable, internally consistent copy of the state after one step.

    This is everything the renderer is allowed to see.
    """

    positions: np.ndarray
    velocities: np.ndarray
    masses: np.ndarray
    luminosities: np.ndarray
    temperatures: np.ndarray
    ids: np.ndarray
    time: float
    step_count: int

    def __len__(self) -> int:
        return self.positions.shape[0]

    @property
    def luminous(self) -> np.ndarray:
        """Boolean mask of bodies that emit light."""
        return self.luminosities > 0.0


def _readonly_copy(array) -> np.ndarray:
    arr = np.array(array, copy=True)
    arr.setflags(write=False)
    return arr


class Simulation:
    """Owns the bodies and advances them through time.

    State lives in an arena of two preallocated buffers. step() reads the
    current buffer, writes the next state into the other one and then flips
    the current index, so no body is ever overwritten while the sweep still
    needs its pre-step value. Callers only ever see copies.
    """

    def __init__(
        self,
        bodies: Sequence[Body],
        domain: SimulationDomain,
        dt: float,
        integrator: Optional[Integrator] = None,
        force_calculator: Optional[ForceCalculator] = None,
    ):
        """Initialize simulation.

        Args:
            bodies: Initial bodies (order is preserved)
            domain: Simulation domain used for display mapping
            dt: Time step (seconds), must be positive
            integrator: Integrator to use (default: Euler-average)
            force_calculator: Force law settings (default: SI gravity, vectorized)

        Raises:
            ConfigurationError: On an empty body list, bad dt or duplicate ids
        """
        bodies = list(bodies)
        if not bodies:
            raise ConfigurationError("A simulation needs at least one body")
        if not (np.isfinite(dt) and dt > 0.0):
            raise ConfigurationError(f"Timestep must be positive and finite, got {dt}")
        ids = [b.id for b in bodies]
        if len(set(ids)) != len(ids):
            raise ConfigurationError("Body ids must be unique")

        self.domain = domain
        self.dt = float(dt)
        self.integrator = integrator or EulerIntegrator()
        self.force_calculator = force_calculator or ForceCalculator()

        positions, velocities, masses = bodies_to_arrays(bodies)
        n = len(bodies)
        self._masses = _readonly_copy(masses)
        self._luminosities = _readonly_copy(np.array([b.luminosity for b in bodies], dtype=np.float64))
        self._temperatures = _readonly_copy(np.array([b.temperature for b in bodies], dtype=np.int64))
        self._ids = _readonly_copy(np.array(ids, dtype=np.int64))

        self._positions = np.zeros((2, n, 2), dtype=np.float64)
        self._velocities = np.zeros((2, n, 2), dtype=np.float64)
        self._current = 0
        self._positions[0] = positions
        self._velocities[0] = velocities

        self.time = 0.0
        self.step_count = 0

        logger.info(
            "Simulation created: %d bodies, integrator=%s, dt=%g, force=%s",
            n, self.integrator.name, self.dt, self.force_calculator.method,
        )

    @classmethod
    def from_config(cls, config, rng: Optional[np.random.Generator] = None) -> "Simulation":
        """Build a simulation from a Config, generating bodies with its preset."""
        from star_sim.presets import get_preset

        config.validate()
        domain = config.domain()
        preset = get_preset(config.preset, config, domain=domain, rng=rng)
        bodies = preset.generate()
        force_calculator = ForceCalculator(
            G=config.G,
            min_separation=config.min_separation,
            method=config.force_method,
        )
        return cls(
            bodies,
            domain,
            config.dt,
            integrator=get_integrator(config.integrator),
            force_calculator=force_calculator,
        )

    @property
    def n_bodies(self) -> int:
        return self._masses.shape[0]

    @property
    def masses(self) -> np.ndarray:
        return self._masses

    @property
    def state(self) -> SimulationState:
        """Copy of the current state."""
        return SimulationState(self._positions[self._current], self._velocities[self._current])

    def set_state(self, state: SimulationState):
        """Replace the current state (body count must not change)."""
        if len(state) != self.n_bodies:
            raise ConfigurationError(f"State has {len(state)} bodies, simulation has {self.n_bodies}")
        self._positions[self._current] = state.positions
        self._velocities[self._current] = state.velocities

    def step(self):
        """Advance the simulation by one timestep.

        Raises:
            NumericalInstabilityError: If the step produced NaN or infinity;
                the current state is left as it was before the step.
        """
        new_state = self.integrator.step(self.state, self._masses, self.dt, self.force_calculator)
        if not new_state.is_finite():
            raise NumericalInstabilityError(
                f"Non-finite state after step {self.step_count + 1} (t={self.time + self.dt:g})"
            )

        nxt = 1 - self._current
        np.copyto(self._positions[nxt], new_state.positions)
        np.copyto(self._velocities[nxt], new_state.velocities)
        self._current = nxt

        self.time += self.dt
        self.step_count += 1
        logger.debug("step=%d t=%g", self.step_count, self.time)

    def run(self, n_steps: int):
        """Run simulation for specified number of steps."""
        for _ in range(n_steps):
            self.step()

    def reverse(self):
        """Negate every velocity so that further steps run time backwards."""
        self._velocities[self._current] *= -1.0

    def snapshot(self) -> Snapshot:
        """Return a read-only copy of the current state and display attributes."""
        return Snapshot(
            positions=_readonly_copy(self._positions[self._current]),
            velocities=_readonly_copy(self._velocities[self._current]),
            masses=self._masses,
            luminosities=self._luminosities,
            temperatures=self._temperatures,
            ids=self._ids,
            time=self.time,
            step_count=self.step_count,
        )

    def bodies(self) -> List[Body]:
        """Current state as a list of Body records (same ids as at creation)."""
        return bodies_from_arrays(
            self._positions[self._current],
            self._velocities[self._current],
            self._masses,
            luminosities=self._luminosities,
            temperatures=self._temperatures,
            ids=self._ids,
        )
