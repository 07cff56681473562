"""Newtonian gravity between point masses.

Exact pairwise summation, O(N^2) per sweep.

Degenerate separations:
- two distinct bodies at exactly the same coordinates contribute no force
  to each other (the direction is undefined) and a warning is logged;
- for 0 < r < min_separation, r^2 is floored at min_separation^2 while the
  direction stays exact.

Self-interaction is skipped by identity (id or index), never by comparing
positions.
"""

import logging
from typing import Iterable, Literal

import numpy as np

from star_sim.errors import ConfigurationError
from star_sim.physics.body import Body
from star_sim.physics.state import SimulationState, StateDerivative
from star_sim.physics.vector import zero2

logger = logging.getLogger(__name__)

G_SI = 6.674e-11  # m^3 kg^-1 s^-2


def gravitational_force(m1: float, m2: float, p1, p2, G: float = G_SI, min_separation: float = 0.0) -> np.ndarray:
    """Force exerted on the body at p1 by the body at p2.

    Magnitude G*m1*m2/r^2, directed along (p2 - p1).

    Args:
        m1: Mass of the body the force acts on
        m2: Mass of the attracting body
        p1: Position of the body the force acts on
        p2: Position of the attracting body
        G: Gravitational constant
        min_separation: Floor applied to r when computing the magnitude

    Returns:
        Force vector, shape (2,). Zero if p1 == p2.
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    r_sq = dx * dx + dy * dy
    if r_sq == 0.0:
        logger.warning("Coincident bodies at (%g, %g); pair skipped", p1[0], p1[1])
        return zero2()
    r = np.sqrt(r_sq)
    r_sq_eff = max(r_sq, min_separation * min_separation)
    f = G * m1 * m2 / r_sq_eff
    return np.array([f * dx / r, f * dy / r], dtype=np.float64)


def total_acceleration(body: Body, others: Iterable[Body], G: float = G_SI, min_separation: float = 0.0) -> np.ndarray:
    """Acceleration of body due to every other body in others.

    others may include body itself; it is skipped by id.
    """
    force = zero2()
    for other in others:
        if other.id == body.id:
            continue
        force += gravitational_force(body.mass, other.mass, body.position, other.position, G, min_separation)
    return force / body.mass


class ForceCalculator:
    """Accelerations for a full system state.

    The "vectorized" method builds the (n, n, 2) displacement tensor with NumPy
    broadcasting; the "direct" method loops over pairs with gravitational_force.
    Both mask self-pairs by index and follow the same degenerate-separation
    policy, so they agree to rounding.
    """

    def __init__(
        self,
        G: float = G_SI,
        min_separation: float = 0.0,
        method: Literal["vectorized", "direct"] = "vectorized",
    ):
        if method not in ("vectorized", "direct"):
            raise ConfigurationError(f"Unknown force method '{method}'. Available: ['vectorized', 'direct']")
        if not G > 0.0:
            raise ConfigurationError(f"G must be positive, got {G}")
        if min_separation < 0.0:
            raise ConfigurationError(f"min_separation must be non-negative, got {min_separation}")
        self.G = G
        self.min_separation = min_separation
        self.method = method
        self.evaluations = 0

    def reset_count(self):
        self.evaluations = 0

    def compute_accelerations(self, positions, masses) -> np.ndarray:
        """Compute the (n, 2) acceleration array.

        Args:
            positions: (n, 2) positions
            masses: (n,) masses

        Returns:
            (n, 2) accelerations
        """
        self.evaluations += 1
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64).reshape(-1)
        if self.method == "direct":
            return self._compute_direct(positions, masses)
        return self._compute_vectorized(positions, masses)

    def _compute_vectorized(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        n = positions.shape[0]
        if n < 2:
            return np.zeros_like(positions)
        # r_diff[i, j] = p_j - p_i
        r_diff = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        r_sq = np.sum(r_diff ** 2, axis=2)

        skip = np.eye(n, dtype=bool)
        coincident = (r_sq == 0.0) & ~skip
        if np.any(coincident):
            n_pairs = int(np.count_nonzero(coincident)) // 2
            logger.warning("%d coincident body pair(s); pairs skipped", n_pairs)
            skip |= coincident

        floor_sq = self.min_separation * self.min_separation
        r_sq_safe = np.where(skip, 1.0, r_sq)
        r = np.sqrt(r_sq_safe)
        r_sq_eff = np.maximum(r_sq_safe, floor_sq)

        # a_i = sum_j G * m_j / r_ij^2 * (r_ij / |r_ij|)
        magnitude = self.G * masses[np.newaxis, :] / (r_sq_eff * r)
        magnitude = np.where(skip, 0.0, magnitude)
        return np.sum(magnitude[:, :, np.newaxis] * r_diff, axis=1)

    def _compute_direct(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        n = positions.shape[0]
        accelerations = np.zeros((n, 2), dtype=np.float64)
        for i in range(n - 1):
            for j in range(i + 1, n):
                force = gravitational_force(
                    masses[i], masses[j], positions[i], positions[j], self.G, self.min_separation
                )
                accelerations[i] += force / masses[i]
                accelerations[j] -= force / masses[j]
        return accelerations

    def derivative(self, state: SimulationState, masses) -> StateDerivative:
        """(velocities, accelerations) for state."""
        return StateDerivative(state.velocities, self.compute_accelerations(state.positions, masses))


def state_derivative(state: SimulationState, masses, force_calculator: ForceCalculator) -> StateDerivative:
    """Evaluate d(state)/dt = (velocity, acceleration) for every body."""
    return force_calculator.derivative(state, masses)
