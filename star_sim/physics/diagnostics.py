"""Conserved-quantity diagnostics for N-body states."""

from typing import Tuple

import numpy as np

from star_sim.physics.force import G_SI
from star_sim.physics.state import SimulationState


def _arrays(state):
    # Accepts a SimulationState or a (positions, velocities) pair
    if isinstance(state, SimulationState):
        return state.positions, state.velocities
    positions, velocities = state
    return np.asarray(positions, dtype=np.float64), np.asarray(velocities, dtype=np.float64)


def kinetic_energy(state: SimulationState, masses) -> float:
    """Total kinetic energy: 0.5 * sum(m_i * v_i^2)."""
    _, velocities = _arrays(state)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    v_sq = np.sum(velocities ** 2, axis=1)
    return float(0.5 * np.sum(masses * v_sq))


def potential_energy(state: SimulationState, masses, G: float = G_SI, min_separation: float = 0.0) -> float:
    """Total potential energy U = -G * sum_{i<j} m_i * m_j / r_ij.

    Uses the same separation floor as the force law; coincident pairs are
    skipped, matching their zero force contribution.
    """
    positions, _ = _arrays(state)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    n = positions.shape[0]
    if n < 2:
        return 0.0
    r_diff = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    r = np.sqrt(np.sum(r_diff ** 2, axis=2))
    upper = np.triu(np.ones((n, n), dtype=bool), k=1) & (r > 0.0)
    r_eff = np.maximum(r[upper], min_separation)
    m_i = np.broadcast_to(masses[:, np.newaxis], (n, n))[upper]
    m_j = np.broadcast_to(masses[np.newaxis, :], (n, n))[upper]
    return float(-G * np.sum(m_i * m_j / r_eff))


def total_energy(state: SimulationState, masses, G: float = G_SI, min_separation: float = 0.0) -> float:
    return kinetic_energy(state, masses) + potential_energy(state, masses, G, min_separation)


def total_momentum(state: SimulationState, masses) -> np.ndarray:
    """Total linear momentum sum(m_i * v_i), shape (2,)."""
    _, velocities = _arrays(state)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    return np.sum(masses[:, np.newaxis] * velocities, axis=0)


def momentum_scale(state: SimulationState, masses) -> float:
    """sum(m_i * |v_i|), a natural scale for relative momentum drift."""
    _, velocities = _arrays(state)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    return float(np.sum(masses * np.linalg.norm(velocities, axis=1)))


def angular_momentum(state: SimulationState, masses) -> float:
    """z component of total angular momentum about the origin."""
    positions, velocities = _arrays(state)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    return float(np.sum(masses * (positions[:, 0] * velocities[:, 1] - positions[:, 1] * velocities[:, 0])))


def center_of_mass(state: SimulationState, masses) -> Tuple[np.ndarray, np.ndarray]:
    """Centre-of-mass position and velocity."""
    positions, velocities = _arrays(state)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    total_mass = np.sum(masses)
    com = np.sum(masses[:, np.newaxis] * positions, axis=0) / total_mass
    com_v = np.sum(masses[:, np.newaxis] * velocities, axis=0) / total_mass
    return com, com_v
