"""Celestial body record."""

import itertools
import math
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from star_sim.errors import ConfigurationError
from star_sim.physics.vector import as_vectors, vec2

_id_lock = threading.Lock()
_id_counter = itertools.count()


def next_body_id() -> int:
    """Return a process-wide unique body id (never reused)."""
    with _id_lock:
        return next(_id_counter)


@dataclass
class Body:
    """A point mass.

    Attributes:
        position: Position in meters, shape (2,)
        velocity: Velocity in meters per second, shape (2,)
        mass: Mass in kilograms (normalized units for analytic presets), > 0
        luminosity: Brightness relative to the sun; 0 for a black hole
        temperature: Temperature in kelvin, unused when luminosity is 0
        id: Stable identity used to skip self-interaction
    """

    position: np.ndarray
    velocity: np.ndarray
    mass: float
    luminosity: float = 1.0
    temperature: int = 5000
    id: int = field(default_factory=next_body_id)

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64).reshape(2)
        self.velocity = np.array(self.velocity, dtype=np.float64).reshape(2)
        self.mass = float(self.mass)
        if not math.isfinite(self.mass) or self.mass <= 0.0:
            raise ConfigurationError(f"Body mass must be positive and finite, got {self.mass}")
        if not (np.all(np.isfinite(self.position)) and np.all(np.isfinite(self.velocity))):
            raise ConfigurationError("Body position and velocity must be finite")
        if self.luminosity < 0.0:
            raise ConfigurationError(f"Body luminosity must be non-negative, got {self.luminosity}")

    @property
    def is_luminous(self) -> bool:
        return self.luminosity > 0.0

    @classmethod
    def at(cls, x: float, y: float, mass: float, vx: float = 0.0, vy: float = 0.0, **kwargs) -> "Body":
        """Convenience constructor from scalar components."""
        return cls(vec2(x, y), vec2(vx, vy), mass, **kwargs)


def bodies_to_arrays(bodies: Sequence[Body]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split bodies into (positions, velocities, masses) arrays, preserving order."""
    positions = as_vectors(b.position for b in bodies)
    velocities = as_vectors(b.velocity for b in bodies)
    masses = np.array([b.mass for b in bodies], dtype=np.float64)
    return positions, velocities, masses


def bodies_from_arrays(
    positions,
    velocities,
    masses,
    luminosities: Optional[Sequence[float]] = None,
    temperatures: Optional[Sequence[int]] = None,
    ids: Optional[Sequence[int]] = None,
) -> List[Body]:
    """Build bodies from parallel arrays (inverse of bodies_to_arrays)."""
    n = len(masses)
    bodies = []
    for i in range(n):
        kwargs = {}
        if luminosities is not None:
            kwargs["luminosity"] = float(luminosities[i])
        if temperatures is not None:
            kwargs["temperature"] = int(temperatures[i])
        if ids is not None:
            kwargs["id"] = int(ids[i])
        bodies.append(Body(positions[i], velocities[i], masses[i], **kwargs))
    return bodies
