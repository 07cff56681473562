"""Base class for preset scenarios."""

from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from star_sim.physics.body import Body


class Preset(ABC):
    """Abstract base class for initial-condition generators."""

    def __init__(self, n_bodies: int, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        """Initialize preset.

        Args:
            n_bodies: Number of bodies
            seed: Random seed for reproducibility
            rng: Generator to draw from (takes precedence over seed)
        """
        self.n_bodies = n_bodies
        self.seed = seed
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    @abstractmethod
    def generate(self) -> List[Body]:
        """Generate initial conditions.

        Returns:
            List of bodies in a fixed order
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this preset."""
        pass
