"""Random number generation for initial conditions."""

import random
from typing import Optional

import numpy as np


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a NumPy generator.

    With seed=None the generator draws fresh OS entropy, so runs differ.
    """
    return np.random.default_rng(seed)


def set_all_seeds(seed: int) -> np.random.Generator:
    """Seed the global Python and NumPy generators and return a fresh Generator."""
    random.seed(seed)
    np.random.seed(seed)
    return make_rng(seed)
