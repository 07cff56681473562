"""2D vector primitives backed by NumPy float64 arrays."""

from typing import Iterable, Sequence
import numpy as np


def vec2(x: float, y: float) -> np.ndarray:
    """Create a 2D vector."""
    return np.array([x, y], dtype=np.float64)


def zero2() -> np.ndarray:
    """Create the 2D zero vector."""
    return np.zeros(2, dtype=np.float64)


def norm(v) -> float:
    """Euclidean length of a 2D vector."""
    return float(np.hypot(v[0], v[1]))


def as_vectors(data: Iterable[Sequence[float]]) -> np.ndarray:
    """Convert a sequence of (x, y) pairs into an (n, 2) array.

    An empty sequence gives an array of shape (0, 2).
    """
    arr = np.asarray(list(data), dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected (n, 2) vectors, got shape {arr.shape}")
    return arr
