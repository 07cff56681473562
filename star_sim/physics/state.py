"""Whole-system state and its time derivative.

Both types support addition and scalar multiplication element-wise over
their arrays, so Runge-Kutta stage blending reads as ordinary arithmetic:

    s + (k1 * (0.5 * dt)).to_state()

Arrays are stored read-only; every operation returns a new object.
"""

import numpy as np


def _frozen(array) -> np.ndarray:
    arr = np.array(array, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected array of shape (n, 2), got {arr.shape}")
    arr.setflags(write=False)
    return arr


class SimulationState:
    """Positions and velocities of every body, paired by index."""

    __slots__ = ("positions", "velocities")

    def __init__(self, positions, velocities):
        positions = _frozen(positions)
        velocities = _frozen(velocities)
        if positions.shape != velocities.shape:
            raise ValueError(
                f"positions {positions.shape} and velocities {velocities.shape} must match"
            )
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "velocities", velocities)

    def __setattr__(self, name, value):
        raise AttributeError("SimulationState is immutable")

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __add__(self, other: "SimulationState") -> "SimulationState":
        if not isinstance(other, SimulationState):
            return NotImplemented
        return SimulationState(self.positions + other.positions, self.velocities + other.velocities)

    def __mul__(self, scalar: float) -> "SimulationState":
        return SimulationState(self.positions * scalar, self.velocities * scalar)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"SimulationState(n={len(self)})"

    def with_positions(self, positions) -> "SimulationState":
        """Copy of this state with positions overridden."""
        return SimulationState(positions, self.velocities)

    def with_velocities(self, velocities) -> "SimulationState":
        """Copy of this state with velocities overridden."""
        return SimulationState(self.positions, velocities)

    def reversed_time(self) -> "SimulationState":
        """Same positions with every velocity negated."""
        return self.with_velocities(-self.velocities)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.positions)) and np.all(np.isfinite(self.velocities)))

    def allclose(self, other: "SimulationState", rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        return bool(
            np.allclose(self.positions, other.positions, rtol=rtol, atol=atol)
            and np.allclose(self.velocities, other.velocities, rtol=rtol, atol=atol)
        )


class StateDerivative:
    """d(position)/dt and d(velocity)/dt for each body at one evaluation point."""

    __slots__ = ("velocities", "accelerations")

    def __init__(self, velocities, accelerations):
        velocities = _frozen(velocities)
        accelerations = _frozen(accelerations)
        if velocities.shape != accelerations.shape:
            raise ValueError(
                f"velocities {velocities.shape} and accelerations {accelerations.shape} must match"
            )
        object.__setattr__(self, "velocities", velocities)
        object.__setattr__(self, "accelerations", accelerations)

    def __setattr__(self, name, value):
        raise AttributeError("StateDerivative is immutable")

    def __len__(self) -> int:
        return self.velocities.shape[0]

    def __add__(self, other: "StateDerivative") -> "StateDerivative":
        if not isinstance(other, StateDerivative):
            return NotImplemented
        return StateDerivative(
            self.velocities + other.velocities, self.accelerations + other.accelerations
        )

    def __mul__(self, scalar: float) -> "StateDerivative":
        return StateDerivative(self.velocities * scalar, self.accelerations * scalar)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"StateDerivative(n={len(self)})"

    def to_state(self) -> SimulationState:
        """Reinterpret as a state increment (velocity -> position, acceleration -> velocity)."""
        return SimulationState(self.velocities, self.accelerations)
