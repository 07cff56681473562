"""Simulation domain and mapping from simulation space to display space."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from star_sim.errors import ConfigurationError


@dataclass(frozen=True)
class SimulationDomain:
    """Rectangular simulation extent centred on the origin.

    The domain spans [-width/2, width/2] x [-height/2, height/2]. The target
    display size is the window size (pixels) at which the domain exactly fills
    the display; it is only used for aspect-correct mapping.
    """

    width: float
    height: float
    target_display_width: int = 1000
    target_display_height: int = 1000

    def __post_init__(self):
        if not (self.width > 0.0 and self.height > 0.0):
            raise ConfigurationError(f"Domain extents must be positive, got {self.width} x {self.height}")
        if self.target_display_width <= 0 or self.target_display_height <= 0:
            raise ConfigurationError(
                f"Target display size must be positive, got "
                f"{self.target_display_width} x {self.target_display_height}"
            )

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def half_height(self) -> float:
        return self.height / 2.0

    @property
    def target_display_size(self) -> Tuple[int, int]:
        return self.target_display_width, self.target_display_height

    def contains(self, position) -> bool:
        return abs(position[0]) <= self.half_width and abs(position[1]) <= self.half_height

    def scale_factors(self, display_size: Tuple[int, int]) -> Tuple[float, float]:
        """Multipliers taking a position in meters to normalized display coordinates."""
        display_width, display_height = display_size
        if display_width <= 0 or display_height <= 0:
            raise ValueError(f"Display size must be positive, got {display_size}")
        sx = (2.0 / self.width) * (self.target_display_width / display_width)
        sy = (2.0 / self.height) * (self.target_display_height / display_height)
        return sx, sy

    def to_display(self, position, display_size: Tuple[int, int]) -> Optional[Tuple[float, float]]:
        return to_display(position, display_size, self)

    def project(self, positions, display_size: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
        """Map an (n, 2) array of positions to display coordinates.

        Returns:
            Tuple of (coords, visible): coords is (n, 2), visible is a boolean
            (n,) mask of the bodies that fall inside [-1, 1] on both axes.
        """
        sx, sy = self.scale_factors(display_size)
        coords = np.asarray(positions, dtype=np.float64) * np.array([sx, sy])
        visible = np.all(np.abs(coords) <= 1.0, axis=1)
        return coords, visible


def to_display(position, display_size: Tuple[int, int], domain: SimulationDomain) -> Optional[Tuple[float, float]]:
    """Convert a simulation-space position to normalized display coordinates.

    Display coordinates run from -1 to 1 on both axes regardless of pixel size,
    so the current display size is needed to keep the aspect ratio of the
    target display.

    Args:
        position: (x, y) in meters
        display_size: Current (width, height) of the display in pixels
        domain: Simulation domain

    Returns:
        (x, y) in [-1, 1] x [-1, 1], or None when the body is out of frame.
    """
    sx, sy = domain.scale_factors(display_size)
    screen_x = float(position[0]) * sx
    screen_y = float(position[1]) * sy

    if screen_x > 1.0 or screen_x < -1.0 or screen_y > 1.0 or screen_y < -1.0:
        return None

    return screen_x, screen_y
