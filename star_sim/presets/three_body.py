"""Periodic figure-eight three-body orbit."""

from typing import List

from star_sim.errors import ConfigurationError
from star_sim.physics.body import Body
from star_sim.presets.base import Preset

FIGURE_EIGHT_POSITIONS = (
    (-0.3092050, 0.0),
    (0.1546025, -0.09875616),
    (0.1546025, 0.09875616),
)
FIGURE_EIGHT_VELOCITIES = (
    (0.0, -0.50436399),
    (-1.18437049, 0.25218199),
    (1.18437049, 0.25218199),
)


class FigureEightThreeBody(Preset):
    """Three equal masses (1/3 each) chasing each other on a figure eight.

    Normalized units with G = 1; the orbit is periodic, which makes it a
    good accuracy and time-reversal check for the integrators.
    """

    def __init__(self, n_bodies: int = 3, seed: int = None, rng=None):
        if n_bodies != 3:
            raise ConfigurationError(f"The figure-eight preset has exactly 3 bodies, got {n_bodies}")
        super().__init__(n_bodies, seed, rng)

    @property
    def name(self) -> str:
        return "three_body"

    def generate(self) -> List[Body]:
        mass = 1.0 / 3.0
        return [
            Body(position, velocity, mass)
            for position, velocity in zip(FIGURE_EIGHT_POSITIONS, FIGURE_EIGHT_VELOCITIES)
        ]
