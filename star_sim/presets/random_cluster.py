"""Procedural star field: a dark anchor mass plus a normally distributed cloud."""

import logging
from typing import List

import numpy as np

from star_sim.errors import ConfigurationError
from star_sim.physics.body import Body
from star_sim.physics.domain import SimulationDomain
from star_sim.physics.vector import vec2, zero2
from star_sim.presets.base import Preset

logger = logging.getLogger(__name__)


class RandomCluster(Preset):
    """Anchor-plus-cloud star field.

    Body 0 is a very massive, non-luminous anchor at rest at the origin.
    The remaining bodies have positions drawn from N(0, extent/8) on each
    axis, clamped to the domain, and masses drawn from
    N(mass_mean, mass_std).
    """

    def __init__(
        self,
        domain: SimulationDomain,
        n_bodies: int = 300,
        seed: int = None,
        rng: np.random.Generator = None,
        mass_mean: float = 8e29,
        mass_std: float = 5e28,
        anchor_mass: float = 1e31,
        initial_speed: float = 0.0,
        luminosity: float = 1.0,
        temperature: int = 5000,
    ):
        """Initialize star field preset.

        Args:
            domain: Simulation domain; sets the position spread and clamp
            n_bodies: Total number of bodies including the anchor
            seed: Random seed
            rng: Generator to draw from (takes precedence over seed)
            mass_mean: Mean star mass (kg)
            mass_std: Standard deviation of star mass (kg)
            anchor_mass: Mass of the central anchor (kg)
            initial_speed: If > 0, each velocity component is uniform in
                [-initial_speed, initial_speed]; otherwise stars start at rest
            luminosity: Luminosity of every star
            temperature: Temperature of every star (K)
        """
        if n_bodies < 1:
            raise ConfigurationError(f"n_bodies must be at least 1, got {n_bodies}")
        if mass_mean <= 0.0 or mass_std < 0.0:
            raise ConfigurationError("mass_mean must be positive and mass_std non-negative")
        super().__init__(n_bodies, seed, rng)
        self.domain = domain
        self.mass_mean = mass_mean
        self.mass_std = mass_std
        self.anchor_mass = anchor_mass
        self.initial_speed = initial_speed
        self.luminosity = luminosity
        self.temperature = temperature

    @property
    def name(self) -> str:
        return "random"

    def _sample_masses(self, n: int) -> np.ndarray:
        masses = self.rng.normal(self.mass_mean, self.mass_std, n)
        # Redraw the (rare) non-positive tail
        bad = masses <= 0.0
        while np.any(bad):
            masses[bad] = self.rng.normal(self.mass_mean, self.mass_std, int(np.count_nonzero(bad)))
            bad = masses <= 0.0
        return masses

    def generate(self) -> List[Body]:
        """Generate star field initial conditions."""
        n_stars = self.n_bodies - 1
        half_w = self.domain.half_width
        half_h = self.domain.half_height

        xs = np.clip(self.rng.normal(0.0, self.domain.width / 8.0, n_stars), -half_w, half_w)
        ys = np.clip(self.rng.normal(0.0, self.domain.height / 8.0, n_stars), -half_h, half_h)
        masses = self._sample_masses(n_stars)
        if self.initial_speed > 0.0:
            velocities = self.rng.uniform(-self.initial_speed, self.initial_speed, (n_stars, 2))
        else:
            velocities = np.zeros((n_stars, 2))

        bodies = [Body(zero2(), zero2(), self.anchor_mass, luminosity=0.0, temperature=0)]
        for i in range(n_stars):
            bodies.append(
                Body(
                    vec2(xs[i], ys[i]),
                    velocities[i],
                    masses[i],
                    luminosity=self.luminosity,
                    temperature=self.temperature,
                )
            )
        logger.debug("Generated %d stars around a %.3g kg anchor", n_stars, self.anchor_mass)
        return bodies
