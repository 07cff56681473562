"""Preset scenario generators."""

from typing import Optional

import numpy as np

from star_sim.errors import ConfigurationError
from star_sim.presets.base import Preset
from star_sim.presets.random_cluster import RandomCluster
from star_sim.presets.three_body import FigureEightThreeBody

PRESETS = {
    "three_body": FigureEightThreeBody,
    "random": RandomCluster,
}


def get_preset(name: str, config, domain=None, rng: Optional[np.random.Generator] = None) -> Preset:
    """Build a preset from a Config.

    Args:
        name: Preset name ('three_body' or 'random')
        config: Config supplying body count and generator parameters
        domain: Domain for the procedural preset (default: config.domain())
        rng: Optional generator; otherwise config.seed is used
    """
    if name not in PRESETS:
        raise ConfigurationError(f"Unknown preset: {name}. Available: {list(PRESETS)}")
    if name == "three_body":
        return FigureEightThreeBody(n_bodies=config.n_bodies, seed=config.seed, rng=rng)
    return RandomCluster(
        domain if domain is not None else config.domain(),
        n_bodies=config.n_bodies,
        seed=config.seed,
        rng=rng,
        mass_mean=config.mass_mean,
        mass_std=config.mass_std,
        anchor_mass=config.anchor_mass,
        initial_speed=config.initial_speed,
    )


__all__ = ["Preset", "RandomCluster", "FigureEightThreeBody", "PRESETS", "get_preset"]
