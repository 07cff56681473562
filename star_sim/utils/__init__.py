"""Configuration and reproducibility helpers."""

from star_sim.utils.config import Config, load_config, save_config
from star_sim.utils.reproducibility import make_rng

__all__ = ["Config", "load_config", "save_config", "make_rng"]
