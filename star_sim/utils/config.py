"""Configuration management."""

import json
import math
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from star_sim.errors import ConfigurationError
from star_sim.physics.domain import SimulationDomain


@dataclass
class Config:
    """Simulation configuration.

    Defaults describe the procedural star field: lengths in meters, masses
    in kilograms, time in seconds.
    """
    # Simulation parameters
    n_bodies: int = 300
    dt: float = 1e7
    G: float = 6.674e-11
    integrator: str = "euler"
    force_method: str = "vectorized"
    min_separation: float = 0.0

    # Preset parameters
    preset: str = "random"
    mass_mean: float = 8e29
    mass_std: float = 5e28
    anchor_mass: float = 1e31
    initial_speed: float = 0.0

    # Domain and display
    domain_width: float = 1e14
    domain_height: float = 1e14
    target_display_width: int = 1000
    target_display_height: int = 1000

    # Loop rates (Hz)
    step_rate: float = 120.0
    frame_rate: float = 60.0

    # Reproducibility
    seed: Optional[int] = None

    @classmethod
    def for_preset(cls, preset: str, **overrides) -> "Config":
        """Defaults suited to a preset, with optional overrides."""
        if preset == "three_body":
            base = cls(
                n_bodies=3,
                dt=1e-3,
                G=1.0,
                integrator="rk4",
                preset="three_body",
                domain_width=2.0,
                domain_height=2.0,
            )
        else:
            base = cls(preset=preset)
        return replace(base, **overrides)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Apply the given keys on top of the defaults for their preset."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        # PyYAML reads "1e13" as a string, so coerce numeric fields
        coerced = dict(data)
        for f in fields(cls):
            if f.name in coerced and f.type in (int, float) and coerced[f.name] is not None:
                try:
                    coerced[f.name] = f.type(coerced[f.name])
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(f"Invalid value for {f.name}: {coerced[f.name]!r}") from e
        return cls.for_preset(coerced.get("preset") or "random", **coerced)

    def domain(self) -> SimulationDomain:
        return SimulationDomain(
            width=self.domain_width,
            height=self.domain_height,
            target_display_width=self.target_display_width,
            target_display_height=self.target_display_height,
        )

    def validate(self) -> "Config":
        """Check every setting, raising ConfigurationError on the first bad one."""
        from star_sim.physics.integrators import INTEGRATORS
        from star_sim.presets import PRESETS

        if self.n_bodies < 1:
            raise ConfigurationError(f"n_bodies must be at least 1, got {self.n_bodies}")
        if not (math.isfinite(self.dt) and self.dt > 0.0):
            raise ConfigurationError(f"dt must be positive and finite, got {self.dt}")
        if not self.G > 0.0:
            raise ConfigurationError(f"G must be positive, got {self.G}")
        if self.min_separation < 0.0:
            raise ConfigurationError(f"min_separation must be non-negative, got {self.min_separation}")
        if self.integrator.lower() not in INTEGRATORS:
            raise ConfigurationError(f"Unknown integrator '{self.integrator}'. Available: {list(INTEGRATORS)}")
        if self.force_method not in ("vectorized", "direct"):
            raise ConfigurationError(f"Unknown force method '{self.force_method}'")
        if self.preset not in PRESETS:
            raise ConfigurationError(f"Unknown preset '{self.preset}'. Available: {list(PRESETS)}")
        if self.mass_mean <= 0.0 or self.mass_std < 0.0:
            raise ConfigurationError("mass_mean must be positive and mass_std non-negative")
        if self.anchor_mass <= 0.0:
            raise ConfigurationError(f"anchor_mass must be positive, got {self.anchor_mass}")
        if self.initial_speed < 0.0:
            raise ConfigurationError(f"initial_speed must be non-negative, got {self.initial_speed}")
        if self.step_rate <= 0.0 or self.frame_rate <= 0.0:
            raise ConfigurationError("step_rate and frame_rate must be positive")
        # Raises on bad extents or display size
        self.domain()
        return self


def read_config_file(config_path: str) -> dict:
    """Read the raw settings mapping from a .json or .yaml file."""
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        try:
            if config_path.suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping of settings")
    return data


def load_config(config_path: str) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Validated Config object
    """
    return Config.from_dict(read_config_file(config_path)).validate()


def save_config(config: Config, output_path: str):
    """Save configuration to file.

    Args:
        config: Config object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            yaml.safe_dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
