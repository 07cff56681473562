"""
Star Simulation - a 2D N-body gravity engine with a pluggable renderer.

Features:
- Exact pairwise Newtonian gravity
- Multiple integrators (Euler-average, Verlet, RK4)
- Double-buffered simulation state with immutable snapshots
- Fixed-rate stepping thread decoupled from rendering
- Preset scenarios (figure-eight three-body, procedural star field)
- matplotlib renderer and CLI
"""

__version__ = "0.1.0"

from star_sim.physics.simulation import Simulation, Snapshot
from star_sim.physics.domain import SimulationDomain
from star_sim.physics.body import Body
from star_sim.utils.config import Config

__all__ = [
    "Simulation",
    "Snapshot",
    "SimulationDomain",
    "Body",
    "Config",
]
