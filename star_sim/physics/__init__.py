"""Physics engine for 2D N-body simulations."""

from star_sim.physics.body import Body
from star_sim.physics.domain import SimulationDomain, to_display
from star_sim.physics.force import ForceCalculator, gravitational_force, total_acceleration
from star_sim.physics.simulation import Simulation, Snapshot
from star_sim.physics.state import SimulationState, StateDerivative

__all__ = [
    "Body",
    "SimulationDomain",
    "to_display",
    "ForceCalculator",
    "gravitational_force",
    "total_acceleration",
    "Simulation",
    "Snapshot",
    "SimulationState",
    "StateDerivative",
]
