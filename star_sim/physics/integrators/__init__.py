"""Numerical integrators for N-body simulations."""

from star_sim.errors import ConfigurationError
from star_sim.physics.integrators.base import Integrator
from star_sim.physics.integrators.euler import EulerIntegrator
from star_sim.physics.integrators.verlet import VerletIntegrator
from star_sim.physics.integrators.rk4 import RK4Integrator

INTEGRATORS = {
    "euler": EulerIntegrator,
    "verlet": VerletIntegrator,
    "rk4": RK4Integrator,
}


def get_integrator(name: str) -> Integrator:
    """Create an integrator by name."""
    integrator_class = INTEGRATORS.get(name.lower())
    if integrator_class is None:
        raise ConfigurationError(f"Unknown integrator '{name}'. Available: {list(INTEGRATORS)}")
    return integrator_class()


__all__ = [
    "Integrator",
    "EulerIntegrator",
    "VerletIntegrator",
    "RK4Integrator",
    "INTEGRATORS",
    "get_integrator",
]
