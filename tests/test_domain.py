"""Tests for the simulation domain and display mapping."""

import numpy as np
import pytest
from star_sim.errors import ConfigurationError
from star_sim.physics.domain import SimulationDomain, to_display


@pytest.fixture
def domain():
    return SimulationDomain(width=1e14, height=1e14, target_display_width=1000, target_display_height=1000)


def test_center_maps_to_origin(domain):
    assert to_display((0.0, 0.0), (1000, 1000), domain) == (0.0, 0.0)


def test_just_outside_half_width_is_out_of_frame(domain):
    assert to_display((domain.half_width + 1.0, 0.0), (1000, 1000), domain) is None
    assert to_display((0.0, -(domain.half_height + 1.0)), (1000, 1000), domain) is None


def test_edge_is_in_frame(domain):
    coords = to_display((domain.half_width, -domain.half_height), (1000, 1000), domain)
    assert coords is not None
    assert np.allclose(coords, (1.0, -1.0))


def test_aspect_correction():
    """A wider window shrinks x so the domain keeps its aspect ratio."""
    domain = SimulationDomain(width=100.0, height=100.0, target_display_width=500, target_display_height=500)
    coords = domain.to_display((25.0, 25.0), (1000, 500))
    assert np.allclose(coords, (0.25, 0.5))

    # Smaller window than the target: the same point falls outside
    assert domain.to_display((40.0, 0.0), (250, 500)) is None


def test_project_masks_out_of_frame():
    domain = SimulationDomain(width=10.0, height=10.0, target_display_width=100, target_display_height=100)
    positions = np.array([[0.0, 0.0], [4.0, -4.0], [6.0, 0.0], [0.0, -5.5]])
    coords, visible = domain.project(positions, (100, 100))
    assert np.array_equal(visible, [True, True, False, False])
    assert np.allclose(coords[1], [0.8, -0.8])


def test_invalid_domain():
    with pytest.raises(ConfigurationError):
        SimulationDomain(width=0.0, height=1.0)
    with pytest.raises(ConfigurationError):
        SimulationDomain(width=1.0, height=1.0, target_display_width=0)


def test_domain_is_frozen(domain):
    with pytest.raises(AttributeError):
        domain.width = 5.0
