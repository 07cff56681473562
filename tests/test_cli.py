"""Tests for the command line entry point."""

import json

import numpy as np
import pytest
from star_sim.cli.main import main, run_threaded
from star_sim.errors import NumericalInstabilityError
from star_sim.physics.body import Body
from star_sim.physics.domain import SimulationDomain
from star_sim.physics.integrators.base import Integrator
from star_sim.physics.simulation import Simulation
from star_sim.physics.state import SimulationState
from star_sim.render import renderer_2d
from star_sim.utils.config import Config


def test_headless_three_body(capsys):
    code = main(["--preset", "three_body", "--steps", "20", "--log-every", "10"])
    out = capsys.readouterr().out

    assert code == 0
    assert "three_body with 3 bodies" in out
    assert "Integrator: rk4" in out
    assert "Simulation complete!" in out


def test_headless_random_cluster(capsys):
    code = main([
        "--bodies", "15", "--steps", "5", "--seed", "1",
        "--integrator", "verlet", "--force-method", "direct",
    ])
    out = capsys.readouterr().out

    assert code == 0
    assert "random with 15 bodies" in out
    assert "force: direct" in out


def test_config_file(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"n_bodies": 8, "seed": 2, "integrator": "euler"}))

    code = main(["--config", str(path), "--steps", "3"])
    out = capsys.readouterr().out

    assert code == 0
    assert "random with 8 bodies" in out


def test_bad_config_returns_error(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"dt": -1.0}))

    assert main(["--config", str(path), "--steps", "1"]) == 1
    assert "Error" in capsys.readouterr().err


def test_missing_config_returns_error(tmp_path):
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_preset_flag_over_config_file(tmp_path, capsys):
    """--preset switches the defaults under a file's own keys."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"seed": 2}))

    code = main(["--config", str(path), "--preset", "three_body", "--steps", "3"])
    out = capsys.readouterr().out

    assert code == 0
    assert "three_body with 3 bodies" in out


class _StubRenderer:
    def __init__(self, domain, **kwargs):
        self.frames = 0

    @property
    def is_open(self):
        return True

    def render(self, snapshot):
        self.frames += 1

    def close(self):
        pass


class _ExplodingIntegrator(Integrator):
    name = "exploding"
    order = 1

    def step(self, state, masses, dt, force_calculator):
        return SimulationState(np.full_like(state.positions, np.nan), state.velocities)


def test_threaded_run_reports_failed_step(monkeypatch):
    """A step failing on the stepping thread surfaces on the drawing thread."""
    monkeypatch.setattr(renderer_2d, "Renderer2D", _StubRenderer)
    bodies = [Body.at(-1.0, 0.0, 1.0), Body.at(1.0, 0.0, 1.0)]
    sim = Simulation(bodies, SimulationDomain(4.0, 4.0), 0.01, integrator=_ExplodingIntegrator())
    config = Config(step_rate=200.0, frame_rate=200.0)

    with pytest.raises(NumericalInstabilityError):
        run_threaded(sim, config, steps=10)
    assert sim.step_count == 0
