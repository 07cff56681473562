"""CLI main entry point."""

import argparse
import logging
import sys

import numpy as np

from star_sim.concurrency import FixedRateLoop, LatestSnapshot, SteppingLoop
from star_sim.errors import ConfigurationError, NumericalInstabilityError
from star_sim.physics import diagnostics
from star_sim.physics.integrators import INTEGRATORS
from star_sim.physics.simulation import Simulation
from star_sim.presets import PRESETS
from star_sim.utils.config import Config, read_config_file
from star_sim.utils.reproducibility import set_all_seeds

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(module)s - %(message)s'


def build_config(args) -> Config:
    """Merge a config file (if any) with command line overrides."""
    if args.config:
        data = read_config_file(args.config)
        if args.preset:
            data["preset"] = args.preset
        config = Config.from_dict(data)
    else:
        config = Config.for_preset(args.preset or "random")

    overrides = {
        'n_bodies': args.bodies,
        'dt': args.dt,
        'integrator': args.integrator,
        'force_method': args.force_method,
        'seed': args.seed,
        'step_rate': args.step_rate,
        'frame_rate': args.frame_rate,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config.validate()


def print_header():
    print(f"{'Step':<8} {'Time':<12} {'E':<14} {'|P|':<14} {'Lz':<14} {'dE/E0':<10}")
    print("-" * 76)


def print_row(sim: Simulation, E0: float):
    state = sim.state
    masses = sim.masses
    G = sim.force_calculator.G
    eps = sim.force_calculator.min_separation
    E = diagnostics.total_energy(state, masses, G, eps)
    P = float(np.linalg.norm(diagnostics.total_momentum(state, masses)))
    Lz = diagnostics.angular_momentum(state, masses)
    dE = (E - E0) / abs(E0) * 100 if abs(E0) > 0 else 0.0
    print(f"{sim.step_count:<8} {sim.time:<12.4g} {E:<14.6g} {P:<14.6g} {Lz:<14.6g} {dE:<10.4f}%")


def run_headless(sim: Simulation, steps: int, log_every: int):
    """Step the simulation on the calling thread and print diagnostics."""
    E0 = diagnostics.total_energy(sim.state, sim.masses, sim.force_calculator.G, sim.force_calculator.min_separation)
    print_header()
    print_row(sim, E0)
    for _ in range(steps):
        sim.step()
        if sim.step_count % log_every == 0:
            print_row(sim, E0)


def run_rendered(sim: Simulation, config: Config, steps: int):
    """Step and draw in the same tick at the frame rate."""
    from star_sim.render.renderer_2d import Renderer2D

    renderer = Renderer2D(sim.domain)

    def tick():
        sim.step()
        renderer.render(sim.snapshot())
        if not renderer.is_open:
            loop.stop()

    loop = FixedRateLoop(tick, config.frame_rate, name="render-loop", max_iterations=steps or None)
    renderer.render(sim.snapshot())
    try:
        loop.run()
    finally:
        renderer.close()


def run_threaded(sim: Simulation, config: Config, steps: int):
    """Step on a background thread; draw the latest snapshot on this one."""
    from star_sim.render.renderer_2d import Renderer2D

    renderer = Renderer2D(sim.domain)
    cell = LatestSnapshot(sim.snapshot())
    stepper = SteppingLoop(sim, cell, rate_hz=config.step_rate, max_iterations=steps or None)

    def draw():
        if stepper.error is not None:
            raise stepper.error
        snapshot = cell.latest()
        renderer.render(snapshot)
        if not renderer.is_open:
            render_loop.stop()

    render_loop = FixedRateLoop(draw, config.frame_rate, name="render-loop")
    stepper.start()
    try:
        render_loop.run()
    finally:
        stepper.stop()
        renderer.close()


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Star Simulation - 2D N-body gravity")

    # Simulation parameters
    parser.add_argument('--config', type=str, default=None,
                       help='JSON or YAML configuration file')
    parser.add_argument('--preset', type=str, default=None, choices=list(PRESETS),
                       help='Initial conditions (default: random)')
    parser.add_argument('--bodies', type=int, default=None,
                       help='Number of bodies (random preset)')
    parser.add_argument('--steps', type=int, default=1000,
                       help='Number of simulation steps (0 = run until the window closes)')
    parser.add_argument('--dt', type=float, default=None,
                       help='Time step')
    parser.add_argument('--integrator', type=str, default=None, choices=list(INTEGRATORS),
                       help='Numerical integrator')
    parser.add_argument('--force-method', type=str, default=None, choices=['vectorized', 'direct'],
                       help='Pairwise force evaluation method')
    parser.add_argument('--seed', type=int, default=None,
                       help='Random seed for reproducibility')

    # Rendering
    parser.add_argument('--render', action='store_true',
                       help='Open a window and draw the simulation')
    parser.add_argument('--threaded', action='store_true',
                       help='Step on a separate thread at --step-rate (with --render)')
    parser.add_argument('--step-rate', type=float, default=None,
                       help='Steps per second for the stepping thread')
    parser.add_argument('--frame-rate', type=float, default=None,
                       help='Frames per second for rendering')

    # Output
    parser.add_argument('--log-every', type=int, default=100,
                       help='Print diagnostics every N steps (headless)')
    parser.add_argument('--log-level', type=str, default='WARNING',
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Logging verbosity')

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        config = build_config(args)
        rng = set_all_seeds(config.seed) if config.seed is not None else None
        sim = Simulation.from_config(config, rng=rng)
    except (ConfigurationError, OSError) as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Running simulation: {config.preset} with {sim.n_bodies} bodies")
    print(f"Integrator: {sim.integrator.name}, dt: {sim.dt:g}, force: {sim.force_calculator.method}")

    try:
        if not args.render:
            run_headless(sim, args.steps, max(1, args.log_every))
        elif args.threaded:
            run_threaded(sim, config, args.steps)
        else:
            run_rendered(sim, config, args.steps)
    except NumericalInstabilityError as e:
        logger.error("Simulation diverged: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Simulation complete!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
