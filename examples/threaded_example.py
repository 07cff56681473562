"""Step a star field on a background thread and draw it on the main thread."""

import logging

from star_sim import Config, Simulation
from star_sim.concurrency import FixedRateLoop, LatestSnapshot, SteppingLoop
from star_sim.render.renderer_2d import Renderer2D


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

    config = Config(n_bodies=300, seed=42)
    sim = Simulation.from_config(config)

    cell = LatestSnapshot(sim.snapshot())
    stepper = SteppingLoop(sim, cell, rate_hz=config.step_rate)
    renderer = Renderer2D(sim.domain, title="Star field")

    def draw():
        renderer.render(cell.latest())
        if not renderer.is_open:
            frames.stop()

    frames = FixedRateLoop(draw, config.frame_rate, name="render-loop")

    print("Close the window to stop.")
    stepper.start()
    try:
        frames.run()
    finally:
        stepper.stop()
        stepper.join(timeout=1.0)
        renderer.close()
    print(f"Stopped after {cell.latest().step_count} steps ({stepper.overruns} late steps)")


if __name__ == "__main__":
    main()
