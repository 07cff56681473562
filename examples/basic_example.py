"""Basic example of using the star simulator."""

from star_sim import Config, Simulation
from star_sim.physics import diagnostics


def main():
    """Run the figure-eight three-body orbit for one period."""
    config = Config.for_preset("three_body", dt=1e-3)
    sim = Simulation.from_config(config)

    def energy():
        return diagnostics.total_energy(sim.state, sim.masses, G=config.G)

    print("Running simulation...")
    initial = energy()
    print(f"Initial energy: {initial:.9f}")

    # One period of the figure eight is about 6.3259 time units
    for step in range(6326):
        sim.step()
        if step % 1000 == 0:
            print(f"Step {step}: Time={sim.time:.2f}, Energy={energy():.9f}")

    print(f"Final energy: {energy():.9f} (drift {abs(energy() - initial):.2e})")
    for body in sim.bodies():
        print(f"Body {body.id}: x=({body.position[0]:+.5f}, {body.position[1]:+.5f})")
    print("Simulation complete!")


if __name__ == "__main__":
    main()
