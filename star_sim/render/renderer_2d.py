"""2D renderer using matplotlib."""

from typing import Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import Normalize
from matplotlib.figure import Figure

from star_sim.physics.domain import SimulationDomain
from star_sim.physics.simulation import Snapshot
from star_sim.render.base import Renderer

# Temperature range mapped onto the colormap (K)
MIN_TEMPERATURE = 2000.0
MAX_TEMPERATURE = 12000.0


class Renderer2D(Renderer):
    """Draws snapshots in normalized display space.

    Positions go through SimulationDomain.project with the current canvas
    size in pixels; bodies outside [-1, 1] are dropped for that frame.
    """

    def __init__(
        self,
        domain: SimulationDomain,
        figsize: Optional[Tuple[float, float]] = None,
        dpi: int = 100,
        star_size: float = 4.0,
        anchor_size: float = 30.0,
        title: str = "Star Simulation",
    ):
        """Initialize 2D renderer.

        Args:
            domain: Simulation domain used for coordinate mapping
            figsize: Figure size in inches (default: target display size / dpi)
            dpi: Dots per inch
            star_size: Marker size of luminous bodies
            anchor_size: Marker size of non-luminous bodies
            title: Window title
        """
        self.domain = domain
        self.dpi = dpi
        self.figsize = figsize or (
            domain.target_display_width / dpi,
            domain.target_display_height / dpi,
        )
        self.star_size = star_size
        self.anchor_size = anchor_size
        self.title = title

        self.fig: Optional[Figure] = None
        self.ax = None
        self.stars = None
        self.dark = None
        self.initialized = False
        self._norm = Normalize(vmin=MIN_TEMPERATURE, vmax=MAX_TEMPERATURE, clip=True)
        self._cmap = plt.cm.plasma

    def _initialize(self):
        """Create the figure if not already done."""
        if self.initialized:
            return
        self.fig, self.ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self.fig.patch.set_facecolor('black')
        self.ax.set_facecolor('black')
        self.ax.set_xlim(-1.0, 1.0)
        self.ax.set_ylim(-1.0, 1.0)
        self.ax.set_axis_off()
        self.fig.subplots_adjust(left=0, right=1, bottom=0, top=1)
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(self.title)

        empty = np.zeros((0, 2))
        self.stars = self.ax.scatter(empty[:, 0], empty[:, 1], s=self.star_size, marker='o', linewidths=0)
        self.dark = self.ax.scatter(
            empty[:, 0], empty[:, 1], s=self.anchor_size, marker='o',
            facecolors='none', edgecolors='dimgray', linewidths=0.8,
        )

        plt.show(block=False)
        plt.pause(0.1)
        self.initialized = True

    @property
    def display_size(self) -> Tuple[int, int]:
        """Current canvas size in pixels."""
        if self.fig is None:
            return self.domain.target_display_size
        width, height = self.fig.canvas.get_width_height()
        return max(int(width), 1), max(int(height), 1)

    @property
    def is_open(self) -> bool:
        """Check if the figure window is still open."""
        if self.fig is None:
            return not self.initialized
        if not plt.fignum_exists(self.fig.number):
            self.fig = None
            self.ax = None
            return False
        return True

    def frame_data(self, snapshot: Snapshot, display_size: Tuple[int, int]):
        """Split a snapshot into in-frame luminous and dark bodies.

        Returns:
            Tuple of (star_coords, star_colors, dark_coords)
        """
        coords, visible = self.domain.project(snapshot.positions, display_size)
        luminous = snapshot.luminous
        star_mask = visible & luminous
        dark_mask = visible & ~luminous
        star_colors = self._cmap(self._norm(snapshot.temperatures[star_mask].astype(float)))
        return coords[star_mask], star_colors, coords[dark_mask]

    def render(self, snapshot: Snapshot):
        """Render current frame."""
        if self.initialized and not self.is_open:
            return
        self._initialize()

        star_coords, star_colors, dark_coords = self.frame_data(snapshot, self.display_size)
        self.stars.set_offsets(star_coords)
        self.stars.set_facecolors(star_colors)
        self.dark.set_offsets(dark_coords)

        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()

    def close(self):
        """Close the renderer."""
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None
            self.ax = None
        self.initialized = False
