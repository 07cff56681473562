"""Base renderer interface."""

from abc import ABC, abstractmethod

from star_sim.physics.simulation import Snapshot


class Renderer(ABC):
    """Abstract base class for renderers.

    A renderer only reads snapshots; it never touches simulation state.
    """

    @abstractmethod
    def render(self, snapshot: Snapshot):
        """Render one frame.

        Args:
            snapshot: State to draw
        """
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the output window is still open."""
        pass

    @abstractmethod
    def close(self):
        """Close the renderer."""
        pass
