"""Rendering of simulation snapshots."""

from star_sim.render.base import Renderer
from star_sim.render.renderer_2d import Renderer2D

__all__ = ["Renderer", "Renderer2D"]
