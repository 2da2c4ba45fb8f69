"""Visualization tools for the offroad simulation."""

from offroadsim.visualization.renderer import PygameRenderer, RenderConfig
from offroadsim.visualization.plotter import TelemetryPlotter

__all__ = [
    "PygameRenderer",
    "RenderConfig",
    "TelemetryPlotter",
]
