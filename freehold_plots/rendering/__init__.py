"""
Rendering Layer
===============

Bounded Context: Visualization of plot borders (stateless drawing).
"""

from freehold_plots.rendering.visualizer import GridTransform, PlotVisualizer

__all__ = [
    "GridTransform",
    "PlotVisualizer",
]
