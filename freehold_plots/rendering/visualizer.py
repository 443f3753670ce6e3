"""
Plot Visualizer Module
======================

Pure visualization layer for plot outlines.

Design:
- Stateless rendering (pure functions over a numpy canvas)
- No business logic: consumes Polygon.border_raster_lines and vertices
- Configurable styles
- Uses supervision drawing utilities

Dependencies:
- supervision (draw utilities, Color, Point)
- numpy (canvas arrays)
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import supervision as sv

from freehold_plots.geometry.polygon import BoundingBox, Polygon
from freehold_plots.geometry.shapes import GridPoint


@dataclass(frozen=True)
class GridTransform:
    """Maps block coordinates to canvas pixels."""

    origin_x: int
    origin_z: int
    scale: int
    margin: int

    def to_pixel(self, point: GridPoint) -> sv.Point:
        return sv.Point(
            x=int((point.x - self.origin_x) * self.scale + self.margin),
            y=int((point.z - self.origin_z) * self.scale + self.margin),
        )


class PlotVisualizer:
    """
    Stateless visualizer for plot borders.

    Usage:
        visualizer = PlotVisualizer(scale=8)
        frame = visualizer.render([town, market])
        cv2.imwrite("plots.png", frame)
    """

    def __init__(
        self,
        scale: int = 8,
        margin: int = 16,
        border_color: sv.Color = sv.Color(r=255, g=200, b=0),
        vertex_color: sv.Color = sv.Color(r=255, g=255, b=255),
        fill_color: sv.Color = sv.Color(r=0, g=160, b=0),
        text_color: sv.Color = sv.Color(r=255, g=255, b=255),
        background: int = 0,
        thickness: int = 1,
        text_scale: float = 0.4,
        opacity: float = 0.2,
    ):
        """
        Args:
            scale: Pixels per block
            margin: Pixels of padding around the union bounding box
            border_color: Color for border raster edges
            vertex_color: Color for vertex markers
            fill_color: Color for translucent plot fill
            text_color: Color for plot labels
            background: Gray level of the blank canvas
            thickness: Line thickness
            text_scale: Scale factor for labels
            opacity: Fill opacity (0-1)
        """
        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")
        self.scale = scale
        self.margin = margin
        self.border_color = border_color
        self.vertex_color = vertex_color
        self.fill_color = fill_color
        self.text_color = text_color
        self.background = background
        self.thickness = thickness
        self.text_scale = text_scale
        self.opacity = opacity

    def canvas_for(self, polygons: Sequence[Polygon]) -> Tuple[np.ndarray, GridTransform]:
        """Blank BGR canvas covering every drawable polygon, plus its transform."""
        points: List[GridPoint] = [v for p in polygons for v in p.vertices]
        box = BoundingBox.around(points) or BoundingBox(0, 0, 0, 0)
        width = (box.max_x - box.min_x + 1) * self.scale + 2 * self.margin
        height = (box.max_z - box.min_z + 1) * self.scale + 2 * self.margin
        frame = np.full((height, width, 3), self.background, dtype=np.uint8)
        transform = GridTransform(box.min_x, box.min_z, self.scale, self.margin)
        return frame, transform

    def draw_plot(
        self,
        frame: np.ndarray,
        polygon: Polygon,
        transform: GridTransform,
        label: Optional[str] = None,
    ) -> np.ndarray:
        """
        Draw one plot: translucent fill, border raster, vertex markers, label.

        Args:
            frame: Canvas to draw on
            polygon: Plot to draw
            transform: Block-to-pixel mapping from canvas_for()
            label: Text to show at the centroid (default: display name)

        Returns:
            Frame with the plot drawn
        """
        if not polygon.vertices:
            return frame

        if len(polygon.vertices) >= 3:
            pixels = np.array(
                [[p.x, p.y] for p in (transform.to_pixel(v) for v in polygon.vertices)],
                dtype=np.int32,
            )
            frame = sv.draw_filled_polygon(
                scene=frame,
                polygon=pixels,
                color=self.fill_color,
                opacity=self.opacity,
            )

        for edge in polygon.border_raster_lines:
            frame = sv.draw_line(
                scene=frame,
                start=transform.to_pixel(edge.p1),
                end=transform.to_pixel(edge.p2),
                color=self.border_color,
                thickness=self.thickness,
            )

        # Vertex markers sit at the block centre.
        for vertex in polygon.vertices:
            centre = transform.to_pixel(GridPoint(vertex.x + 0.5, vertex.z + 0.5))
            half = max(1, self.scale // 4)
            frame = sv.draw_rectangle(
                scene=frame,
                rect=sv.Rect(x=centre.x - half, y=centre.y - half, width=2 * half, height=2 * half),
                color=self.vertex_color,
                thickness=self.thickness,
            )

        centroid = polygon.centroid
        if centroid is not None:
            frame = sv.draw_text(
                scene=frame,
                text=label if label is not None else polygon.display_name,
                text_anchor=transform.to_pixel(centroid),
                text_color=self.text_color,
                text_scale=self.text_scale,
                text_thickness=1,
                text_padding=2,
                background_color=sv.Color(r=0, g=0, b=0),
            )
        return frame

    def render(self, polygons: Iterable[Polygon]) -> np.ndarray:
        """Draw every non-wilderness polygon onto a fresh canvas, outer plots first."""
        drawable = sorted(
            (p for p in polygons if not p.is_wilderness), key=lambda p: (p.depth, p.id)
        )
        frame, transform = self.canvas_for(drawable)
        for polygon in drawable:
            frame = self.draw_plot(frame, polygon, transform)
        return frame
