"""
Vertex list text codec.

Storage keeps a plot outline as bracket-delimited coordinate pairs::

    [0,0][0,10][10,10][10,0]

Older rows carry decimal coordinates (``[0.0,10.0]``); those are truncated
toward zero on read.
"""

import re
from typing import Iterable, List

from freehold_plots.geometry.shapes import GridPoint, round_half_up

_PAIR = re.compile(r"\[\s*(-?\d+(?:\.\d*)?)\s*,\s*(-?\d+(?:\.\d*)?)\s*\]")


def serialize_vertices(vertices: Iterable[GridPoint]) -> str:
    """Encode vertices as ``[x,z]`` pairs of rounded integers."""
    return "".join(
        f"[{round_half_up(point.x)},{round_half_up(point.z)}]" for point in vertices
    )


def parse_vertices(text: str) -> List[GridPoint]:
    """
    Decode a vertex string back into the ordered vertex list.

    Args:
        text: Encoded vertices, may be empty

    Returns:
        Vertices in stored order

    Raises:
        ValueError: If the text is not a sequence of ``[x,z]`` pairs
    """
    text = (text or "").strip()
    vertices: List[GridPoint] = []
    position = 0
    for match in _PAIR.finditer(text):
        if match.start() != position:
            raise ValueError(f"Malformed vertex string at offset {position}: {text!r}")
        vertices.append(GridPoint(int(float(match.group(1))), int(float(match.group(2)))))
        position = match.end()
    if position != len(text):
        raise ValueError(f"Malformed vertex string at offset {position}: {text!r}")
    return vertices
