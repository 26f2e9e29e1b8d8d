"""Regular polygon vertex calculation utilities.

Generates evenly spaced vertices on a circle for constructing regular
shapes. Independent of any drawn entity.
"""
import math
from typing import List

from .models import Point


def calculate_regular_vertices(
    center_x: float,
    center_y: float,
    radius: float,
    n: int,
    start_deg: float = 0
) -> List[Point]:
    """
    Calculate the vertices of a regular n-gon.

    Vertex order starts at the offset angle and goes counter-clockwise.

    Args:
        center_x: X coordinate of the polygon center (mm)
        center_y: Y coordinate of the polygon center (mm)
        radius: Circumradius, center to vertex (mm)
        n: Number of vertices
        start_deg: Angle of the first vertex in degrees (0 = +X axis)

    Returns:
        List of n vertices
    """
    if n < 3:
        raise ValueError(f"A regular polygon needs at least 3 vertices, got {n}")

    a0 = math.radians(start_deg or 0)
    vertices = []
    for i in range(n):
        a = a0 + i * (2 * math.pi / n)
        vertices.append(Point(center_x + radius * math.cos(a), center_y + radius * math.sin(a)))

    return vertices
