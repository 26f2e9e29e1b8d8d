"""Circle fitting, angle and arc direction utilities."""
import math
from typing import Tuple, Optional

from ..models import Point, CircleFit

DEGENERATE_EPSILON = 1e-10


def circle_from_3(p1: Point, p2: Point, p3: Point) -> Optional[CircleFit]:
    """
    Fit the circumscribed circle through three points.

    Args:
        p1: First point (mm)
        p2: Second point (mm)
        p3: Third point (mm)

    Returns:
        CircleFit with center and radius, or None when the points are
        collinear or coincident
    """
    x1, y1 = p1.x_mm, p1.y_mm
    x2, y2 = p2.x_mm, p2.y_mm
    x3, y3 = p3.x_mm, p3.y_mm

    a = x1 * (y2 - y3) - y1 * (x2 - x3) + x2 * y3 - x3 * y2
    if abs(a) < DEGENERATE_EPSILON:
        return None

    s1 = x1 * x1 + y1 * y1
    s2 = x2 * x2 + y2 * y2
    s3 = x3 * x3 + y3 * y3
    b = s1 * (y3 - y2) + s2 * (y1 - y3) + s3 * (y2 - y1)
    c = s1 * (x2 - x3) + s2 * (x3 - x1) + s3 * (x1 - x2)

    cx = -b / (2 * a)
    cy = -c / (2 * a)
    r = math.hypot(cx - x1, cy - y1)
    return CircleFit(cx=cx, cy=cy, r=r)


def angle(cx: float, cy: float, x: float, y: float) -> float:
    """Angle in radians of (x, y) as seen from center (cx, cy)."""
    return math.atan2(y - cy, x - cx)


def mod2pi(t: float) -> float:
    """Normalize an angle into [0, 2π)."""
    two_pi = 2 * math.pi
    t = math.fmod(t, two_pi)
    if t < 0:
        t += two_pi
    return t


def resolve_arc_direction(
    start: Point,
    mid: Point,
    end: Point,
    center: Tuple[float, float]
) -> Tuple[bool, float]:
    """
    Decide which way a 3-point arc travels around its center.

    The arc is counter-clockwise when the mid point's forward (CCW) angular
    offset from start does not exceed the end point's, i.e. the mid point
    lies on the CCW path from start to end.

    Args:
        start: Arc start point
        mid: Pass-through point
        end: Arc end point
        center: Fitted circle center (cx, cy)

    Returns:
        Tuple of (ccw, sweep) where sweep is the traversed angle in [0, 2π)
    """
    cx, cy = center
    a_s = angle(cx, cy, start.x_mm, start.y_mm)
    a_m = angle(cx, cy, mid.x_mm, mid.y_mm)
    a_e = angle(cx, cy, end.x_mm, end.y_mm)

    sweep_se = mod2pi(a_e - a_s)
    sweep_sm = mod2pi(a_m - a_s)
    ccw = sweep_sm <= sweep_se
    sweep = sweep_se if ccw else mod2pi(a_s - a_e)
    return ccw, sweep


def calculate_arc_direction(ccw: bool) -> str:
    """
    G-code arc word for a direction.

    Returns:
        "G3" for counter-clockwise, "G2" for clockwise
    """
    return "G3" if ccw else "G2"


def calculate_ij_offsets(
    current: Tuple[float, float],
    center: Tuple[float, float]
) -> Tuple[float, float]:
    """
    Calculate I, J offsets for arc commands.

    I and J are the offsets from the current position to the arc center.

    Args:
        current: Current position (x, y)
        center: Arc center (x, y)

    Returns:
        Tuple of (I, J) offsets
    """
    cx, cy = current
    ax, ay = center

    i = ax - cx
    j = ay - cy

    return (i, j)
