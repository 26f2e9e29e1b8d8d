"""Adaptive point sampling for arcs and circles.

Step sizes are given in active units and converted to mm before sampling.
Both samplers return None for degenerate input instead of raising, so
exporters can skip the entity and carry on.
"""
import math
from typing import Optional, Union

from .models import ArcSample, CircleSample, Point, Units
from .utils.arc_utils import DEGENERATE_EPSILON, angle, circle_from_3, resolve_arc_direction
from .utils.units import to_mm

MIN_ARC_SAMPLES = 6
MIN_CIRCLE_SEGMENTS = 24


def _step_mm(step: float, units: Union[str, Units]) -> float:
    step_mm = to_mm(step, units)
    if step_mm <= 0:
        raise ValueError(f"Sample step must be positive, got {step}")
    return step_mm


def sample_arc3(
    start: Point,
    mid: Point,
    end: Point,
    step: float,
    units: Union[str, Units] = Units.MM
) -> Optional[ArcSample]:
    """
    Sample a 3-point arc into evenly spaced points.

    The point count is max(6, ceil(arc_length / step_mm) + 1). Points run from
    start to end along the direction the mid point selects.

    Args:
        start: Arc start point
        mid: Pass-through point
        end: Arc end point
        step: Target spacing between samples (active units)
        units: Active units of ``step``

    Returns:
        ArcSample, or None when the three points do not define a circle
    """
    fit = circle_from_3(start, mid, end)
    if fit is None:
        return None

    cx, cy, r = fit.cx, fit.cy, fit.r
    ccw, sweep = resolve_arc_direction(start, mid, end, (cx, cy))
    a_s = angle(cx, cy, start.x_mm, start.y_mm)

    arc_length = r * sweep
    n = max(MIN_ARC_SAMPLES, math.ceil(arc_length / _step_mm(step, units)) + 1)

    # resolve_arc_direction already returns the signed-direction sweep
    signed_sweep = sweep if ccw else -sweep
    pts = []
    for i in range(n):
        t = i / (n - 1)
        ang = a_s + t * signed_sweep
        pts.append(Point(cx + r * math.cos(ang), cy + r * math.sin(ang)))

    return ArcSample(ccw=ccw, cx=cx, cy=cy, r=r, pts=pts)


def sample_circle(
    center: Point,
    radius_point: Point,
    step: float,
    units: Union[str, Units] = Units.MM
) -> Optional[CircleSample]:
    """
    Sample a full circle starting at angle 0.

    Emits n + 1 points for n = max(24, ceil(circumference / step_mm)), so the
    last sample lands back on angle 2π.

    Args:
        center: Circle center
        radius_point: Any point on the circle
        step: Target spacing between samples (active units)
        units: Active units of ``step``

    Returns:
        CircleSample, or None when the radius is below 1e-10 mm
    """
    cx, cy = center.x_mm, center.y_mm
    r = circle_radius(center, radius_point)
    if r < DEGENERATE_EPSILON:
        return None

    circumference = 2 * math.pi * r
    n = max(MIN_CIRCLE_SEGMENTS, math.ceil(circumference / _step_mm(step, units)))

    pts = []
    for i in range(n + 1):
        ang = (i / n) * 2 * math.pi
        pts.append(Point(cx + r * math.cos(ang), cy + r * math.sin(ang)))

    return CircleSample(cx=cx, cy=cy, r=r, pts=pts)


def circle_radius(center: Point, radius_point: Point) -> float:
    """Radius of a center/radius-point circle in mm."""
    return math.hypot(radius_point.x_mm - center.x_mm, radius_point.y_mm - center.y_mm)

