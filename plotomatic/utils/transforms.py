"""Coordinate transforms between screen, world and work-zero frames.

Coordinate Systems:
    - World: drawing coordinates in mm, Y-up
    - Screen: canvas pixels, Y-down (row 0 is the top edge)
    - Rec: work-relative frame used for storage; equals world minus work
      zero for the HAAS flavor, world itself otherwise
"""
import math
from typing import Tuple

from ..models import DrawingConfig, Point
from .units import to_mm, to_units


def _check_canvas(canvas_width: float, canvas_height: float) -> None:
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(
            f"Canvas size must be positive, got {canvas_width}x{canvas_height}"
        )


def view_height_units(
    config: DrawingConfig,
    canvas_width: float,
    canvas_height: float
) -> float:
    """View height in active units, derived from view width and canvas aspect."""
    _check_canvas(canvas_width, canvas_height)
    return config.view_width * (canvas_height / canvas_width)


def _view_window(
    config: DrawingConfig,
    canvas_width: float,
    canvas_height: float
) -> Tuple[float, float, float, float]:
    """Return (xmin, ymin, width, height) of the visible window in mm."""
    vw_mm = to_mm(config.view_width, config.units)
    vh_mm = to_mm(view_height_units(config, canvas_width, canvas_height), config.units)
    xmin = config.center_world.x_mm - vw_mm / 2
    ymin = config.center_world.y_mm - vh_mm / 2
    return xmin, ymin, vw_mm, vh_mm


def world_to_screen(
    x_mm: float,
    y_mm: float,
    config: DrawingConfig,
    canvas_width: float,
    canvas_height: float
) -> Tuple[float, float]:
    """
    Map world mm coordinates to canvas pixels.

    Args:
        x_mm: World X (mm)
        y_mm: World Y (mm)
        config: View configuration (units, view width, center)
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels

    Returns:
        (sx, sy) pixel position, Y flipped so row 0 is the top edge
    """
    xmin, ymin, vw_mm, vh_mm = _view_window(config, canvas_width, canvas_height)
    sx = ((x_mm - xmin) / vw_mm) * canvas_width
    sy = canvas_height - ((y_mm - ymin) / vh_mm) * canvas_height
    return sx, sy


def screen_to_world(
    sx: float,
    sy: float,
    config: DrawingConfig,
    canvas_width: float,
    canvas_height: float
) -> Tuple[float, float]:
    """Inverse of world_to_screen: pixel position to world mm."""
    xmin, ymin, vw_mm, vh_mm = _view_window(config, canvas_width, canvas_height)
    x_mm = xmin + (sx / canvas_width) * vw_mm
    y_mm = ymin + ((canvas_height - sy) / canvas_height) * vh_mm
    return x_mm, y_mm


def world_to_rec(world: Point, config: DrawingConfig) -> Point:
    """Express a world point in the work frame selected by the coord flavor."""
    if config.coord_flavor.uses_work_zero:
        zero = config.work_zero_world
        return Point(world.x_mm - zero.x_mm, world.y_mm - zero.y_mm)
    return Point(world.x_mm, world.y_mm)


def rec_to_world(rec: Point, config: DrawingConfig) -> Point:
    """Inverse of world_to_rec."""
    if config.coord_flavor.uses_work_zero:
        zero = config.work_zero_world
        return Point(rec.x_mm + zero.x_mm, rec.y_mm + zero.y_mm)
    return Point(rec.x_mm, rec.y_mm)


def round_to_step(value: float, step: float) -> float:
    """Round a value to the nearest multiple of step, halves rounding up."""
    if step <= 0:
        raise ValueError(f"Grid step must be positive, got {step}")
    return _round_half_up(value / step) * step


def _round_half_up(value: float) -> float:
    # .5 goes towards +infinity, not to even
    return math.floor(value + 0.5)


def snap_rec(rec: Point, config: DrawingConfig, snap_enabled: bool = True) -> Point:
    """
    Snap a work-frame point to the grid, one axis at a time.

    Rounding happens in active units using config.grid_step, then the result
    is converted back to mm.

    Args:
        rec: Point in the work frame (mm)
        config: Configuration providing units and grid step
        snap_enabled: When False the point is returned unchanged

    Returns:
        Snapped point (mm)
    """
    if not snap_enabled:
        return rec
    x_u = round_to_step(to_units(rec.x_mm, config.units), config.grid_step)
    y_u = round_to_step(to_units(rec.y_mm, config.units), config.grid_step)
    return Point(to_mm(x_u, config.units), to_mm(y_u, config.units))
