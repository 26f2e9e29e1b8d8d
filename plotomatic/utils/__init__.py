"""Shared utility modules for geometry and export."""

from .units import to_mm, to_units
from .arc_utils import (
    circle_from_3,
    angle,
    mod2pi,
    resolve_arc_direction,
    calculate_arc_direction,
    calculate_ij_offsets
)
from .transforms import (
    view_height_units,
    world_to_screen,
    screen_to_world,
    world_to_rec,
    rec_to_world,
    round_to_step,
    snap_rec
)
from .gcode_format import (
    format_coordinate,
    round_coordinate,
    generate_header,
    generate_footer,
    generate_comment,
    generate_rapid_move,
    generate_linear_move,
    generate_arc_move
)

__all__ = [
    # units
    'to_mm',
    'to_units',
    # arc_utils
    'circle_from_3',
    'angle',
    'mod2pi',
    'resolve_arc_direction',
    'calculate_arc_direction',
    'calculate_ij_offsets',
    # transforms
    'view_height_units',
    'world_to_screen',
    'screen_to_world',
    'world_to_rec',
    'rec_to_world',
    'round_to_step',
    'snap_rec',
    # gcode_format
    'format_coordinate',
    'round_coordinate',
    'generate_header',
    'generate_footer',
    'generate_comment',
    'generate_rapid_move',
    'generate_linear_move',
    'generate_arc_move',
]
