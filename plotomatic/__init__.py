"""Geometry and export engine for 2D drawings."""

from .models import (
    Point,
    PointEntity,
    LineEntity,
    PolylineEntity,
    Arc3Entity,
    Circle2Entity,
    Feature,
    Units,
    CoordFlavor,
    DrawingConfig,
    TaggedPoint,
    FEATURE_HINTS,
    EXPORTABLE_FEATURES,
)
from .sampling import (
    sample_arc3,
    sample_circle,
    circle_radius
)
from .polygon_generator import calculate_regular_vertices
from .drawing import Drawing, validate_drawing
from .exporter import DrawingExporter
from .drawing_parser import parse_drawing, parse_drawing_file, ParseError

__all__ = [
    # Models
    'Point',
    'PointEntity',
    'LineEntity',
    'PolylineEntity',
    'Arc3Entity',
    'Circle2Entity',
    'Feature',
    'Units',
    'CoordFlavor',
    'DrawingConfig',
    'TaggedPoint',
    'FEATURE_HINTS',
    'EXPORTABLE_FEATURES',
    # Sampling
    'sample_arc3',
    'sample_circle',
    'circle_radius',
    # Polygons
    'calculate_regular_vertices',
    # Drawing store
    'Drawing',
    'validate_drawing',
    # Export
    'DrawingExporter',
    # Loading
    'parse_drawing',
    'parse_drawing_file',
    'ParseError',
]
