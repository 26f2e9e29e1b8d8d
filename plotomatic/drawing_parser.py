"""Load drawing documents into a Drawing.

A drawing document is JSON in the same shape the IR export writes:

    {"features": {"CONTOUR": [{"type": "LINE", "id": 1, "ax": 0, ...}, ...]}}

Coordinates are millimeters. ``id`` is optional; missing ids are assigned
after the largest id present. ``purpose``/``z_strategy`` are ignored.
"""
import json
from typing import Any, Dict, List

from .drawing import Drawing
from .models import (
    Arc3Entity,
    Circle2Entity,
    Feature,
    LineEntity,
    Point,
    PointEntity,
    PolylineEntity,
)


class ParseError(Exception):
    """Custom exception for parsing errors."""
    pass


# Coordinate keys per entity type, in (x, y) pairs
_POINT_KEYS = {
    'POINT': [('x', 'y')],
    'LINE': [('ax', 'ay'), ('bx', 'by')],
    'ARC3': [('sx', 'sy'), ('mx', 'my'), ('ex', 'ey')],
    'CIRCLE2': [('cx', 'cy'), ('rx', 'ry')],
}


def parse_drawing_file(file_path: str) -> Drawing:
    """Read and parse a drawing file."""
    try:
        with open(file_path, 'r') as f:
            content = f.read()
    except FileNotFoundError:
        raise ParseError(f"Drawing file not found: {file_path}")
    except OSError as e:
        raise ParseError(f"Error reading file {file_path}: {str(e)}")

    if not content.strip():
        raise ParseError("Drawing file is empty")

    return parse_drawing(content)


def parse_drawing(content: str) -> Drawing:
    """
    Parse a drawing document from JSON text.

    Args:
        content: JSON document text

    Returns:
        Drawing holding every entity, grouped by feature

    Raises:
        ParseError: listing every problem found in the document
    """
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Drawing file is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})")

    if not isinstance(document, dict) or not isinstance(document.get('features'), dict):
        raise ParseError("Drawing file must be an object with a 'features' mapping")

    errors = []
    pending = []  # (feature, record, location)

    for feature_name, records in document['features'].items():
        try:
            feature = Feature.parse(feature_name)
        except ValueError as e:
            errors.append(str(e))
            continue
        if not isinstance(records, list):
            errors.append(f"Feature '{feature_name}': expected a list of entities")
            continue
        for idx, record in enumerate(records, 1):
            pending.append((feature, record, f"{feature.value} entity {idx}"))

    used_ids = {
        r.get('id') for _, r, _ in pending
        if isinstance(r, dict) and isinstance(r.get('id'), int) and not isinstance(r.get('id'), bool)
    }
    next_id = max(used_ids, default=0) + 1
    seen_ids = set()

    drawing = Drawing()
    for feature, record, location in pending:
        if not isinstance(record, dict):
            errors.append(f"{location}: expected an object, got {type(record).__name__}")
            continue

        entity_id = record.get('id')
        if entity_id is None:
            entity_id = next_id
            next_id += 1
        elif not isinstance(entity_id, int) or isinstance(entity_id, bool):
            errors.append(f"{location}: id must be an integer, got {entity_id!r}")
            continue
        if entity_id in seen_ids:
            errors.append(f"{location}: duplicate id {entity_id}")
            continue
        seen_ids.add(entity_id)

        try:
            drawing.add(feature, _build_entity(record, entity_id))
        except ParseError as e:
            errors.append(f"{location}: {e}")

    if errors:
        error_msg = "Errors found in drawing file:\n" + "\n".join(f"- {error}" for error in errors)
        raise ParseError(error_msg)

    return drawing


def _number(record: Dict[str, Any], key: str) -> float:
    """Extract a numeric field from an entity record."""
    if key not in record:
        raise ParseError(f"missing '{key}'")
    value = record[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _points(record: Dict[str, Any], pairs) -> List[Point]:
    return [Point(_number(record, kx), _number(record, ky)) for kx, ky in pairs]


def _build_entity(record: Dict[str, Any], entity_id: int):
    """Create the entity a record describes."""
    entity_type = str(record.get('type', '')).upper()

    if entity_type == 'POLYLINE':
        raw_pts = record.get('pts')
        if not isinstance(raw_pts, list):
            raise ParseError("POLYLINE needs a 'pts' list")
        pts = []
        for p in raw_pts:
            if not isinstance(p, dict):
                raise ParseError(f"polyline vertex must be an object with 'x' and 'y', got {p!r}")
            pts.append(Point(_number(p, 'x'), _number(p, 'y')))
        closed = record.get('closed', False)
        if not isinstance(closed, bool):
            raise ParseError(f"'closed' must be true or false, got {closed!r}")
        return PolylineEntity(pts=pts, closed=closed, id=entity_id)

    if entity_type not in _POINT_KEYS:
        raise ParseError(
            f"unknown type '{record.get('type')}'. Expected: POINT, LINE, POLYLINE, ARC3 or CIRCLE2"
        )

    pts = _points(record, _POINT_KEYS[entity_type])
    if entity_type == 'POINT':
        return PointEntity(p=pts[0], id=entity_id)
    if entity_type == 'LINE':
        return LineEntity(A=pts[0], B=pts[1], id=entity_id)
    if entity_type == 'ARC3':
        return Arc3Entity(S=pts[0], M=pts[1], E=pts[2], id=entity_id)
    return Circle2Entity(C=pts[0], RP=pts[1], id=entity_id)
