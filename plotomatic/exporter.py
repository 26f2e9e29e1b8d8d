"""Export engine for drawn entities.

This module walks the entities of one or more features and produces:
- Flattened, source-tagged point sequences
- Waypoint CSV and multi-feature points CSV
- Segment (motion) CSV
- G-code
- A JSON intermediate representation (IR) in raw millimeters
- Teaching pseudocode

Entities that cannot be exported (degenerate arcs, zero-radius circles,
polylines with fewer than 2 points, unknown types) are skipped without
raising so one bad entity never blanks a whole export.
"""
import json
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .models import (
    Arc3Entity,
    Circle2Entity,
    DrawingConfig,
    Entity,
    Feature,
    LineEntity,
    Point,
    PointEntity,
    PolylineEntity,
    TaggedPoint,
)
from .sampling import circle_radius, sample_arc3, sample_circle
from .utils.arc_utils import (
    DEGENERATE_EPSILON,
    calculate_arc_direction,
    calculate_ij_offsets,
    circle_from_3,
    resolve_arc_direction,
)
from .utils.gcode_format import (
    format_coordinate,
    generate_comment,
    generate_footer,
    generate_header,
    generate_linear_move,
    generate_rapid_move,
    generate_arc_move,
    round_coordinate,
)
from .utils.units import to_units

WAYPOINTS_HEADER = "N,X,Y,UNITS,SRC"
SEGMENTS_HEADER = "N,ACTION,X,Y,I,J,UNITS,SRC"
POINTS_HEADER = "FEATURE,N,X,Y,UNITS,SRC"
PSEUDO_TITLE = "# Teaching Pseudocode export"

IR_PRECISION = 4

FeatureLike = Union[str, Feature]
EntitySource = Callable[[Feature], Sequence[Entity]]


def _is_exportable(entity: Entity) -> bool:
    """False for entities whose geometry cannot produce motion."""
    if isinstance(entity, PolylineEntity):
        return len(entity.pts) >= 2
    if isinstance(entity, Arc3Entity):
        return circle_from_3(entity.S, entity.M, entity.E) is not None
    if isinstance(entity, Circle2Entity):
        return circle_radius(entity.C, entity.RP) >= DEGENERATE_EPSILON
    return isinstance(entity, (PointEntity, LineEntity))


def _ir_fragment(value) -> str:
    """Compact JSON for an IR record, floats fixed at IR_PRECISION decimals."""
    if isinstance(value, dict):
        return "{" + ",".join(f"{json.dumps(k)}:{_ir_fragment(v)}" for k, v in value.items()) + "}"
    if isinstance(value, list):
        return "[" + ",".join(_ir_fragment(v) for v in value) + "]"
    if isinstance(value, float):
        return format_coordinate(value, IR_PRECISION)
    return json.dumps(value)


class DrawingExporter:
    """Produces every export encoding for a drawing."""

    def __init__(self, config: DrawingConfig, entity_source):
        """
        Initialize the exporter.

        Args:
            config: Units/view configuration
            entity_source: Object with ``entities_for_feature(feature)`` (such
                as a Drawing) or a callable taking a Feature
        """
        self.config = config
        if hasattr(entity_source, 'entities_for_feature'):
            self._get_entities: EntitySource = entity_source.entities_for_feature
        else:
            self._get_entities = entity_source

    @property
    def units_name(self) -> str:
        return self.config.units.value

    def _entities(self, feature: Feature) -> List[Entity]:
        return list(self._get_entities(feature))

    def _fmt(self, value_mm: float) -> str:
        """Convert mm to active units and format at the unit's precision."""
        return format_coordinate(to_units(value_mm, self.config.units), self.config.decimals)

    def _xy(self, p: Point, sep: str = ",") -> str:
        return f"{self._fmt(p.x_mm)}{sep}{self._fmt(p.y_mm)}"

    def _units_xy(self, p: Point):
        return to_units(p.x_mm, self.config.units), to_units(p.y_mm, self.config.units)

    def _step(self, sample_step: Optional[float]) -> float:
        return self.config.grid_step if sample_step is None else sample_step

    # ------------------------------------------------------------------
    # Point flattening
    # ------------------------------------------------------------------

    def flatten_feature_points(
        self,
        feature: FeatureLike,
        sample_step: Optional[float] = None
    ) -> List[TaggedPoint]:
        """
        Flatten a feature's entities into source-tagged points.

        Args:
            feature: Feature to flatten
            sample_step: Arc/circle sample spacing in active units
                (defaults to the grid step)

        Returns:
            Points in storage order, each tagged ``TYPE#id[:index]``
        """
        feature = Feature.parse(feature)
        step = self._step(sample_step)
        units = self.config.units
        out = []

        for e in self._entities(feature):
            if isinstance(e, PointEntity):
                out.append(TaggedPoint(e.p.x_mm, e.p.y_mm, f"POINT#{e.id}", editable=True, entity_id=e.id))
            elif isinstance(e, LineEntity):
                out.append(TaggedPoint(e.A.x_mm, e.A.y_mm, f"LINE#{e.id}:A"))
                out.append(TaggedPoint(e.B.x_mm, e.B.y_mm, f"LINE#{e.id}:B"))
            elif isinstance(e, PolylineEntity):
                for idx, p in enumerate(e.pts, 1):
                    out.append(TaggedPoint(p.x_mm, p.y_mm, f"POLY#{e.id}:{idx}"))
                if e.closed and len(e.pts) > 1:
                    p0 = e.pts[0]
                    out.append(TaggedPoint(p0.x_mm, p0.y_mm, f"POLY#{e.id}:CLOSE"))
            elif isinstance(e, Arc3Entity):
                res = sample_arc3(e.S, e.M, e.E, step, units)
                if res:
                    for idx, p in enumerate(res.pts, 1):
                        out.append(TaggedPoint(p.x_mm, p.y_mm, f"ARC#{e.id}:{idx}"))
            elif isinstance(e, Circle2Entity):
                res = sample_circle(e.C, e.RP, step, units)
                if res:
                    for idx, p in enumerate(res.pts, 1):
                        out.append(TaggedPoint(p.x_mm, p.y_mm, f"CIRC#{e.id}:{idx}"))

        return out

    # ------------------------------------------------------------------
    # CSV exports
    # ------------------------------------------------------------------

    def export_waypoints_csv(self, feature: FeatureLike, sample_step: Optional[float] = None) -> str:
        """One row per flattened point: ``N,X,Y,UNITS,SRC``."""
        lines = [WAYPOINTS_HEADER]
        for n, p in enumerate(self.flatten_feature_points(feature, sample_step), 1):
            lines.append(f"{n},{self._fmt(p.x_mm)},{self._fmt(p.y_mm)},{self.units_name},{p.src}")
        return "\n".join(lines)

    def export_points_csv(
        self,
        features: Iterable[FeatureLike],
        sample_step: Optional[float] = None
    ) -> str:
        """Flattened points of several features; N restarts per feature."""
        lines = [POINTS_HEADER]
        for feature in features:
            feature = Feature.parse(feature)
            for n, p in enumerate(self.flatten_feature_points(feature, sample_step), 1):
                lines.append(
                    f"{feature.value},{n},{self._fmt(p.x_mm)},{self._fmt(p.y_mm)},{self.units_name},{p.src}"
                )
        return "\n".join(lines)

    def export_points_for_features(
        self,
        features: Iterable[FeatureLike],
        sample_step: Optional[float] = None
    ) -> str:
        return self.export_points_csv(features, sample_step)

    def _segment_row(self, n: int, action: str, x: str, y: str, i: str, j: str, src: str) -> str:
        return f"{n},{action},{x},{y},{i},{j},{self.units_name},{src}"

    def _segment_rows(self, feature: Feature, e: Entity) -> List[tuple]:
        """(action, x, y, i, j, src) tuples for one entity."""
        if feature is Feature.DRILL:
            # Only points are hole centers; everything else is reference here
            if isinstance(e, PointEntity):
                return [("DRILL_POINT", self._fmt(e.p.x_mm), self._fmt(e.p.y_mm), "", "", f"POINT#{e.id}")]
            return []

        if isinstance(e, PointEntity):
            return [("POINT", self._fmt(e.p.x_mm), self._fmt(e.p.y_mm), "", "", f"POINT#{e.id}")]

        if isinstance(e, LineEntity):
            src = f"LINE#{e.id}:A({self._xy(e.A)})"
            return [("FEED_TO", self._fmt(e.B.x_mm), self._fmt(e.B.y_mm), "", "", src)]

        if isinstance(e, PolylineEntity):
            rows = []
            for idx in range(1, len(e.pts)):
                p = e.pts[idx]
                rows.append(("FEED_TO", self._fmt(p.x_mm), self._fmt(p.y_mm), "", "", f"POLY#{e.id}:{idx + 1}"))
            if e.closed:
                p0 = e.pts[0]
                rows.append(("FEED_TO", self._fmt(p0.x_mm), self._fmt(p0.y_mm), "", "", f"POLY#{e.id}:CLOSE"))
            return rows

        if isinstance(e, Arc3Entity):
            fit = circle_from_3(e.S, e.M, e.E)
            ccw, _ = resolve_arc_direction(e.S, e.M, e.E, (fit.cx, fit.cy))
            i, j = calculate_ij_offsets((e.S.x_mm, e.S.y_mm), (fit.cx, fit.cy))
            action = "ARC_CCW_TO" if ccw else "ARC_CW_TO"
            return [(action, self._fmt(e.E.x_mm), self._fmt(e.E.y_mm), self._fmt(i), self._fmt(j), f"ARC3#{e.id}")]

        if isinstance(e, Circle2Entity):
            r = circle_radius(e.C, e.RP)
            return [("CIRCLE_CENTER_R", self._fmt(e.C.x_mm), self._fmt(e.C.y_mm), self._fmt(r), "", f"CIRCLE2#{e.id}")]

        return []

    def export_segments_csv(self, feature: FeatureLike) -> str:
        """
        One row per motion unit: ``N,ACTION,X,Y,I,J,UNITS,SRC``.

        Actions: DRILL_POINT (DRILL feature only), POINT, FEED_TO,
        ARC_CCW_TO / ARC_CW_TO (I,J offset from arc start to center) and
        CIRCLE_CENTER_R (radius in the I column).
        """
        feature = Feature.parse(feature)
        lines = [SEGMENTS_HEADER]
        n = 0

        for e in self._entities(feature):
            if not _is_exportable(e):
                continue
            for action, x, y, i, j, src in self._segment_rows(feature, e):
                n += 1
                lines.append(self._segment_row(n, action, x, y, i, j, src))

        return "\n".join(lines)

    # ------------------------------------------------------------------
    # G-code
    # ------------------------------------------------------------------

    def _gcode_block(self, e: Entity) -> List[str]:
        d = self.config.decimals

        if isinstance(e, PointEntity):
            x, y = self._units_xy(e.p)
            return [f"{generate_comment(f'POINT#{e.id}')} {generate_rapid_move(x, y, d)}"]

        if isinstance(e, LineEntity):
            return [
                generate_comment(f"LINE#{e.id}"),
                generate_rapid_move(*self._units_xy(e.A), d),
                generate_linear_move(*self._units_xy(e.B), d),
            ]

        if isinstance(e, PolylineEntity):
            block = [
                generate_comment(f"POLY#{e.id}"),
                generate_rapid_move(*self._units_xy(e.pts[0]), d),
            ]
            for p in e.pts[1:]:
                block.append(generate_linear_move(*self._units_xy(p), d))
            if e.closed:
                block.append(generate_linear_move(*self._units_xy(e.pts[0]), d, comment="close"))
            return block

        if isinstance(e, Arc3Entity):
            fit = circle_from_3(e.S, e.M, e.E)
            ccw, _ = resolve_arc_direction(e.S, e.M, e.E, (fit.cx, fit.cy))
            i, j = calculate_ij_offsets((e.S.x_mm, e.S.y_mm), (fit.cx, fit.cy))
            ex, ey = self._units_xy(e.E)
            return [
                generate_comment(f"ARC3#{e.id}"),
                generate_rapid_move(*self._units_xy(e.S), d),
                generate_arc_move(
                    calculate_arc_direction(ccw), ex, ey,
                    to_units(i, self.config.units), to_units(j, self.config.units), d
                ),
            ]

        if isinstance(e, Circle2Entity):
            # Circles go out as polygons, never as native arc words
            res = sample_circle(e.C, e.RP, self.config.grid_step, self.config.units)
            if res is None or not res.pts:
                return []
            block = [
                generate_comment(f"CIRCLE2#{e.id}"),
                generate_rapid_move(*self._units_xy(res.pts[0]), d),
            ]
            for p in res.pts[1:]:
                block.append(generate_linear_move(*self._units_xy(p), d))
            return block

        return []

    def export_gcode(self, features: Iterable[FeatureLike]) -> str:
        """
        G-code program for the given features, in feature-list order.

        Starts with the G90/G21 preamble and ends with M2. Each entity gets a
        block whose first line names its source tag.
        """
        lines = generate_header()
        for feature in features:
            for e in self._entities(Feature.parse(feature)):
                if not _is_exportable(e):
                    continue
                lines.extend(self._gcode_block(e))
        lines.extend(generate_footer())
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # JSON intermediate representation
    # ------------------------------------------------------------------

    @staticmethod
    def _ir_value(value_mm: float) -> float:
        return round_coordinate(value_mm, IR_PRECISION)

    def _ir_record(self, e: Entity, v: Callable[[float], float]) -> Optional[dict]:
        if isinstance(e, PointEntity):
            return {"type": "POINT", "id": e.id, "x": v(e.p.x_mm), "y": v(e.p.y_mm)}
        if isinstance(e, LineEntity):
            return {
                "type": "LINE", "id": e.id,
                "ax": v(e.A.x_mm), "ay": v(e.A.y_mm),
                "bx": v(e.B.x_mm), "by": v(e.B.y_mm),
            }
        if isinstance(e, PolylineEntity):
            return {
                "type": "POLYLINE", "id": e.id,
                "closed": bool(e.closed),
                "pts": [{"x": v(p.x_mm), "y": v(p.y_mm)} for p in e.pts],
            }
        if isinstance(e, Arc3Entity):
            return {
                "type": "ARC3", "id": e.id,
                "sx": v(e.S.x_mm), "sy": v(e.S.y_mm),
                "mx": v(e.M.x_mm), "my": v(e.M.y_mm),
                "ex": v(e.E.x_mm), "ey": v(e.E.y_mm),
            }
        if isinstance(e, Circle2Entity):
            return {
                "type": "CIRCLE2", "id": e.id,
                "cx": v(e.C.x_mm), "cy": v(e.C.y_mm),
                "rx": v(e.RP.x_mm), "ry": v(e.RP.y_mm),
            }
        return None

    def _ir_records(self, feature: Feature, v: Callable[[float], float]) -> List[dict]:
        records = []
        for e in self._entities(feature):
            if not _is_exportable(e):
                continue
            record = self._ir_record(e, v)
            if record is not None:
                records.append(record)
        return records

    def build_ir(
        self,
        features: Iterable[FeatureLike],
        purpose: str = "drawing_export",
        z_strategy: str = "none"
    ) -> dict:
        """IR document as a dict (unit-agnostic, millimeters rounded to 4 decimals)."""
        document = {"purpose": purpose, "z_strategy": z_strategy, "features": {}}
        for feature in features:
            feature = Feature.parse(feature)
            document["features"][feature.value] = self._ir_records(feature, self._ir_value)
        return document

    def export_ir_json(
        self,
        features: Iterable[FeatureLike],
        purpose: str = "drawing_export",
        z_strategy: str = "none"
    ) -> str:
        """
        IR document as JSON text, one entity record per line.

        Coordinates are millimeters written with exactly 4 decimals
        (``25.4000``).
        """
        features = [Feature.parse(f) for f in features]
        lines = [
            "{",
            f'  "purpose": {json.dumps(purpose)},',
            f'  "z_strategy": {json.dumps(z_strategy)},',
            '  "features": {',
        ]
        for fidx, feature in enumerate(features):
            records = self._ir_records(feature, float)
            lines.append(f'    "{feature.value}": [')
            for idx, record in enumerate(records):
                end = "," if idx < len(records) - 1 else ""
                lines.append(f"      {_ir_fragment(record)}{end}")
            lines.append("    ]" + ("," if fidx < len(features) - 1 else ""))
        lines.append("  }")
        lines.append("}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Teaching pseudocode
    # ------------------------------------------------------------------

    def _pseudo_line(self, e: Entity) -> Optional[str]:
        def xy(p):
            return self._xy(p, sep=", ")

        if isinstance(e, PointEntity):
            return f"POINT {xy(e.p)}   # id:{e.id}"
        if isinstance(e, LineEntity):
            return f"LINE {xy(e.A)}  ->  {xy(e.B)}   # id:{e.id}"
        if isinstance(e, PolylineEntity):
            path = "  ->  ".join(xy(p) for p in e.pts)
            close = "  -> (close)" if e.closed else ""
            return f"POLYLINE {path}{close}   # id:{e.id}"
        if isinstance(e, Arc3Entity):
            return f"ARC3 {xy(e.S)}  through  {xy(e.M)}  to  {xy(e.E)}   # id:{e.id}"
        if isinstance(e, Circle2Entity):
            r = circle_radius(e.C, e.RP)
            return f"CIRCLE  center {xy(e.C)}  radius {self._fmt(r)}   # id:{e.id}"
        return None

    def export_teaching_pseudo(self, features: Iterable[FeatureLike]) -> str:
        """One readable line per entity under a ``# FEATURE: name`` heading."""
        lines = [PSEUDO_TITLE]
        for feature in features:
            feature = Feature.parse(feature)
            lines.append("")
            lines.append(f"# FEATURE: {feature.value}")
            for e in self._entities(feature):
                if not _is_exportable(e):
                    continue
                line = self._pseudo_line(e)
                if line is not None:
                    lines.append(line)
        return "\n".join(lines)
