"""Tests for plotomatic/drawing_parser.py module."""
import json

import pytest

from plotomatic.drawing_parser import parse_drawing, parse_drawing_file, ParseError
from plotomatic.exporter import DrawingExporter
from plotomatic.models import (
    Arc3Entity,
    Circle2Entity,
    Feature,
    LineEntity,
    Point,
    PointEntity,
    PolylineEntity,
)


def _doc(features):
    return json.dumps({"purpose": "test", "z_strategy": "none", "features": features})


class TestParseDrawing:
    """Tests for parse_drawing function."""

    def test_all_entity_types(self):
        drawing = parse_drawing(_doc({
            "DRILL": [{"type": "POINT", "id": 1, "x": 1.5, "y": 2}],
            "CONTOUR": [
                {"type": "LINE", "id": 2, "ax": 0, "ay": 0, "bx": 3, "by": 4},
                {"type": "POLYLINE", "id": 3, "closed": True, "pts": [{"x": 0, "y": 0}, {"x": 1, "y": 0}]},
                {"type": "ARC3", "id": 4, "sx": 1, "sy": 0, "mx": 0, "my": 1, "ex": -1, "ey": 0},
            ],
            "POCKET": [{"type": "CIRCLE2", "id": 5, "cx": 0, "cy": 0, "rx": 2, "ry": 0}],
        }))

        point = drawing.entities_for_feature(Feature.DRILL)[0]
        assert isinstance(point, PointEntity)
        assert point.p == Point(1.5, 2.0)

        line, poly, arc = drawing.entities_for_feature(Feature.CONTOUR)
        assert isinstance(line, LineEntity) and line.B == Point(3.0, 4.0)
        assert isinstance(poly, PolylineEntity) and poly.closed is True and len(poly.pts) == 2
        assert isinstance(arc, Arc3Entity) and arc.M == Point(0.0, 1.0)

        circle = drawing.entities_for_feature(Feature.POCKET)[0]
        assert isinstance(circle, Circle2Entity) and circle.RP == Point(2.0, 0.0)

    def test_missing_ids_are_assigned(self):
        drawing = parse_drawing(_doc({
            "CONTOUR": [
                {"type": "POINT", "x": 0, "y": 0},
                {"type": "POINT", "id": 10, "x": 1, "y": 1},
                {"type": "POINT", "x": 2, "y": 2},
            ],
        }))
        ids = [e.id for e in drawing.entities_for_feature('CONTOUR')]
        assert ids == [11, 10, 12]

    def test_feature_names_case_insensitive(self):
        drawing = parse_drawing(_doc({"ref": [{"type": "point", "x": 0, "y": 0}]}))
        assert len(drawing.entities_for_feature(Feature.REF)) == 1

    def test_round_trip_through_ir(self, mm_exporter):
        """An exported IR loads back into the same IR."""
        features = ['DRILL', 'CONTOUR', 'POCKET', 'REF']
        ir = mm_exporter.export_ir_json(features)
        reloaded = DrawingExporter(mm_exporter.config, parse_drawing(ir))
        assert reloaded.export_ir_json(features) == ir

    def test_invalid_json(self):
        with pytest.raises(ParseError, match="not valid JSON"):
            parse_drawing("{not json")

    def test_missing_features(self):
        with pytest.raises(ParseError, match="'features' mapping"):
            parse_drawing(json.dumps({"purpose": "x"}))

    def test_errors_are_collected(self):
        """Every bad record is reported in one ParseError."""
        with pytest.raises(ParseError) as exc_info:
            parse_drawing(_doc({
                "CONTOUR": [
                    {"type": "LINE", "id": 1, "ax": 0, "ay": 0, "bx": 1},
                    {"type": "SPLINE", "id": 2},
                    {"type": "POINT", "id": 3, "x": "a", "y": 0},
                ],
                "ENGRAVE": [],
            }))
        message = str(exc_info.value)
        assert message.startswith("Errors found in drawing file:")
        assert "missing 'by'" in message
        assert "unknown type 'SPLINE'" in message
        assert "'x' must be a number" in message
        assert "Unknown feature 'ENGRAVE'" in message

    def test_duplicate_ids(self):
        with pytest.raises(ParseError, match="duplicate id 1"):
            parse_drawing(_doc({
                "DRILL": [{"type": "POINT", "id": 1, "x": 0, "y": 0}],
                "REF": [{"type": "POINT", "id": 1, "x": 0, "y": 0}],
            }))

    def test_bad_polyline_vertex(self):
        with pytest.raises(ParseError, match="polyline vertex"):
            parse_drawing(_doc({"CONTOUR": [{"type": "POLYLINE", "pts": [[0, 0]]}]}))

    def test_closed_must_be_boolean(self):
        """A string such as "false" is not read as a truthy flag."""
        with pytest.raises(ParseError, match="'closed' must be true or false"):
            parse_drawing(_doc({"CONTOUR": [
                {"type": "POLYLINE", "closed": "false", "pts": [{"x": 0, "y": 0}, {"x": 1, "y": 0}]}
            ]}))

    def test_boolean_id_rejected(self):
        """true is not id 1, even next to a record with id 1."""
        with pytest.raises(ParseError) as exc_info:
            parse_drawing(_doc({"DRILL": [
                {"type": "POINT", "id": 1, "x": 0, "y": 0},
                {"type": "POINT", "id": True, "x": 1, "y": 1},
            ]}))
        message = str(exc_info.value)
        assert "id must be an integer, got True" in message
        assert "duplicate" not in message

    def test_boolean_is_not_a_number(self):
        with pytest.raises(ParseError, match="must be a number"):
            parse_drawing(_doc({"DRILL": [{"type": "POINT", "x": True, "y": 0}]}))


class TestParseDrawingFile:
    """Tests for parse_drawing_file function."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "part.json"
        path.write_text(_doc({"DRILL": [{"type": "POINT", "id": 1, "x": 0, "y": 0}]}))
        drawing = parse_drawing_file(str(path))
        assert len(drawing) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            parse_drawing_file(str(tmp_path / "nope.json"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("   \n")
        with pytest.raises(ParseError, match="empty"):
            parse_drawing_file(str(path))
