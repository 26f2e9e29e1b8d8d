"""Tests for plotomatic/drawing.py module."""
import pytest

from plotomatic.drawing import Drawing, validate_drawing
from plotomatic.models import (
    Feature,
    LineEntity,
    Point,
    PointEntity,
    PolylineEntity,
)


class TestDrawing:
    """Tests for the Drawing entity store."""

    def test_ids_are_sequential(self, drawing):
        a = drawing.add_point('DRILL', Point(0, 0))
        b = drawing.add_line('CONTOUR', Point(0, 0), Point(1, 1))
        assert (a.id, b.id) == (1, 2)

    def test_storage_order(self, drawing):
        drawing.add_point('CONTOUR', Point(1, 1))
        drawing.add_point('CONTOUR', Point(2, 2))
        drawing.add_point('CONTOUR', Point(3, 3))
        xs = [e.p.x_mm for e in drawing.entities_for_feature(Feature.CONTOUR)]
        assert xs == [1, 2, 3]

    def test_feature_isolation(self, sample_drawing):
        drill = sample_drawing.entities_for_feature('DRILL')
        assert len(drill) == 1
        assert isinstance(drill[0], PointEntity)
        assert len(sample_drawing.entities_for_feature('REF')) == 1

    def test_entities_for_feature_returns_copy(self, sample_drawing):
        entities = sample_drawing.entities_for_feature('CONTOUR')
        entities.clear()
        assert len(sample_drawing.entities_for_feature('CONTOUR')) == 3

    def test_add_explicit_entity_advances_ids(self, drawing):
        drawing.add('POCKET', LineEntity(A=Point(0, 0), B=Point(1, 0), id=41))
        assert drawing.add_point('POCKET', Point(0, 0)).id == 42

    def test_unknown_feature(self, drawing):
        with pytest.raises(ValueError):
            drawing.add_point('ENGRAVE', Point(0, 0))

    def test_add_rectangle(self, drawing):
        rect = drawing.add_rectangle('POCKET', Point(0, 0), Point(4, 2))
        assert isinstance(rect, PolylineEntity)
        assert rect.closed is True
        assert rect.pts == (Point(0, 0), Point(4, 0), Point(4, 2), Point(0, 2))

    def test_add_regular_polygon(self, drawing):
        poly = drawing.add_regular_polygon('POCKET', Point(0, 0), 10.0, 6)
        assert poly.closed is True
        assert len(poly.pts) == 6
        assert poly.pts[0].x_mm == pytest.approx(10.0)

    def test_remove(self, sample_drawing):
        removed = sample_drawing.remove(2)
        assert isinstance(removed, LineEntity)
        assert len(sample_drawing) == 5
        assert sample_drawing.remove(999) is None

    def test_feature_counts(self, sample_drawing):
        counts = sample_drawing.feature_counts()
        assert counts[Feature.CONTOUR] == 3
        assert counts[Feature.POCKET] == 1

    def test_entities_are_immutable(self, sample_drawing):
        line = sample_drawing.entities_for_feature('CONTOUR')[0]
        with pytest.raises(AttributeError):
            line.A = Point(9, 9)


class TestValidateDrawing:
    """Tests for validate_drawing function."""

    def test_clean_drawing(self, drawing):
        drawing.add_point('DRILL', Point(0, 0))
        drawing.add_circle2('POCKET', Point(0, 0), Point(3, 0))
        assert validate_drawing(drawing) == []

    def test_degenerate_arc(self, drawing):
        drawing.add_arc3('CONTOUR', Point(0, 0), Point(1, 1), Point(2, 2))
        warnings = validate_drawing(drawing)
        assert len(warnings) == 1
        assert "ARC3#1" in warnings[0]
        assert "collinear" in warnings[0]

    def test_zero_radius_circle(self, drawing):
        drawing.add_circle2('POCKET', Point(5, 5), Point(5, 5))
        assert "radius is zero" in validate_drawing(drawing)[0]

    def test_short_polyline(self, drawing):
        drawing.add_polyline('CONTOUR', [Point(0, 0)])
        assert "fewer than 2 points" in validate_drawing(drawing)[0]

    def test_non_point_in_drill(self, drawing):
        drawing.add_line('DRILL', Point(0, 0), Point(1, 0))
        assert "only POINT" in validate_drawing(drawing)[0]
