"""In-memory entity store grouped by feature.

The exporters only need ``entities_for_feature``; any object with that
method (or a plain callable) can stand in for a Drawing.
"""
from typing import Dict, List, Optional, Sequence, Union

from .models import (
    Arc3Entity,
    Circle2Entity,
    Entity,
    Feature,
    LineEntity,
    Point,
    PointEntity,
    PolylineEntity,
)
from .polygon_generator import calculate_regular_vertices
from .sampling import circle_radius
from .utils.arc_utils import DEGENERATE_EPSILON, circle_from_3


class Drawing:
    """Entities bucketed by feature, in insertion order."""

    def __init__(self):
        self._features: Dict[Feature, List[Entity]] = {f: [] for f in Feature}
        self._next_id = 1

    def next_id(self) -> int:
        """Reserve the next unused entity id."""
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def add(self, feature: Union[str, Feature], entity: Entity) -> Entity:
        """Append an entity to a feature bucket."""
        self._features[Feature.parse(feature)].append(entity)
        self._next_id = max(self._next_id, entity.id + 1)
        return entity

    def add_point(self, feature, p: Point) -> PointEntity:
        return self.add(feature, PointEntity(p=p, id=self.next_id()))

    def add_line(self, feature, a: Point, b: Point) -> LineEntity:
        return self.add(feature, LineEntity(A=a, B=b, id=self.next_id()))

    def add_polyline(self, feature, pts: Sequence[Point], closed: bool = False) -> PolylineEntity:
        return self.add(feature, PolylineEntity(pts=tuple(pts), closed=closed, id=self.next_id()))

    def add_arc3(self, feature, s: Point, m: Point, e: Point) -> Arc3Entity:
        return self.add(feature, Arc3Entity(S=s, M=m, E=e, id=self.next_id()))

    def add_circle2(self, feature, c: Point, rp: Point) -> Circle2Entity:
        return self.add(feature, Circle2Entity(C=c, RP=rp, id=self.next_id()))

    def add_rectangle(self, feature, corner: Point, opposite: Point) -> PolylineEntity:
        """Add an axis-aligned rectangle as a closed 4-vertex polyline."""
        pts = [
            Point(corner.x_mm, corner.y_mm),
            Point(opposite.x_mm, corner.y_mm),
            Point(opposite.x_mm, opposite.y_mm),
            Point(corner.x_mm, opposite.y_mm),
        ]
        return self.add_polyline(feature, pts, closed=True)

    def add_regular_polygon(
        self,
        feature,
        center: Point,
        radius: float,
        n: int,
        start_deg: float = 0
    ) -> PolylineEntity:
        """Add a regular n-gon as a closed polyline."""
        pts = calculate_regular_vertices(center.x_mm, center.y_mm, radius, n, start_deg)
        return self.add_polyline(feature, pts, closed=True)

    def entities_for_feature(self, feature: Union[str, Feature]) -> List[Entity]:
        """Entities of a feature in storage order (a copy)."""
        return list(self._features[Feature.parse(feature)])

    def remove(self, entity_id: int) -> Optional[Entity]:
        """Remove an entity by id from whichever feature holds it."""
        for entities in self._features.values():
            for idx, entity in enumerate(entities):
                if entity.id == entity_id:
                    return entities.pop(idx)
        return None

    def feature_counts(self) -> Dict[Feature, int]:
        return {f: len(entities) for f, entities in self._features.items()}

    def __len__(self) -> int:
        return sum(len(entities) for entities in self._features.values())


def validate_drawing(drawing: Drawing) -> List[str]:
    """
    List entities that exporters will silently skip.

    Args:
        drawing: The drawing to check

    Returns:
        List of warning messages (empty if every entity is exportable)
    """
    warnings = []

    for feature in Feature:
        for entity in drawing.entities_for_feature(feature):
            tag = f"{entity.type}#{entity.id} in {feature.value}"
            if isinstance(entity, PolylineEntity) and len(entity.pts) < 2:
                warnings.append(f"{tag}: polyline has fewer than 2 points")
            elif isinstance(entity, Arc3Entity) and circle_from_3(entity.S, entity.M, entity.E) is None:
                warnings.append(f"{tag}: arc points are collinear or coincident")
            elif isinstance(entity, Circle2Entity) and circle_radius(entity.C, entity.RP) < DEGENERATE_EPSILON:
                warnings.append(f"{tag}: circle radius is zero")
            elif feature is Feature.DRILL and not isinstance(entity, PointEntity):
                warnings.append(f"{tag}: only POINT entities produce DRILL segments")

    return warnings
