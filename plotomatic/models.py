"""Shared dataclasses for the geometry and export engine.

All entity coordinates are stored in millimeters. Display/export units only
matter at format time.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class Units(Enum):
    """Active display unit with its conversion factor and decimal precision."""
    INCH = 'in'
    MM = 'mm'

    @property
    def factor(self) -> float:
        """Millimeters per unit."""
        return 25.4 if self is Units.INCH else 1.0

    @property
    def decimals(self) -> int:
        return 4 if self is Units.INCH else 3

    @classmethod
    def parse(cls, value: Union[str, 'Units']) -> 'Units':
        """Accept 'in'/'mm' (case-insensitive) or an existing Units member."""
        if isinstance(value, Units):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown units '{value}'. Expected 'in' or 'mm'")


class CoordFlavor(Enum):
    """Work-frame strategy for recorded coordinates.

    HAAS stores coordinates relative to the work-zero origin; WORLD stores raw
    world coordinates.
    """
    HAAS = 'haas'
    WORLD = 'world'

    @classmethod
    def parse(cls, value: Union[str, 'CoordFlavor']) -> 'CoordFlavor':
        """Map 'haas' to HAAS and any other flavor name to WORLD."""
        if isinstance(value, CoordFlavor):
            return value
        if str(value).strip().lower() == 'haas':
            return cls.HAAS
        return cls.WORLD

    @property
    def uses_work_zero(self) -> bool:
        return self is CoordFlavor.HAAS


class Feature(Enum):
    """Named buckets entities are assigned to."""
    DRILL = 'DRILL'
    CONTOUR = 'CONTOUR'
    POCKET = 'POCKET'
    REF = 'REF'

    @classmethod
    def parse(cls, value: Union[str, 'Feature']) -> 'Feature':
        if isinstance(value, Feature):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            names = ', '.join(f.value for f in cls)
            raise ValueError(f"Unknown feature '{value}'. Expected one of: {names}")


FEATURE_HINTS = {
    Feature.DRILL: "Unconnected points/circles for drilling patterns.",
    Feature.CONTOUR: "Connected path entities (polyline/arc).",
    Feature.POCKET: "Closed boundaries (polyline/circle) as pocket outlines.",
    Feature.REF: "Construction geometry (no export).",
}

# REF is construction-only; callers leave it out of machining exports.
EXPORTABLE_FEATURES = [Feature.DRILL, Feature.CONTOUR, Feature.POCKET]


@dataclass(frozen=True)
class Point:
    """A 2D coordinate point in millimeters."""
    x_mm: float
    y_mm: float


@dataclass(frozen=True)
class PointEntity:
    """Reference/drill marker."""
    p: Point
    id: int
    type: str = field(default='POINT', init=False)


@dataclass(frozen=True)
class LineEntity:
    """Single segment from A to B."""
    A: Point
    B: Point
    id: int
    type: str = field(default='LINE', init=False)


@dataclass(frozen=True)
class PolylineEntity:
    """Connected chain, optionally closed back to its first point."""
    pts: tuple
    id: int
    closed: bool = False
    type: str = field(default='POLYLINE', init=False)

    def __post_init__(self):
        # Accept any sequence but keep the stored vertices immutable
        object.__setattr__(self, 'pts', tuple(self.pts))


@dataclass(frozen=True)
class Arc3Entity:
    """Arc through start S, interior point M and end E."""
    S: Point
    M: Point
    E: Point
    id: int
    type: str = field(default='ARC3', init=False)


@dataclass(frozen=True)
class Circle2Entity:
    """Circle from center C and a radius-defining point RP."""
    C: Point
    RP: Point
    id: int
    type: str = field(default='CIRCLE2', init=False)


Entity = Union[PointEntity, LineEntity, PolylineEntity, Arc3Entity, Circle2Entity]


@dataclass
class DrawingConfig:
    """Units and view configuration consumed by the engine."""
    units: Units = Units.INCH
    grid_step: float = 0.25        # in active units
    major_every: int = 4
    view_width: float = 12.0       # in active units
    coord_flavor: CoordFlavor = CoordFlavor.HAAS
    center_world: Point = Point(0.0, 0.0)
    work_zero_world: Point = Point(0.0, 0.0)

    def __post_init__(self):
        self.units = Units.parse(self.units)
        self.coord_flavor = CoordFlavor.parse(self.coord_flavor)

    @property
    def decimals(self) -> int:
        return self.units.decimals

    @classmethod
    def from_object(cls, obj) -> 'DrawingConfig':
        """Build a configuration from a settings class such as ``config.Config``."""
        return cls(
            units=getattr(obj, 'UNITS', 'in'),
            grid_step=float(getattr(obj, 'GRID_STEP', 0.25)),
            major_every=int(getattr(obj, 'MAJOR_EVERY', 4)),
            view_width=float(getattr(obj, 'VIEW_WIDTH', 12.0)),
            coord_flavor=getattr(obj, 'COORD_FLAVOR', 'haas'),
        )


@dataclass
class TaggedPoint:
    """A flattened point with its source tag (e.g. ``LINE#3:A``)."""
    x_mm: float
    y_mm: float
    src: str
    editable: bool = False
    entity_id: Optional[int] = None


@dataclass
class CircleFit:
    """Circumscribed circle through three points."""
    cx: float
    cy: float
    r: float


@dataclass
class ArcSample:
    """Sampled 3-point arc with its fitted circle and direction."""
    ccw: bool
    cx: float
    cy: float
    r: float
    pts: List[Point]


@dataclass
class CircleSample:
    """Sampled full circle."""
    cx: float
    cy: float
    r: float
    pts: List[Point]
