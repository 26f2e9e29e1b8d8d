"""Test configuration and fixtures."""
import pytest

from plotomatic.drawing import Drawing
from plotomatic.exporter import DrawingExporter
from plotomatic.models import DrawingConfig, Point, Units


@pytest.fixture
def inch_config():
    """Default configuration: inches, 0.25 grid."""
    return DrawingConfig(units=Units.INCH, grid_step=0.25)


@pytest.fixture
def mm_config():
    """Millimeter configuration with a 1 mm grid."""
    return DrawingConfig(units=Units.MM, grid_step=1.0)


@pytest.fixture
def drawing():
    """Empty drawing."""
    return Drawing()


@pytest.fixture
def sample_drawing():
    """A drawing with one entity of every type across features."""
    d = Drawing()
    d.add_point('DRILL', Point(10.0, 20.0))                                   # id 1
    d.add_line('CONTOUR', Point(0.0, 0.0), Point(25.4, 0.0))                  # id 2
    d.add_polyline('CONTOUR', [Point(0, 0), Point(10, 0), Point(10, 10)],
                   closed=True)                                               # id 3
    d.add_arc3('CONTOUR', Point(1, 0), Point(0, 1), Point(-1, 0))             # id 4
    d.add_circle2('POCKET', Point(0, 0), Point(10, 0))                        # id 5
    d.add_line('REF', Point(-5, -5), Point(5, 5))                             # id 6
    return d


@pytest.fixture
def mm_exporter(mm_config, sample_drawing):
    """Exporter over the sample drawing in millimeters."""
    return DrawingExporter(mm_config, sample_drawing)
