"""Unit conversion utilities."""
from typing import Union

from ..models import Units


def to_mm(value: float, units: Union[str, Units]) -> float:
    """Convert a value in the given display unit to millimeters."""
    return value * Units.parse(units).factor


def to_units(value_mm: float, units: Union[str, Units]) -> float:
    """Convert a millimeter value to the given display unit."""
    return value_mm / Units.parse(units).factor
