"""Number and G-code formatting utilities.

Every exporter formats numbers through format_coordinate so CSV, G-code
and pseudocode output agree digit for digit.
"""
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import List, Optional

PROGRAM_TITLE = "(PlotOMatic G-code export)"


def format_coordinate(value: float, precision: int = 4) -> str:
    """
    Format a value with a fixed number of decimal places.

    Rounds the exact binary value half away from zero. A negative value
    that rounds to zero keeps its sign (``-0.0000``); a zero input, signed
    or not, prints as ``0.0000``.

    Args:
        value: The coordinate value
        precision: Number of decimal places (default 4)

    Returns:
        Formatted string representation
    """
    exact = Decimal(value)
    quantum = Decimal(1).scaleb(-precision)
    # Room for every integer digit plus the kept decimals
    context = Context(prec=max(28, exact.adjusted() + precision + 2))
    rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    if rounded.is_zero() and not value < 0:
        rounded = abs(rounded)
    return f"{rounded:f}"


def round_coordinate(value: float, precision: int = 4) -> float:
    """Round a value the same way format_coordinate does, as a float."""
    return float(format_coordinate(value, precision))


def generate_header() -> List[str]:
    """
    Generate the program preamble.

    Returns:
        Title comment, absolute distance mode and mm units lines
    """
    return [
        PROGRAM_TITLE,
        "G90 ; absolute distance mode",
        "G21 ; mm units",
    ]


def generate_footer() -> List[str]:
    """Generate the program end line."""
    return ["M2"]


def generate_comment(text: str) -> str:
    """Wrap text in a G-code parenthesised comment."""
    return f"({text})"


def generate_rapid_move(x: float, y: float, precision: int = 4) -> str:
    """
    Generate a G0 rapid move command.

    Args:
        x: X coordinate (active units)
        y: Y coordinate (active units)
        precision: Decimal places

    Returns:
        G0 command string
    """
    return f"G0 X{format_coordinate(x, precision)} Y{format_coordinate(y, precision)}"


def generate_linear_move(
    x: float,
    y: float,
    precision: int = 4,
    comment: Optional[str] = None
) -> str:
    """
    Generate a G1 linear feed command.

    Args:
        x: X coordinate (active units)
        y: Y coordinate (active units)
        precision: Decimal places
        comment: Optional trailing ``;`` comment

    Returns:
        G1 command string
    """
    line = f"G1 X{format_coordinate(x, precision)} Y{format_coordinate(y, precision)}"
    if comment:
        line += f" ; {comment}"
    return line


def generate_arc_move(
    direction: str,
    x: float,
    y: float,
    i: float,
    j: float,
    precision: int = 4
) -> str:
    """
    Generate a G2/G3 arc move command.

    Args:
        direction: "G2" for CW, "G3" for CCW
        x: Destination X coordinate
        y: Destination Y coordinate
        i: I offset (X distance from start to arc center)
        j: J offset (Y distance from start to arc center)
        precision: Decimal places

    Returns:
        Arc command string
    """
    parts = [
        direction,
        f"X{format_coordinate(x, precision)}",
        f"Y{format_coordinate(y, precision)}",
        f"I{format_coordinate(i, precision)}",
        f"J{format_coordinate(j, precision)}",
    ]
    return " ".join(parts)
