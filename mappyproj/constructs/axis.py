from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Tuple


class AxisOrientation(Enum):
    """
    The direction an ordinate increases in.

    Values are spelled exactly as in WKT.
    """

    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"
    UP = "UP"
    DOWN = "DOWN"
    OTHER = "OTHER"

    @classmethod
    def from_string(cls, s: str) -> AxisOrientation:
        try:
            return cls(s.upper())
        except ValueError as e:
            raise ValueError(f"unknown axis orientation {s}") from e


class Axis(NamedTuple):
    """
    A named axis of a coordinate system.

    The ordered tuple of axes on a coordinate system defines the order and the sign
    of the ordinates of its points.

    Attributes:
        name: The axis name (e.g. "Lat", "Easting")
        orientation: The direction in which the ordinate increases
    """

    name: str
    orientation: AxisOrientation


# Axes assumed when a definition carries no AXIS nodes
DEFAULT_GEOGRAPHIC_AXES: Tuple[Axis, ...] = (
    Axis("Lon", AxisOrientation.EAST),
    Axis("Lat", AxisOrientation.NORTH),
)
DEFAULT_PROJECTED_AXES: Tuple[Axis, ...] = (
    Axis("X", AxisOrientation.EAST),
    Axis("Y", AxisOrientation.NORTH),
)
DEFAULT_GEOCENTRIC_AXES: Tuple[Axis, ...] = (
    Axis("X", AxisOrientation.OTHER),
    Axis("Y", AxisOrientation.EAST),
    Axis("Z", AxisOrientation.NORTH),
)
