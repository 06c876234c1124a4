from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from mappyproj.constructs.authority import Authority
from mappyproj.utils.constants import DEGREES_PER_RADIAN, UNIT_EQUIVALENCE_TOLERANCE


def _factors_equivalent(a: float, b: float) -> bool:
    return abs(a - b) <= UNIT_EQUIVALENCE_TOLERANCE * max(abs(a), abs(b))


@dataclass(frozen=True)
class AngularUnit:
    """
    A unit of angle, defined by the number of radians in one unit.

    Attributes:
        name: The unit name as it appears in WKT (e.g. "degree")
        radians_per_unit: The conversion factor to radians
        authority: An optional authority identity

    Examples:
        >>> from mappyproj.constructs.units import DEGREE
        >>> DEGREE.to_degrees(1.0)
        1.0
    """

    name: str
    radians_per_unit: float
    authority: Optional[Authority] = None

    def __post_init__(self):
        if not self.radians_per_unit > 0:
            raise ValueError(
                f"angular unit {self.name} must have a positive factor, "
                f"found {self.radians_per_unit}"
            )

    @property
    def degrees_per_unit(self) -> float:
        if self.is_equivalent(DEGREE):
            return 1.0
        return self.radians_per_unit * DEGREES_PER_RADIAN

    def to_degrees(self, value: float) -> float:
        return value * self.degrees_per_unit

    def is_equivalent(self, other: AngularUnit) -> bool:
        """Two units are equivalent when their factors agree to a relative 1e-12."""
        return _factors_equivalent(self.radians_per_unit, other.radians_per_unit)


@dataclass(frozen=True)
class LinearUnit:
    """
    A unit of length, defined by the number of metres in one unit.

    Attributes:
        name: The unit name as it appears in WKT (e.g. "metre")
        meters_per_unit: The conversion factor to metres
        authority: An optional authority identity
    """

    name: str
    meters_per_unit: float
    authority: Optional[Authority] = None

    def __post_init__(self):
        if not self.meters_per_unit > 0:
            raise ValueError(
                f"linear unit {self.name} must have a positive factor, "
                f"found {self.meters_per_unit}"
            )

    def to_meters(self, value: float) -> float:
        return value * self.meters_per_unit

    def is_equivalent(self, other: LinearUnit) -> bool:
        return _factors_equivalent(self.meters_per_unit, other.meters_per_unit)


RADIAN = AngularUnit("radian", 1.0, Authority.epsg(9101))
DEGREE = AngularUnit("degree", math.pi / 180.0, Authority.epsg(9122))
GRAD = AngularUnit("grad", math.pi / 200.0, Authority.epsg(9105))
ARC_SECOND = AngularUnit("arc-second", math.pi / 648000.0, Authority.epsg(9104))

METRE = LinearUnit("metre", 1.0, Authority.epsg(9001))
FOOT = LinearUnit("foot", 0.3048, Authority.epsg(9002))
US_SURVEY_FOOT = LinearUnit("US survey foot", 1200.0 / 3937.0, Authority.epsg(9003))
