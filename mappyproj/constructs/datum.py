from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

import numpy as np

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.units import DEGREE, GRAD, AngularUnit, LinearUnit, METRE
from mappyproj.utils.constants import RADIANS_PER_ARC_SECOND

WGS84_DATUM_CODE = "6326"
_WGS84_DATUM_NAMES = {"WGS84", "WGS1984", "DWGS1984", "WORLDGEODETICSYSTEM1984"}


@dataclass(frozen=True)
class Ellipsoid:
    """
    An ellipsoid of revolution approximating the shape of the Earth.

    The ellipsoid is defined by its semi-major axis and inverse flattening (0 for a
    sphere). The derived quantities (semi-minor axis, flattening, eccentricity and
    eccentricity squared) are computed once when the ellipsoid is built.

    Attributes:
        name: The ellipsoid name
        semi_major_axis: The equatorial radius
        inverse_flattening: 1/f, or 0 for a sphere
        axis_unit: The linear unit of the axes
        authority: An optional authority identity
        semi_minor_axis: The polar radius (derived)
        flattening: f (derived)
        eccentricity_squared: e^2 (derived)
        eccentricity: e (derived)

    Examples:
        >>> from mappyproj.constructs.datum import Ellipsoid
        >>> grs80 = Ellipsoid("GRS 1980", 6378137.0, 298.257222101)
        >>> round(grs80.semi_minor_axis, 4)
        6356752.3141
    """

    name: str
    semi_major_axis: float
    inverse_flattening: float
    axis_unit: LinearUnit = METRE
    authority: Optional[Authority] = None

    semi_minor_axis: float = field(init=False, repr=False, compare=False)
    flattening: float = field(init=False, repr=False, compare=False)
    eccentricity_squared: float = field(init=False, repr=False, compare=False)
    eccentricity: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.semi_major_axis > 0:
            raise ValueError(
                f"ellipsoid {self.name} must have a positive semi-major axis"
            )
        if self.inverse_flattening < 0:
            raise ValueError(
                f"ellipsoid {self.name} must have a non-negative inverse flattening"
            )
        f = 1.0 / self.inverse_flattening if self.inverse_flattening else 0.0
        es = 2.0 * f - f * f
        object.__setattr__(self, "flattening", f)
        object.__setattr__(self, "semi_minor_axis", self.semi_major_axis * (1.0 - f))
        object.__setattr__(self, "eccentricity_squared", es)
        object.__setattr__(self, "eccentricity", math.sqrt(es))

    @classmethod
    def from_axes(
        cls,
        name: str,
        semi_major_axis: float,
        semi_minor_axis: float,
        axis_unit: LinearUnit = METRE,
        authority: Optional[Authority] = None,
    ) -> Ellipsoid:
        """
        Build an ellipsoid from its two axes instead of its inverse flattening.

        Equal axes build a sphere.
        """
        if semi_minor_axis > semi_major_axis or semi_minor_axis <= 0:
            raise ValueError(
                f"ellipsoid {name} semi-minor axis {semi_minor_axis} must be positive "
                f"and not larger than the semi-major axis {semi_major_axis}"
            )
        if semi_major_axis == semi_minor_axis:
            inv_f = 0.0
        else:
            inv_f = semi_major_axis / (semi_major_axis - semi_minor_axis)
        return cls(name, semi_major_axis, inv_f, axis_unit, authority)

    @property
    def is_sphere(self) -> bool:
        return self.inverse_flattening == 0

    def in_meters(self) -> Ellipsoid:
        """Return this ellipsoid with its axes expressed in metres."""
        if self.axis_unit.is_equivalent(METRE):
            return self
        return Ellipsoid(
            self.name,
            self.axis_unit.to_meters(self.semi_major_axis),
            self.inverse_flattening,
            METRE,
            self.authority,
        )

    def same_shape(self, other: Ellipsoid) -> bool:
        a = self.in_meters()
        b = other.in_meters()
        return (
            abs(a.semi_major_axis - b.semi_major_axis) < 1e-6
            and abs(a.eccentricity_squared - b.eccentricity_squared) < 1e-15
        )


@dataclass(frozen=True)
class PrimeMeridian:
    """
    The meridian from which longitudes are measured.

    Attributes:
        name: The prime meridian name
        longitude: Its longitude east of Greenwich, in `angular_unit`
        angular_unit: The unit of `longitude`
        authority: An optional authority identity
    """

    name: str
    longitude: float
    angular_unit: AngularUnit = DEGREE
    authority: Optional[Authority] = None

    @property
    def longitude_degrees(self) -> float:
        return self.angular_unit.to_degrees(self.longitude)

    @property
    def is_greenwich(self) -> bool:
        return self.longitude == 0


class BursaWolfParameters(NamedTuple):
    """
    Seven-parameter (Bursa-Wolf) shift from a datum to WGS84, as carried by TOWGS84.

    The rotations use the position vector convention.

    Attributes:
        dx: X translation in metres
        dy: Y translation in metres
        dz: Z translation in metres
        ex: X rotation in arc-seconds
        ey: Y rotation in arc-seconds
        ez: Z rotation in arc-seconds
        ppm: Scale correction in parts per million
    """

    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0
    ex: float = 0.0
    ey: float = 0.0
    ez: float = 0.0
    ppm: float = 0.0

    @property
    def is_null(self) -> bool:
        return not any(self)

    def to_matrix(self) -> np.ndarray:
        """
        Build the 4x4 homogeneous matrix mapping geocentric coordinates on this datum
        to geocentric coordinates on WGS84.
        """
        rx = self.ex * RADIANS_PER_ARC_SECOND
        ry = self.ey * RADIANS_PER_ARC_SECOND
        rz = self.ez * RADIANS_PER_ARC_SECOND
        s = 1.0 + self.ppm * 1e-6
        return np.array(
            [
                [s, -s * rz, s * ry, self.dx],
                [s * rz, s, -s * rx, self.dy],
                [-s * ry, s * rx, s, self.dz],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )


def _normalize_name(name: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", name.upper())


@dataclass(frozen=True)
class HorizontalDatum:
    """
    A geodetic reference frame: an ellipsoid anchored to the Earth.

    Datums are identified by authority code when they carry one; the Bursa-Wolf
    parameters describe how to reach WGS84 from this datum.

    Attributes:
        name: The datum name
        ellipsoid: The datum's ellipsoid
        to_wgs84: Optional shift parameters toward WGS84
        authority: An optional authority identity
    """

    name: str
    ellipsoid: Ellipsoid
    to_wgs84: Optional[BursaWolfParameters] = None
    authority: Optional[Authority] = None

    @property
    def is_wgs84(self) -> bool:
        if self.authority is not None and self.authority.name.upper() == "EPSG":
            return self.authority.code == WGS84_DATUM_CODE
        return _normalize_name(self.name) in _WGS84_DATUM_NAMES

    def shift_to_wgs84(self) -> Optional[BursaWolfParameters]:
        """
        Get the parameters that shift this datum to WGS84.

        Returns:
            The TOWGS84 parameters, a null shift for WGS84 itself, or None if unknown
        """
        if self.to_wgs84 is not None:
            return self.to_wgs84
        if self.is_wgs84:
            return BursaWolfParameters()
        return None

    def is_same_datum(self, other: HorizontalDatum) -> bool:
        """
        Decide whether two datums are the same reference frame.

        Datums with authority codes are compared by code only. Otherwise two datums
        are the same if they share a normalized name, the same ellipsoid shape and the
        same shift parameters.
        """
        if self is other:
            return True
        if self.authority is not None and other.authority is not None:
            return self.authority.matches(other.authority)
        if self.is_wgs84 and other.is_wgs84:
            return True
        return (
            _normalize_name(self.name) == _normalize_name(other.name)
            and self.ellipsoid.same_shape(other.ellipsoid)
            and self.shift_to_wgs84() == other.shift_to_wgs84()
        )


WGS84_ELLIPSOID = Ellipsoid("WGS 84", 6378137.0, 298.257223563, METRE, Authority.epsg(7030))
GRS80_ELLIPSOID = Ellipsoid("GRS 1980", 6378137.0, 298.257222101, METRE, Authority.epsg(7019))
AIRY_1830_ELLIPSOID = Ellipsoid("Airy 1830", 6377563.396, 299.3249646, METRE, Authority.epsg(7001))
CLARKE_1866_ELLIPSOID = Ellipsoid("Clarke 1866", 6378206.4, 294.9786982138982, METRE, Authority.epsg(7008))
INTERNATIONAL_1924_ELLIPSOID = Ellipsoid("International 1924", 6378388.0, 297.0, METRE, Authority.epsg(7022))

GREENWICH = PrimeMeridian("Greenwich", 0.0, DEGREE, Authority.epsg(8901))
PARIS = PrimeMeridian("Paris", 2.5969213, GRAD, Authority.epsg(8903))

WGS84_DATUM = HorizontalDatum("WGS_1984", WGS84_ELLIPSOID, None, Authority.epsg(6326))
