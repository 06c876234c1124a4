"""Geographic to geocentric conversion and datum shifts through geocentric space."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from mappyproj.constructs.datum import BursaWolfParameters, Ellipsoid
from mappyproj.transforms.math_transform import (
    Affine,
    Concatenated,
    Direction,
    MathTransform,
    Point,
    as_point,
)
from mappyproj.utils.constants import GEOCENTRIC_MAX_ITER, GEOCENTRIC_TOLERANCE
from mappyproj.utils.exceptions import ProjectionComputationError


def geographic_to_geocentric(
    ellipsoid: Ellipsoid, lon: float, lat: float, h: float = 0.0
) -> Tuple[float, float, float]:
    """
    Convert longitude and latitude in radians plus an ellipsoidal height in metres
    to earth-centred X, Y, Z in metres.
    """
    a = ellipsoid.semi_major_axis
    es = ellipsoid.eccentricity_squared
    sinphi = math.sin(lat)
    cosphi = math.cos(lat)
    n = a / math.sqrt(1.0 - es * sinphi * sinphi)
    x = (n + h) * cosphi * math.cos(lon)
    y = (n + h) * cosphi * math.sin(lon)
    z = (n * (1.0 - es) + h) * sinphi
    return x, y, z


def geocentric_to_geographic(
    ellipsoid: Ellipsoid, x: float, y: float, z: float
) -> Tuple[float, float, float]:
    """
    Convert earth-centred X, Y, Z in metres to longitude and latitude in radians plus
    an ellipsoidal height in metres.

    Raises:
        ProjectionComputationError: If the latitude iteration does not converge
    """
    a = ellipsoid.semi_major_axis
    es = ellipsoid.eccentricity_squared
    p = math.hypot(x, y)
    lon = math.atan2(y, x)
    lat = math.atan2(z, p * (1.0 - es))
    for _ in range(GEOCENTRIC_MAX_ITER):
        sinphi = math.sin(lat)
        n = a / math.sqrt(1.0 - es * sinphi * sinphi)
        next_lat = math.atan2(z + es * n * sinphi, p)
        if abs(next_lat - lat) < GEOCENTRIC_TOLERANCE:
            lat = next_lat
            break
        lat = next_lat
    else:
        raise ProjectionComputationError(
            f"geocentric latitude failed to converge for ({x}, {y}, {z})"
        )
    sinphi = math.sin(lat)
    h = p * math.cos(lat) + z * sinphi - a * math.sqrt(1.0 - es * sinphi * sinphi)
    return lon, lat, h


@dataclass(frozen=True)
class GeocentricTransform(MathTransform):
    """
    Conversion between geographic (longitude, latitude, height) and geocentric (X, Y, Z).

    The forward direction takes degrees and an optional height in metres (0 when the
    point has only two ordinates) and returns metres. The inverse direction always
    returns three ordinates.

    Attributes:
        ellipsoid: The ellipsoid, with axes in metres
        direction: FORWARD (geographic to geocentric) or INVERSE
    """

    ellipsoid: Ellipsoid
    direction: Direction = Direction.FORWARD

    @property
    def source_dimension(self) -> int:
        return 3

    @property
    def target_dimension(self) -> int:
        return 3

    def transform(self, point: Sequence[float]) -> Point:
        if self.direction is Direction.FORWARD:
            p = as_point(point, 2)
            h = p[2] if len(p) > 2 else 0.0
            return geographic_to_geocentric(
                self.ellipsoid, math.radians(p[0]), math.radians(p[1]), h
            ) + p[3:]
        p = as_point(point, 3)
        lon, lat, h = geocentric_to_geographic(self.ellipsoid, p[0], p[1], p[2])
        return (math.degrees(lon), math.degrees(lat), h) + p[3:]

    def inverse(self) -> GeocentricTransform:
        return GeocentricTransform(self.ellipsoid, self.direction.flip())


@dataclass(frozen=True)
class DatumShiftTransform(MathTransform):
    """
    A datum shift on Greenwich geographic degrees, carried out in geocentric space.

    The inner pipeline maps (lon, lat, h) on the source ellipsoid to (lon, lat, h) on
    the target ellipsoid. The height is 0 for two-dimensional points, and the output
    has as many ordinates as the input.

    Attributes:
        pipeline: The geographic to geographic 3-d pipeline
    """

    pipeline: MathTransform

    @classmethod
    def bursa_wolf(
        cls,
        source_ellipsoid: Ellipsoid,
        source_shift: BursaWolfParameters,
        target_ellipsoid: Ellipsoid,
        target_shift: BursaWolfParameters,
    ) -> DatumShiftTransform:
        """
        Build a shift from a source to a target datum through WGS84.

        Each side's shift maps its geocentric coordinates to WGS84; the target side is
        applied through the exact inverse of its matrix.
        """
        to_wgs84 = Affine(source_shift.to_matrix())
        from_wgs84 = Affine(target_shift.to_matrix()).inverse()
        return cls(
            Concatenated(
                (
                    GeocentricTransform(source_ellipsoid, Direction.FORWARD),
                    to_wgs84.then(from_wgs84),
                    GeocentricTransform(target_ellipsoid, Direction.INVERSE),
                )
            )
        )

    @classmethod
    def null_shift(
        cls, source_ellipsoid: Ellipsoid, target_ellipsoid: Ellipsoid
    ) -> DatumShiftTransform:
        """Build a shift that only changes the ellipsoid, with no translation or rotation."""
        return cls(
            Concatenated(
                (
                    GeocentricTransform(source_ellipsoid, Direction.FORWARD),
                    GeocentricTransform(target_ellipsoid, Direction.INVERSE),
                )
            )
        )

    @property
    def source_dimension(self) -> int:
        return 2

    @property
    def target_dimension(self) -> int:
        return 2

    def transform(self, point: Sequence[float]) -> Point:
        p = as_point(point, 2)
        h = p[2] if len(p) > 2 else 0.0
        lon, lat, h2 = self.pipeline.transform((p[0], p[1], h))[:3]
        if len(p) > 2:
            return (lon, lat, h2) + p[3:]
        return lon, lat

    def inverse(self) -> DatumShiftTransform:
        return DatumShiftTransform(self.pipeline.inverse())
