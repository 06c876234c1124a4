from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.axis import (
    DEFAULT_GEOCENTRIC_AXES,
    DEFAULT_GEOGRAPHIC_AXES,
    DEFAULT_PROJECTED_AXES,
    Axis,
    AxisOrientation,
)
from mappyproj.constructs.datum import GREENWICH, HorizontalDatum, PrimeMeridian
from mappyproj.constructs.projection import Projection
from mappyproj.constructs.units import DEGREE, METRE, AngularUnit, LinearUnit
from mappyproj.projections.registry import LINEAR_PARAMETERS, get_method
from mappyproj.transforms.math_transform import Affine

_EAST_WEST = {AxisOrientation.EAST, AxisOrientation.WEST}
_NORTH_SOUTH = {AxisOrientation.NORTH, AxisOrientation.SOUTH}
_UP_DOWN = {AxisOrientation.UP, AxisOrientation.DOWN}


def _check_horizontal_axes(name: str, axes: Tuple[Axis, ...]):
    if len(axes) not in (2, 3):
        raise ValueError(f"{name} must have 2 or 3 axes but found {len(axes)}")
    orientations = [a.orientation for a in axes]
    groups = (_EAST_WEST, _NORTH_SOUTH, _UP_DOWN)[: len(axes)]
    for group in groups:
        if sum(1 for o in orientations if o in group) != 1:
            labels = "/".join(sorted(o.value for o in group))
            raise ValueError(
                f"{name} must have exactly one {labels} axis; found "
                f"{[o.value for o in orientations]}"
            )


def _as_axes(axes: Optional[Sequence[Axis]], default: Tuple[Axis, ...]) -> Tuple[Axis, ...]:
    if not axes:
        return default
    return tuple(Axis(a[0], a[1]) for a in axes)


@dataclass(frozen=True)
class GeographicCoordinateSystem:
    """
    A coordinate system of angular longitude and latitude on a horizontal datum.

    Longitudes are measured from the prime meridian in the angular unit. The axes
    define the ordinate order; without explicit axes points are (longitude, latitude).

    Attributes:
        name: The coordinate system name
        datum: The horizontal datum
        prime_meridian: The meridian longitudes are measured from
        angular_unit: The unit of both angular ordinates
        axes: The ordered axes (2, or 3 with an ellipsoidal height)
        authority: An optional authority identity

    Examples:
        >>> from mappyproj.constructs.coordinate_system import GeographicCoordinateSystem
        >>> from mappyproj.constructs.datum import WGS84_DATUM
        >>> wgs84 = GeographicCoordinateSystem("WGS 84", WGS84_DATUM)
        >>> wgs84.dimension
        2
    """

    name: str
    datum: HorizontalDatum
    prime_meridian: PrimeMeridian = GREENWICH
    angular_unit: AngularUnit = DEGREE
    axes: Tuple[Axis, ...] = DEFAULT_GEOGRAPHIC_AXES
    authority: Optional[Authority] = None

    def __post_init__(self):
        object.__setattr__(self, "axes", _as_axes(self.axes, DEFAULT_GEOGRAPHIC_AXES))
        _check_horizontal_axes(f"geographic coordinate system {self.name}", self.axes)

    def __repr__(self):
        return f"GeographicCoordinateSystem(name={self.name!r}, authority={self.authority})"

    @property
    def dimension(self) -> int:
        return len(self.axes)

    @property
    def geographic_cs(self) -> GeographicCoordinateSystem:
        return self

    def to_wkt(self) -> str:
        from mappyproj.wkt.writer import to_wkt

        return to_wkt(self)


@dataclass(frozen=True)
class ProjectedCoordinateSystem:
    """
    A planar coordinate system obtained by projecting a geographic coordinate system.

    The geographic base is a complete value; a projected system is never built around
    an unresolved base.

    Attributes:
        name: The coordinate system name
        geographic_cs: The geographic coordinate system that is projected
        projection: The projection definition
        linear_unit: The unit of the projected ordinates
        axes: The ordered axes; without explicit axes points are (easting, northing)
        authority: An optional authority identity
    """

    name: str
    geographic_cs: GeographicCoordinateSystem
    projection: Projection
    linear_unit: LinearUnit = METRE
    axes: Tuple[Axis, ...] = DEFAULT_PROJECTED_AXES
    authority: Optional[Authority] = None

    def __post_init__(self):
        if not isinstance(self.geographic_cs, GeographicCoordinateSystem):
            raise TypeError(
                f"projected coordinate system {self.name} needs a geographic base, "
                f"found {type(self.geographic_cs).__name__}"
            )
        object.__setattr__(self, "axes", _as_axes(self.axes, DEFAULT_PROJECTED_AXES))
        _check_horizontal_axes(f"projected coordinate system {self.name}", self.axes)
        if self.projection.is_supported:
            self.resolved_parameters()

    def __repr__(self):
        return (
            f"ProjectedCoordinateSystem(name={self.name!r}, "
            f"method={self.projection.method!r}, authority={self.authority})"
        )

    def resolved_parameters(self) -> Dict[str, float]:
        """
        Get the projection parameters keyed by canonical name, with angles in degrees,
        false easting and northing in metres and defaults filled in.

        Angular parameters are read in the angular unit of the geographic base, so range
        checks such as "a standard parallel cannot be a pole" run here rather than on
        the bare projection.

        Raises:
            UnsupportedProjectionMethodError: If the method is not registered
            MissingProjectionParameterError: If a required parameter is missing
            InvalidProjectionParametersError: If parameter values are unusable
        """
        method = get_method(self.projection.method)
        angular_unit = self.geographic_cs.angular_unit
        parameters = {}
        for p in self.projection.parameters:
            key = method.canonical_parameter(p.name)
            if key in method.angular:
                parameters[key] = angular_unit.to_degrees(p.value)
            elif key in LINEAR_PARAMETERS:
                parameters[key] = self.linear_unit.to_meters(p.value)
            else:
                parameters[key] = p.value
        return method.resolve_degree_parameters(parameters)

    @property
    def dimension(self) -> int:
        return len(self.axes)

    @property
    def datum(self) -> HorizontalDatum:
        return self.geographic_cs.datum

    def to_wkt(self) -> str:
        from mappyproj.wkt.writer import to_wkt

        return to_wkt(self)


@dataclass(frozen=True)
class GeocentricCoordinateSystem:
    """
    An earth-centred cartesian (X, Y, Z) coordinate system on a horizontal datum.

    Attributes:
        name: The coordinate system name
        datum: The horizontal datum
        prime_meridian: The meridian the X axis points to
        linear_unit: The unit of the ordinates
        axes: The three axes
        authority: An optional authority identity
    """

    name: str
    datum: HorizontalDatum
    prime_meridian: PrimeMeridian = GREENWICH
    linear_unit: LinearUnit = METRE
    axes: Tuple[Axis, ...] = DEFAULT_GEOCENTRIC_AXES
    authority: Optional[Authority] = None

    def __post_init__(self):
        object.__setattr__(self, "axes", _as_axes(self.axes, DEFAULT_GEOCENTRIC_AXES))
        if len(self.axes) != 3:
            raise ValueError(
                f"geocentric coordinate system {self.name} must have 3 axes "
                f"but found {len(self.axes)}"
            )

    def __repr__(self):
        return f"GeocentricCoordinateSystem(name={self.name!r}, authority={self.authority})"

    @property
    def dimension(self) -> int:
        return 3

    def to_wkt(self) -> str:
        from mappyproj.wkt.writer import to_wkt

        return to_wkt(self)


@dataclass(frozen=True)
class FittedCoordinateSystem:
    """
    A coordinate system defined by an affine adjustment of another coordinate system.

    Attributes:
        name: The coordinate system name
        base_cs: The coordinate system the fitted system is attached to
        to_base: The affine transform from fitted coordinates to base coordinates
        axes: The ordered axes
        authority: An optional authority identity
    """

    name: str
    base_cs: CoordinateSystem
    to_base: Affine
    axes: Tuple[Axis, ...] = ()
    authority: Optional[Authority] = None

    def __post_init__(self):
        if self.to_base.target_dimension != self.base_cs.dimension:
            raise ValueError(
                f"fitted coordinate system {self.name} maps to {self.to_base.target_dimension} "
                f"dimensions but its base has {self.base_cs.dimension}"
            )
        default = tuple(
            Axis(n, AxisOrientation.OTHER) for n in ("X", "Y", "Z")[: self.to_base.source_dimension]
        )
        object.__setattr__(self, "axes", _as_axes(self.axes, default))
        if len(self.axes) != self.to_base.source_dimension:
            raise ValueError(
                f"fitted coordinate system {self.name} has {len(self.axes)} axes "
                f"but its transform takes {self.to_base.source_dimension} ordinates"
            )

    def __repr__(self):
        return f"FittedCoordinateSystem(name={self.name!r}, base={self.base_cs!r})"

    @property
    def dimension(self) -> int:
        return len(self.axes)

    def to_wkt(self) -> str:
        from mappyproj.wkt.writer import to_wkt

        return to_wkt(self)


CoordinateSystem = Union[
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
    GeocentricCoordinateSystem,
    FittedCoordinateSystem,
]
