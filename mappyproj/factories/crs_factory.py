from __future__ import annotations

from typing import Optional, Sequence, Union

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.axis import Axis
from mappyproj.constructs.coordinate_system import (
    CoordinateSystem,
    FittedCoordinateSystem,
    GeocentricCoordinateSystem,
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
)
from mappyproj.constructs.datum import (
    BursaWolfParameters,
    Ellipsoid,
    HorizontalDatum,
    PrimeMeridian,
)
from mappyproj.constructs.projection import ParameterInput, Projection
from mappyproj.constructs.units import DEGREE, METRE, AngularUnit, LinearUnit
from mappyproj.factories.authority_registry import REGISTRY, AuthorityRegistry
from mappyproj.transforms.math_transform import Affine
from mappyproj.wkt.parser import parse_wkt


class CoordinateSystemFactory:
    """
    Builds coordinate systems and their components from WKT, authority codes or
    explicit values.

    Every method returns an immutable, fully validated object or raises.

    Args:
        registry: The authority registry used for code lookups

    Examples:
        >>> from mappyproj.factories.crs_factory import CoordinateSystemFactory
        >>> from mappyproj.constructs.units import METRE
        >>> factory = CoordinateSystemFactory()
        >>> wgs84 = factory.create_from_authority_code("EPSG", 4326)
        >>> utm = factory.create_projected_coordinate_system(
        ...     "UTM 18N",
        ...     wgs84,
        ...     factory.create_projection(
        ...         "UTM 18N",
        ...         "Transverse_Mercator",
        ...         {"latitude_of_origin": 0, "central_meridian": -75, "scale_factor": 0.9996,
        ...          "false_easting": 500000},
        ...     ),
        ...     METRE,
        ... )
    """

    def __init__(self, registry: AuthorityRegistry = REGISTRY):
        self.registry = registry

    def create_from_wkt(self, text: str) -> CoordinateSystem:
        """
        Build a coordinate system from WKT1 text.

        Raises:
            WktParseError: If the text is malformed
        """
        return parse_wkt(text)

    def create_from_authority_code(
        self, authority: str, code: Union[int, str]
    ) -> CoordinateSystem:
        """
        Get a well-known coordinate system from the built-in registry.

        Raises:
            UnknownAuthorityCodeError: If the code is not in the registry
        """
        return self.registry.get(authority, code)

    def create_geographic_coordinate_system(
        self,
        name: str,
        angular_unit: AngularUnit,
        datum: HorizontalDatum,
        prime_meridian: PrimeMeridian,
        axes: Optional[Sequence[Axis]] = None,
        authority: Optional[Authority] = None,
    ) -> GeographicCoordinateSystem:
        return GeographicCoordinateSystem(
            name, datum, prime_meridian, angular_unit, axes, authority
        )

    def create_projected_coordinate_system(
        self,
        name: str,
        geographic_cs: GeographicCoordinateSystem,
        projection: Projection,
        linear_unit: LinearUnit = METRE,
        axes: Optional[Sequence[Axis]] = None,
        authority: Optional[Authority] = None,
    ) -> ProjectedCoordinateSystem:
        return ProjectedCoordinateSystem(
            name, geographic_cs, projection, linear_unit, axes, authority
        )

    def create_geocentric_coordinate_system(
        self,
        name: str,
        datum: HorizontalDatum,
        prime_meridian: PrimeMeridian,
        linear_unit: LinearUnit = METRE,
        axes: Optional[Sequence[Axis]] = None,
        authority: Optional[Authority] = None,
    ) -> GeocentricCoordinateSystem:
        return GeocentricCoordinateSystem(
            name, datum, prime_meridian, linear_unit, axes, authority
        )

    def create_fitted_coordinate_system(
        self,
        name: str,
        base_cs: CoordinateSystem,
        to_base: Affine,
        axes: Optional[Sequence[Axis]] = None,
        authority: Optional[Authority] = None,
    ) -> FittedCoordinateSystem:
        return FittedCoordinateSystem(name, base_cs, to_base, axes, authority)

    def create_projection(
        self,
        name: str,
        method: str,
        parameters: ParameterInput,
        authority: Optional[Authority] = None,
    ) -> Projection:
        """
        Build a projection definition.

        Args:
            name: The projection name
            method: The projection method name or alias
            parameters: A mapping or (name, value) pairs, in the order they should be kept

        Raises:
            MissingProjectionParameterError: If a required parameter is missing
            InvalidProjectionParametersError: If parameter values are unusable
        """
        return Projection.from_parameters(method, parameters, name, authority)

    def create_ellipsoid(
        self,
        name: str,
        semi_major_axis: float,
        semi_minor_axis: float,
        linear_unit: LinearUnit = METRE,
        authority: Optional[Authority] = None,
    ) -> Ellipsoid:
        return Ellipsoid.from_axes(name, semi_major_axis, semi_minor_axis, linear_unit, authority)

    def create_flattened_sphere(
        self,
        name: str,
        semi_major_axis: float,
        inverse_flattening: float,
        linear_unit: LinearUnit = METRE,
        authority: Optional[Authority] = None,
    ) -> Ellipsoid:
        return Ellipsoid(name, semi_major_axis, inverse_flattening, linear_unit, authority)

    def create_horizontal_datum(
        self,
        name: str,
        ellipsoid: Ellipsoid,
        to_wgs84: Optional[BursaWolfParameters] = None,
        authority: Optional[Authority] = None,
    ) -> HorizontalDatum:
        return HorizontalDatum(name, ellipsoid, to_wgs84, authority)

    def create_prime_meridian(
        self,
        name: str,
        longitude: float,
        angular_unit: AngularUnit = DEGREE,
        authority: Optional[Authority] = None,
    ) -> PrimeMeridian:
        return PrimeMeridian(name, longitude, angular_unit, authority)


_DEFAULT_FACTORY = CoordinateSystemFactory()


def from_wkt(text: str) -> CoordinateSystem:
    """
    Build a coordinate system from WKT1 text.

    Raises:
        WktParseError: If the text is malformed
    """
    return _DEFAULT_FACTORY.create_from_wkt(text)


def from_authority_code(authority: str, code: Union[int, str]) -> CoordinateSystem:
    """
    Get a well-known coordinate system, e.g. from_authority_code("EPSG", 4326).

    Raises:
        UnknownAuthorityCodeError: If the code is not in the built-in registry
    """
    return _DEFAULT_FACTORY.create_from_authority_code(authority, code)
