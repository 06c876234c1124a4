"""Derive the transform between two coordinate systems.

Both sides are first reduced to longitude and latitude in degrees east of
Greenwich on their own datum. A datum shift joins the two sides when their
datums differ, and the target side's reduction is then undone.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, NamedTuple

import numpy as np

from mappyproj.constructs.axis import AxisOrientation
from mappyproj.constructs.coordinate_system import (
    CoordinateSystem,
    FittedCoordinateSystem,
    GeocentricCoordinateSystem,
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
)
from mappyproj.constructs.datum import Ellipsoid, HorizontalDatum, PrimeMeridian
from mappyproj.projections import get_method
from mappyproj.transforms.coordinate_transformation import (
    CoordinateTransformation,
    TransformType,
)
from mappyproj.transforms.geocentric import DatumShiftTransform, GeocentricTransform
from mappyproj.transforms.math_transform import (
    Affine,
    Direction,
    Identity,
    MathTransform,
    ProjectionTransform,
)
from mappyproj.transforms.ops import compose
from mappyproj.utils.constants import DEFAULT_TRANSFORMATION_CACHE_SIZE
from mappyproj.utils.exceptions import DatumShiftError

log = logging.getLogger(__name__)

# orientation -> (target ordinate, sign)
_ORDINATE_OF = {
    AxisOrientation.EAST: (0, 1.0),
    AxisOrientation.WEST: (0, -1.0),
    AxisOrientation.NORTH: (1, 1.0),
    AxisOrientation.SOUTH: (1, -1.0),
    AxisOrientation.UP: (2, 1.0),
    AxisOrientation.DOWN: (2, -1.0),
}

# geocentric orientation -> target ordinate
_GEOCENTRIC_ORDINATE_OF = {
    AxisOrientation.OTHER: 0,
    AxisOrientation.EAST: 1,
    AxisOrientation.NORTH: 2,
}


def _axis_affine(axes: tuple, horizontal_scale: float, translate_x: float = 0.0) -> Affine:
    """
    Build the affine that reorders and scales ordinates given in `axes` order into
    (east, north[, up]) order.

    Horizontal ordinates are multiplied by `horizontal_scale`; the vertical one is kept.
    """
    n = len(axes)
    m = np.zeros((n + 1, n + 1))
    m[n, n] = 1.0
    for i, axis in enumerate(axes):
        row, sign = _ORDINATE_OF[axis.orientation]
        scale = sign * (horizontal_scale if row < 2 else 1.0)
        m[row, i] = scale
    m[0, n] = translate_x
    return Affine(m)


def _prime_meridian_affine(prime_meridian: PrimeMeridian) -> Affine:
    return Affine.from_scale_translate([1.0, 1.0], [prime_meridian.longitude_degrees, 0.0])


def geographic_normalizer(cs: GeographicCoordinateSystem) -> Affine:
    """The affine from the ordinates of `cs` to Greenwich (longitude, latitude[, height]) degrees."""
    return _axis_affine(
        cs.axes, cs.angular_unit.degrees_per_unit, cs.prime_meridian.longitude_degrees
    )


def projected_normalizer(cs: ProjectedCoordinateSystem) -> Affine:
    """The affine from the ordinates of `cs` to (easting, northing[, height]) metres."""
    return _axis_affine(cs.axes, cs.linear_unit.meters_per_unit)


def geocentric_normalizer(cs: GeocentricCoordinateSystem) -> Affine:
    """
    The affine from the ordinates of `cs` to (X, Y, Z) metres.

    Axes oriented OTHER, EAST and NORTH are X, Y and Z wherever they appear. Axes that
    do not name each of those once are taken in order.
    """
    s = cs.linear_unit.meters_per_unit
    rows = [_GEOCENTRIC_ORDINATE_OF.get(axis.orientation) for axis in cs.axes]
    if sorted(r for r in rows if r is not None) != [0, 1, 2]:
        return Affine.from_scale_translate([s, s, s])
    m = np.zeros((4, 4))
    m[3, 3] = 1.0
    for i, row in enumerate(rows):
        m[row, i] = s
    return Affine(m)


def projection_ellipsoid(cs: ProjectedCoordinateSystem, parameters: dict) -> Ellipsoid:
    """
    The ellipsoid a projection is computed on: the datum's ellipsoid, unless the
    projection overrides its axes with semi_major / semi_minor parameters.
    """
    ellipsoid = cs.geographic_cs.datum.ellipsoid.in_meters()
    if "semi_major" not in parameters and "semi_minor" not in parameters:
        return ellipsoid
    a = parameters.get("semi_major", ellipsoid.semi_major_axis)
    if "semi_minor" in parameters:
        return Ellipsoid.from_axes(ellipsoid.name, a, parameters["semi_minor"])
    return Ellipsoid(ellipsoid.name, a, ellipsoid.inverse_flattening)


def projection_transform(cs: ProjectedCoordinateSystem) -> ProjectionTransform:
    """
    Build the forward projection of a projected coordinate system.

    Angular parameters are converted from the base geographic unit to degrees and the
    false easting and northing from the projected unit to metres.

    Raises:
        UnsupportedProjectionMethodError: If the method is not registered
        MissingProjectionParameterError: If a required parameter is missing
        InvalidProjectionParametersError: If parameter values are unusable
    """
    method = get_method(cs.projection.method)
    resolved = cs.resolved_parameters()
    constants = method.setup(resolved, projection_ellipsoid(cs, resolved))
    return ProjectionTransform(method, constants, Direction.FORWARD)


class _Reduction(NamedTuple):
    steps: List[MathTransform]
    datum: HorizontalDatum


def to_geographic(cs: CoordinateSystem) -> _Reduction:
    """
    Get the steps taking the ordinates of `cs` to Greenwich (longitude, latitude) degrees
    on the datum of `cs`.
    """
    if isinstance(cs, GeographicCoordinateSystem):
        return _Reduction([geographic_normalizer(cs)], cs.datum)
    if isinstance(cs, ProjectedCoordinateSystem):
        return _Reduction(
            [
                projected_normalizer(cs),
                projection_transform(cs).inverse(),
                _prime_meridian_affine(cs.geographic_cs.prime_meridian),
            ],
            cs.datum,
        )
    if isinstance(cs, GeocentricCoordinateSystem):
        return _Reduction(
            [
                geocentric_normalizer(cs),
                GeocentricTransform(cs.datum.ellipsoid.in_meters(), Direction.INVERSE),
                _prime_meridian_affine(cs.prime_meridian),
            ],
            cs.datum,
        )
    if isinstance(cs, FittedCoordinateSystem):
        base = to_geographic(cs.base_cs)
        return _Reduction([cs.to_base] + base.steps, base.datum)
    raise TypeError(f"unsupported coordinate system type {type(cs).__name__}")


def from_geographic(cs: CoordinateSystem) -> _Reduction:
    """The steps taking Greenwich geographic degrees on the datum of `cs` to its ordinates."""
    reduction = to_geographic(cs)
    return _Reduction([s.inverse() for s in reversed(reduction.steps)], reduction.datum)


class CoordinateTransformationFactory:
    """
    Builds transformations between coordinate systems.

    Transformations are memoized per (source, target) pair in a bounded LRU cache, so
    asking twice for the same pair returns the same object.

    Args:
        allow_null_datum_shift: When two datums differ and the shift between them is
            unknown, apply a null geocentric shift and log a warning. When False such a
            request raises DatumShiftError.
        cache_size: The maximum number of transformations to keep; 0 disables the cache

    Examples:
        >>> from mappyproj import from_authority_code
        >>> from mappyproj.factories.transformation_factory import (
        ...     CoordinateTransformationFactory,
        ... )
        >>> factory = CoordinateTransformationFactory()
        >>> t = factory.create_from_coordinate_systems(
        ...     from_authority_code("EPSG", 4326), from_authority_code("EPSG", 900913)
        ... )
        >>> x, y = t.math_transform.transform((-74.008573, 40.711946))
    """

    def __init__(
        self,
        allow_null_datum_shift: bool = True,
        cache_size: int = DEFAULT_TRANSFORMATION_CACHE_SIZE,
    ):
        self.allow_null_datum_shift = allow_null_datum_shift
        self._cached_create = lru_cache(maxsize=cache_size)(self._create)

    def create_from_coordinate_systems(
        self, source: CoordinateSystem, target: CoordinateSystem
    ) -> CoordinateTransformation:
        """
        Build the transformation from `source` to `target`.

        Args:
            source: The coordinate system of the input points
            target: The coordinate system of the output points

        Returns:
            A reusable transformation

        Raises:
            UnsupportedProjectionMethodError: If a projection method is not registered
            MissingProjectionParameterError: If a projection lacks a required parameter
            InvalidProjectionParametersError: If projection parameters are unusable
            DatumShiftError: If the datums differ, no shift is known and null shifts
                are not allowed
        """
        return self._cached_create(source, target)

    def cache_clear(self):
        self._cached_create.cache_clear()

    def _create(
        self, source: CoordinateSystem, target: CoordinateSystem
    ) -> CoordinateTransformation:
        if source is target or source == target:
            return CoordinateTransformation(
                source, target, Identity(source.dimension), TransformType.CONVERSION
            )

        source_side = to_geographic(source)
        target_side = from_geographic(target)

        steps: List[MathTransform] = list(source_side.steps)
        transform_type = TransformType.CONVERSION
        if not source_side.datum.is_same_datum(target_side.datum):
            steps.append(self.datum_shift(source_side.datum, target_side.datum))
            transform_type = TransformType.TRANSFORMATION
        steps.extend(target_side.steps)

        math_transform = compose(steps)
        log.debug(
            f"{transform_type.value} from {source.name} to {target.name}: {math_transform!r}"
        )
        return CoordinateTransformation(source, target, math_transform, transform_type)

    def datum_shift(
        self, source: HorizontalDatum, target: HorizontalDatum
    ) -> DatumShiftTransform:
        """
        Build the shift between two different datums.

        A Bursa-Wolf shift through WGS84 is used when both datums know their shift to
        WGS84; otherwise only the ellipsoid changes.

        Raises:
            DatumShiftError: If no shift is known and null shifts are not allowed
        """
        source_shift = source.shift_to_wgs84()
        target_shift = target.shift_to_wgs84()
        source_ellipsoid = source.ellipsoid.in_meters()
        target_ellipsoid = target.ellipsoid.in_meters()
        if source_shift is not None and target_shift is not None:
            return DatumShiftTransform.bursa_wolf(
                source_ellipsoid, source_shift, target_ellipsoid, target_shift
            )
        if not self.allow_null_datum_shift:
            raise DatumShiftError(
                f"no shift parameters are known between datum {source.name} "
                f"and datum {target.name}"
            )
        log.warning(
            f"no shift parameters are known between datum {source.name} and datum "
            f"{target.name}; applying a null shift, results may be off by hundreds of metres"
        )
        return DatumShiftTransform.null_shift(source_ellipsoid, target_ellipsoid)


_DEFAULT_FACTORY = CoordinateTransformationFactory()


def create_transformation(
    source: CoordinateSystem, target: CoordinateSystem
) -> CoordinateTransformation:
    """
    Build the transformation from `source` to `target` with the default factory.

    Examples:
        >>> from mappyproj import create_transformation, from_authority_code
        >>> t = create_transformation(
        ...     from_authority_code("EPSG", 4326), from_authority_code("EPSG", 3857)
        ... )
        >>> t.transform_type.value
        'conversion'
    """
    return _DEFAULT_FACTORY.create_from_coordinate_systems(source, target)
