"""Write coordinate system constructs as OGC WKT1."""

from __future__ import annotations

from typing import List, Optional, Union

import numpy as np

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.axis import Axis
from mappyproj.constructs.coordinate_system import (
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
from mappyproj.constructs.projection import Projection, ProjectionParameter
from mappyproj.constructs.units import DEGREE, AngularUnit, LinearUnit
from mappyproj.transforms.math_transform import Affine
from mappyproj.utils.keys import (
    AUTHORITY_KEY,
    AXIS_KEY,
    DATUM_KEY,
    FITTED_CS_KEY,
    GEOCCS_KEY,
    GEOGCS_KEY,
    PARAM_MT_KEY,
    PARAMETER_KEY,
    PRIMEM_KEY,
    PROJCS_KEY,
    PROJECTION_KEY,
    SPHEROID_KEY,
    TOWGS84_KEY,
    UNIT_KEY,
)
from mappyproj.wkt.parser import AFFINE_METHOD

Writable = Union[
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
    GeocentricCoordinateSystem,
    FittedCoordinateSystem,
    HorizontalDatum,
    Ellipsoid,
    PrimeMeridian,
    AngularUnit,
    LinearUnit,
    Projection,
    Axis,
    Affine,
    Authority,
    BursaWolfParameters,
]


def format_number(value: float) -> str:
    """Write a number in its shortest round-trip form; integral values have no fraction."""
    v = float(value)
    if v.is_integer() and abs(v) < 1e17:
        return str(int(v))
    return repr(v)


def quote(s: str) -> str:
    return '"' + s.replace('"', '""') + '"'


def _node(keyword: str, *args: Optional[str]) -> str:
    return f"{keyword}[{','.join(a for a in args if a is not None)}]"


def _authority(authority: Optional[Authority]) -> Optional[str]:
    if authority is None:
        return None
    return _node(AUTHORITY_KEY, quote(authority.name), quote(str(authority.code)))


def _unit(unit: Union[AngularUnit, LinearUnit]) -> str:
    if isinstance(unit, AngularUnit):
        factor = unit.radians_per_unit
    else:
        factor = unit.meters_per_unit
    return _node(UNIT_KEY, quote(unit.name), format_number(factor), _authority(unit.authority))


def _axis(axis: Axis) -> str:
    return _node(AXIS_KEY, quote(axis.name), axis.orientation.value)


def _ellipsoid(ellipsoid: Ellipsoid) -> str:
    # SPHEROID has no unit node, the axis is always written in metres
    ellipsoid = ellipsoid.in_meters()
    return _node(
        SPHEROID_KEY,
        quote(ellipsoid.name),
        format_number(ellipsoid.semi_major_axis),
        format_number(ellipsoid.inverse_flattening),
        _authority(ellipsoid.authority),
    )


def _to_wgs84(shift: Optional[BursaWolfParameters]) -> Optional[str]:
    if shift is None:
        return None
    return _node(TOWGS84_KEY, *(format_number(v) for v in shift))


def _datum(datum: HorizontalDatum) -> str:
    return _node(
        DATUM_KEY,
        quote(datum.name),
        _ellipsoid(datum.ellipsoid),
        _to_wgs84(datum.to_wgs84),
        _authority(datum.authority),
    )


def _prime_meridian(pm: PrimeMeridian, unit: AngularUnit) -> str:
    # a prime meridian is written in the unit of its coordinate system
    if pm.angular_unit.is_equivalent(unit):
        longitude = pm.longitude
    else:
        longitude = pm.longitude_degrees / unit.degrees_per_unit
    return _node(PRIMEM_KEY, quote(pm.name), format_number(longitude), _authority(pm.authority))


def _parameter(p: ProjectionParameter) -> str:
    return _node(PARAMETER_KEY, quote(p.name), format_number(p.value))


def _projection(projection: Projection) -> str:
    return _node(PROJECTION_KEY, quote(projection.method), _authority(projection.authority))


def _affine(affine: Affine) -> str:
    size = affine.matrix.shape[0]
    identity = np.eye(size)
    args: List[str] = [
        quote(AFFINE_METHOD),
        _node(PARAMETER_KEY, quote("num_row"), str(size)),
        _node(PARAMETER_KEY, quote("num_col"), str(size)),
    ]
    for i in range(size):
        for j in range(size):
            if affine.matrix[i, j] != identity[i, j]:
                args.append(
                    _node(PARAMETER_KEY, quote(f"elt_{i}_{j}"), format_number(affine.matrix[i, j]))
                )
    return _node(PARAM_MT_KEY, *args)


def _geographic(cs: GeographicCoordinateSystem) -> str:
    return _node(
        GEOGCS_KEY,
        quote(cs.name),
        _datum(cs.datum),
        _prime_meridian(cs.prime_meridian, cs.angular_unit),
        _unit(cs.angular_unit),
        *(_axis(a) for a in cs.axes),
        _authority(cs.authority),
    )


def _projected(cs: ProjectedCoordinateSystem) -> str:
    return _node(
        PROJCS_KEY,
        quote(cs.name),
        _geographic(cs.geographic_cs),
        _projection(cs.projection),
        *(_parameter(p) for p in cs.projection.parameters),
        _unit(cs.linear_unit),
        *(_axis(a) for a in cs.axes),
        _authority(cs.authority),
    )


def _geocentric(cs: GeocentricCoordinateSystem) -> str:
    return _node(
        GEOCCS_KEY,
        quote(cs.name),
        _datum(cs.datum),
        _prime_meridian(cs.prime_meridian, DEGREE),
        _unit(cs.linear_unit),
        *(_axis(a) for a in cs.axes),
        _authority(cs.authority),
    )


def _fitted(cs: FittedCoordinateSystem) -> str:
    return _node(
        FITTED_CS_KEY,
        quote(cs.name),
        _affine(cs.to_base),
        to_wkt(cs.base_cs),
        *(_axis(a) for a in cs.axes),
        _authority(cs.authority),
    )


_WRITERS = {
    GeographicCoordinateSystem: _geographic,
    ProjectedCoordinateSystem: _projected,
    GeocentricCoordinateSystem: _geocentric,
    FittedCoordinateSystem: _fitted,
    HorizontalDatum: _datum,
    Ellipsoid: _ellipsoid,
    AngularUnit: _unit,
    LinearUnit: _unit,
    Projection: _projection,
    Axis: _axis,
    Affine: _affine,
    Authority: _authority,
    BursaWolfParameters: _to_wgs84,
    ProjectionParameter: _parameter,
}


def to_wkt(obj: Writable) -> str:
    """
    Serialize a construct as canonical WKT1.

    Axes are always written, so the output is explicit about ordinate order. Parsing the
    output of a coordinate system gives back an equal coordinate system.

    Args:
        obj: A coordinate system or one of its components

    Returns:
        The WKT text

    Raises:
        TypeError: If the object has no WKT form

    Examples:
        >>> from mappyproj.utils.crs import LATLON_CRS
        >>> LATLON_CRS.to_wkt()[:15]
        'GEOGCS["WGS 84"'
    """
    if isinstance(obj, PrimeMeridian):
        return _prime_meridian(obj, obj.angular_unit)
    writer = _WRITERS.get(type(obj))
    if writer is None:
        raise TypeError(f"cannot write {type(obj).__name__} as WKT")
    return writer(obj)
