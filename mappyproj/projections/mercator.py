"""Mercator projection methods: 1SP, 2SP and the spherical Pseudo-Mercator."""

from __future__ import annotations

import math
from typing import Mapping, NamedTuple, Tuple

from mappyproj.constructs.datum import Ellipsoid
from mappyproj.projections.geodesy import adjust_lon, msfnz, phi2z
from mappyproj.projections.registry import (
    DEFAULT_OPTIONAL_PARAMETERS,
    ProjectionMethod,
    no_validation,
)
from mappyproj.utils.constants import EPSLN, HALF_PI
from mappyproj.utils.exceptions import (
    InvalidProjectionParametersError,
    ProjectionComputationError,
)


class MercatorConstants(NamedTuple):
    a: float
    e: float
    k0: float
    lon0: float
    false_easting: float
    false_northing: float


def forward(c: MercatorConstants, lon: float, lat: float) -> Tuple[float, float]:
    if abs(abs(lat) - HALF_PI) <= EPSLN:
        raise ProjectionComputationError(
            "mercator is undefined at the poles "
            f"(latitude {math.degrees(lat)} degrees)"
        )
    esinphi = c.e * math.sin(lat)
    x = c.false_easting + c.a * c.k0 * adjust_lon(lon - c.lon0)
    y = c.false_northing + c.a * c.k0 * math.log(
        math.tan(math.pi * 0.25 + lat * 0.5)
        * math.pow((1.0 - esinphi) / (1.0 + esinphi), 0.5 * c.e)
    )
    return x, y


def inverse(c: MercatorConstants, x: float, y: float) -> Tuple[float, float]:
    ts = math.exp(-(y - c.false_northing) / (c.a * c.k0))
    lat = phi2z(c.e, ts)
    lon = adjust_lon(c.lon0 + (x - c.false_easting) / (c.a * c.k0))
    return lon, lat


def _validate_1sp(params: Mapping[str, float]):
    if params["scale_factor"] <= 0:
        raise InvalidProjectionParametersError(
            f"scale_factor must be positive, found {params['scale_factor']}"
        )


def _setup_1sp(params: Mapping[str, float], ellipsoid: Ellipsoid) -> MercatorConstants:
    return MercatorConstants(
        a=ellipsoid.semi_major_axis,
        e=ellipsoid.eccentricity,
        k0=params["scale_factor"],
        lon0=math.radians(params["central_meridian"]),
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
    )


def _check_ranges_2sp(params: Mapping[str, float]):
    if abs(params["standard_parallel_1"]) >= 90.0:
        raise InvalidProjectionParametersError(
            "standard_parallel_1 must be between -90 and 90 degrees, "
            f"found {params['standard_parallel_1']}"
        )


def _setup_2sp(params: Mapping[str, float], ellipsoid: Ellipsoid) -> MercatorConstants:
    lat1 = math.radians(params["standard_parallel_1"])
    e = ellipsoid.eccentricity
    return MercatorConstants(
        a=ellipsoid.semi_major_axis,
        e=e,
        k0=msfnz(e, math.sin(lat1), math.cos(lat1)),
        lon0=math.radians(params["central_meridian"]),
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
    )


def _setup_pseudo(params: Mapping[str, float], ellipsoid: Ellipsoid) -> MercatorConstants:
    # spherical formulas on the semi-major axis, whatever the ellipsoid
    return MercatorConstants(
        a=ellipsoid.semi_major_axis,
        e=0.0,
        k0=1.0,
        lon0=math.radians(params["central_meridian"]),
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
    )


MERCATOR_1SP = ProjectionMethod(
    name="Mercator_1SP",
    authority_code=9804,
    aliases=("Mercator",),
    required=("central_meridian", "scale_factor"),
    optional={**DEFAULT_OPTIONAL_PARAMETERS, "latitude_of_origin": 0.0},
    synonyms={},
    angular=frozenset(("central_meridian", "latitude_of_origin")),
    validate=_validate_1sp,
    setup=_setup_1sp,
    forward=forward,
    inverse=inverse,
)

MERCATOR_2SP = ProjectionMethod(
    name="Mercator_2SP",
    authority_code=9805,
    aliases=(),
    required=("central_meridian", "standard_parallel_1"),
    optional={**DEFAULT_OPTIONAL_PARAMETERS, "latitude_of_origin": 0.0},
    synonyms={},
    angular=frozenset(("central_meridian", "standard_parallel_1", "latitude_of_origin")),
    validate=no_validation,
    setup=_setup_2sp,
    forward=forward,
    inverse=inverse,
    check_ranges=_check_ranges_2sp,
)

PSEUDO_MERCATOR = ProjectionMethod(
    name="Popular_Visualisation_Pseudo_Mercator",
    authority_code=1024,
    aliases=("Pseudo_Mercator", "Mercator_Auxiliary_Sphere"),
    required=("central_meridian",),
    optional={**DEFAULT_OPTIONAL_PARAMETERS, "latitude_of_origin": 0.0, "scale_factor": 1.0},
    synonyms={},
    angular=frozenset(("central_meridian", "latitude_of_origin")),
    validate=no_validation,
    setup=_setup_pseudo,
    forward=forward,
    inverse=inverse,
)

METHODS = (MERCATOR_1SP, MERCATOR_2SP, PSEUDO_MERCATOR)
