"""Lambert Conformal Conic, one and two standard parallel variants."""

from __future__ import annotations

import math
from typing import Mapping, NamedTuple, Tuple

from mappyproj.constructs.datum import Ellipsoid
from mappyproj.projections.geodesy import adjust_lon, msfnz, phi2z, tsfnz
from mappyproj.projections.registry import (
    DEFAULT_OPTIONAL_PARAMETERS,
    ProjectionMethod,
)
from mappyproj.utils.constants import EPSLN, HALF_PI
from mappyproj.utils.exceptions import (
    InvalidProjectionParametersError,
    ProjectionComputationError,
)


class LambertConstants(NamedTuple):
    a: float
    e: float
    # ratio of the angle between meridians to the true angle
    ns: float
    f0: float
    # radius of the parallel of origin
    rh: float
    lon0: float
    false_easting: float
    false_northing: float


def forward(c: LambertConstants, lon: float, lat: float) -> Tuple[float, float]:
    con = abs(abs(lat) - HALF_PI)
    if con > EPSLN:
        sinphi = math.sin(lat)
        ts = tsfnz(c.e, lat, sinphi)
        rh1 = c.a * c.f0 * math.pow(ts, c.ns)
    else:
        if lat * c.ns <= 0:
            raise ProjectionComputationError(
                "lambert conformal conic is undefined at the pole opposite the cone apex "
                f"(latitude {math.degrees(lat)} degrees)"
            )
        rh1 = 0.0
    theta = c.ns * adjust_lon(lon - c.lon0)
    x = rh1 * math.sin(theta) + c.false_easting
    y = c.rh - rh1 * math.cos(theta) + c.false_northing
    return x, y


def inverse(c: LambertConstants, x: float, y: float) -> Tuple[float, float]:
    dx = x - c.false_easting
    dy = c.rh - y + c.false_northing
    if c.ns > 0:
        rh1 = math.sqrt(dx * dx + dy * dy)
        con = 1.0
    else:
        rh1 = -math.sqrt(dx * dx + dy * dy)
        con = -1.0
    theta = 0.0
    if rh1 != 0:
        theta = math.atan2(con * dx, con * dy)
    if rh1 != 0 or c.ns > 0.0:
        ts = math.pow(rh1 / (c.a * c.f0), 1.0 / c.ns)
        lat = phi2z(c.e, ts)
    else:
        lat = -HALF_PI
    lon = adjust_lon(theta / c.ns + c.lon0)
    return lon, lat


def _validate_2sp(params: Mapping[str, float]):
    lat1 = math.radians(params["standard_parallel_1"])
    lat2 = math.radians(params["standard_parallel_2"])
    if abs(lat1 + lat2) < EPSLN:
        raise InvalidProjectionParametersError(
            "standard parallels cannot be equal and on opposite sides of the equator "
            f"({params['standard_parallel_1']}, {params['standard_parallel_2']})"
        )


def _validate_1sp(params: Mapping[str, float]):
    if params["latitude_of_origin"] == 0:
        raise InvalidProjectionParametersError(
            "latitude_of_origin of a one standard parallel lambert conic cannot be the equator"
        )
    if params["scale_factor"] <= 0:
        raise InvalidProjectionParametersError(
            f"scale_factor must be positive, found {params['scale_factor']}"
        )


def _setup_2sp(params: Mapping[str, float], ellipsoid: Ellipsoid) -> LambertConstants:
    e = ellipsoid.eccentricity
    a = ellipsoid.semi_major_axis
    lat0 = math.radians(params["latitude_of_origin"])
    lat1 = math.radians(params["standard_parallel_1"])
    lat2 = math.radians(params["standard_parallel_2"])

    sin_po = math.sin(lat1)
    con = sin_po
    ms1 = msfnz(e, sin_po, math.cos(lat1))
    ts1 = tsfnz(e, lat1, sin_po)

    sin_po = math.sin(lat2)
    ms2 = msfnz(e, sin_po, math.cos(lat2))
    ts2 = tsfnz(e, lat2, sin_po)

    ts0 = tsfnz(e, lat0, math.sin(lat0))

    if abs(lat1 - lat2) > EPSLN:
        ns = math.log(ms1 / ms2) / math.log(ts1 / ts2)
    else:
        ns = con
    f0 = ms1 / (ns * math.pow(ts1, ns))
    return LambertConstants(
        a=a,
        e=e,
        ns=ns,
        f0=f0,
        rh=a * f0 * math.pow(ts0, ns),
        lon0=math.radians(params["central_meridian"]),
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
    )


def _check_ranges_1sp(params: Mapping[str, float]):
    if abs(params["latitude_of_origin"]) >= 90.0:
        raise InvalidProjectionParametersError(
            f"latitude_of_origin cannot be a pole, found {params['latitude_of_origin']}"
        )


def _setup_1sp(params: Mapping[str, float], ellipsoid: Ellipsoid) -> LambertConstants:
    e = ellipsoid.eccentricity
    a = ellipsoid.semi_major_axis
    lat0 = math.radians(params["latitude_of_origin"])
    sin_po = math.sin(lat0)
    ms0 = msfnz(e, sin_po, math.cos(lat0))
    ts0 = tsfnz(e, lat0, sin_po)
    ns = sin_po
    # the scale factor is folded into f0 so the shared formulas apply unchanged
    f0 = params["scale_factor"] * ms0 / (ns * math.pow(ts0, ns))
    return LambertConstants(
        a=a,
        e=e,
        ns=ns,
        f0=f0,
        rh=a * f0 * math.pow(ts0, ns),
        lon0=math.radians(params["central_meridian"]),
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
    )


LAMBERT_CONFORMAL_CONIC_2SP = ProjectionMethod(
    name="Lambert_Conformal_Conic_2SP",
    authority_code=9802,
    aliases=("Lambert_Conformal_Conic",),
    required=(
        "latitude_of_origin",
        "central_meridian",
        "standard_parallel_1",
        "standard_parallel_2",
    ),
    optional=DEFAULT_OPTIONAL_PARAMETERS,
    synonyms={
        "latitude_of_false_origin": "latitude_of_origin",
        "longitude_of_false_origin": "central_meridian",
        "latitude_of_1st_standard_parallel": "standard_parallel_1",
        "latitude_of_2nd_standard_parallel": "standard_parallel_2",
        "easting_at_false_origin": "false_easting",
        "northing_at_false_origin": "false_northing",
    },
    angular=frozenset(
        (
            "latitude_of_origin",
            "central_meridian",
            "standard_parallel_1",
            "standard_parallel_2",
        )
    ),
    validate=_validate_2sp,
    setup=_setup_2sp,
    forward=forward,
    inverse=inverse,
)

LAMBERT_CONFORMAL_CONIC_1SP = ProjectionMethod(
    name="Lambert_Conformal_Conic_1SP",
    authority_code=9801,
    aliases=(),
    required=("latitude_of_origin", "central_meridian", "scale_factor"),
    optional=DEFAULT_OPTIONAL_PARAMETERS,
    synonyms={},
    angular=frozenset(("latitude_of_origin", "central_meridian")),
    validate=_validate_1sp,
    setup=_setup_1sp,
    forward=forward,
    inverse=inverse,
    check_ranges=_check_ranges_1sp,
)

METHODS = (LAMBERT_CONFORMAL_CONIC_2SP, LAMBERT_CONFORMAL_CONIC_1SP)
