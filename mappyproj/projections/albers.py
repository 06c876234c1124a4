"""Albers Equal-Area Conic."""

from __future__ import annotations

import math
from typing import Mapping, NamedTuple, Tuple

from mappyproj.constructs.datum import Ellipsoid
from mappyproj.projections.geodesy import adjust_lon, msfnz, phi1z, qsfnz
from mappyproj.projections.registry import (
    DEFAULT_OPTIONAL_PARAMETERS,
    ProjectionMethod,
)
from mappyproj.utils.constants import EPSLN, HALF_PI
from mappyproj.utils.exceptions import (
    InvalidProjectionParametersError,
    ProjectionComputationError,
)


class AlbersConstants(NamedTuple):
    a: float
    e: float
    es: float
    ns0: float
    c: float
    rh: float
    lon0: float
    false_easting: float
    false_northing: float


def _radius(c: AlbersConstants, qs: float) -> float:
    radicand = c.c - c.ns0 * qs
    if radicand < 0:
        raise ProjectionComputationError(
            "point lies outside the domain of the albers projection"
        )
    return c.a * math.sqrt(radicand) / c.ns0


def forward(c: AlbersConstants, lon: float, lat: float) -> Tuple[float, float]:
    qs = qsfnz(c.e, math.sin(lat))
    rh1 = _radius(c, qs)
    theta = c.ns0 * adjust_lon(lon - c.lon0)
    x = rh1 * math.sin(theta) + c.false_easting
    y = c.rh - rh1 * math.cos(theta) + c.false_northing
    return x, y


def inverse(c: AlbersConstants, x: float, y: float) -> Tuple[float, float]:
    x = x - c.false_easting
    y = c.rh - y + c.false_northing
    if c.ns0 >= 0:
        rh1 = math.sqrt(x * x + y * y)
        con = 1.0
    else:
        rh1 = -math.sqrt(x * x + y * y)
        con = -1.0
    theta = 0.0
    if rh1 != 0.0:
        theta = math.atan2(con * x, con * y)
    con = rh1 * c.ns0 / c.a
    qs = (c.c - con * con) / c.ns0
    if c.e >= 1e-10:
        con = 1 - 0.5 * (1.0 - c.es) * math.log((1.0 - c.e) / (1.0 + c.e)) / c.e
        if abs(abs(con) - abs(qs)) > 0.0000000001:
            lat = phi1z(c.e, qs)
        else:
            lat = HALF_PI if qs >= 0 else -HALF_PI
    else:
        lat = phi1z(c.e, qs)
    lon = adjust_lon(theta / c.ns0 + c.lon0)
    return lon, lat


def _validate(params: Mapping[str, float]):
    lat1 = math.radians(params["standard_parallel_1"])
    lat2 = math.radians(params["standard_parallel_2"])
    if abs(lat1 + lat2) < EPSLN:
        raise InvalidProjectionParametersError(
            "standard parallels cannot be equal and on opposite sides of the equator "
            f"({params['standard_parallel_1']}, {params['standard_parallel_2']})"
        )


def _setup(params: Mapping[str, float], ellipsoid: Ellipsoid) -> AlbersConstants:
    a = ellipsoid.semi_major_axis
    es = ellipsoid.eccentricity_squared
    e = ellipsoid.eccentricity
    lat0 = math.radians(params["latitude_of_center"])
    lat1 = math.radians(params["standard_parallel_1"])
    lat2 = math.radians(params["standard_parallel_2"])

    sin_po = math.sin(lat1)
    con = sin_po
    ms1 = msfnz(e, sin_po, math.cos(lat1))
    qs1 = qsfnz(e, sin_po)

    sin_po = math.sin(lat2)
    ms2 = msfnz(e, sin_po, math.cos(lat2))
    qs2 = qsfnz(e, sin_po)

    qs0 = qsfnz(e, math.sin(lat0))

    if abs(lat1 - lat2) > EPSLN:
        ns0 = (ms1 * ms1 - ms2 * ms2) / (qs2 - qs1)
    else:
        ns0 = con
    c = ms1 * ms1 + ns0 * qs1
    return AlbersConstants(
        a=a,
        e=e,
        es=es,
        ns0=ns0,
        c=c,
        rh=a * math.sqrt(c - ns0 * qs0) / ns0,
        lon0=math.radians(params["longitude_of_center"]),
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
    )


ALBERS_CONIC_EQUAL_AREA = ProjectionMethod(
    name="Albers_Conic_Equal_Area",
    authority_code=9822,
    aliases=("Albers",),
    required=(
        "latitude_of_center",
        "longitude_of_center",
        "standard_parallel_1",
        "standard_parallel_2",
    ),
    optional=DEFAULT_OPTIONAL_PARAMETERS,
    synonyms={
        "latitude_of_origin": "latitude_of_center",
        "central_meridian": "longitude_of_center",
        "latitude_of_false_origin": "latitude_of_center",
        "longitude_of_false_origin": "longitude_of_center",
    },
    angular=frozenset(
        (
            "latitude_of_center",
            "longitude_of_center",
            "standard_parallel_1",
            "standard_parallel_2",
        )
    ),
    validate=_validate,
    setup=_setup,
    forward=forward,
    inverse=inverse,
)

METHODS = (ALBERS_CONIC_EQUAL_AREA,)
