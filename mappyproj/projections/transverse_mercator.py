"""Transverse Mercator (Gauss-Kruger) after the USGS GCTP series formulation."""

from __future__ import annotations

import math
from typing import Mapping, NamedTuple, Tuple

from mappyproj.constructs.datum import Ellipsoid
from mappyproj.projections.geodesy import (
    adjust_lon,
    asinz,
    e0fn,
    e1fn,
    e2fn,
    e3fn,
    mlfn,
)
from mappyproj.projections.registry import (
    DEFAULT_OPTIONAL_PARAMETERS,
    ProjectionMethod,
)
from mappyproj.utils.constants import EPSLN, HALF_PI, TM_INVERSE_MAX_ITER
from mappyproj.utils.exceptions import (
    InvalidProjectionParametersError,
    ProjectionComputationError,
)

# Below this eccentricity squared the spherical formulas are used
SPHERE_ES_LIMIT = 0.00001


class TransverseMercatorConstants(NamedTuple):
    a: float
    k0: float
    lon0: float
    lat0: float
    false_easting: float
    false_northing: float
    es: float
    esp: float
    e0: float
    e1: float
    e2: float
    e3: float
    ml0: float
    spherical: bool


def _setup(params: Mapping[str, float], ellipsoid: Ellipsoid) -> TransverseMercatorConstants:
    a = ellipsoid.semi_major_axis
    es = ellipsoid.eccentricity_squared
    lat0 = math.radians(params["latitude_of_origin"])
    e0 = e0fn(es)
    e1 = e1fn(es)
    e2 = e2fn(es)
    e3 = e3fn(es)
    return TransverseMercatorConstants(
        a=a,
        k0=params["scale_factor"],
        lon0=math.radians(params["central_meridian"]),
        lat0=lat0,
        false_easting=params["false_easting"],
        false_northing=params["false_northing"],
        es=es,
        esp=es / (1.0 - es),
        e0=e0,
        e1=e1,
        e2=e2,
        e3=e3,
        ml0=a * mlfn(e0, e1, e2, e3, lat0),
        spherical=es < SPHERE_ES_LIMIT,
    )


def forward(c: TransverseMercatorConstants, lon: float, lat: float) -> Tuple[float, float]:
    delta_lon = adjust_lon(lon - c.lon0)
    sin_phi = math.sin(lat)
    cos_phi = math.cos(lat)

    if c.spherical:
        b = cos_phi * math.sin(delta_lon)
        if abs(abs(b) - 1.0) < EPSLN:
            raise ProjectionComputationError(
                "point projects into infinity on the spherical transverse mercator"
            )
        x = 0.5 * c.a * c.k0 * math.log((1.0 + b) / (1.0 - b))
        con = math.acos(
            max(-1.0, min(1.0, cos_phi * math.cos(delta_lon) / math.sqrt(1.0 - b * b)))
        )
        if lat < 0:
            con = -con
        y = c.a * c.k0 * (con - c.lat0)
        return x + c.false_easting, y + c.false_northing

    al = cos_phi * delta_lon
    als = al * al
    cs = c.esp * cos_phi * cos_phi
    tq = math.tan(lat)
    t = tq * tq
    con = 1.0 - c.es * sin_phi * sin_phi
    n = c.a / math.sqrt(con)
    ml = c.a * mlfn(c.e0, c.e1, c.e2, c.e3, lat)

    x = (
        c.k0
        * n
        * al
        * (
            1.0
            + als
            / 6.0
            * (1.0 - t + cs + als / 20.0 * (5.0 - 18.0 * t + t * t + 72.0 * cs - 58.0 * c.esp))
        )
        + c.false_easting
    )
    y = (
        c.k0
        * (
            ml
            - c.ml0
            + n
            * tq
            * (
                als
                * (
                    0.5
                    + als
                    / 24.0
                    * (
                        5.0
                        - t
                        + 9.0 * cs
                        + 4.0 * cs * cs
                        + als
                        / 30.0
                        * (61.0 - 58.0 * t + t * t + 600.0 * cs - 330.0 * c.esp)
                    )
                )
            )
        )
        + c.false_northing
    )
    return x, y


def inverse(c: TransverseMercatorConstants, x: float, y: float) -> Tuple[float, float]:
    x = x - c.false_easting
    y = y - c.false_northing

    if c.spherical:
        f = math.exp(x / (c.a * c.k0))
        g = 0.5 * (f - 1.0 / f)
        temp = c.lat0 + y / (c.a * c.k0)
        h = math.cos(temp)
        con = math.sqrt((1.0 - h * h) / (1.0 + g * g))
        lat = asinz(con)
        if temp < 0:
            lat = -lat
        if g == 0 and h == 0:
            lon = c.lon0
        else:
            lon = adjust_lon(math.atan2(g, h) + c.lon0)
        return lon, lat

    con = (c.ml0 + y / c.k0) / c.a
    phi = con
    for i in range(TM_INVERSE_MAX_ITER + 1):
        delta_phi = (
            (
                con
                + c.e1 * math.sin(2.0 * phi)
                - c.e2 * math.sin(4.0 * phi)
                + c.e3 * math.sin(6.0 * phi)
            )
            / c.e0
        ) - phi
        phi += delta_phi
        if abs(delta_phi) <= EPSLN:
            break
    else:
        raise ProjectionComputationError(
            f"transverse mercator latitude did not converge after {TM_INVERSE_MAX_ITER} iterations"
        )

    if abs(phi) >= HALF_PI:
        lat = HALF_PI if y >= 0 else -HALF_PI
        return c.lon0, lat

    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    tan_phi = math.tan(phi)
    cs = c.esp * cos_phi * cos_phi
    css = cs * cs
    t = tan_phi * tan_phi
    ts = t * t
    con = 1.0 - c.es * sin_phi * sin_phi
    n = c.a / math.sqrt(con)
    r = n * (1.0 - c.es) / con
    d = x / (n * c.k0)
    ds = d * d

    lat = phi - (n * tan_phi * ds / r) * (
        0.5
        - ds
        / 24.0
        * (
            5.0
            + 3.0 * t
            + 10.0 * cs
            - 4.0 * css
            - 9.0 * c.esp
            - ds / 30.0 * (61.0 + 90.0 * t + 298.0 * cs + 45.0 * ts - 252.0 * c.esp - 3.0 * css)
        )
    )
    lon = adjust_lon(
        c.lon0
        + (
            d
            * (
                1.0
                - ds
                / 6.0
                * (1.0 + 2.0 * t + cs - ds / 20.0 * (5.0 - 2.0 * cs + 28.0 * t - 3.0 * css + 8.0 * c.esp + 24.0 * ts))
            )
            / cos_phi
        )
    )
    return lon, lat


def _validate(params: Mapping[str, float]):
    if params["scale_factor"] <= 0:
        raise InvalidProjectionParametersError(
            f"scale_factor must be positive, found {params['scale_factor']}"
        )


TRANSVERSE_MERCATOR = ProjectionMethod(
    name="Transverse_Mercator",
    authority_code=9807,
    aliases=("Gauss_Kruger",),
    required=("latitude_of_origin", "central_meridian", "scale_factor"),
    optional=DEFAULT_OPTIONAL_PARAMETERS,
    synonyms={},
    angular=frozenset(("latitude_of_origin", "central_meridian")),
    validate=_validate,
    setup=_setup,
    forward=forward,
    inverse=inverse,
)

METHODS = (TRANSVERSE_MERCATOR,)
