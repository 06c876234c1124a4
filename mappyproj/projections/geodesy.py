"""Ellipsoidal primitives shared by the projection methods.

The function names follow the USGS General Cartographic Transformation Package
(GCTP), the source of most of the projection formulas in this package. Angles
are in radians.
"""

import math

from mappyproj.utils.constants import (
    EPSLN,
    HALF_PI,
    PHI1Z_MAX_ITER,
    PHI2Z_MAX_ITER,
    TWO_PI,
)
from mappyproj.utils.exceptions import ProjectionComputationError


def sign(x: float) -> float:
    return -1.0 if x < 0 else 1.0


def adjust_lon(x: float) -> float:
    """
    Normalize a longitude to the interval (-pi, pi].

    Args:
        x: A longitude in radians

    Returns:
        The same meridian expressed in (-pi, pi]
    """
    if -math.pi < x <= math.pi:
        return x
    x = math.fmod(x + math.pi, TWO_PI)
    if x <= 0:
        x += TWO_PI
    return x - math.pi


def asinz(con: float) -> float:
    """Arcsine that clamps its argument to [-1, 1] against rounding noise."""
    if abs(con) > 1.0:
        con = sign(con)
    return math.asin(con)


def msfnz(eccent: float, sinphi: float, cosphi: float) -> float:
    """Radius of the parallel at `phi` divided by the semi-major axis."""
    con = eccent * sinphi
    return cosphi / math.sqrt(1.0 - con * con)


def tsfnz(eccent: float, phi: float, sinphi: float) -> float:
    """Conformal (isometric) latitude function t used by the conformal projections."""
    con = eccent * sinphi
    com = 0.5 * eccent
    con = math.pow((1.0 - con) / (1.0 + con), com)
    return math.tan(0.5 * (HALF_PI - phi)) / con


def phi2z(eccent: float, ts: float) -> float:
    """
    Solve the conformal latitude function t for geodetic latitude.

    Args:
        eccent: The ellipsoid eccentricity
        ts: The value of the t function

    Returns:
        The latitude in radians

    Raises:
        ProjectionComputationError: If the iteration does not converge
    """
    eccnth = 0.5 * eccent
    phi = HALF_PI - 2.0 * math.atan(ts)
    for _ in range(PHI2Z_MAX_ITER):
        con = eccent * math.sin(phi)
        dphi = (
            HALF_PI
            - 2.0 * math.atan(ts * math.pow((1.0 - con) / (1.0 + con), eccnth))
            - phi
        )
        phi += dphi
        if abs(dphi) <= EPSLN:
            return phi
    raise ProjectionComputationError(
        f"latitude did not converge after {PHI2Z_MAX_ITER} iterations (ts={ts})"
    )


def qsfnz(eccent: float, sinphi: float) -> float:
    """Authalic latitude function q used by the equal-area projections."""
    if eccent > 1.0e-7:
        con = eccent * sinphi
        return (1.0 - eccent * eccent) * (
            sinphi / (1.0 - con * con)
            - (0.5 / eccent) * math.log((1.0 - con) / (1.0 + con))
        )
    return 2.0 * sinphi


def phi1z(eccent: float, qs: float) -> float:
    """
    Solve the authalic latitude function q for geodetic latitude.

    Raises:
        ProjectionComputationError: If the iteration does not converge
    """
    phi = asinz(0.5 * qs)
    if eccent < EPSLN:
        return phi
    eccnts = eccent * eccent
    for _ in range(PHI1Z_MAX_ITER):
        sinpi = math.sin(phi)
        cospi = math.cos(phi)
        con = eccent * sinpi
        com = 1.0 - con * con
        dphi = (
            0.5
            * com
            * com
            / cospi
            * (
                qs / (1.0 - eccnts)
                - sinpi / com
                + 0.5 / eccent * math.log((1.0 - con) / (1.0 + con))
            )
        )
        phi += dphi
        if abs(dphi) <= EPSLN:
            return phi
    raise ProjectionComputationError(
        f"authalic latitude did not converge after {PHI1Z_MAX_ITER} iterations (qs={qs})"
    )


# Coefficients of the meridian arc series


def e0fn(x: float) -> float:
    return 1.0 - 0.25 * x * (1.0 + x / 16.0 * (3.0 + 1.25 * x))


def e1fn(x: float) -> float:
    return 0.375 * x * (1.0 + 0.25 * x * (1.0 + 0.46875 * x))


def e2fn(x: float) -> float:
    return 0.05859375 * x * x * (1.0 + 0.75 * x)


def e3fn(x: float) -> float:
    return x * x * x * (35.0 / 3072.0)


def mlfn(e0: float, e1: float, e2: float, e3: float, phi: float) -> float:
    """Meridian arc length from the equator to `phi`, divided by the semi-major axis."""
    return (
        e0 * phi
        - e1 * math.sin(2.0 * phi)
        + e2 * math.sin(4.0 * phi)
        - e3 * math.sin(6.0 * phi)
    )
