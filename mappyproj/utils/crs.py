"""Coordinate system constants and coercion used throughout mappyproj.

This module defines the standard coordinate systems used by the convenience helpers:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326), longitude first
- XY_CRS: Web Mercator projected coordinates (EPSG:3857)
"""

from __future__ import annotations

import re
from typing import Any

from mappyproj.constructs.coordinate_system import (
    FittedCoordinateSystem,
    GeocentricCoordinateSystem,
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
)
from mappyproj.factories.crs_factory import from_authority_code, from_wkt

# WGS84 longitude/latitude coordinate system (EPSG:4326)
# Standard GPS coordinates in decimal degrees, ordered (longitude, latitude)
LATLON_CRS = from_authority_code("EPSG", 4326)

# Web Mercator projected coordinate system (EPSG:3857)
# Coordinates are in meters (easting, northing)
XY_CRS = from_authority_code("EPSG", 3857)

_CS_TYPES = (
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
    GeocentricCoordinateSystem,
    FittedCoordinateSystem,
)

_AUTHORITY_CODE_RE = re.compile(r"^\s*([A-Za-z]+)\s*:\s*(\d+)\s*$")


def crs_from_user_input(value: Any):
    """
    Coerce a user supplied value into a coordinate system.

    Args:
        value: A coordinate system, an integer EPSG code, an "AUTHORITY:CODE" string
            (e.g. "EPSG:4326") or WKT text

    Returns:
        The coordinate system

    Raises:
        UnknownAuthorityCodeError: If a code is not in the built-in registry
        WktParseError: If a string is neither an authority code nor valid WKT
        TypeError: If the value has an unsupported type

    Examples:
        >>> from mappyproj.utils.crs import crs_from_user_input
        >>> crs_from_user_input("EPSG:3857").name
        'WGS 84 / Pseudo-Mercator'
    """
    if isinstance(value, _CS_TYPES):
        return value
    if isinstance(value, bool):
        raise TypeError(f"cannot build a coordinate system from {value!r}")
    if isinstance(value, int):
        return from_authority_code("EPSG", value)
    if isinstance(value, str):
        m = _AUTHORITY_CODE_RE.match(value)
        if m:
            return from_authority_code(m.group(1), m.group(2))
        return from_wkt(value)
    raise TypeError(
        f"cannot build a coordinate system from a {type(value).__name__}"
    )
