"""Exchange coordinate systems with pyproj through WKT1."""

from __future__ import annotations

import logging

from pyproj import CRS
from pyproj.enums import WktVersion
from pyproj.exceptions import CRSError

from mappyproj.constructs.coordinate_system import CoordinateSystem
from mappyproj.wkt.parser import parse_wkt

log = logging.getLogger(__name__)


def to_pyproj_crs(cs: CoordinateSystem) -> CRS:
    """
    Build the pyproj CRS equivalent of a coordinate system.

    Args:
        cs: The coordinate system

    Returns:
        A pyproj CRS parsed from the WKT of `cs`

    Raises:
        ValueError: If PROJ cannot interpret the definition

    Examples:
        >>> from mappyproj.utils.crs import LATLON_CRS
        >>> to_pyproj_crs(LATLON_CRS).is_geographic
        True
    """
    wkt = cs.to_wkt()
    try:
        return CRS.from_wkt(wkt)
    except CRSError as e:
        raise ValueError(f"pyproj could not read the definition of {cs.name}") from e


def from_pyproj_crs(crs: CRS) -> CoordinateSystem:
    """
    Build a coordinate system from a pyproj CRS.

    The CRS is exported as GDAL flavored WKT1, which is then parsed. Constructs
    that WKT1 cannot express (e.g. compound or vertical systems) are rejected.

    Args:
        crs: The pyproj CRS, or anything pyproj.CRS.from_user_input accepts

    Returns:
        The coordinate system

    Raises:
        ValueError: If the input is not a CRS pyproj understands or has no WKT1 form
        WktParseError: If the exported WKT cannot be parsed
    """
    try:
        crs = CRS.from_user_input(crs)
    except CRSError as e:
        raise ValueError(f"Could not build a pyproj CRS from {crs}") from e

    wkt = crs.to_wkt(WktVersion.WKT1_GDAL)
    if wkt is None:
        raise ValueError(f"{crs.name} has no WKT1 representation")

    log.debug(f"importing {crs.name} from pyproj")
    return parse_wkt(wkt)
