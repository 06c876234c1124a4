"""Built-in table of well-known coordinate system definitions keyed by authority code.

The table is WKT text. A definition is parsed the first time it is requested and
the parsed coordinate system is cached for the life of the process.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Tuple, Union

from mappyproj.constructs.coordinate_system import CoordinateSystem
from mappyproj.utils.exceptions import UnknownAuthorityCodeError
from mappyproj.wkt.parser import parse_wkt

log = logging.getLogger(__name__)

EPSG = "EPSG"

_METRE = 'UNIT["metre",1,AUTHORITY["EPSG","9001"]]'
_DEGREE = 'UNIT["degree",0.0174532925199433,AUTHORITY["EPSG","9122"]]'
_GREENWICH = 'PRIMEM["Greenwich",0,AUTHORITY["EPSG","8901"]]'
_EASTING_NORTHING = 'AXIS["Easting",EAST],AXIS["Northing",NORTH]'

_GRS80 = 'SPHEROID["GRS 1980",6378137,298.257222101,AUTHORITY["EPSG","7019"]]'
_WGS84_DATUM = (
    'DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563,AUTHORITY["EPSG","7030"]],'
    'AUTHORITY["EPSG","6326"]]'
)


def _geogcs(name: str, datum: str, code: int) -> str:
    return f'GEOGCS["{name}",{datum},{_GREENWICH},{_DEGREE},AUTHORITY["EPSG","{code}"]]'


WGS84_WKT = _geogcs("WGS 84", _WGS84_DATUM, 4326)

NAD83_WKT = _geogcs(
    "NAD83",
    f'DATUM["North_American_Datum_1983",{_GRS80},TOWGS84[0,0,0,0,0,0,0],'
    'AUTHORITY["EPSG","6269"]]',
    4269,
)

ETRS89_WKT = _geogcs(
    "ETRS89",
    f'DATUM["European_Terrestrial_Reference_System_1989",{_GRS80},'
    'TOWGS84[0,0,0,0,0,0,0],AUTHORITY["EPSG","6258"]]',
    4258,
)

RGF93_WKT = _geogcs(
    "RGF93",
    f'DATUM["Reseau_Geodesique_Francais_1993",{_GRS80},TOWGS84[0,0,0,0,0,0,0],'
    'AUTHORITY["EPSG","6171"]]',
    4171,
)

OSGB36_WKT = _geogcs(
    "OSGB 1936",
    'DATUM["OSGB_1936",SPHEROID["Airy 1830",6377563.396,299.3249646,AUTHORITY["EPSG","7001"]],'
    'TOWGS84[446.448,-125.157,542.06,0.15,0.247,0.842,-20.489],AUTHORITY["EPSG","6277"]]',
    4277,
)

PSEUDO_MERCATOR_WKT = (
    f'PROJCS["WGS 84 / Pseudo-Mercator",{WGS84_WKT},'
    'PROJECTION["Popular_Visualisation_Pseudo_Mercator"],'
    'PARAMETER["latitude_of_origin",0],PARAMETER["central_meridian",0],'
    'PARAMETER["scale_factor",1],PARAMETER["false_easting",0],PARAMETER["false_northing",0],'
    f'{_METRE},{_EASTING_NORTHING},AUTHORITY["EPSG","3857"]]'
)

# Google's spherical mercator as published before EPSG:3857 existed; the semi_minor
# parameter turns the WGS84 ellipsoid into a sphere
GOOGLE_MERCATOR_WKT = (
    'PROJCS["Google Mercator",GEOGCS["WGS 84",DATUM["World Geodetic System 1984",'
    'SPHEROID["WGS 84",6378137.0,298.257223563,AUTHORITY["EPSG","7030"]],'
    'AUTHORITY["EPSG","6326"]],PRIMEM["Greenwich",0.0,AUTHORITY["EPSG","8901"]],'
    'UNIT["degree",0.017453292519943295],AXIS["Geodetic latitude",NORTH],'
    'AXIS["Geodetic longitude",EAST],AUTHORITY["EPSG","4326"]],'
    'PROJECTION["Mercator_1SP"],PARAMETER["semi_minor",6378137.0],'
    'PARAMETER["latitude_of_origin",0.0],PARAMETER["central_meridian",0.0],'
    'PARAMETER["scale_factor",1.0],PARAMETER["false_easting",0.0],'
    'PARAMETER["false_northing",0.0],UNIT["m",1.0],AXIS["Easting",EAST],'
    'AXIS["Northing",NORTH],AUTHORITY["EPSG","900913"]]'
)

WORLD_MERCATOR_WKT = (
    f'PROJCS["WGS 84 / World Mercator",{WGS84_WKT},PROJECTION["Mercator_1SP"],'
    'PARAMETER["central_meridian",0],PARAMETER["scale_factor",1],'
    'PARAMETER["false_easting",0],PARAMETER["false_northing",0],'
    f'{_METRE},{_EASTING_NORTHING},AUTHORITY["EPSG","3395"]]'
)

LAMBERT_93_WKT = (
    f'PROJCS["RGF93 / Lambert-93",{RGF93_WKT},PROJECTION["Lambert_Conformal_Conic_2SP"],'
    'PARAMETER["standard_parallel_1",49],PARAMETER["standard_parallel_2",44],'
    'PARAMETER["latitude_of_origin",46.5],PARAMETER["central_meridian",3],'
    'PARAMETER["false_easting",700000],PARAMETER["false_northing",6600000],'
    f'{_METRE},AXIS["X",EAST],AXIS["Y",NORTH],AUTHORITY["EPSG","2154"]]'
)

BRITISH_NATIONAL_GRID_WKT = (
    f'PROJCS["OSGB 1936 / British National Grid",{OSGB36_WKT},'
    'PROJECTION["Transverse_Mercator"],PARAMETER["latitude_of_origin",49],'
    'PARAMETER["central_meridian",-2],PARAMETER["scale_factor",0.9996012717],'
    'PARAMETER["false_easting",400000],PARAMETER["false_northing",-100000],'
    f'{_METRE},AXIS["E",EAST],AXIS["N",NORTH],AUTHORITY["EPSG","27700"]]'
)

CONUS_ALBERS_WKT = (
    f'PROJCS["NAD83 / Conus Albers",{NAD83_WKT},PROJECTION["Albers_Conic_Equal_Area"],'
    'PARAMETER["latitude_of_center",23],PARAMETER["longitude_of_center",-96],'
    'PARAMETER["standard_parallel_1",29.5],PARAMETER["standard_parallel_2",45.5],'
    'PARAMETER["false_easting",0],PARAMETER["false_northing",0],'
    f'{_METRE},{_EASTING_NORTHING},AUTHORITY["EPSG","5070"]]'
)

WGS84_GEOCENTRIC_WKT = (
    f'GEOCCS["WGS 84",{_WGS84_DATUM},{_GREENWICH},{_METRE},'
    'AXIS["Geocentric X",OTHER],AXIS["Geocentric Y",OTHER],AXIS["Geocentric Z",NORTH],'
    'AUTHORITY["EPSG","4978"]]'
)

_DEFINITIONS: Dict[int, str] = {
    4326: WGS84_WKT,
    4269: NAD83_WKT,
    4258: ETRS89_WKT,
    4171: RGF93_WKT,
    4277: OSGB36_WKT,
    3857: PSEUDO_MERCATOR_WKT,
    900913: GOOGLE_MERCATOR_WKT,
    3395: WORLD_MERCATOR_WKT,
    2154: LAMBERT_93_WKT,
    27700: BRITISH_NATIONAL_GRID_WKT,
    5070: CONUS_ALBERS_WKT,
    4978: WGS84_GEOCENTRIC_WKT,
}

UTM_NORTH_CODES = range(32601, 32661)
UTM_SOUTH_CODES = range(32701, 32761)


def utm_wkt(zone: int, north: bool) -> str:
    """
    Build the WKT of a WGS84 UTM zone.

    Args:
        zone: The zone number, 1 to 60
        north: True for the northern hemisphere zone

    Returns:
        The WKT text of EPSG:326zz (north) or EPSG:327zz (south)
    """
    if not 1 <= zone <= 60:
        raise ValueError(f"UTM zone must be between 1 and 60, found {zone}")
    code = (32600 if north else 32700) + zone
    hemisphere = "N" if north else "S"
    false_northing = 0 if north else 10000000
    central_meridian = zone * 6 - 183
    return (
        f'PROJCS["WGS 84 / UTM zone {zone}{hemisphere}",{WGS84_WKT},'
        'PROJECTION["Transverse_Mercator"],PARAMETER["latitude_of_origin",0],'
        f'PARAMETER["central_meridian",{central_meridian}],PARAMETER["scale_factor",0.9996],'
        f'PARAMETER["false_easting",500000],PARAMETER["false_northing",{false_northing}],'
        f'{_METRE},{_EASTING_NORTHING},AUTHORITY["EPSG","{code}"]]'
    )


def _normalize_code(authority: str, code: Union[int, str]) -> Tuple[str, int]:
    name = str(authority).strip().upper()
    try:
        number = int(str(code).strip())
    except ValueError as e:
        raise UnknownAuthorityCodeError(authority, code) from e
    return name, number


def definition(authority: str, code: Union[int, str]) -> str:
    """
    Get the WKT definition of a built-in authority code.

    Raises:
        UnknownAuthorityCodeError: If the code is not in the table
    """
    name, number = _normalize_code(authority, code)
    if name == EPSG:
        if number in _DEFINITIONS:
            return _DEFINITIONS[number]
        if number in UTM_NORTH_CODES:
            return utm_wkt(number - 32600, True)
        if number in UTM_SOUTH_CODES:
            return utm_wkt(number - 32700, False)
    raise UnknownAuthorityCodeError(authority, code)


class AuthorityRegistry:
    """
    A lazily filled cache of parsed built-in coordinate systems.

    Each definition is parsed at most once. Reads of an already parsed code do not
    take the lock.

    Examples:
        >>> from mappyproj.factories.authority_registry import REGISTRY
        >>> REGISTRY.get("epsg", 4326).name
        'WGS 84'
    """

    def __init__(self):
        self._cache: Dict[Tuple[str, int], CoordinateSystem] = {}
        self._lock = threading.Lock()

    def get(self, authority: str, code: Union[int, str]) -> CoordinateSystem:
        """
        Get the coordinate system for an authority code.

        Args:
            authority: The authority name, case-insensitive (e.g. "EPSG")
            code: The code, as an int or a numeric string

        Raises:
            UnknownAuthorityCodeError: If the code is not in the built-in table
        """
        key = _normalize_code(authority, code)
        cs = self._cache.get(key)
        if cs is not None:
            return cs
        text = definition(authority, code)
        with self._lock:
            cs = self._cache.get(key)
            if cs is None:
                cs = parse_wkt(text)
                self._cache[key] = cs
                log.debug(f"cached {key[0]}:{key[1]} {cs.name}")
        return cs

    def find(self, authority: str, code: Union[int, str]) -> Optional[CoordinateSystem]:
        try:
            return self.get(authority, code)
        except UnknownAuthorityCodeError:
            return None

    @staticmethod
    def codes(authority: str = EPSG) -> Tuple[int, ...]:
        """All codes the built-in table knows for an authority, sorted."""
        if authority.strip().upper() != EPSG:
            return ()
        return tuple(sorted((*_DEFINITIONS, *UTM_NORTH_CODES, *UTM_SOUTH_CODES)))


REGISTRY = AuthorityRegistry()
