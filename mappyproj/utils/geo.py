from typing import Tuple

from mappyproj.constructs.coordinate import Coordinate
from mappyproj.factories.transformation_factory import create_transformation
from mappyproj.utils.crs import LATLON_CRS, XY_CRS


def xy_to_latlon(x: float, y: float) -> Tuple[float, float]:
    """
    Transform Web Mercator (EPSG:3857) coordinates to WGS84 latitude/longitude.

    This function converts from the projected coordinate system commonly used for
    web mapping (meters, sometimes called "xy" coordinates) to standard geographic
    coordinates (degrees).

    Args:
        x: The x-coordinate (easting) in Web Mercator projection (meters)
        y: The y-coordinate (northing) in Web Mercator projection (meters)

    Returns:
        A tuple of (latitude, longitude) in decimal degrees (WGS84/EPSG:4326)

    Examples:
        >>> # New York City in Web Mercator
        >>> lat, lon = xy_to_latlon(-8238596.66, 4969946.17)
        >>> print(f"Lat: {lat:.4f}, Lon: {lon:.4f}")
        Lat: 40.7119, Lon: -74.0086
    """
    transformation = create_transformation(XY_CRS, LATLON_CRS)
    lon, lat = transformation.transform((x, y))[:2]

    return lat, lon


def latlon_to_xy(lat: float, lon: float) -> Tuple[float, float]:
    """
    Transform WGS84 latitude/longitude to Web Mercator (EPSG:3857) coordinates.

    Args:
        lat: The latitude in decimal degrees (range: -85.06 to 85.06 for Web Mercator)
        lon: The longitude in decimal degrees (range: -180 to 180)

    Returns:
        A tuple of (x, y) in Web Mercator projection meters (EPSG:3857)

    Raises:
        ProjectionComputationError: If the latitude is a pole

    Examples:
        >>> x, y = latlon_to_xy(40.711946, -74.008573)
        >>> print(f"X: {x:.1f}m, Y: {y:.1f}m")
        X: -8238596.7m, Y: 4969946.2m
    """
    transformation = create_transformation(LATLON_CRS, XY_CRS)
    x, y = transformation.transform((lon, lat))[:2]

    return x, y


def coord_to_coord_dist(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the Euclidean distance between two coordinates.

    The distance is computed in the coordinates' coordinate system. For distances in
    meters, the coordinates should be in a projected system (like EPSG:3857) rather
    than lat/lon (EPSG:4326).

    Args:
        a: The first coordinate
        b: The second coordinate

    Returns:
        The Euclidean distance in the units of the coordinate system

    Raises:
        ValueError: If the coordinates are in different coordinate systems

    Examples:
        >>> coord1 = Coordinate.from_lat_lon(40.7128, -74.0060).to_crs('EPSG:3857')
        >>> coord2 = Coordinate.from_lat_lon(40.7589, -73.9851).to_crs('EPSG:3857')
        >>> distance = coord_to_coord_dist(coord1, coord2)
    """
    if a.crs != b.crs:
        raise ValueError(
            f"cannot measure between {a.crs.name} and {b.crs.name}; convert one first"
        )
    dist = a.geom.distance(b.geom)

    return dist
