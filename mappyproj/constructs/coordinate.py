from __future__ import annotations

import math
from typing import Any, NamedTuple

from shapely.geometry import Point

from mappyproj.constructs.coordinate_system import CoordinateSystem
from mappyproj.factories.transformation_factory import create_transformation
from mappyproj.utils.crs import LATLON_CRS, crs_from_user_input
from mappyproj.utils.exceptions import CrsException, ProjectionComputationError


class Coordinate(NamedTuple):
    """
    Represents a single point together with the coordinate system it is expressed in.

    A Coordinate is an immutable object that combines a spatial point geometry with its
    coordinate system, allowing it to be transformed into any other coordinate system the
    engine can reach.

    Attributes:
        coordinate_id: The unique identifier for this coordinate (can be any hashable type)
        geom: The Shapely Point geometry; its x and y are the first and second ordinates
            in the axis order of `crs`
        crs: The coordinate system of the point
        x: The first ordinate (longitude for LATLON_CRS, easting in projected systems)
        y: The second ordinate (latitude for LATLON_CRS, northing in projected systems)

    Examples:
        >>> from mappyproj.constructs.coordinate import Coordinate
        >>> # Create a coordinate from latitude and longitude
        >>> coord = Coordinate.from_lat_lon(40.7128, -74.0060)
        >>> print(coord.x, coord.y)
        -74.006 40.7128

        >>> # Transform to a different coordinate system (Web Mercator)
        >>> web_mercator = coord.to_crs('EPSG:3857')
        >>> print(web_mercator.crs.authority)
        EPSG:3857
    """

    coordinate_id: Any
    geom: Point
    crs: CoordinateSystem

    def __repr__(self):
        crs_a = self.crs.authority or self.crs.name if self.crs else "Null"
        return f"Coordinate(coordinate_id={self.coordinate_id}, x={self.x}, y={self.y}, crs={crs_a})"

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> Coordinate:
        """
        Create a coordinate from latitude and longitude values in WGS84 (EPSG:4326).

        Args:
            lat: The latitude in decimal degrees (range: -90 to 90)
            lon: The longitude in decimal degrees (range: -180 to 180)

        Returns:
            A new Coordinate instance in EPSG:4326 with no coordinate_id
        """
        return cls(coordinate_id=None, geom=Point(lon, lat), crs=LATLON_CRS)

    @property
    def x(self) -> float:
        return self.geom.x

    @property
    def y(self) -> float:
        return self.geom.y

    def to_crs(self, new_crs: Any) -> Coordinate:
        """
        Transform this coordinate to a different coordinate system.

        If the target is the same as the current coordinate system, the original
        coordinate is returned unchanged.

        Args:
            new_crs: The target. Can be a coordinate system, an "EPSG:nnnn" string, an
                integer EPSG code or WKT text

        Returns:
            A new Coordinate with transformed geometry in the target coordinate system.
            The coordinate_id is preserved from the original coordinate.

        Raises:
            ValueError: If new_crs cannot be turned into a coordinate system, or if the
                point cannot be transformed (e.g. a pole in Mercator)

        Examples:
            >>> coord = Coordinate.from_lat_lon(40.7128, -74.0060)
            >>> mercator_coord = coord.to_crs('EPSG:3857')
            >>> utm_coord = coord.to_crs(32618)  # UTM Zone 18N
        """
        # convert the incoming crs to a coordinate system; this could fail
        try:
            new_crs = crs_from_user_input(new_crs)
        except (CrsException, TypeError) as e:
            raise ValueError(
                f"Could not parse incoming `new_crs` parameter: {new_crs}"
            ) from e

        if new_crs == self.crs:
            return self

        transformation = create_transformation(self.crs, new_crs)
        try:
            new_x, new_y = transformation.transform((self.geom.x, self.geom.y))[:2]
        except ProjectionComputationError as e:
            raise ValueError(
                f"Unable to convert {self.crs.name} ({self.geom.x}, {self.geom.y}) -> {new_crs.name}"
            ) from e

        if math.isinf(new_x) or math.isinf(new_y):
            raise ValueError(
                f"Unable to convert {self.crs.name} ({self.geom.x}, {self.geom.y}) -> {new_crs.name} ({new_x}, {new_y})"
            )

        return Coordinate(
            coordinate_id=self.coordinate_id,
            geom=Point(new_x, new_y),
            crs=new_crs,
        )
