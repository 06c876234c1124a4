"""
# Transform Example

An example of reading points from a file and moving them between coordinate systems with mappyproj
"""


def main():
    from mappyproj import package_root

    """
    First, we load some points from a file.
    The mappyproj package includes a small sample of New York City landmarks that we can use for demonstration.

    Let's take a look at the file to see what it holds:
    """

    import pandas as pd

    df = pd.read_csv(package_root() / "resources/points/nyc_landmarks.csv")
    df.head()

    """
    The points are in the EPSG:4326 coordinate system, given as longitude and latitude in decimal degrees.
    mappyproj always takes ordinates in the axis order of the coordinate system, and for the built in EPSG:4326 that is (longitude, latitude).

    Now, let's look up the coordinate systems we want to work with.
    mappyproj ships a table of well known EPSG codes, and each code is parsed the first time it is asked for:
    """

    from mappyproj import from_authority_code

    wgs84 = from_authority_code("EPSG", 4326)
    web_mercator = from_authority_code("EPSG", 3857)
    utm_18n = from_authority_code("EPSG", 32618)

    print(utm_18n.to_wkt())

    """
    Every coordinate system can be written back out as WKT, and WKT from other tools can be read in with `from_wkt`.

    Next, we build a transformation. A transformation is built once and can then be used for as many points as needed:
    """

    from mappyproj import create_transformation

    to_utm = create_transformation(wgs84, utm_18n)

    for row in df.itertuples():
        x, y = to_utm.transform((row.longitude, row.latitude))
        print(f"{row.name}: {x:.2f}E {y:.2f}N")

    """
    For a whole dataframe it is faster to transform all of the points at once.
    The `transform_dataframe` helper accepts coordinate systems, EPSG codes or "EPSG:nnnn" strings:
    """

    from mappyproj.utils.process_points import transform_dataframe

    xy_df = transform_dataframe(df, wgs84, "EPSG:3857", "longitude", "latitude")
    xy_df.head()

    """
    If you'd rather work with individual points, the `Coordinate` object wraps a shapely point together with its coordinate system:
    """

    from mappyproj.utils.process_points import points_from_csv

    coords = points_from_csv(package_root() / "resources/points/nyc_landmarks.csv")
    coords_xy = [c.to_crs(web_mercator) for c in coords]

    """
    Since both points are now in a projected coordinate system, the distance between them is in (approximate) meters:
    """

    from mappyproj.utils.geo import coord_to_coord_dist

    print(coord_to_coord_dist(coords_xy[0], coords_xy[1]))

    """
    Web mercator stretches distances away from the equator, so for measuring, a local projection like UTM is a better choice:
    """

    coords_utm = [c.to_crs(utm_18n) for c in coords]

    print(coord_to_coord_dist(coords_utm[0], coords_utm[1]))

    """
    Lastly, transformations between different datums apply a Bursa-Wolf shift.
    For example, going from WGS84 to the British National Grid moves points onto the OSGB 1936 datum:
    """

    bng = from_authority_code("EPSG", 27700)
    to_bng = create_transformation(wgs84, bng)

    print(to_bng.transform_type)
    print(to_bng.transform((-0.1275, 51.507222)))


if __name__ == "__main__":
    main()
