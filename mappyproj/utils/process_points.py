from __future__ import annotations

from pathlib import Path
from typing import Any, List, Union

import numpy as np
import pandas as pd
from shapely.geometry import Point

from mappyproj.constructs.coordinate import Coordinate
from mappyproj.factories.transformation_factory import create_transformation
from mappyproj.utils.crs import LATLON_CRS, crs_from_user_input


def _check_columns(frame: pd.DataFrame, x_column: str, y_column: str):
    if x_column not in frame.columns:
        raise ValueError(f"Could not find x column {x_column} in dataframe")
    if y_column not in frame.columns:
        raise ValueError(f"Could not find y column {y_column} in dataframe")


def transform_dataframe(
    frame: pd.DataFrame,
    source: Any,
    target: Any,
    x_column: str = "x",
    y_column: str = "y",
) -> pd.DataFrame:
    """
    Transform the point columns of a dataframe to another coordinate system.

    The whole frame is transformed as one packed array. The index and all other columns
    are kept; the x and y columns are replaced by the transformed values.

    Args:
        frame: The dataframe with one point per row
        source: The coordinate system of the points (anything crs_from_user_input accepts)
        target: The coordinate system to transform to
        x_column: The column holding the first ordinate (longitude for EPSG:4326)
        y_column: The column holding the second ordinate (latitude for EPSG:4326)

    Returns:
        A new dataframe with transformed x and y columns

    Raises:
        ValueError: If a column is missing
        ProjectionComputationError: If a point cannot be transformed

    Examples:
        >>> import pandas as pd
        >>> df = pd.DataFrame({"longitude": [-74.008573], "latitude": [40.711946]})
        >>> xy = transform_dataframe(df, 4326, 3857, "longitude", "latitude")
    """
    _check_columns(frame, x_column, y_column)

    transformation = create_transformation(
        crs_from_user_input(source), crs_from_user_input(target)
    )
    points = frame[[x_column, y_column]].to_numpy(dtype=np.float64)
    transformed = transformation.math_transform.transform_array(points)

    result = frame.copy()
    result[x_column] = transformed[:, 0]
    result[y_column] = transformed[:, 1]

    return result


def dataframe_to_coordinates(
    frame: pd.DataFrame,
    crs: Any = LATLON_CRS,
    x_column: str = "x",
    y_column: str = "y",
) -> List[Coordinate]:
    """
    Build coordinates from a dataframe, using the dataframe index as the coordinate id.

    Args:
        frame: The dataframe with one point per row
        crs: The coordinate system of the points
        x_column: The column holding the first ordinate
        y_column: The column holding the second ordinate

    Returns:
        A list of coordinates in frame order

    Raises:
        ValueError: If a column is missing
    """
    _check_columns(frame, x_column, y_column)
    cs = crs_from_user_input(crs)

    return [
        Coordinate(coordinate_id=index, geom=Point(x, y), crs=cs)
        for index, x, y in zip(frame.index, frame[x_column], frame[y_column])
    ]


def points_from_csv(
    file: Union[str, Path],
    crs: Any = LATLON_CRS,
    x_column: str = "longitude",
    y_column: str = "latitude",
) -> List[Coordinate]:
    """
    Read coordinates from a csv file.

    Args:
        file: The path to the csv file
        crs: The coordinate system of the points in the file
        x_column: The column holding the first ordinate
        y_column: The column holding the second ordinate

    Returns:
        A list of coordinates in file order, identified by row number

    Raises:
        FileNotFoundError: If the file does not exist
        TypeError: If the file is not a csv file
        ValueError: If a column is missing
    """
    filepath = Path(file)
    if not filepath.is_file():
        raise FileNotFoundError(file)
    elif not filepath.suffix == ".csv":
        raise TypeError(f"file of type {filepath.suffix} does not appear to be a csv file")

    frame = pd.read_csv(filepath)
    return dataframe_to_coordinates(frame, crs, x_column, y_column)
