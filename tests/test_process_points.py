from unittest import TestCase

import pandas as pd

from mappyproj.utils.crs import LATLON_CRS, XY_CRS
from mappyproj.utils.process_points import (
    dataframe_to_coordinates,
    points_from_csv,
    transform_dataframe,
)
from tests import get_test_dir


class TestProcessPoints(TestCase):
    def setUp(self):
        self.frame = pd.DataFrame(
            {
                "x": [-74.008573, 0.0],
                "y": [40.711946, 0.0],
                "label": ["nyc", "null island"],
            },
            index=[10, 20],
        )

    def test_transform_dataframe(self):
        result = transform_dataframe(self.frame, 4326, "EPSG:3857")

        self.assertEqual(list(result.index), [10, 20])
        self.assertEqual(list(result["label"]), ["nyc", "null island"])
        self.assertAlmostEqual(result.loc[10, "x"], -8238596.6606968148, delta=1e-6)
        self.assertAlmostEqual(result.loc[10, "y"], 4969946.160065121, delta=1e-6)
        self.assertAlmostEqual(result.loc[20, "x"], 0.0, delta=1e-6)
        # the input frame is untouched
        self.assertEqual(self.frame.loc[10, "x"], -74.008573)

    def test_transform_dataframe_columns(self):
        frame = self.frame.rename(columns={"x": "lon", "y": "lat"})
        result = transform_dataframe(frame, LATLON_CRS, XY_CRS, "lon", "lat")
        self.assertAlmostEqual(result.loc[10, "lon"], -8238596.6606968148, delta=1e-6)

        with self.assertRaises(ValueError):
            transform_dataframe(frame, LATLON_CRS, XY_CRS)

    def test_transform_empty_dataframe(self):
        empty = pd.DataFrame({"x": [], "y": []})
        self.assertEqual(len(transform_dataframe(empty, 4326, 3857)), 0)

    def test_dataframe_to_coordinates(self):
        coords = dataframe_to_coordinates(self.frame)
        self.assertEqual([c.coordinate_id for c in coords], [10, 20])
        self.assertEqual(coords[0].x, -74.008573)
        self.assertIs(coords[0].crs, LATLON_CRS)

        with self.assertRaises(ValueError):
            dataframe_to_coordinates(self.frame, y_column="latitude")

    def test_points_from_csv(self):
        coords = points_from_csv(get_test_dir() / "test_assets" / "sample_points.csv")
        self.assertEqual(len(coords), 3)
        self.assertEqual(coords[0].coordinate_id, 0)
        self.assertEqual(coords[0].x, -74.008573)
        self.assertEqual(coords[0].y, 40.711946)

    def test_points_from_csv_errors(self):
        with self.assertRaises(FileNotFoundError):
            points_from_csv(get_test_dir() / "test_assets" / "missing.csv")
        with self.assertRaises(TypeError):
            points_from_csv(get_test_dir() / "test_assets" / "wgs84.wkt")

    def test_packaged_sample_points(self):
        from mappyproj import package_root

        coords = points_from_csv(package_root() / "resources/points/nyc_landmarks.csv")
        self.assertEqual(len(coords), 5)
        self.assertEqual(coords[0].x, -74.008573)
