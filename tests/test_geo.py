from unittest import TestCase

from mappyproj.constructs.coordinate import Coordinate
from mappyproj.utils.exceptions import ProjectionComputationError
from mappyproj.utils.geo import coord_to_coord_dist, latlon_to_xy, xy_to_latlon


class TestGeoUtils(TestCase):
    def test_latlon_to_xy(self):
        x, y = latlon_to_xy(40.711946, -74.008573)
        self.assertAlmostEqual(x, -8238596.6606968148, delta=1e-6)
        self.assertAlmostEqual(y, 4969946.160065121, delta=1e-6)

    def test_xy_to_latlon(self):
        lat, lon = xy_to_latlon(-8238596.6606968148, 4969946.160065121)
        self.assertAlmostEqual(lat, 40.711946, delta=1e-9)
        self.assertAlmostEqual(lon, -74.008573, delta=1e-9)

    def test_pole(self):
        with self.assertRaises(ProjectionComputationError):
            latlon_to_xy(-90.0, 0.0)

    def test_coord_to_coord_dist(self):
        a = Coordinate.from_lat_lon(0.0, 0.0).to_crs(3857)
        b = Coordinate.from_lat_lon(0.0, 1.0).to_crs(3857)
        # one degree of longitude on the equator of the web mercator sphere
        self.assertAlmostEqual(coord_to_coord_dist(a, b), 111319.49079327357, delta=1e-6)

    def test_coord_to_coord_dist_needs_one_crs(self):
        a = Coordinate.from_lat_lon(0.0, 0.0)
        b = a.to_crs(3857)
        with self.assertRaises(ValueError):
            coord_to_coord_dist(a, b)
