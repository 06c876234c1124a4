from unittest import TestCase

from mappyproj.constructs.coordinate import Coordinate
from mappyproj.factories.authority_registry import REGISTRY
from mappyproj.utils.crs import LATLON_CRS, XY_CRS, crs_from_user_input
from mappyproj.utils.exceptions import UnknownAuthorityCodeError, WktParseError


class TestCoordinate(TestCase):
    def setUp(self):
        self.nyc = Coordinate.from_lat_lon(40.711946, -74.008573)

    def test_from_lat_lon(self):
        self.assertIsNone(self.nyc.coordinate_id)
        self.assertEqual(self.nyc.x, -74.008573)
        self.assertEqual(self.nyc.y, 40.711946)
        self.assertIs(self.nyc.crs, LATLON_CRS)
        self.assertIn("EPSG:4326", repr(self.nyc))

    def test_to_crs(self):
        for target in ("EPSG:3857", "epsg:3857", 3857, XY_CRS, XY_CRS.to_wkt()):
            with self.subTest(target=target):
                c = self.nyc.to_crs(target)
                self.assertEqual(c.crs, XY_CRS)
                self.assertAlmostEqual(c.x, -8238596.6606968148, delta=1e-6)
                self.assertAlmostEqual(c.y, 4969946.160065121, delta=1e-6)

    def test_to_crs_keeps_the_id(self):
        c = Coordinate(coordinate_id="a", geom=self.nyc.geom, crs=LATLON_CRS)
        self.assertEqual(c.to_crs(32618).coordinate_id, "a")

    def test_to_crs_and_back(self):
        back = self.nyc.to_crs(32618).to_crs(4326)
        self.assertAlmostEqual(back.x, self.nyc.x, delta=1e-9)
        self.assertAlmostEqual(back.y, self.nyc.y, delta=1e-9)

    def test_same_crs_returns_self(self):
        self.assertIs(self.nyc.to_crs(4326), self.nyc)
        self.assertIs(self.nyc.to_crs(LATLON_CRS), self.nyc)

    def test_bad_crs(self):
        for target in ("EPSG:999999", 3.5, "not a coordinate system", True):
            with self.subTest(target=target):
                with self.assertRaises(ValueError):
                    self.nyc.to_crs(target)

    def test_pole_cannot_be_projected(self):
        with self.assertRaises(ValueError):
            Coordinate.from_lat_lon(90.0, 0.0).to_crs(3857)


class TestCrsFromUserInput(TestCase):
    def test_inputs(self):
        self.assertIs(crs_from_user_input(XY_CRS), XY_CRS)
        self.assertIs(crs_from_user_input(3857), REGISTRY.get("EPSG", 3857))
        self.assertIs(crs_from_user_input(" EPSG : 3857 "), REGISTRY.get("EPSG", 3857))
        self.assertEqual(crs_from_user_input(LATLON_CRS.to_wkt()), LATLON_CRS)

    def test_errors(self):
        with self.assertRaises(UnknownAuthorityCodeError):
            crs_from_user_input(1)
        with self.assertRaises(WktParseError):
            crs_from_user_input("EPSG:")
        with self.assertRaises(TypeError):
            crs_from_user_input(None)
        with self.assertRaises(TypeError):
            crs_from_user_input(False)
