from concurrent.futures import ThreadPoolExecutor
from unittest import TestCase

from mappyproj.constructs.coordinate_system import (
    GeocentricCoordinateSystem,
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
)
from mappyproj.factories.authority_registry import (
    REGISTRY,
    AuthorityRegistry,
    definition,
    utm_wkt,
)
from mappyproj.utils.exceptions import CrsException, UnknownAuthorityCodeError


class TestAuthorityRegistry(TestCase):
    def test_well_known_codes(self):
        self.assertIsInstance(REGISTRY.get("EPSG", 4326), GeographicCoordinateSystem)
        self.assertIsInstance(REGISTRY.get("EPSG", 3857), ProjectedCoordinateSystem)
        self.assertIsInstance(REGISTRY.get("EPSG", 4978), GeocentricCoordinateSystem)
        self.assertEqual(REGISTRY.get("EPSG", 4326).name, "WGS 84")

    def test_lookup_is_case_and_type_insensitive(self):
        a = REGISTRY.get("EPSG", 4326)
        self.assertIs(REGISTRY.get("epsg", "4326"), a)
        self.assertIs(REGISTRY.get(" Epsg ", " 4326 "), a)

    def test_repeated_lookups_return_the_same_object(self):
        self.assertIs(REGISTRY.get("EPSG", 2154), REGISTRY.get("EPSG", 2154))

    def test_utm_zones(self):
        north = REGISTRY.get("EPSG", 32618)
        self.assertEqual(north.name, "WGS 84 / UTM zone 18N")
        self.assertEqual(north.projection.get_parameter("central_meridian"), -75.0)
        self.assertEqual(north.projection.get_parameter("false_northing"), 0.0)
        self.assertEqual(str(north.authority), "EPSG:32618")

        south = REGISTRY.get("EPSG", 32733)
        self.assertEqual(south.name, "WGS 84 / UTM zone 33S")
        self.assertEqual(south.projection.get_parameter("central_meridian"), 15.0)
        self.assertEqual(south.projection.get_parameter("false_northing"), 10000000.0)

    def test_utm_zone_bounds(self):
        with self.assertRaises(ValueError):
            utm_wkt(0, True)
        with self.assertRaises(ValueError):
            utm_wkt(61, False)

    def test_unknown_codes(self):
        for authority, code in [("EPSG", 999999), ("EPSG", "abc"), ("ESRI", 4326), ("EPSG", 32600)]:
            with self.subTest(authority=authority, code=code):
                with self.assertRaises(UnknownAuthorityCodeError) as ctx:
                    REGISTRY.get(authority, code)
                self.assertIn(str(code), str(ctx.exception))
                self.assertIsInstance(ctx.exception, CrsException)
                self.assertIsNone(REGISTRY.find(authority, code))

    def test_definition(self):
        self.assertIn('AUTHORITY["EPSG","4326"]', definition("EPSG", 4326))
        with self.assertRaises(UnknownAuthorityCodeError):
            definition("EPSG", 1)

    def test_codes(self):
        codes = AuthorityRegistry.codes()
        self.assertEqual(list(codes), sorted(codes))
        for code in (4326, 3857, 900913, 4978, 32601, 32660, 32701, 32760):
            self.assertIn(code, codes)
        self.assertNotIn(32661, codes)
        self.assertEqual(AuthorityRegistry.codes("ESRI"), ())

    def test_concurrent_lookups_share_one_object(self):
        registry = AuthorityRegistry()
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: registry.get("EPSG", 27700), range(32)))
        self.assertTrue(all(cs is results[0] for cs in results))
