from unittest import TestCase

from pyproj import CRS, Transformer

from mappyproj.constructs.coordinate_system import ProjectedCoordinateSystem
from mappyproj.factories.authority_registry import REGISTRY
from mappyproj.factories.transformation_factory import create_transformation
from mappyproj.utils.crs import LATLON_CRS
from mappyproj.utils.interop import from_pyproj_crs, to_pyproj_crs


class TestPyprojInterop(TestCase):
    def test_to_pyproj(self):
        self.assertTrue(to_pyproj_crs(LATLON_CRS).is_geographic)

        utm = to_pyproj_crs(REGISTRY.get("EPSG", 32618))
        self.assertTrue(utm.is_projected)
        self.assertEqual(utm.name, "WGS 84 / UTM zone 18N")

    def test_to_pyproj_transforms_like_mappyproj(self):
        utm = REGISTRY.get("EPSG", 32618)
        proj = Transformer.from_crs("EPSG:4326", to_pyproj_crs(utm), always_xy=True)
        ours = create_transformation(LATLON_CRS, utm)
        for lon, lat in [(-74.5, 40.5), (-75.0, 10.0), (-76.0, 55.0)]:
            with self.subTest(lon=lon, lat=lat):
                px, py = proj.transform(lon, lat)
                x, y = ours.transform((lon, lat))
                self.assertAlmostEqual(x, px, delta=0.005)
                self.assertAlmostEqual(y, py, delta=0.005)

    def test_from_pyproj(self):
        imported = from_pyproj_crs(CRS.from_epsg(32618))
        self.assertIsInstance(imported, ProjectedCoordinateSystem)
        self.assertEqual(imported.name, "WGS 84 / UTM zone 18N")
        self.assertEqual(str(imported.authority), "EPSG:32618")

        registry = create_transformation(LATLON_CRS, REGISTRY.get("EPSG", 32618))
        converted = create_transformation(LATLON_CRS, imported)
        x1, y1 = registry.transform((-74.008573, 40.711946))
        x2, y2 = converted.transform((-74.008573, 40.711946))
        self.assertAlmostEqual(x1, x2, delta=1e-6)
        self.assertAlmostEqual(y1, y2, delta=1e-6)

    def test_from_pyproj_user_input(self):
        imported = from_pyproj_crs("EPSG:27700")
        self.assertEqual(imported.projection.method, "Transverse_Mercator")

    def test_bad_input(self):
        with self.assertRaises(ValueError):
            from_pyproj_crs("definitely not a crs")
