import math
from unittest import TestCase

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.datum import (
    AIRY_1830_ELLIPSOID,
    GRS80_ELLIPSOID,
    PARIS,
    WGS84_DATUM,
    WGS84_ELLIPSOID,
    BursaWolfParameters,
    Ellipsoid,
    HorizontalDatum,
)
from mappyproj.constructs.units import (
    DEGREE,
    FOOT,
    GRAD,
    METRE,
    AngularUnit,
    LinearUnit,
)


class TestUnits(TestCase):
    def test_degree_conversion(self):
        self.assertEqual(DEGREE.degrees_per_unit, 1.0)
        self.assertAlmostEqual(GRAD.to_degrees(100.0), 90.0, places=12)

    def test_equivalent_units_with_different_names(self):
        wkt_degree = AngularUnit("degree", 0.0174532925199433)
        self.assertTrue(wkt_degree.is_equivalent(DEGREE))
        self.assertFalse(GRAD.is_equivalent(DEGREE))

        self.assertTrue(LinearUnit("m", 1.0).is_equivalent(METRE))
        self.assertFalse(FOOT.is_equivalent(METRE))
        self.assertAlmostEqual(FOOT.to_meters(10.0), 3.048)

    def test_non_positive_factor_is_rejected(self):
        with self.assertRaises(ValueError):
            AngularUnit("broken", 0.0)
        with self.assertRaises(ValueError):
            LinearUnit("broken", -1.0)


class TestEllipsoid(TestCase):
    def test_derived_quantities(self):
        self.assertAlmostEqual(WGS84_ELLIPSOID.semi_minor_axis, 6356752.314245179, places=6)
        self.assertAlmostEqual(
            WGS84_ELLIPSOID.eccentricity_squared, 0.0066943799901413165, places=15
        )
        self.assertAlmostEqual(
            WGS84_ELLIPSOID.eccentricity,
            math.sqrt(WGS84_ELLIPSOID.eccentricity_squared),
            places=15,
        )

    def test_sphere(self):
        sphere = Ellipsoid.from_axes("sphere", 6378137.0, 6378137.0)
        self.assertTrue(sphere.is_sphere)
        self.assertEqual(sphere.eccentricity, 0.0)
        self.assertEqual(sphere.semi_minor_axis, 6378137.0)

    def test_from_axes_matches_inverse_flattening(self):
        grs80 = Ellipsoid.from_axes("GRS 1980", 6378137.0, GRS80_ELLIPSOID.semi_minor_axis)
        self.assertAlmostEqual(
            grs80.inverse_flattening, GRS80_ELLIPSOID.inverse_flattening, places=6
        )
        self.assertTrue(grs80.same_shape(GRS80_ELLIPSOID))

    def test_invalid_ellipsoids_are_rejected(self):
        with self.assertRaises(ValueError):
            Ellipsoid("broken", 0.0, 298.0)
        with self.assertRaises(ValueError):
            Ellipsoid("broken", 6378137.0, -1.0)
        with self.assertRaises(ValueError):
            Ellipsoid.from_axes("broken", 6356752.0, 6378137.0)

    def test_in_meters(self):
        feet = Ellipsoid("feet", 20925604.48, 294.978698214, FOOT)
        meters = feet.in_meters()
        self.assertEqual(meters.axis_unit, METRE)
        self.assertAlmostEqual(meters.semi_major_axis, 20925604.48 * 0.3048, places=6)
        self.assertIs(WGS84_ELLIPSOID.in_meters(), WGS84_ELLIPSOID)


class TestPrimeMeridian(TestCase):
    def test_paris_in_degrees(self):
        self.assertAlmostEqual(PARIS.longitude_degrees, 2.33722917, places=8)
        self.assertFalse(PARIS.is_greenwich)


class TestHorizontalDatum(TestCase):
    def test_wgs84_has_a_null_shift(self):
        self.assertTrue(WGS84_DATUM.is_wgs84)
        self.assertEqual(WGS84_DATUM.shift_to_wgs84(), BursaWolfParameters())
        self.assertTrue(WGS84_DATUM.shift_to_wgs84().is_null)

    def test_unknown_shift(self):
        airy = HorizontalDatum("OSGB_1936", AIRY_1830_ELLIPSOID)
        self.assertIsNone(airy.shift_to_wgs84())

    def test_same_datum_by_authority(self):
        renamed = HorizontalDatum(
            "World Geodetic System 1984", WGS84_ELLIPSOID, None, Authority("epsg", "6326")
        )
        self.assertTrue(WGS84_DATUM.is_same_datum(renamed))

        other = HorizontalDatum("WGS_1984", WGS84_ELLIPSOID, None, Authority.epsg(6269))
        self.assertFalse(WGS84_DATUM.is_same_datum(other))

    def test_same_datum_by_definition(self):
        a = HorizontalDatum("OSGB_1936", AIRY_1830_ELLIPSOID)
        b = HorizontalDatum("OSGB 1936", AIRY_1830_ELLIPSOID)
        self.assertTrue(a.is_same_datum(b))

        shifted = HorizontalDatum(
            "OSGB 1936", AIRY_1830_ELLIPSOID, BursaWolfParameters(446.448, -125.157, 542.06)
        )
        self.assertFalse(a.is_same_datum(shifted))

    def test_bursa_wolf_matrix(self):
        translation = BursaWolfParameters(1.0, 2.0, 3.0)
        m = translation.to_matrix()
        self.assertEqual(m.shape, (4, 4))
        self.assertEqual(m[:3, 3].tolist(), [1.0, 2.0, 3.0])
        self.assertEqual(m[3].tolist(), [0.0, 0.0, 0.0, 1.0])

        scaled = BursaWolfParameters(ppm=10.0).to_matrix()
        self.assertAlmostEqual(scaled[0, 0], 1.00001, places=12)
