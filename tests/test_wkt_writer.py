from unittest import TestCase

import numpy as np

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.axis import Axis, AxisOrientation
from mappyproj.constructs.coordinate_system import (
    FittedCoordinateSystem,
    GeographicCoordinateSystem,
)
from mappyproj.constructs.datum import PARIS, WGS84_DATUM, Ellipsoid, HorizontalDatum
from mappyproj.constructs.units import GRAD, METRE, US_SURVEY_FOOT
from mappyproj.factories.authority_registry import AuthorityRegistry
from mappyproj.transforms.math_transform import Affine
from mappyproj.wkt.parser import parse_wkt
from mappyproj.wkt.writer import format_number, quote, to_wkt


class TestWktWriter(TestCase):
    def test_format_number(self):
        self.assertEqual(format_number(6378137.0), "6378137")
        self.assertEqual(format_number(-0.5), "-0.5")
        self.assertEqual(format_number(298.257223563), "298.257223563")
        self.assertEqual(format_number(0.017453292519943295), "0.017453292519943295")

    def test_quote(self):
        self.assertEqual(quote('NAD "27"'), '"NAD ""27"""')

    def test_write_components(self):
        self.assertEqual(to_wkt(METRE), 'UNIT["metre",1,AUTHORITY["EPSG","9001"]]')
        self.assertEqual(to_wkt(Authority.epsg(4326)), 'AUTHORITY["EPSG","4326"]')
        self.assertEqual(to_wkt(Axis("Lat", AxisOrientation.NORTH)), 'AXIS["Lat",NORTH]')

    def test_write_geographic(self):
        cs = GeographicCoordinateSystem("WGS 84", WGS84_DATUM)
        wkt = cs.to_wkt()
        self.assertTrue(wkt.startswith('GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84"'))
        # axes are always written
        self.assertIn('AXIS["Lon",EAST],AXIS["Lat",NORTH]', wkt)

    def test_round_trip_registry(self):
        for code in AuthorityRegistry.codes():
            with self.subTest(code=code):
                cs = AuthorityRegistry().get("EPSG", code)
                self.assertEqual(parse_wkt(cs.to_wkt()), cs)

    def test_round_trip_prime_meridian_in_grads(self):
        cs = GeographicCoordinateSystem(
            "NTF (Paris)", WGS84_DATUM, PARIS, GRAD, authority=Authority.epsg(4807)
        )
        wkt = cs.to_wkt()
        self.assertIn('PRIMEM["Paris",2.5969213', wkt)
        self.assertEqual(parse_wkt(wkt), cs)

    def test_ellipsoid_in_feet_is_written_in_metres(self):
        clarke_ft = Ellipsoid("Clarke 1866 (ft)", 20925832.16, 294.97869821, US_SURVEY_FOOT)
        cs = GeographicCoordinateSystem("Clarke (ft)", HorizontalDatum("D_Clarke", clarke_ft))
        wkt = cs.to_wkt()
        self.assertNotIn("20925832.16", wkt)
        parsed = parse_wkt(wkt)
        self.assertEqual(parsed.datum.ellipsoid, clarke_ft.in_meters())
        self.assertTrue(parsed.datum.ellipsoid.same_shape(clarke_ft))
        self.assertAlmostEqual(parsed.datum.ellipsoid.semi_major_axis, 6378206.4, delta=1e-3)

    def test_round_trip_fitted(self):
        base = GeographicCoordinateSystem("WGS 84", WGS84_DATUM)
        matrix = np.array([[0.5, 0.0, 10.0], [0.0, 0.5, 20.0], [0.0, 0.0, 1.0]])
        cs = FittedCoordinateSystem("Local", base, Affine(matrix))
        wkt = cs.to_wkt()
        self.assertIn('PARAM_MT["Affine",PARAMETER["num_row",3]', wkt)
        self.assertNotIn("elt_2_2", wkt)
        self.assertEqual(parse_wkt(wkt), cs)

    def test_unsupported_type(self):
        with self.assertRaises(TypeError):
            to_wkt("GEOGCS")
