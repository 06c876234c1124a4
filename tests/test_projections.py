import itertools
import math
from unittest import TestCase

import numpy as np
from pyproj import Proj

from mappyproj.constructs.coordinate_system import (
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
)
from mappyproj.constructs.datum import CLARKE_1866_ELLIPSOID, WGS84_DATUM, HorizontalDatum
from mappyproj.constructs.projection import Projection
from mappyproj.constructs.units import GRAD
from mappyproj.factories.authority_registry import REGISTRY
from mappyproj.factories.transformation_factory import projection_transform
from mappyproj.projections import PROJECTION_METHODS, find_method, get_method, method_names
from mappyproj.projections.albers import ALBERS_CONIC_EQUAL_AREA, AlbersConstants
from mappyproj.transforms.math_transform import Direction, ProjectionTransform
from mappyproj.utils.crs import LATLON_CRS
from mappyproj.utils.exceptions import (
    InvalidProjectionParametersError,
    MissingProjectionParameterError,
    ProjectionComputationError,
    UnsupportedProjectionMethodError,
)
from mappyproj.wkt.parser import parse_wkt

# longitude and latitude ranges inside the domain of each definition
DOMAINS = {
    3857: (np.linspace(-170, 170, 5), np.linspace(-80, 80, 5)),
    900913: (np.linspace(-170, 170, 5), np.linspace(-80, 80, 5)),
    3395: (np.linspace(-170, 170, 5), np.linspace(-80, 80, 5)),
    32618: (np.linspace(-77, -73, 5), np.linspace(-60, 70, 5)),
    32733: (np.linspace(13, 17, 5), np.linspace(-60, 5, 5)),
    27700: (np.linspace(-6, 1.5, 5), np.linspace(50, 58, 5)),
    2154: (np.linspace(-5, 9, 5), np.linspace(41, 51, 5)),
    5070: (np.linspace(-125, -67, 5), np.linspace(25, 49, 5)),
}

PROJ_DEFINITIONS = {
    3395: "+proj=merc +lon_0=0 +k=1 +x_0=0 +y_0=0 +ellps=WGS84",
    3857: "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 +x_0=0 +y_0=0 +k=1",
    32618: "+proj=utm +zone=18 +ellps=WGS84",
    27700: (
        "+proj=tmerc +lat_0=49 +lon_0=-2 +k=0.9996012717 +x_0=400000 +y_0=-100000 "
        "+ellps=airy"
    ),
    2154: (
        "+proj=lcc +lat_0=46.5 +lon_0=3 +lat_1=49 +lat_2=44 +x_0=700000 +y_0=6600000 "
        "+ellps=GRS80"
    ),
    5070: (
        "+proj=aea +lat_0=23 +lon_0=-96 +lat_1=29.5 +lat_2=45.5 +x_0=0 +y_0=0 "
        "+ellps=GRS80"
    ),
}

# the transverse mercator series is compared close to its central meridian
PROJ_DOMAINS = {
    32618: (np.linspace(-76.5, -73.5, 4), np.linspace(-40, 60, 5)),
    27700: (np.linspace(-3.5, -0.5, 4), np.linspace(50, 58, 5)),
}

CLARKE_1866_DATUM = HorizontalDatum("Clarke 1866 based", CLARKE_1866_ELLIPSOID)
CLARKE_1866_CS = GeographicCoordinateSystem("Clarke 1866", CLARKE_1866_DATUM)


def _projected(method: str, parameters: dict, base=LATLON_CRS) -> ProjectedCoordinateSystem:
    return ProjectedCoordinateSystem(
        method, base, Projection.from_parameters(method, parameters)
    )


# definitions with no entry in the built-in table
LCC_1SP = _projected(
    "Lambert_Conformal_Conic_1SP",
    {
        "latitude_of_origin": 18,
        "central_meridian": -77,
        "scale_factor": 1,
        "false_easting": 250000,
        "false_northing": 150000,
    },
    CLARKE_1866_CS,
)
MERCATOR_2SP = _projected(
    "Mercator_2SP", {"standard_parallel_1": 42, "central_meridian": 51}
)


def _grid(lons, lats):
    return list(itertools.product(lons, lats))


class TestProjectionRegistry(TestCase):
    def test_lookup_by_alias_and_spelling(self):
        self.assertEqual(find_method("Mercator").name, "Mercator_1SP")
        self.assertEqual(
            find_method("lambert conformal conic 2sp").name, "Lambert_Conformal_Conic_2SP"
        )
        self.assertEqual(find_method("Gauss-Kruger").name, "Transverse_Mercator")
        self.assertIsNone(find_method("Bogus"))

    def test_get_unknown_method(self):
        with self.assertRaises(UnsupportedProjectionMethodError) as ctx:
            get_method("Bogus")
        self.assertEqual(ctx.exception.method, "Bogus")

    def test_registry_is_read_only(self):
        with self.assertRaises(TypeError):
            PROJECTION_METHODS["bogus"] = get_method("Mercator_1SP")

    def test_method_names(self):
        names = method_names()
        for name in (
            "Albers_Conic_Equal_Area",
            "Lambert_Conformal_Conic_1SP",
            "Lambert_Conformal_Conic_2SP",
            "Mercator_1SP",
            "Mercator_2SP",
            "Popular_Visualisation_Pseudo_Mercator",
            "Transverse_Mercator",
        ):
            self.assertIn(name, names)


class TestProjectionParameters(TestCase):
    LCC = {
        "standard_parallel_1": 33,
        "standard_parallel_2": 45,
        "latitude_of_origin": 23,
        "central_meridian": -96,
    }

    def test_lcc_missing_second_parallel(self):
        params = dict(self.LCC)
        del params["standard_parallel_2"]
        with self.assertRaises(MissingProjectionParameterError) as ctx:
            Projection.from_parameters("Lambert_Conformal_Conic_2SP", params)
        self.assertEqual(ctx.exception.parameter, "standard_parallel_2")
        self.assertIn("standard_parallel_2", str(ctx.exception))

    def test_lcc_opposite_parallels(self):
        params = dict(self.LCC, standard_parallel_1=30, standard_parallel_2=-30)
        with self.assertRaises(InvalidProjectionParametersError):
            Projection.from_parameters("Lambert_Conformal_Conic_2SP", params)

    def test_parameter_synonyms(self):
        projection = Projection.from_parameters(
            "Lambert_Conformal_Conic_2SP",
            {
                "Latitude_of_1st_standard_parallel": 33,
                "Latitude_of_2nd_standard_parallel": 45,
                "Latitude_of_false_origin": 23,
                "Longitude_of_false_origin": -96,
            },
        )
        resolved = projection.method_definition.resolve_parameters(projection.parameter_map())
        self.assertEqual(resolved["standard_parallel_2"], 45.0)
        self.assertEqual(resolved["false_easting"], 0.0)

    def test_duplicate_parameter(self):
        with self.assertRaises(ValueError):
            Projection(
                "Mercator_1SP",
                "Mercator_1SP",
                (("central_meridian", 0), ("Central_Meridian", 1), ("scale_factor", 1)),
            )

    def test_get_parameter(self):
        projection = Projection.from_parameters(
            "Mercator_1SP", [("central_meridian", 10), ("scale_factor", 1)]
        )
        self.assertEqual(projection.get_parameter("Central_Meridian"), 10.0)
        self.assertTrue(projection.has_parameter("scale_factor"))
        with self.assertRaises(MissingProjectionParameterError):
            projection.get_parameter("false_easting")

    def test_invalid_scale_factor(self):
        with self.assertRaises(InvalidProjectionParametersError):
            Projection.from_parameters(
                "Transverse_Mercator",
                {"latitude_of_origin": 0, "central_meridian": 0, "scale_factor": 0},
            )

    def test_mercator_2sp_parallel_at_the_pole(self):
        with self.assertRaises(InvalidProjectionParametersError):
            _projected("Mercator_2SP", {"standard_parallel_1": 90, "central_meridian": 0})

        wkt = (
            f'PROJCS["Polar Mercator",{LATLON_CRS.to_wkt()},PROJECTION["Mercator_2SP"],'
            'PARAMETER["standard_parallel_1",-90],PARAMETER["central_meridian",0],'
            'UNIT["metre",1]]'
        )
        with self.assertRaises(InvalidProjectionParametersError):
            parse_wkt(wkt)

    def test_lcc_1sp_origin_at_the_pole(self):
        with self.assertRaises(InvalidProjectionParametersError):
            _projected(
                "Lambert_Conformal_Conic_1SP",
                {"latitude_of_origin": 90, "central_meridian": 0, "scale_factor": 1},
            )

    def test_ranges_are_checked_in_the_geographic_unit(self):
        grads = GeographicCoordinateSystem("WGS 84 (grads)", WGS84_DATUM, angular_unit=GRAD)
        # 95 grads is 85.5 degrees
        cs = _projected(
            "Mercator_2SP", {"standard_parallel_1": 95, "central_meridian": 0}, grads
        )
        self.assertAlmostEqual(cs.resolved_parameters()["standard_parallel_1"], 85.5, delta=1e-12)
        with self.assertRaises(InvalidProjectionParametersError):
            _projected("Mercator_2SP", {"standard_parallel_1": 120, "central_meridian": 0}, grads)


class TestProjectionMath(TestCase):
    def _assert_round_trip(self, cs: ProjectedCoordinateSystem, points):
        forward = projection_transform(cs)
        inverse = forward.inverse()
        for lon, lat in points:
            x, y = forward.transform((lon, lat))
            lon2, lat2 = inverse.transform((x, y))
            self.assertAlmostEqual(lon2, lon, delta=1e-7, msg=f"{cs.name} {lon},{lat}")
            self.assertAlmostEqual(lat2, lat, delta=1e-7, msg=f"{cs.name} {lon},{lat}")

    def test_round_trip_registry_definitions(self):
        for code, (lons, lats) in DOMAINS.items():
            with self.subTest(code=code):
                self._assert_round_trip(REGISTRY.get("EPSG", code), _grid(lons, lats))

    def test_round_trip_lcc_1sp(self):
        self._assert_round_trip(
            LCC_1SP, _grid(np.linspace(-80, -74, 4), np.linspace(10, 26, 4))
        )

    def test_round_trip_mercator_2sp(self):
        self._assert_round_trip(
            MERCATOR_2SP, _grid(np.linspace(20, 80, 4), np.linspace(-70, 70, 5))
        )

    def test_agrees_with_proj(self):
        for code, definition in PROJ_DEFINITIONS.items():
            with self.subTest(code=code):
                proj = Proj(definition)
                forward = projection_transform(REGISTRY.get("EPSG", code))
                lons, lats = PROJ_DOMAINS.get(code, DOMAINS[code])
                for lon, lat in _grid(lons, lats):
                    x, y = forward.transform((lon, lat))
                    px, py = proj(lon, lat)
                    self.assertAlmostEqual(x, px, delta=0.005, msg=f"{lon},{lat}")
                    self.assertAlmostEqual(y, py, delta=0.005, msg=f"{lon},{lat}")

    def test_lcc_1sp_agrees_with_proj(self):
        proj = Proj(
            "+proj=lcc +lat_1=18 +lat_0=18 +lon_0=-77 +k_0=1 +x_0=250000 +y_0=150000 "
            "+ellps=clrk66"
        )
        forward = projection_transform(LCC_1SP)
        for lon, lat in _grid(np.linspace(-80, -74, 4), np.linspace(10, 26, 4)):
            x, y = forward.transform((lon, lat))
            px, py = proj(lon, lat)
            self.assertAlmostEqual(x, px, delta=0.005)
            self.assertAlmostEqual(y, py, delta=0.005)

    def test_mercator_2sp_agrees_with_proj(self):
        proj = Proj("+proj=merc +lat_ts=42 +lon_0=51 +x_0=0 +y_0=0 +ellps=WGS84")
        forward = projection_transform(MERCATOR_2SP)
        for lon, lat in _grid(np.linspace(20, 80, 4), np.linspace(-70, 70, 5)):
            x, y = forward.transform((lon, lat))
            px, py = proj(lon, lat)
            self.assertAlmostEqual(x, px, delta=0.005)
            self.assertAlmostEqual(y, py, delta=0.005)

    def test_known_utm_point(self):
        forward = projection_transform(REGISTRY.get("EPSG", 32618))
        x, y = forward.transform((-75.0, 0.0))
        self.assertAlmostEqual(x, 500000.0, delta=1e-6)
        self.assertAlmostEqual(y, 0.0, delta=1e-6)

    def test_mercator_pole(self):
        forward = projection_transform(REGISTRY.get("EPSG", 3395))
        with self.assertRaises(ProjectionComputationError):
            forward.transform((0.0, 90.0))
        # the transform stays usable after a failure
        x, y = forward.transform((0.0, 0.0))
        self.assertAlmostEqual(x, 0.0, delta=1e-6)
        self.assertAlmostEqual(y, 0.0, delta=1e-6)

    def test_lcc_pole_opposite_the_apex(self):
        forward = projection_transform(REGISTRY.get("EPSG", 2154))
        with self.assertRaises(ProjectionComputationError):
            forward.transform((3.0, -90.0))

        # the apex of the cone is a single point
        x, _ = forward.transform((3.0, 90.0))
        self.assertAlmostEqual(x, 700000.0, delta=1e-6)

        x, y = forward.transform((3.0, 46.5))
        self.assertAlmostEqual(x, 700000.0, delta=1e-6)
        self.assertAlmostEqual(y, 6600000.0, delta=1e-6)

    def test_albers_outside_the_domain(self):
        # a spherical cone with n = 1 and C = 0.5 only reaches latitude asin(0.25)
        a = 6378137.0
        constants = AlbersConstants(
            a=a,
            e=0.0,
            es=0.0,
            ns0=1.0,
            c=0.5,
            rh=a * math.sqrt(0.5),
            lon0=0.0,
            false_easting=0.0,
            false_northing=0.0,
        )
        forward = ProjectionTransform(ALBERS_CONIC_EQUAL_AREA, constants, Direction.FORWARD)
        with self.assertRaises(ProjectionComputationError):
            forward.transform((0.0, 60.0))

        x, y = forward.transform((0.0, -30.0))
        self.assertAlmostEqual(x, 0.0, delta=1e-6)
        self.assertAlmostEqual(y, a * (math.sqrt(0.5) - math.sqrt(1.5)), delta=1e-6)

        lon, lat = forward.inverse().transform((x, y))
        self.assertAlmostEqual(lon, 0.0, delta=1e-9)
        self.assertAlmostEqual(lat, -30.0, delta=1e-9)
