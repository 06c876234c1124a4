"""Keyword names of the WKT grammar.

These constants are shared by the parser and the writer so both sides agree on
the spelling of every node.
"""

GEOGCS_KEY = "GEOGCS"
PROJCS_KEY = "PROJCS"
GEOCCS_KEY = "GEOCCS"
FITTED_CS_KEY = "FITTED_CS"

DATUM_KEY = "DATUM"
SPHEROID_KEY = "SPHEROID"
ELLIPSOID_KEY = "ELLIPSOID"
PRIMEM_KEY = "PRIMEM"
UNIT_KEY = "UNIT"
AXIS_KEY = "AXIS"
PROJECTION_KEY = "PROJECTION"
PARAMETER_KEY = "PARAMETER"
AUTHORITY_KEY = "AUTHORITY"
TOWGS84_KEY = "TOWGS84"
EXTENSION_KEY = "EXTENSION"
PARAM_MT_KEY = "PARAM_MT"

# Keywords that may start a coordinate system definition
CS_KEYS = (GEOGCS_KEY, PROJCS_KEY, GEOCCS_KEY, FITTED_CS_KEY)

# Every keyword the parser understands
KNOWN_KEYS = frozenset(
    (
        *CS_KEYS,
        DATUM_KEY,
        SPHEROID_KEY,
        ELLIPSOID_KEY,
        PRIMEM_KEY,
        UNIT_KEY,
        AXIS_KEY,
        PROJECTION_KEY,
        PARAMETER_KEY,
        AUTHORITY_KEY,
        TOWGS84_KEY,
        EXTENSION_KEY,
        PARAM_MT_KEY,
    )
)
