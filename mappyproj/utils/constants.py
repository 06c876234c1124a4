"""Numerical constants and defaults used throughout mappyproj."""

import math

# Tolerance guarding divide-by-zero and pole singularities in the projection math
EPSLN = 1.0e-10

HALF_PI = math.pi * 0.5
TWO_PI = math.pi * 2.0

DEGREES_PER_RADIAN = 180.0 / math.pi
RADIANS_PER_DEGREE = math.pi / 180.0

# Arc-seconds to radians, used for Bursa-Wolf rotation parameters
RADIANS_PER_ARC_SECOND = RADIANS_PER_DEGREE / 3600.0

# Iteration limits for the latitude solvers
PHI2Z_MAX_ITER = 15
PHI1Z_MAX_ITER = 25
TM_INVERSE_MAX_ITER = 6
GEOCENTRIC_MAX_ITER = 30

# Convergence tolerance (radians) for the geocentric -> geographic solver
GEOCENTRIC_TOLERANCE = 1.0e-14

# Relative tolerance under which two unit factors are considered the same unit
UNIT_EQUIVALENCE_TOLERANCE = 1.0e-12

# Default number of (source, target) pairs memoized by a transformation factory
DEFAULT_TRANSFORMATION_CACHE_SIZE = 128
