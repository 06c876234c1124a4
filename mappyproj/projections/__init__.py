"""The projection library.

Importing this package registers every built-in projection method.
"""

from mappyproj.projections import (
    albers,
    lambert_conformal_conic,
    mercator,
    transverse_mercator,
)
from mappyproj.projections.registry import (
    PROJECTION_METHODS,
    ProjectionMethod,
    _register,
    find_method,
    get_method,
    method_names,
)

for _module in (mercator, transverse_mercator, lambert_conformal_conic, albers):
    for _method in _module.METHODS:
        _register(_method)

__all__ = [
    "PROJECTION_METHODS",
    "ProjectionMethod",
    "find_method",
    "get_method",
    "method_names",
]
