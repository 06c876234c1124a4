"""Registry of projection methods.

Each projection method is a record of data plus two functions (forward and
inverse) rather than a class. The registry is filled once when
`mappyproj.projections` is imported and is read-only afterwards.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
)

from mappyproj.constructs.datum import Ellipsoid
from mappyproj.utils.exceptions import (
    MissingProjectionParameterError,
    UnsupportedProjectionMethodError,
)

log = logging.getLogger(__name__)

# Parameters every method accepts; they override the base ellipsoid
ELLIPSOID_PARAMETERS = ("semi_major", "semi_minor")

# Parameters expressed in the linear unit of the projected coordinate system
LINEAR_PARAMETERS = frozenset(("false_easting", "false_northing"))

DEFAULT_OPTIONAL_PARAMETERS: Dict[str, float] = {
    "false_easting": 0.0,
    "false_northing": 0.0,
}


def normalize_name(name: str) -> str:
    """Normalize a method or parameter name: lower case, no spaces, dashes or underscores."""
    return re.sub(r"[\s_\-]", "", name.lower())


def no_validation(parameters: Mapping[str, float]):
    pass


class ProjectionMethod(NamedTuple):
    """
    A named projection method: its parameter contract and its math.

    Attributes:
        name: The canonical OGC method name (e.g. "Transverse_Mercator")
        authority_code: The EPSG method code, if any
        aliases: Other names the method is known by
        required: Parameter names that must be present
        optional: Parameter names that may be absent, with their defaults
        synonyms: Alternate parameter names mapped to their canonical names
        angular: Names of the parameters that are angles (in the geographic unit)
        validate: Checks a resolved parameter mapping; raises on invalid values. Only checks
            that hold whatever the angular unit are made here
        setup: Builds the method's constants from the resolved parameters and the ellipsoid
        forward: Maps (constants, longitude, latitude) in radians to (x, y) in metres
        inverse: Maps (constants, x, y) in metres to (longitude, latitude) in radians
        check_ranges: Checks resolved parameters once they are converted to degrees, e.g.
            that a latitude is not a pole
    """

    name: str
    authority_code: Optional[int]
    aliases: Tuple[str, ...]
    required: Tuple[str, ...]
    optional: Mapping[str, float]
    synonyms: Mapping[str, str]
    angular: FrozenSet[str]
    validate: Callable[[Mapping[str, float]], None]
    setup: Callable[[Mapping[str, float], Ellipsoid], Any]
    forward: Callable[[Any, float, float], Tuple[float, float]]
    inverse: Callable[[Any, float, float], Tuple[float, float]]
    check_ranges: Callable[[Mapping[str, float]], None] = no_validation

    def canonical_parameter(self, name: str) -> str:
        key = name.lower()
        return self.synonyms.get(key, key)

    def resolve_parameters(self, parameters: Mapping[str, float]) -> Dict[str, float]:
        """
        Map parameter names to their canonical spelling, check the required set, fill in
        defaults for the optional ones and run the method's validation.

        Args:
            parameters: Parameter values keyed by name (any case, synonyms allowed)

        Returns:
            A new dictionary keyed by canonical lower case parameter names

        Raises:
            MissingProjectionParameterError: If a required parameter is absent
            InvalidProjectionParametersError: If the values are not usable by the method
        """
        resolved: Dict[str, float] = {}
        for name, value in parameters.items():
            resolved[self.canonical_parameter(name)] = float(value)

        for name in self.required:
            if name not in resolved:
                raise MissingProjectionParameterError(name, self.name)

        for name, default in self.optional.items():
            resolved.setdefault(name, default)

        self.validate(resolved)

        return resolved

    def resolve_degree_parameters(self, parameters: Mapping[str, float]) -> Dict[str, float]:
        """
        Resolve parameters whose angles are in degrees and whose linear values are in
        metres. On top of `resolve_parameters` this runs the degree range checks.

        Raises:
            MissingProjectionParameterError: If a required parameter is absent
            InvalidProjectionParametersError: If the values are not usable by the method
        """
        resolved = self.resolve_parameters(parameters)
        self.check_ranges(resolved)
        return resolved


_METHODS: Dict[str, ProjectionMethod] = {}

PROJECTION_METHODS: Mapping[str, ProjectionMethod] = MappingProxyType(_METHODS)


def _register(method: ProjectionMethod):
    for name in (method.name, *method.aliases):
        key = normalize_name(name)
        if key in _METHODS:
            raise ValueError(f"projection method name {name} is registered twice")
        _METHODS[key] = method
    log.debug(f"registered projection method {method.name}")


def find_method(name: str) -> Optional[ProjectionMethod]:
    """
    Look up a projection method by name or alias.

    Returns:
        The method, or None if no method is registered under that name
    """
    return PROJECTION_METHODS.get(normalize_name(name))


def get_method(name: str) -> ProjectionMethod:
    """
    Look up a projection method by name or alias.

    Raises:
        UnsupportedProjectionMethodError: If no method is registered under that name
    """
    method = find_method(name)
    if method is None:
        raise UnsupportedProjectionMethodError(name)
    return method


def method_names() -> Tuple[str, ...]:
    """The canonical names of all registered methods, sorted."""
    return tuple(sorted({m.name for m in PROJECTION_METHODS.values()}))

