from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, NamedTuple, Optional, Tuple, Union

from mappyproj.constructs.authority import Authority
from mappyproj.projections import ProjectionMethod, find_method
from mappyproj.utils.exceptions import MissingProjectionParameterError

log = logging.getLogger(__name__)


class ProjectionParameter(NamedTuple):
    """
    A named numeric projection parameter, e.g. ("central_meridian", -75.0).

    Angular parameters are expressed in the angular unit of the projected system's
    geographic base; false easting and northing in its linear unit.
    """

    name: str
    value: float


ParameterInput = Union[Mapping[str, float], Iterable[Tuple[str, float]]]


def _as_parameters(parameters: ParameterInput) -> Tuple[ProjectionParameter, ...]:
    if isinstance(parameters, Mapping):
        items = parameters.items()
    else:
        items = parameters
    return tuple(ProjectionParameter(str(n), float(v)) for n, v in items)


@dataclass(frozen=True)
class Projection:
    """
    A projection definition: a method name plus its ordered parameters.

    When the method is registered in the projection library, the parameters are
    validated against the method's required set as soon as the projection is built.
    An unregistered method is kept as-is so the definition can still be read and
    written, but no transform can be built from it.

    Attributes:
        name: The projection name (often the same as the method); not compared
        method: The projection method name, e.g. "Lambert_Conformal_Conic_2SP"
        parameters: The ordered parameters
        authority: An optional authority identity

    Raises:
        MissingProjectionParameterError: If a required parameter is missing
        InvalidProjectionParametersError: If parameter values are unusable

    Examples:
        >>> from mappyproj.constructs.projection import Projection
        >>> utm18 = Projection.from_parameters(
        ...     "Transverse_Mercator",
        ...     {
        ...         "latitude_of_origin": 0,
        ...         "central_meridian": -75,
        ...         "scale_factor": 0.9996,
        ...         "false_easting": 500000,
        ...         "false_northing": 0,
        ...     },
        ... )
        >>> utm18.get_parameter("central_meridian")
        -75.0
    """

    name: str = field(compare=False)
    method: str
    parameters: Tuple[ProjectionParameter, ...] = ()
    authority: Optional[Authority] = None

    def __post_init__(self):
        object.__setattr__(self, "parameters", _as_parameters(self.parameters))

        seen = set()
        for p in self.parameters:
            key = p.name.lower()
            if key in seen:
                raise ValueError(f"projection parameter {p.name} is given twice")
            seen.add(key)

        method = self.method_definition
        if method is None:
            log.warning(
                f"projection method {self.method} is not registered; "
                "coordinates cannot be transformed with it"
            )
        else:
            method.resolve_parameters(self.parameter_map())

    @classmethod
    def from_parameters(
        cls,
        method: str,
        parameters: ParameterInput,
        name: Optional[str] = None,
        authority: Optional[Authority] = None,
    ) -> Projection:
        return cls(name or method, method, _as_parameters(parameters), authority)

    @property
    def method_definition(self) -> Optional[ProjectionMethod]:
        return find_method(self.method)

    @property
    def is_supported(self) -> bool:
        return self.method_definition is not None

    def parameter_map(self) -> Dict[str, float]:
        """Get the parameters as a dictionary keyed by lower case name."""
        return {p.name.lower(): p.value for p in self.parameters}

    def get_parameter(self, name: str) -> float:
        """
        Get a parameter value by name (case-insensitive).

        Raises:
            MissingProjectionParameterError: If the parameter is not present
        """
        value = self.parameter_map().get(name.lower())
        if value is None:
            raise MissingProjectionParameterError(name, self.method)
        return value

    def has_parameter(self, name: str) -> bool:
        return name.lower() in self.parameter_map()
