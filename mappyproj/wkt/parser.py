"""Parse OGC WKT1 coordinate system definitions.

Parsing happens in two stages. The first builds a generic tree of keyword nodes
from the token stream and checks bracket balance. The second walks the tree,
checks that every node has the children its keyword requires and builds the
coordinate system constructs.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

import numpy as np

from mappyproj.constructs.authority import Authority
from mappyproj.constructs.axis import Axis, AxisOrientation
from mappyproj.constructs.coordinate_system import (
    CoordinateSystem,
    FittedCoordinateSystem,
    GeocentricCoordinateSystem,
    GeographicCoordinateSystem,
    ProjectedCoordinateSystem,
)
from mappyproj.constructs.datum import (
    BursaWolfParameters,
    Ellipsoid,
    HorizontalDatum,
    PrimeMeridian,
)
from mappyproj.constructs.projection import Projection, ProjectionParameter
from mappyproj.constructs.units import DEGREE, AngularUnit, LinearUnit
from mappyproj.transforms.math_transform import Affine
from mappyproj.utils.exceptions import CrsException, WktParseError
from mappyproj.utils.keys import (
    AUTHORITY_KEY,
    AXIS_KEY,
    CS_KEYS,
    DATUM_KEY,
    ELLIPSOID_KEY,
    EXTENSION_KEY,
    FITTED_CS_KEY,
    GEOCCS_KEY,
    GEOGCS_KEY,
    KNOWN_KEYS,
    PARAM_MT_KEY,
    PARAMETER_KEY,
    PRIMEM_KEY,
    PROJCS_KEY,
    PROJECTION_KEY,
    SPHEROID_KEY,
    TOWGS84_KEY,
    UNIT_KEY,
)
from mappyproj.wkt.tokenizer import Token, TokenType, parse_error, tokenize

log = logging.getLogger(__name__)

_CLOSING = {"[": "]", "(": ")"}

AFFINE_METHOD = "Affine"


class WktValue(NamedTuple):
    """A leaf argument of a WKT node: a quoted string, a number or a bare identifier."""

    type: TokenType
    value: Union[str, float]
    text: str
    position: int


class WktNode(NamedTuple):
    """
    A keyword node of the WKT tree, e.g. UNIT["metre", 1].

    Attributes:
        keyword: The keyword in upper case
        args: The arguments, leaves and child nodes, in order
        position: The offset of the keyword in the source
        end: The offset of the closing bracket in the source
    """

    keyword: str
    args: Tuple[Union[WktValue, WktNode], ...]
    position: int
    end: int


class _TreeReader:
    """Stage one: tokens to a tree of WktNode."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _next(self) -> Token:
        token = self.tokens[self.index]
        if token.type is not TokenType.END:
            self.index += 1
        return token

    def _error(self, message: str, token: Token, expected: str) -> WktParseError:
        return parse_error(self.text, message, token.position, expected, token.describe())

    def read(self) -> WktNode:
        token = self._next()
        if token.type is not TokenType.IDENTIFIER:
            raise self._error("expected a keyword", token, "a keyword")
        node = self._node(token)
        trailing = self._peek()
        if trailing.type is not TokenType.END:
            raise self._error("unexpected trailing input", trailing, "end of input")
        return node

    def _node(self, keyword: Token) -> WktNode:
        opening = self._next()
        if opening.type is not TokenType.OPEN:
            raise self._error(
                f"expected an opening bracket after {keyword.text}", opening, "'[' or '('"
            )
        closing_char = _CLOSING[opening.value]

        args: List[Union[WktValue, WktNode]] = []
        if self._peek().type is TokenType.CLOSE:
            raise self._error(
                f"{keyword.text} has no arguments", self._peek(), "an argument"
            )
        while True:
            args.append(self._arg())
            token = self._next()
            if token.type is TokenType.COMMA:
                continue
            if token.type is TokenType.CLOSE:
                if token.value != closing_char:
                    raise self._error(
                        f"mismatched bracket closing {keyword.text}",
                        token,
                        repr(closing_char),
                    )
                return WktNode(keyword.text.upper(), tuple(args), keyword.position, token.position)
            raise self._error(
                f"expected a comma or {closing_char!r} in {keyword.text}",
                token,
                f"',' or {closing_char!r}",
            )

    def _arg(self) -> Union[WktValue, WktNode]:
        token = self._next()
        if token.type in (TokenType.STRING, TokenType.NUMBER):
            return WktValue(token.type, token.value, token.text, token.position)
        if token.type is TokenType.IDENTIFIER:
            if self._peek().type is TokenType.OPEN:
                return self._node(token)
            return WktValue(token.type, token.value, token.text, token.position)
        raise self._error("expected an argument", token, "a string, number or keyword")


def parse_tree(text: str) -> WktNode:
    """
    Parse WKT text into a generic node tree without interpreting the keywords.

    Raises:
        WktParseError: On malformed input
    """
    return _TreeReader(text).read()


class _Builder:
    """Stage two: a WktNode tree to coordinate system constructs."""

    def __init__(self, text: str):
        self.text = text

    def error(
        self,
        message: str,
        position: int,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ) -> WktParseError:
        return parse_error(self.text, message, position, expected, found)

    # leaves

    def string(self, node: WktNode, index: int, what: str) -> str:
        arg = self.arg(node, index, what)
        if not isinstance(arg, WktValue) or arg.type is not TokenType.STRING:
            raise self.error(
                f"{node.keyword} {what} must be a quoted string",
                _position(arg),
                "a quoted string",
                _describe(arg),
            )
        return arg.value

    def number(self, node: WktNode, index: int, what: str) -> float:
        arg = self.arg(node, index, what)
        if not isinstance(arg, WktValue) or arg.type is not TokenType.NUMBER:
            raise self.error(
                f"{node.keyword} {what} must be a number",
                _position(arg),
                "a number",
                _describe(arg),
            )
        return arg.value

    def arg(self, node: WktNode, index: int, what: str) -> Union[WktValue, WktNode]:
        if index >= len(node.args):
            raise self.error(f"{node.keyword} is missing its {what}", node.end, what, "']'")
        return node.args[index]

    def check_leaf_count(self, node: WktNode, count: int):
        for arg in node.args[count:]:
            if not isinstance(arg, WktNode):
                raise self.error(
                    f"unexpected value in {node.keyword}",
                    arg.position,
                    "a keyword",
                    _describe(arg),
                )

    def children(
        self,
        node: WktNode,
        start: int,
        allowed: Mapping[str, Tuple[int, Optional[int]]],
    ) -> Dict[str, List[WktNode]]:
        """
        Group the child nodes of `node` from argument `start` on by keyword and check
        each keyword appears between its minimum and maximum number of times.
        """
        self.check_leaf_count(node, start)
        groups: Dict[str, List[WktNode]] = defaultdict(list)
        for child in node.args[start:]:
            key = SPHEROID_KEY if child.keyword == ELLIPSOID_KEY else child.keyword
            if key not in allowed:
                if key in KNOWN_KEYS:
                    message = f"{child.keyword} is not allowed in {node.keyword}"
                else:
                    message = f"unknown keyword {child.keyword}"
                raise self.error(
                    message,
                    child.position,
                    "one of " + ", ".join(allowed),
                    child.keyword,
                )
            groups[key].append(child)

        for key, (lo, hi) in allowed.items():
            found = groups.get(key, [])
            if len(found) < lo:
                raise self.error(
                    f"{node.keyword} is missing {key}", node.end, key, "']'"
                )
            if hi is not None and len(found) > hi:
                raise self.error(
                    f"{node.keyword} has more than one {key}",
                    found[hi].position,
                    f"at most {hi} {key}",
                    key,
                )
        return groups

    # components

    def authority(self, groups: Dict[str, List[WktNode]]) -> Optional[Authority]:
        nodes = groups.get(AUTHORITY_KEY)
        if not nodes:
            return None
        node = nodes[0]
        name = self.string(node, 0, "authority name")
        code = self.arg(node, 1, "authority code")
        if len(node.args) > 2:
            raise self.error("AUTHORITY takes a name and a code", node.args[2].position)
        if isinstance(code, WktValue) and code.type is TokenType.STRING:
            return Authority(name, code.value)
        if isinstance(code, WktValue) and code.type is TokenType.NUMBER:
            value = code.value
            return Authority(name, str(int(value)) if value.is_integer() else code.text)
        raise self.error(
            "AUTHORITY code must be a string or a number",
            _position(code),
            "a string or number",
            _describe(code),
        )

    def angular_unit(self, node: WktNode) -> AngularUnit:
        name = self.string(node, 0, "name")
        factor = self.number(node, 1, "conversion factor")
        groups = self.children(node, 2, {AUTHORITY_KEY: (0, 1)})
        return self.construct(node, AngularUnit, name, factor, self.authority(groups))

    def linear_unit(self, node: WktNode) -> LinearUnit:
        name = self.string(node, 0, "name")
        factor = self.number(node, 1, "conversion factor")
        groups = self.children(node, 2, {AUTHORITY_KEY: (0, 1)})
        return self.construct(node, LinearUnit, name, factor, self.authority(groups))

    def ellipsoid(self, node: WktNode) -> Ellipsoid:
        name = self.string(node, 0, "name")
        a = self.number(node, 1, "semi-major axis")
        inv_f = self.number(node, 2, "inverse flattening")
        groups = self.children(node, 3, {AUTHORITY_KEY: (0, 1)})
        return self.construct(
            node, Ellipsoid, name, a, inv_f, authority=self.authority(groups)
        )

    def to_wgs84(self, node: WktNode) -> BursaWolfParameters:
        values = [self.number(node, i, f"parameter {i + 1}") for i in range(len(node.args))]
        if len(values) not in (3, 7):
            raise self.error(
                f"TOWGS84 takes 3 or 7 numbers, found {len(values)}",
                node.position,
                "3 or 7 numbers",
                str(len(values)),
            )
        return BursaWolfParameters(*values)

    def datum(self, node: WktNode) -> HorizontalDatum:
        name = self.string(node, 0, "name")
        groups = self.children(
            node, 1, {SPHEROID_KEY: (1, 1), TOWGS84_KEY: (0, 1), AUTHORITY_KEY: (0, 1)}
        )
        ellipsoid = self.ellipsoid(groups[SPHEROID_KEY][0])
        shift = None
        if groups.get(TOWGS84_KEY):
            shift = self.to_wgs84(groups[TOWGS84_KEY][0])
        return HorizontalDatum(name, ellipsoid, shift, self.authority(groups))

    def prime_meridian(self, node: WktNode, unit: AngularUnit) -> PrimeMeridian:
        name = self.string(node, 0, "name")
        longitude = self.number(node, 1, "longitude")
        groups = self.children(node, 2, {AUTHORITY_KEY: (0, 1)})
        return PrimeMeridian(name, longitude, unit, self.authority(groups))

    def axis(self, node: WktNode) -> Axis:
        name = self.string(node, 0, "name")
        arg = self.arg(node, 1, "orientation")
        if len(node.args) > 2:
            raise self.error(
                "AXIS takes a name and an orientation", _position(node.args[2])
            )
        if not isinstance(arg, WktValue) or arg.type is TokenType.NUMBER:
            raise self.error(
                "AXIS orientation must be a keyword",
                _position(arg),
                "an axis orientation",
                _describe(arg),
            )
        try:
            orientation = AxisOrientation.from_string(arg.value)
        except ValueError as e:
            raise self.error(
                f"unknown axis orientation {arg.text}",
                arg.position,
                "one of " + ", ".join(o.value for o in AxisOrientation),
                arg.text,
            ) from e
        return Axis(name, orientation)

    def axes(self, groups: Dict[str, List[WktNode]]) -> Tuple[Axis, ...]:
        return tuple(self.axis(n) for n in groups.get(AXIS_KEY, []))

    def parameter(self, node: WktNode) -> ProjectionParameter:
        name = self.string(node, 0, "name")
        value = self.number(node, 1, "value")
        if len(node.args) > 2:
            raise self.error(
                "PARAMETER takes a name and a value", _position(node.args[2])
            )
        return ProjectionParameter(name, value)

    def affine(self, node: WktNode) -> Affine:
        method = self.string(node, 0, "method name")
        if method.lower() != AFFINE_METHOD.lower():
            raise self.error(
                f"unsupported math transform {method}",
                node.args[0].position,
                AFFINE_METHOD,
                method,
            )
        groups = self.children(node, 1, {PARAMETER_KEY: (0, None)})
        params = {
            p.name.lower(): p.value
            for p in (self.parameter(n) for n in groups.get(PARAMETER_KEY, []))
        }
        rows = int(params.pop("num_row", 3))
        cols = int(params.pop("num_col", 3))
        if rows != cols:
            raise self.error(
                f"affine matrix must be square, found {rows}x{cols}", node.position
            )
        matrix = np.eye(rows)
        for key, value in params.items():
            parts = key.split("_")
            if len(parts) != 3 or parts[0] != "elt":
                raise self.error(f"unknown affine parameter {key}", node.position)
            i, j = int(parts[1]), int(parts[2])
            if not (0 <= i < rows and 0 <= j < cols):
                raise self.error(
                    f"affine parameter {key} is outside a {rows}x{cols} matrix",
                    node.position,
                )
            matrix[i, j] = value
        return self.construct(node, Affine, matrix)

    # coordinate systems

    def coordinate_system(self, node: WktNode) -> CoordinateSystem:
        if node.keyword == GEOGCS_KEY:
            return self.geographic(node)
        if node.keyword == PROJCS_KEY:
            return self.projected(node)
        if node.keyword == GEOCCS_KEY:
            return self.geocentric(node)
        if node.keyword == FITTED_CS_KEY:
            return self.fitted(node)
        raise self.error(
            f"unsupported coordinate system keyword {node.keyword}",
            node.position,
            "one of " + ", ".join(CS_KEYS),
            node.keyword,
        )

    def geographic(self, node: WktNode) -> GeographicCoordinateSystem:
        name = self.string(node, 0, "name")
        groups = self.children(
            node,
            1,
            {
                DATUM_KEY: (1, 1),
                PRIMEM_KEY: (1, 1),
                UNIT_KEY: (1, 1),
                AXIS_KEY: (0, 3),
                AUTHORITY_KEY: (0, 1),
            },
        )
        datum = self.datum(groups[DATUM_KEY][0])
        unit = self.angular_unit(groups[UNIT_KEY][0])
        pm = self.prime_meridian(groups[PRIMEM_KEY][0], unit)
        return self.construct(
            node,
            GeographicCoordinateSystem,
            name,
            datum,
            pm,
            unit,
            self.axes(groups),
            self.authority(groups),
        )

    def projected(self, node: WktNode) -> ProjectedCoordinateSystem:
        name = self.string(node, 0, "name")
        groups = self.children(
            node,
            1,
            {
                GEOGCS_KEY: (1, 1),
                PROJECTION_KEY: (1, 1),
                PARAMETER_KEY: (0, None),
                UNIT_KEY: (1, 1),
                AXIS_KEY: (0, 3),
                EXTENSION_KEY: (0, 1),
                AUTHORITY_KEY: (0, 1),
            },
        )
        geographic_cs = self.geographic(groups[GEOGCS_KEY][0])

        projection_node = groups[PROJECTION_KEY][0]
        method = self.string(projection_node, 0, "method name")
        projection_groups = self.children(projection_node, 1, {AUTHORITY_KEY: (0, 1)})
        parameters = tuple(self.parameter(n) for n in groups.get(PARAMETER_KEY, []))
        projection = self.construct(
            projection_node,
            Projection,
            method,
            method,
            parameters,
            self.authority(projection_groups),
        )

        if groups.get(EXTENSION_KEY):
            ext = groups[EXTENSION_KEY][0]
            log.debug(
                f"ignoring EXTENSION {self.string(ext, 0, 'name')} of projected "
                f"coordinate system {name}"
            )

        unit = self.linear_unit(groups[UNIT_KEY][0])
        return self.construct(
            node,
            ProjectedCoordinateSystem,
            name,
            geographic_cs,
            projection,
            unit,
            self.axes(groups),
            self.authority(groups),
        )

    def geocentric(self, node: WktNode) -> GeocentricCoordinateSystem:
        name = self.string(node, 0, "name")
        groups = self.children(
            node,
            1,
            {
                DATUM_KEY: (1, 1),
                PRIMEM_KEY: (1, 1),
                UNIT_KEY: (1, 1),
                AXIS_KEY: (0, 3),
                AUTHORITY_KEY: (0, 1),
            },
        )
        datum = self.datum(groups[DATUM_KEY][0])
        # a geocentric prime meridian is always in degrees
        pm = self.prime_meridian(groups[PRIMEM_KEY][0], DEGREE)
        unit = self.linear_unit(groups[UNIT_KEY][0])
        return self.construct(
            node,
            GeocentricCoordinateSystem,
            name,
            datum,
            pm,
            unit,
            self.axes(groups),
            self.authority(groups),
        )

    def fitted(self, node: WktNode) -> FittedCoordinateSystem:
        name = self.string(node, 0, "name")
        allowed: Dict[str, Tuple[int, Optional[int]]] = {
            PARAM_MT_KEY: (1, 1),
            AXIS_KEY: (0, 3),
            AUTHORITY_KEY: (0, 1),
        }
        for key in CS_KEYS:
            allowed[key] = (0, 1)
        groups = self.children(node, 1, allowed)
        bases = [n for key in CS_KEYS for n in groups.get(key, [])]
        if len(bases) != 1:
            raise self.error(
                f"FITTED_CS needs exactly one base coordinate system, found {len(bases)}",
                node.position,
                "one of " + ", ".join(CS_KEYS),
            )
        to_base = self.affine(groups[PARAM_MT_KEY][0])
        base_cs = self.coordinate_system(bases[0])
        return self.construct(
            node,
            FittedCoordinateSystem,
            name,
            base_cs,
            to_base,
            self.axes(groups),
            self.authority(groups),
        )

    def construct(self, node: WktNode, cls, *args, **kwargs):
        """
        Build a construct, reporting its validation errors at the node's position.

        Library errors such as a missing projection parameter are raised unchanged.
        """
        try:
            return cls(*args, **kwargs)
        except CrsException:
            raise
        except (ValueError, TypeError) as e:
            raise self.error(str(e), node.position) from e


def _position(arg: Union[WktValue, WktNode]) -> int:
    return arg.position


def _describe(arg: Union[WktValue, WktNode]) -> str:
    if isinstance(arg, WktNode):
        return f"keyword {arg.keyword}"
    return f"{arg.type.value} {arg.text!r}"


def parse_wkt(text: str) -> CoordinateSystem:
    """
    Parse a WKT1 coordinate system definition.

    Args:
        text: The WKT text of a GEOGCS, PROJCS, GEOCCS or FITTED_CS

    Returns:
        The coordinate system

    Raises:
        WktParseError: If the text is malformed or structurally incomplete
        MissingProjectionParameterError: If a projection lacks a required parameter
        InvalidProjectionParametersError: If projection parameters are unusable

    Examples:
        >>> from mappyproj.wkt.parser import parse_wkt
        >>> cs = parse_wkt(
        ...     'GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]],'
        ...     'PRIMEM["Greenwich",0],UNIT["degree",0.0174532925199433]]'
        ... )
        >>> cs.name
        'WGS 84'
    """
    if not isinstance(text, str):
        raise TypeError(f"WKT must be a string, found {type(text).__name__}")
    tree = parse_tree(text)
    cs = _Builder(text).coordinate_system(tree)
    log.debug(f"parsed {type(cs).__name__} {cs.name}")
    return cs
