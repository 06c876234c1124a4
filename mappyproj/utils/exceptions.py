"""Exceptions raised by mappyproj.

Every error derives from CrsException and from the closest built-in exception,
so callers can catch either the library-wide base or the familiar builtin.
"""

from __future__ import annotations

from typing import Optional, Union


class CrsException(Exception):
    """Base class for all mappyproj errors."""


class WktParseError(CrsException, ValueError):
    """
    Raised when a WKT definition is malformed or structurally incomplete.

    Attributes:
        position: The character offset in the input where the problem was detected
        line: The 1-based line number of the position
        column: The 1-based column number of the position
        expected: A description of what the parser expected at that position
        found: A description of what was actually found
    """

    def __init__(
        self,
        message: str,
        position: int = 0,
        line: int = 1,
        column: int = 1,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ):
        self.position = position
        self.line = line
        self.column = column
        self.expected = expected
        self.found = found
        super().__init__(
            f"{message} at position {position} (line {line}, column {column})"
        )


class UnknownAuthorityCodeError(CrsException, LookupError):
    """Raised when an authority code is not in the built-in registry."""

    def __init__(self, authority: str, code: Union[int, str]):
        self.authority = authority
        self.code = code
        super().__init__(f"unrecognized CRS identity {authority}:{code}")

    def __str__(self):
        return self.args[0]


class MissingProjectionParameterError(CrsException, ValueError):
    """Raised when a projection lacks a parameter its method requires."""

    def __init__(self, parameter: str, method: Optional[str] = None):
        self.parameter = parameter
        self.method = method
        if method:
            msg = f"missing projection parameter '{parameter}' for method {method}"
        else:
            msg = f"missing projection parameter '{parameter}'"
        super().__init__(msg)


class UnsupportedProjectionMethodError(CrsException, ValueError):
    """Raised when a projection method name is not in the projection registry."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"unsupported projection method '{method}'")


class InvalidProjectionParametersError(CrsException, ValueError):
    """Raised when projection parameters are present but mathematically invalid."""


class ProjectionComputationError(CrsException, ArithmeticError):
    """Raised when a projection hits a singularity or its solver fails to converge."""


class SingularMatrixError(CrsException, ArithmeticError):
    """Raised when inverting an affine transform whose matrix is not invertible."""


class DatumShiftError(CrsException, ValueError):
    """Raised when a datum shift is required but no shift parameters are known."""
