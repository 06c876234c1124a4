from __future__ import annotations

import logging
import math
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Sequence, Tuple

import numpy as np
import shapely.ops
from shapely.geometry.base import BaseGeometry

from mappyproj.projections import ProjectionMethod
from mappyproj.utils.exceptions import ProjectionComputationError, SingularMatrixError

log = logging.getLogger(__name__)

Point = Tuple[float, ...]


class Direction(Enum):
    FORWARD = "forward"
    INVERSE = "inverse"

    def flip(self) -> Direction:
        if self is Direction.FORWARD:
            return Direction.INVERSE
        return Direction.FORWARD


def as_point(point: Sequence[float], dimension: int) -> Point:
    """
    Coerce a point to a tuple of floats, checking it has at least `dimension` ordinates.

    Raises:
        ValueError: If the point has too few ordinates
    """
    p = tuple(float(v) for v in point)
    if len(p) < dimension:
        raise ValueError(
            f"point {p} has {len(p)} ordinates but the transform needs {dimension}"
        )
    return p


class MathTransform(metaclass=ABCMeta):
    """
    A function mapping points from one coordinate space to another.

    Transforms are immutable: the direction of a transform is fixed when it is
    built and `inverse()` always returns a new transform. A point may carry more
    ordinates than a transform consumes; the extra ordinates are passed through
    unchanged.
    """

    @property
    @abstractmethod
    def source_dimension(self) -> int:
        """The number of ordinates the transform consumes."""

    @property
    @abstractmethod
    def target_dimension(self) -> int:
        """The number of ordinates the transform produces."""

    @property
    def is_identity(self) -> bool:
        return False

    @abstractmethod
    def transform(self, point: Sequence[float]) -> Point:
        """
        Transform a single point.

        Args:
            point: The point ordinates

        Returns:
            The transformed point as a tuple of floats
        """

    @abstractmethod
    def inverse(self) -> MathTransform:
        """
        Get the transform that undoes this one.

        Raises:
            SingularMatrixError: If the transform is an affine with a singular matrix
        """

    def transform_points(self, points: Iterable[Sequence[float]]) -> Iterator[Point]:
        """
        Lazily transform a sequence of points, preserving order and count.

        A failing point raises when it is reached; the transform itself stays usable.
        """
        for p in points:
            yield self.transform(p)

    def transform_array(self, array: np.ndarray) -> np.ndarray:
        """
        Transform a packed (n, dimension) array of points.

        Args:
            array: A 2-d array with one point per row

        Returns:
            A new 2-d array with one transformed point per row
        """
        a = np.asarray(array, dtype=float)
        if a.ndim != 2:
            raise ValueError(f"expected a 2-d array of points but got shape {a.shape}")
        if len(a) == 0:
            return a.copy()
        return np.array([self.transform(row) for row in a], dtype=float)

    def transform_geometry(self, geometry: BaseGeometry) -> BaseGeometry:
        """
        Transform every vertex of a shapely geometry.

        Args:
            geometry: Any shapely geometry

        Returns:
            A new geometry of the same type with transformed vertices

        Examples:
            >>> from shapely.geometry import LineString
            >>> line = LineString([(-74.0, 40.7), (-73.9, 40.8)])
            >>> projected = transformation.math_transform.transform_geometry(line)
        """

        def _func(*ordinates):
            points = [self.transform(p) for p in zip(*ordinates)]
            dims = len(ordinates)
            return tuple(tuple(p[i] for p in points) for i in range(dims))

        return shapely.ops.transform(_func, geometry)


@dataclass(frozen=True)
class Identity(MathTransform):
    """A transform that returns its input unchanged."""

    dimension: int = 2

    @property
    def source_dimension(self) -> int:
        return self.dimension

    @property
    def target_dimension(self) -> int:
        return self.dimension

    @property
    def is_identity(self) -> bool:
        return True

    def transform(self, point: Sequence[float]) -> Point:
        return as_point(point, self.dimension)

    def transform_array(self, array: np.ndarray) -> np.ndarray:
        a = np.array(array, dtype=float)
        if a.ndim != 2 or a.shape[1] < self.dimension:
            raise ValueError(
                f"expected an (n, {self.dimension}) array of points but got shape {a.shape}"
            )
        return a

    def inverse(self) -> Identity:
        return self


@dataclass(frozen=True, eq=False)
class Affine(MathTransform):
    """
    An affine transform given by an (n+1)x(n+1) homogeneous matrix.

    The matrix is copied and made read-only when the transform is built. Its last row
    must be (0, ..., 0, 1).

    Attributes:
        matrix: The homogeneous matrix

    Examples:
        >>> from mappyproj.transforms.math_transform import Affine
        >>> swap = Affine([[0, 1, 0], [1, 0, 0], [0, 0, 1]])
        >>> swap.transform((1.0, 2.0))
        (2.0, 1.0)
    """

    matrix: np.ndarray

    def __post_init__(self):
        m = np.array(self.matrix, dtype=float)
        if m.ndim != 2 or m.shape[0] != m.shape[1] or m.shape[0] < 2:
            raise ValueError(f"affine matrix must be square, found shape {m.shape}")
        last = np.zeros(m.shape[0])
        last[-1] = 1.0
        if not np.array_equal(m[-1], last):
            raise ValueError(f"affine matrix last row must be {last.tolist()}, found {m[-1].tolist()}")
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)

    def __eq__(self, other):
        if not isinstance(other, Affine):
            return NotImplemented
        return np.array_equal(self.matrix, other.matrix)

    def __hash__(self):
        return hash((self.matrix.shape, self.matrix.tobytes()))

    def __repr__(self):
        return f"Affine({self.matrix.tolist()})"

    @classmethod
    def identity(cls, dimension: int) -> Affine:
        return cls(np.eye(dimension + 1))

    @classmethod
    def from_scale_translate(
        cls, scales: Sequence[float], translations: Sequence[float] = ()
    ) -> Affine:
        """
        Build a diagonal affine: ordinate i becomes scales[i] * v + translations[i].

        Missing translations are zero.
        """
        n = len(scales)
        m = np.eye(n + 1)
        for i, s in enumerate(scales):
            m[i, i] = s
        for i, t in enumerate(translations):
            m[i, n] = t
        return cls(m)

    @property
    def dimension(self) -> int:
        return self.matrix.shape[0] - 1

    @property
    def source_dimension(self) -> int:
        return self.dimension

    @property
    def target_dimension(self) -> int:
        return self.dimension

    @property
    def is_identity(self) -> bool:
        return np.array_equal(self.matrix, np.eye(self.matrix.shape[0]))

    def _apply(self, block: np.ndarray) -> np.ndarray:
        n = self.dimension
        out = block.copy()
        out[:, :n] = block[:, :n] @ self.matrix[:n, :n].T + self.matrix[:n, n]
        return out

    def transform(self, point: Sequence[float]) -> Point:
        p = as_point(point, self.dimension)
        return tuple(self._apply(np.array([p]))[0].tolist())

    def transform_array(self, array: np.ndarray) -> np.ndarray:
        a = np.asarray(array, dtype=float)
        if a.ndim != 2 or a.shape[1] < self.dimension:
            raise ValueError(
                f"expected an (n, {self.dimension}) array of points but got shape {a.shape}"
            )
        return self._apply(a)

    def then(self, other: Affine) -> Affine:
        """
        Compose two affines: the result applies this transform first, then `other`.
        """
        if other.dimension != self.dimension:
            raise ValueError(
                f"cannot compose a {self.dimension}-d affine with a {other.dimension}-d affine"
            )
        return Affine(other.matrix @ self.matrix)

    def inverse(self) -> Affine:
        try:
            inv = np.linalg.inv(self.matrix)
        except np.linalg.LinAlgError as e:
            raise SingularMatrixError(
                f"affine matrix {self.matrix.tolist()} is not invertible"
            ) from e
        if not np.all(np.isfinite(inv)):
            raise SingularMatrixError(
                f"affine matrix {self.matrix.tolist()} is not invertible"
            )
        # the inverse of an affine keeps the (0, ..., 0, 1) last row
        inv[-1] = 0.0
        inv[-1, -1] = 1.0
        return Affine(inv)


@dataclass(frozen=True)
class ProjectionTransform(MathTransform):
    """
    A named map projection in one direction.

    The forward direction maps (longitude, latitude) in degrees to (x, y) in metres;
    the inverse direction maps metres back to degrees.

    Attributes:
        method: The projection method supplying the math
        constants: The method's precomputed constants for one definition
        direction: FORWARD or INVERSE
    """

    method: ProjectionMethod = field(compare=False, repr=False)
    constants: Any
    direction: Direction = Direction.FORWARD
    method_name: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "method_name", self.method.name)

    @property
    def source_dimension(self) -> int:
        return 2

    @property
    def target_dimension(self) -> int:
        return 2

    def transform(self, point: Sequence[float]) -> Point:
        p = as_point(point, 2)
        try:
            if self.direction is Direction.FORWARD:
                x, y = self.method.forward(
                    self.constants, math.radians(p[0]), math.radians(p[1])
                )
            else:
                lon, lat = self.method.inverse(self.constants, p[0], p[1])
                x, y = math.degrees(lon), math.degrees(lat)
        except (ValueError, OverflowError, ZeroDivisionError) as e:
            raise ProjectionComputationError(
                f"{self.method_name} {self.direction.value} failed for point {p}: {e}"
            ) from e
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ProjectionComputationError(
                f"{self.method_name} {self.direction.value} is undefined for point {p}"
            )
        return (x, y) + p[2:]

    def inverse(self) -> ProjectionTransform:
        return ProjectionTransform(self.method, self.constants, self.direction.flip())


@dataclass(frozen=True)
class Inverted(MathTransform):
    """
    The inverse of another transform.

    The wrapped transform's inverse is computed once when this object is built.
    """

    wrapped: MathTransform
    _inverse: MathTransform = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_inverse", self.wrapped.inverse())

    @property
    def source_dimension(self) -> int:
        return self.wrapped.target_dimension

    @property
    def target_dimension(self) -> int:
        return self.wrapped.source_dimension

    @property
    def is_identity(self) -> bool:
        return self.wrapped.is_identity

    def transform(self, point: Sequence[float]) -> Point:
        return self._inverse.transform(point)

    def transform_array(self, array: np.ndarray) -> np.ndarray:
        return self._inverse.transform_array(array)

    def inverse(self) -> MathTransform:
        return self.wrapped


@dataclass(frozen=True)
class Concatenated(MathTransform):
    """
    A chain of transforms applied left to right.

    Attributes:
        steps: The transforms in application order
    """

    steps: Tuple[MathTransform, ...]

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))
        if not self.steps:
            raise ValueError("a concatenated transform needs at least one step")

    @property
    def source_dimension(self) -> int:
        return self.steps[0].source_dimension

    @property
    def target_dimension(self) -> int:
        return self.steps[-1].target_dimension

    @property
    def is_identity(self) -> bool:
        return all(s.is_identity for s in self.steps)

    def transform(self, point: Sequence[float]) -> Point:
        p = tuple(point)
        for step in self.steps:
            p = step.transform(p)
        return p

    def transform_array(self, array: np.ndarray) -> np.ndarray:
        a = np.asarray(array, dtype=float)
        for step in self.steps:
            a = step.transform_array(a)
        return a

    def inverse(self) -> Concatenated:
        return Concatenated(tuple(s.inverse() for s in reversed(self.steps)))
