from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, NamedTuple, Sequence

from mappyproj.constructs.coordinate_system import CoordinateSystem
from mappyproj.transforms.math_transform import MathTransform, Point


class TransformType(Enum):
    """
    The kind of a coordinate transformation.

    Values:
        CONVERSION: Source and target share a datum; the result is exact
        TRANSFORMATION: A datum shift is involved
    """

    CONVERSION = "conversion"
    TRANSFORMATION = "transformation"


class CoordinateTransformation(NamedTuple):
    """
    A transformation between two coordinate systems.

    Attributes:
        source_cs: The coordinate system of the input points
        target_cs: The coordinate system of the output points
        math_transform: The transform that does the work
        transform_type: Whether a datum shift is involved

    Examples:
        >>> from mappyproj import create_transformation, from_authority_code
        >>> t = create_transformation(
        ...     from_authority_code("EPSG", 4326), from_authority_code("EPSG", 3857)
        ... )
        >>> x, y = t.transform((-74.008573, 40.711946))
    """

    source_cs: CoordinateSystem
    target_cs: CoordinateSystem
    math_transform: MathTransform
    transform_type: TransformType

    @property
    def is_identity(self) -> bool:
        return self.math_transform.is_identity

    def transform(self, point: Sequence[float]) -> Point:
        return self.math_transform.transform(point)

    def transform_points(self, points: Iterable[Sequence[float]]) -> Iterator[Point]:
        return self.math_transform.transform_points(points)

    def inverse(self) -> CoordinateTransformation:
        """Get the transformation from the target back to the source."""
        return CoordinateTransformation(
            self.target_cs,
            self.source_cs,
            self.math_transform.inverse(),
            self.transform_type,
        )
