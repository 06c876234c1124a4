from __future__ import annotations

import logging
from typing import Iterable, List

from mappyproj.transforms.math_transform import (
    Affine,
    Concatenated,
    Identity,
    MathTransform,
)

log = logging.getLogger(__name__)


def _flatten(steps: Iterable[MathTransform]) -> List[MathTransform]:
    flat: List[MathTransform] = []
    for step in steps:
        if isinstance(step, Concatenated):
            flat.extend(_flatten(step.steps))
        else:
            flat.append(step)
    return flat


def compose(steps: Iterable[MathTransform]) -> MathTransform:
    """
    Compose transforms into the simplest equivalent transform.

    Nested concatenations are flattened, identity steps are dropped and adjacent
    affines of the same dimension are multiplied together.

    Args:
        steps: The transforms in application order

    Returns:
        An Identity if nothing is left, the single remaining step, or a Concatenated

    Examples:
        >>> from mappyproj.transforms.math_transform import Affine
        >>> from mappyproj.transforms.ops import compose
        >>> scale = Affine.from_scale_translate([2.0, 2.0])
        >>> compose([scale, scale.inverse()]).is_identity
        True
    """
    flat = _flatten(steps)
    dimension = flat[0].source_dimension if flat else 2

    reduced: List[MathTransform] = []
    for step in flat:
        if step.is_identity:
            continue
        if (
            reduced
            and isinstance(step, Affine)
            and isinstance(reduced[-1], Affine)
            and reduced[-1].dimension == step.dimension
        ):
            merged = reduced.pop().then(step)
            if not merged.is_identity:
                reduced.append(merged)
            continue
        reduced.append(step)

    log.debug(f"composed {len(flat)} steps into {len(reduced)}")

    if not reduced:
        return Identity(dimension)
    if len(reduced) == 1:
        return reduced[0]
    return Concatenated(tuple(reduced))
