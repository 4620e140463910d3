"""
Power vector notation for corneal astigmatism.

A cylinder C at axis θ is represented by its double-angle Cartesian form
(X, Y) = (C·cos 2θ, C·sin 2θ). Cylinders from different surfaces or
different axes can only be combined in this form.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from biomcyl.services.axis import normalize_axis, to_degrees, to_radians


@dataclass(frozen=True)
class PowerVector:
    """Double-angle Cartesian representation of a cylinder."""
    x: float
    y: float

    def __add__(self, other: "PowerVector") -> "PowerVector":
        return PowerVector(self.x + other.x, self.y + other.y)

    def scaled(self, factor: float) -> "PowerVector":
        return PowerVector(self.x * factor, self.y * factor)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)


def decompose(C: float, axis_deg: float) -> PowerVector:
    """
    Convert cylinder magnitude and axis to a power vector.

    Args:
        C: Cylinder magnitude in diopters (may be negative)
        axis_deg: Axis in degrees

    Returns:
        PowerVector(X, Y)
    """
    th = 2 * to_radians(axis_deg)
    return PowerVector(C * math.cos(th), C * math.sin(th))


def recompose(vec: PowerVector) -> Tuple[float, float]:
    """
    Convert a power vector back to cylinder magnitude and axis.

    The magnitude is always >= 0. At zero magnitude the axis is undefined;
    atan2(0, 0) gives 0 and the axis is reported as 180.

    Returns:
        (C, axis_deg) with axis_deg in (0, 180]
    """
    C = math.hypot(vec.x, vec.y)
    axis = to_degrees(math.atan2(vec.y, vec.x)) / 2.0
    return C, normalize_axis(axis)
