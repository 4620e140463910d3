"""
Angle and axis helpers.

Astigmatism axes have 180° periodicity. The convention used throughout is the
half-open interval (0, 180]: an axis that folds onto 0 is reported as 180.
"""

import math
from enum import Enum


class AxisType(str, Enum):
    """Orientation of the steep corneal meridian."""
    WTR = "WTR"  # with-the-rule
    ATR = "ATR"  # against-the-rule
    OBL = "OBL"  # oblique


def to_radians(deg: float) -> float:
    return deg * (math.pi / 180)


def to_degrees(rad: float) -> float:
    return rad * (180 / math.pi)


def normalize_axis(angle: float) -> float:
    """
    Fold any angle onto (0, 180].

    Examples:
        normalize_axis(0) -> 180
        normalize_axis(270) -> 90
        normalize_axis(-10) -> 170
    """
    a = math.fmod(angle, 180.0)
    if a <= 0:
        a += 180.0
    return a


def orthogonal(axis: float) -> float:
    """Axis of the other principal meridian."""
    return normalize_axis(axis + 90)


def sync_axis(value):
    """
    Partner axis for an edited axis field.

    Returns None when the edited value is not a finite number, in which case
    the partner field is left as it is.
    """
    if value is None or not math.isfinite(value):
        return None
    return orthogonal(value)


def classify_axis(axis: float) -> AxisType | None:
    """
    Classify a steep axis as WTR, ATR or OBL.

    WTR: [60°, 120°]. ATR: [0°, 30°] or [150°, 180°]. Everything else is
    oblique. Returns None when there is no valid axis to classify.
    """
    if axis is None or not math.isfinite(axis):
        return None
    a = normalize_axis(axis)
    if 60 <= a <= 120:
        return AxisType.WTR
    if (0 <= a <= 30) or (150 <= a <= 180):
        return AxisType.ATR
    return AxisType.OBL
