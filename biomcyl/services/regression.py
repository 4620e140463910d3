"""
Regression corrections of measured anterior astigmatism.

- AK: affine regression on the power vector components, then recomposed.
  Recomposition takes a square root, so the result is never negative.
- Savini Optimized (SO): regression on magnitude and cos(2·axis). The result
  can come out negative; a negative cylinder at θ is the same optical
  correction as a positive one at θ + 90°, so it is flipped.
"""

import logging
import math
from typing import Tuple

from biomcyl.constants import AK_MODEL, SO_MODEL, AKRegression, SaviniRegression
from biomcyl.services.axis import normalize_axis, to_radians
from biomcyl.services.power_vector import PowerVector, decompose, recompose

log = logging.getLogger(__name__)


def ak_vector(measured: PowerVector, model: AKRegression = AK_MODEL) -> PowerVector:
    """Apply the AK componentwise regression to a measured power vector."""
    return PowerVector(
        model.intercept_x + model.slope_x * measured.x,
        model.intercept_y + model.slope_y * measured.y,
    )


def calculate_ak(cyl_meas: float, axis_steep: float,
                 model: AKRegression = AK_MODEL) -> Tuple[float, float]:
    """
    AK regression-corrected cylinder.

    Args:
        cyl_meas: Measured anterior cylinder (K steep - K flat), D
        axis_steep: Steep anterior axis, degrees

    Returns:
        (magnitude, axis) with magnitude >= 0 and axis in (0, 180]
    """
    est = ak_vector(decompose(cyl_meas, axis_steep), model)
    mag, axis = recompose(est)
    log.debug("AK: %.4f @ %.2f -> %.4f @ %.2f", cyl_meas, axis_steep, mag, axis)
    return mag, axis


def savini_raw(cyl_meas: float, axis_steep: float,
               model: SaviniRegression = SO_MODEL) -> float:
    """Unflipped SO magnitude: intercept + slope·C + cos_coeff·cos(2θ)."""
    return model.intercept + model.slope * cyl_meas + model.cos_coeff * math.cos(2 * to_radians(axis_steep))


def calculate_so(cyl_meas: float, axis_steep: float,
                 model: SaviniRegression = SO_MODEL) -> Tuple[float, float]:
    """
    Savini Optimized cylinder.

    Returns:
        (magnitude, axis) with magnitude >= 0 and axis in (0, 180]
    """
    mag = savini_raw(cyl_meas, axis_steep, model)
    axis = axis_steep
    if mag < 0:
        mag = abs(mag)
        axis = axis_steep + 90
        log.debug("SO: negative magnitude, axis flipped to %.2f", normalize_axis(axis))
    return mag, normalize_axis(axis)
