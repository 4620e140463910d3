"""
Total Keratometry (TK) estimator.

Combines the anterior corneal surface (measured at the keratometric index)
with the measured posterior surface:

1. Anterior SimK powers are re-expressed at the true anterior index through
   their radius of curvature.
2. Posterior powers are forced negative and moved to the anterior vertex with
   the Gaussian thick-lens formula P' = P / (1 - (t/n)·P).
3. Mean powers and power vectors of both surfaces are added, scaled by the
   empirical factor 1.0205, and recomposed into TK flat/steep meridians.

Surfaces keep their own steep axes; the two cylinders are only combined as
power vectors.
"""

import logging
import math
from typing import Tuple

from biomcyl.constants import (
    CCT_DEFAULT_UM,
    IDX_ANT,
    IDX_SIMK,
    MOD_LIOU_BRENNAN_SCALE_FACTOR,
)
from biomcyl.errors import NonPhysicalReadingError
from biomcyl.models.schema import KeratometricReading, SurfacePair, TotalKeratometry
from biomcyl.services.axis import orthogonal
from biomcyl.services.power_vector import PowerVector, decompose, recompose

log = logging.getLogger(__name__)


def corneal_radius_mm(k: float, index: float = IDX_SIMK) -> float:
    """Radius of curvature (mm) of a surface of power k (D) at a given index."""
    if not math.isfinite(k) or k <= 0:
        raise NonPhysicalReadingError(f"anterior power must be > 0 D, got {k}")
    return (index - 1) * 1000 / k


def true_anterior_power(k_sim: float) -> float:
    """SimK power re-expressed at the true anterior corneal index."""
    r = corneal_radius_mm(k_sim, IDX_SIMK)
    return (IDX_ANT - 1) * 1000 / r


def vertex_correct(p: float, thickness_m: float, index: float = IDX_ANT) -> float:
    """
    Gaussian vertex correction of a posterior power across the cornea.

    P' = P / (1 - (t/n)·P)
    """
    denom = 1.0 - (thickness_m / index) * p
    if abs(denom) < 1e-8:
        raise NonPhysicalReadingError(f"vertex correction undefined for posterior power {p} D")
    return p / denom


def surface_vector(flat: float, steep: float, steep_axis: float) -> Tuple[float, PowerVector]:
    """Mean power and cylinder power vector (steep - flat at steep_axis) of one surface."""
    return (flat + steep) / 2, decompose(steep - flat, steep_axis)


def calculate_tk(anterior: SurfacePair, posterior: SurfacePair,
                 cct_um: float = CCT_DEFAULT_UM) -> TotalKeratometry:
    """
    Total keratometry from anterior SimK and raw posterior keratometry.

    Args:
        anterior: Anterior flat/steep readings at keratometric index 1.3375
        posterior: Raw posterior flat/steep readings, sign ignored
        cct_um: Central corneal thickness in micrometres

    Returns:
        TotalKeratometry with TK flat/steep meridians and net TK cylinder

    Raises:
        NonPhysicalReadingError: anterior power <= 0 or an undefined vertex
            correction
    """
    # A. anterior surface at the true index
    p_flat_ant = true_anterior_power(anterior.flat.magnitude)
    p_steep_ant = true_anterior_power(anterior.steep.magnitude)
    m_ant, v_ant = surface_vector(p_flat_ant, p_steep_ant, anterior.steep.axis)

    # B. posterior surface, negative by convention, vertexed to the front
    thickness_m = cct_um / 1_000_000
    pk_flat = -abs(posterior.flat.magnitude)
    pk_steep = -abs(posterior.steep.magnitude)
    p_flat_post = vertex_correct(pk_flat, thickness_m)
    p_steep_post = vertex_correct(pk_steep, thickness_m)
    m_post, v_post = surface_vector(p_flat_post, p_steep_post, posterior.steep.axis)

    # C. gaussian addition, D. empirical rescale
    m_tot = (m_ant + m_post) * MOD_LIOU_BRENNAN_SCALE_FACTOR
    v_tot = (v_ant + v_post).scaled(MOD_LIOU_BRENNAN_SCALE_FACTOR)
    c_tot, axis_tot = recompose(v_tot)

    tk_steep = m_tot + c_tot / 2
    tk_flat = m_tot - c_tot / 2
    if not all(math.isfinite(v) for v in (tk_steep, tk_flat, c_tot)):
        raise NonPhysicalReadingError("total keratometry is not finite")

    log.debug(
        "TK: ant M=%.4f X=%.4f Y=%.4f, post M=%.4f X=%.4f Y=%.4f -> %.4f/%.4f @ %.2f",
        m_ant, v_ant.x, v_ant.y, m_post, v_post.x, v_post.y, tk_flat, tk_steep, axis_tot,
    )
    return TotalKeratometry(
        flat=KeratometricReading(magnitude=tk_flat, axis=orthogonal(axis_tot)),
        steep=KeratometricReading(magnitude=tk_steep, axis=axis_tot),
        net=KeratometricReading(magnitude=c_tot, axis=axis_tot),
        posterior=posterior,
    )
