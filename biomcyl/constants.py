"""
Calibration constants for the astigmatism engine.

These are fixed clinical calibration data and are intentionally not exposed
through settings:

- AK regression: componentwise linear regression of measured anterior
  keratometry (power vector X/Y) onto total corneal astigmatism.
- Savini Optimized astigmatism (Placido), Savini et al. JCRS 2017.
- Refractive indices for the keratometric (SimK) and true anterior surface.
- Empirical TK scale factor: the Liou-Brennan ratio is 1.02116; 1.0205 is a
  manual adjustment made to reproduce IOLMaster 700 printouts.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AKRegression:
    """AK regression coefficients applied to the (X, Y) power vector."""
    intercept_x: float
    slope_x: float
    intercept_y: float
    slope_y: float


@dataclass(frozen=True)
class SaviniRegression:
    """Savini Optimized coefficients applied to magnitude and cos(2*axis)."""
    intercept: float
    slope: float
    cos_coeff: float


AK_MODEL = AKRegression(
    intercept_x=0.508, slope_x=0.926,
    intercept_y=0.009, slope_y=0.932,
)

SO_MODEL = SaviniRegression(intercept=0.103, slope=0.836, cos_coeff=0.457)

IDX_SIMK = 1.3375  # keratometric index (SimK)
IDX_ANT = 1.376    # true anterior corneal index

LIOU_BRENNAN_SCALE_FACTOR = 1.02116
# Manually modified to match IOL700 printouts
MOD_LIOU_BRENNAN_SCALE_FACTOR = 1.0205

CCT_DEFAULT_UM = 540  # central corneal thickness, micrometres
