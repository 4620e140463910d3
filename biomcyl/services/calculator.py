"""
Calculation orchestrator.

Owns the sequencing of the measured, AK, SO and TK steps for one set of
readings. All state lives in an explicit `CalculationContext` value: inputs
and posterior visibility go in, a fresh `ResultSet` comes out.

Triggers:
- anterior field changed: measured, AK and SO are recomputed; TK as well when
  the posterior section is visible.
- posterior field changed: TK only, the anterior results are carried over.

If K flat, K steep or the steep axis is not a finite number the whole result
set is cleared, TK included, whatever the posterior readings are.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional

from biomcyl.errors import NonPhysicalReadingError
from biomcyl.models.schema import (
    ANTERIOR_FIELDS,
    AXIS_PARTNERS,
    POSTERIOR_FIELDS,
    CalculationInputs,
    KeratometricReading,
    PosteriorVisibility,
    ResultSet,
    ResultStatus,
    SurfacePair,
    TotalKeratometry,
)
from biomcyl.services.axis import classify_axis, orthogonal, sync_axis
from biomcyl.services.regression import calculate_ak, calculate_so
from biomcyl.services.total_keratometry import calculate_tk
from biomcyl.utils import to_float

log = logging.getLogger(__name__)


def _finite(v: Optional[float]) -> bool:
    return v is not None and math.isfinite(v)


@dataclass(frozen=True)
class CalculationContext:
    """Inputs, posterior visibility and the results derived from them."""
    inputs: CalculationInputs = field(default_factory=CalculationInputs)
    posterior: PosteriorVisibility = PosteriorVisibility.HIDDEN
    results: ResultSet = field(default_factory=ResultSet.cleared)
    eye: Optional[str] = None


def anterior_pair(inputs: CalculationInputs) -> Optional[SurfacePair]:
    """Anterior readings, or None when K flat, K steep or axis steep is unusable."""
    if not (_finite(inputs.k_flat) and _finite(inputs.k_steep) and _finite(inputs.axis_steep)):
        return None
    axis_flat = inputs.axis_flat if _finite(inputs.axis_flat) else orthogonal(inputs.axis_steep)
    return SurfacePair(
        flat=KeratometricReading(magnitude=inputs.k_flat, axis=axis_flat),
        steep=KeratometricReading(magnitude=inputs.k_steep, axis=inputs.axis_steep),
    )


def posterior_pair(inputs: CalculationInputs) -> Optional[SurfacePair]:
    """Raw posterior readings, or None unless all four are finite numbers."""
    values = [getattr(inputs, name) for name in POSTERIOR_FIELDS]
    if not all(_finite(v) for v in values):
        return None
    return SurfacePair(
        flat=KeratometricReading(magnitude=inputs.pk_flat, axis=inputs.p_axis_flat),
        steep=KeratometricReading(magnitude=inputs.pk_steep, axis=inputs.p_axis_steep),
    )


def compute_tk(inputs: CalculationInputs, posterior: PosteriorVisibility,
               anterior: Optional[SurfacePair] = None,
               eye: Optional[str] = None) -> Optional[TotalKeratometry]:
    """TK for the current inputs, or None when it must not be shown."""
    if posterior is not PosteriorVisibility.VISIBLE:
        return None
    anterior = anterior or anterior_pair(inputs)
    pk = posterior_pair(inputs)
    if anterior is None or pk is None:
        return None
    try:
        return calculate_tk(anterior, pk)
    except NonPhysicalReadingError as e:
        log.warning("TK suppressed: %s", e, extra={"eye": eye or "-"})
        return None


def compute_results(inputs: CalculationInputs,
                    posterior: PosteriorVisibility = PosteriorVisibility.HIDDEN,
                    eye: Optional[str] = None) -> ResultSet:
    """Full recomputation: measured, AK, SO and (when visible) TK."""
    anterior = anterior_pair(inputs)
    if anterior is None:
        return ResultSet.cleared()
    if anterior.flat.magnitude <= 0 or anterior.steep.magnitude <= 0:
        log.warning(
            "Rejected non-physical anterior K %.2f/%.2f D",
            anterior.flat.magnitude, anterior.steep.magnitude, extra={"eye": eye or "-"},
        )
        return ResultSet.cleared(ResultStatus.NON_PHYSICAL)

    cyl_meas = anterior.cylinder
    axis_steep = anterior.steep.axis
    so_mag, so_axis = calculate_so(cyl_meas, axis_steep)
    ak_mag, ak_axis = calculate_ak(cyl_meas, axis_steep)
    if not all(math.isfinite(v) for v in (cyl_meas, so_mag, so_axis, ak_mag, ak_axis)):
        log.warning(
            "Rejected anterior K %s/%s D: results are not finite",
            anterior.flat.magnitude, anterior.steep.magnitude, extra={"eye": eye or "-"},
        )
        return ResultSet.cleared(ResultStatus.NON_PHYSICAL)

    return ResultSet(
        status=ResultStatus.OK,
        anterior=anterior,
        measured=KeratometricReading(magnitude=cyl_meas, axis=axis_steep),
        so=KeratometricReading(magnitude=so_mag, axis=so_axis),
        ak=KeratometricReading(magnitude=ak_mag, axis=ak_axis),
        axis_type=classify_axis(axis_steep),
        tk=compute_tk(inputs, posterior, anterior, eye),
    )


def on_anterior_change(ctx: CalculationContext) -> CalculationContext:
    return replace(ctx, results=compute_results(ctx.inputs, ctx.posterior, ctx.eye))


def on_posterior_change(ctx: CalculationContext) -> CalculationContext:
    if not ctx.results.has_data:
        return ctx
    tk = compute_tk(ctx.inputs, ctx.posterior, ctx.results.anterior, ctx.eye)
    return replace(ctx, results=ctx.results.model_copy(update={"tk": tk}))


def update_field(ctx: CalculationContext, name: str, value) -> CalculationContext:
    """
    Set one input field and recompute through the matching trigger.

    `value` may be a number, a raw form string (comma decimals allowed) or
    None. Editing an axis also rewrites its partner axis to stay orthogonal.
    """
    if name not in ANTERIOR_FIELDS and name not in POSTERIOR_FIELDS:
        raise KeyError(f"unknown input field: {name}")

    parsed = to_float(value)
    update = {name: parsed}
    partner = AXIS_PARTNERS.get(name)
    if partner is not None:
        other = sync_axis(parsed)
        if other is not None:
            update[partner] = other

    ctx = replace(ctx, inputs=ctx.inputs.model_copy(update=update))
    if name in ANTERIOR_FIELDS:
        return on_anterior_change(ctx)
    return on_posterior_change(ctx)


def set_posterior_visibility(ctx: CalculationContext,
                             visibility: PosteriorVisibility) -> CalculationContext:
    """Show or hide the posterior section; hiding clears the posterior fields."""
    inputs = ctx.inputs
    if visibility is PosteriorVisibility.HIDDEN:
        inputs = inputs.model_copy(update={name: None for name in POSTERIOR_FIELDS})
    return on_anterior_change(replace(ctx, inputs=inputs, posterior=visibility))


def with_inputs(ctx: CalculationContext, inputs: CalculationInputs,
                eye: Optional[str] = None) -> CalculationContext:
    """Replace the whole reading set (e.g. on eye selection) and recompute."""
    return on_anterior_change(replace(ctx, inputs=inputs, eye=eye if eye is not None else ctx.eye))
