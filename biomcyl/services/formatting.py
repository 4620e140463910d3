"""
Presentation of a ResultSet as display strings.

Kept apart from the numeric modules so those can be tested without any
display concerns. Rounding follows Number.prototype.toFixed (half away from
zero on the exact binary value), so strings match the reference printouts.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from biomcyl.models.schema import DisplayResult, ResultSet

NO_VALUE = "--"


def to_fixed(value: float, digits: int) -> str:
    if not math.isfinite(value):
        return NO_VALUE
    d = Decimal(value)
    q = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        ctx.prec = max(28, d.adjusted() + digits + 2)
        out = d.quantize(q, rounding=ROUND_HALF_UP)
    if out.is_zero():
        out = abs(out)
    return f"{out:.{digits}f}"


def format_power(value: float | None) -> str:
    """Cylinder magnitude, e.g. "+1.50 D"."""
    if value is None:
        return f"{NO_VALUE} D"
    s = to_fixed(value, 2)
    if s == NO_VALUE:
        return f"{NO_VALUE} D"
    return f"{s} D" if s.startswith("-") else f"+{s} D"


def format_axis(value: float | None) -> str:
    """Cylinder axis, e.g. "@ 100°"."""
    if value is None:
        return f"@ {NO_VALUE}°"
    return f"@ {to_fixed(value, 0)}°"


def format_k(value: float | None) -> str:
    return NO_VALUE if value is None else to_fixed(value, 2)


def format_degrees(value: float | None) -> str:
    return NO_VALUE if value is None else to_fixed(value, 0)


def format_results(results: ResultSet) -> DisplayResult:
    """Map a ResultSet onto display slots; cleared results give the sentinels."""
    if not results.has_data:
        return DisplayResult()

    ant = results.anterior
    out = DisplayResult(
        analysis_visible=True,
        k1=format_k(ant.flat.magnitude),
        k1_axis=format_degrees(ant.flat.axis),
        k2=format_k(ant.steep.magnitude),
        k2_axis=format_degrees(ant.steep.axis),
        measured_mag=format_power(results.measured.magnitude),
        measured_axis=format_axis(results.measured.axis),
        so_mag=format_power(results.so.magnitude),
        so_axis=format_axis(results.so.axis),
        ak_mag=format_power(results.ak.magnitude),
        ak_axis=format_axis(results.ak.axis),
        badge=results.axis_type.value if results.axis_type else None,
    )

    tk = results.tk
    if tk is None:
        return out
    pk = tk.posterior
    return out.model_copy(update={
        "pk_visible": True,
        "pk1": format_k(pk.flat.magnitude),
        "pk1_axis": format_degrees(pk.flat.axis),
        "pk2": format_k(pk.steep.magnitude),
        "pk2_axis": format_degrees(pk.steep.axis),
        "tk_visible": True,
        "tk1": format_k(tk.flat.magnitude),
        "tk1_axis": format_degrees(tk.flat.axis),
        "tk2": format_k(tk.steep.magnitude),
        "tk2_axis": format_degrees(tk.steep.axis),
        "tk_net_mag": format_power(tk.net.magnitude),
        "tk_net_axis": format_axis(tk.net.axis),
    })


def format_report(display: DisplayResult, eye: str | None = None) -> str:
    """Plain-text summary of the display slots."""
    if not display.analysis_visible:
        return "No keratometry data."
    lines = []
    if eye:
        lines.append("OD (Right Eye)" if eye == "right" else "OS (Left Eye)")
    lines.append(f"K1: {display.k1} D @ {display.k1_axis}°   K2: {display.k2} D @ {display.k2_axis}°")
    lines.append(f"ΔK (measured): {display.measured_mag} {display.measured_axis}"
                 + (f"  [{display.badge}]" if display.badge else ""))
    lines.append(f"SO (Savini):   {display.so_mag} {display.so_axis}")
    lines.append(f"AK:            {display.ak_mag} {display.ak_axis}")
    if display.pk_visible:
        lines.append(f"PK1: {display.pk1} D @ {display.pk1_axis}°   PK2: {display.pk2} D @ {display.pk2_axis}°")
    if display.tk_visible:
        lines.append(f"TK1: {display.tk1} D @ {display.tk1_axis}°   TK2: {display.tk2} D @ {display.tk2_axis}°")
        lines.append(f"ΔTK:           {display.tk_net_mag} {display.tk_net_axis}")
    return "\n".join(lines)
