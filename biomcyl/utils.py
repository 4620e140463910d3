import math
import re

NUMBER_RX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def normalize_decimal(s: str) -> str:
    """Comma decimals become periods; with a comma present only the first separator is kept."""
    s = s.strip()
    if "," not in s:
        return s
    s = s.replace(",", ".")
    first = s.find(".")
    return s[:first + 1] + s[first + 1:].replace(".", "")


def to_float(value) -> float | None:
    """
    Parse a form value into a finite float.

    Accepts numbers and strings such as "43,25" or " 44.5 D". Returns None for
    empty, non-numeric or non-finite input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        v = float(value)
        return v if math.isfinite(v) else None
    if not isinstance(value, str) or not value.strip():
        return None
    m = NUMBER_RX.match(normalize_decimal(value))
    if not m:
        return None
    v = float(m.group(0))
    return v if math.isfinite(v) else None
