"""
Import of biometry reports already retrieved from BiomAPI.

Fetching (PIN lookup or file upload) is done by the caller; this module only
validates the JSON payload and turns one eye of it into calculation inputs.
"""

import logging
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError

from biomcyl.config import settings
from biomcyl.constants import IDX_SIMK
from biomcyl.errors import BiometryResponseError
from biomcyl.models.biometry import BiometryRecord
from biomcyl.models.schema import CalculationInputs, Eye

log = logging.getLogger(__name__)

PIN_RX = re.compile(r"([a-z]+-[a-z]+-\d{6})", re.IGNORECASE)


def extract_biom_pin(text: str) -> Optional[str]:
    """
    Pull a BiomPIN (word-word-123456) out of a raw PIN or a share URL.

    Returns the lowercased PIN, or None if nothing PIN-shaped is present.
    """
    if not text or not isinstance(text, str):
        return None
    m = PIN_RX.search(text.strip())
    return m.group(1).lower() if m else None


def parse_biometry_response(payload: Dict[str, Any]) -> BiometryRecord:
    """
    Validate a BiomAPI response and build a BiometryRecord.

    Raises:
        BiometryResponseError: unsuccessful response or missing patient/eye data
    """
    if not isinstance(payload, dict):
        raise BiometryResponseError("Invalid response structure from API")
    if not payload.get("success"):
        raise BiometryResponseError(payload.get("message") or "API returned unsuccessful response")

    data = payload.get("data") or {}
    if not data.get("patient") or not data.get("right_eye") or not data.get("left_eye"):
        raise BiometryResponseError("Invalid response structure: missing required data fields")

    posterior = (payload.get("extra_data") or {}).get("posterior_keratometry") or {}
    has_pk = bool(posterior.get("right_eye") and posterior.get("left_eye"))

    pin = payload.get("biom_pin") or ((payload.get("metadata") or {}).get("biompin") or {}).get("pin")

    try:
        record = BiometryRecord(
            patient=data["patient"],
            right_eye=data["right_eye"],
            left_eye=data["left_eye"],
            has_pk=has_pk,
            pk_data={"right_eye": posterior["right_eye"], "left_eye": posterior["left_eye"]} if has_pk else None,
            biom_pin=extract_biom_pin(pin) if pin else None,
        )
    except ValidationError as e:
        raise BiometryResponseError(f"Invalid biometry data: {e}") from e

    log.info("Loaded biometry record (posterior data: %s)", "yes" if has_pk else "no")
    return record


def uses_simk_index(index: Optional[float]) -> bool:
    return index is not None and abs(index - IDX_SIMK) <= settings.index_tolerance


def eye_inputs(record: BiometryRecord, eye: Eye) -> CalculationInputs:
    """
    Calculation inputs for one eye of a record.

    Anterior readings are only taken when the device reported them at the
    keratometric index 1.3375. Posterior readings are taken when present.
    """
    if eye not in ("right", "left"):
        raise ValueError(f"eye must be 'right' or 'left', got {eye!r}")
    key = f"{eye}_eye"
    ant = getattr(record, key)
    fields: Dict[str, Optional[float]] = {}

    if uses_simk_index(ant.keratometric_index):
        fields.update(
            k_flat=ant.K1_magnitude,
            axis_flat=ant.K1_axis,
            k_steep=ant.K2_magnitude,
            axis_steep=ant.K2_axis,
        )
    else:
        log.warning(
            "Anterior keratometry skipped: index %s is not %s",
            ant.keratometric_index, IDX_SIMK, extra={"eye": eye},
        )

    if record.has_pk and record.pk_data:
        pk = record.pk_data.get(key)
        if pk is not None:
            fields.update(
                pk_flat=pk.PK1_magnitude,
                p_axis_flat=pk.PK1_axis,
                pk_steep=pk.PK2_magnitude,
                p_axis_steep=pk.PK2_axis,
            )

    return CalculationInputs(**fields)
