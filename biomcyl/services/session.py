"""
Single-owner session for one patient's keratometry.

Holds the cached biometry record, the selected eye and the current
calculation context. Every mutation recomputes eagerly; the reading set is
replaced wholesale when another eye is selected.
"""

import logging
from typing import Optional

from biomcyl.config import settings
from biomcyl.models.biometry import BiometryRecord
from biomcyl.models.schema import CalculationInputs, DisplayResult, Eye, PosteriorVisibility, ResultSet
from biomcyl.services import calculator
from biomcyl.services.biometry import eye_inputs
from biomcyl.services.calculator import CalculationContext
from biomcyl.services.formatting import format_results

log = logging.getLogger(__name__)


class KeratometrySession:
    """Interactive state for the calculator form."""

    def __init__(self):
        self.record: Optional[BiometryRecord] = None
        self.selected_eye: Optional[Eye] = None
        self.context = CalculationContext()

    @property
    def results(self) -> ResultSet:
        return self.context.results

    @property
    def inputs(self) -> CalculationInputs:
        return self.context.inputs

    @property
    def posterior_visible(self) -> bool:
        return self.context.posterior is PosteriorVisibility.VISIBLE

    def display(self) -> DisplayResult:
        return format_results(self.context.results)

    def set_field(self, name: str, value) -> ResultSet:
        self.context = calculator.update_field(self.context, name, value)
        return self.results

    def set_inputs(self, inputs: CalculationInputs) -> ResultSet:
        self.context = calculator.with_inputs(self.context, inputs)
        return self.results

    def show_posterior(self) -> ResultSet:
        self.context = calculator.set_posterior_visibility(self.context, PosteriorVisibility.VISIBLE)
        return self.results

    def hide_posterior(self) -> ResultSet:
        self.context = calculator.set_posterior_visibility(self.context, PosteriorVisibility.HIDDEN)
        return self.results

    def load_record(self, record: BiometryRecord, eye: Optional[Eye] = None) -> ResultSet:
        """
        Cache a biometry record and show one of its eyes.

        Clears the form first. The posterior section follows the record: shown
        when it carries PK data, hidden otherwise.
        """
        self.record = record
        self.selected_eye = None
        visibility = PosteriorVisibility.VISIBLE if record.has_pk else PosteriorVisibility.HIDDEN
        self.context = CalculationContext(posterior=visibility)
        return self.select_eye(eye or settings.default_eye)

    def select_eye(self, eye: Eye) -> ResultSet:
        """Switch eye; with a cached record its readings replace the current ones."""
        if eye not in ("right", "left"):
            raise ValueError(f"eye must be 'right' or 'left', got {eye!r}")
        self.selected_eye = eye
        if self.record is None:
            self.context = calculator.with_inputs(self.context, self.context.inputs, eye=eye)
            return self.results
        log.info("Selected eye", extra={"eye": eye})
        self.context = calculator.with_inputs(self.context, eye_inputs(self.record, eye), eye=eye)
        return self.results

    def reset(self) -> ResultSet:
        """Drop the record, every reading and every result."""
        self.record = None
        self.selected_eye = None
        self.context = CalculationContext()
        return self.results
