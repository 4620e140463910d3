import pytest
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from biomcyl.models.schema import POSTERIOR_FIELDS, ResultStatus
from biomcyl.services.biometry import parse_biometry_response
from biomcyl.services.session import KeratometrySession

from test_biometry import make_payload


class TestKeratometrySession:

    def setup_method(self):
        self.session = KeratometrySession()

    def test_load_record_with_posterior_selects_right_eye(self):
        results = self.session.load_record(parse_biometry_response(make_payload()))
        assert self.session.selected_eye == "right"
        assert self.session.posterior_visible
        assert results.status == ResultStatus.OK
        assert results.tk is not None
        assert results.tk.steep.magnitude == pytest.approx(43.8765, abs=2e-3)

    def test_load_record_without_posterior_hides_section(self):
        self.session.show_posterior()
        self.session.load_record(parse_biometry_response(make_payload(with_pk=False)))
        assert not self.session.posterior_visible
        assert self.session.results.tk is None
        assert self.session.results.has_data

    def test_select_eye_replaces_readings(self):
        self.session.load_record(parse_biometry_response(make_payload()))
        right = self.session.results
        left = self.session.select_eye("left")
        assert self.session.inputs.k_flat == pytest.approx(42.75)
        assert left.measured.magnitude == pytest.approx(0.75)
        assert left != right

    def test_manual_entry(self):
        s = self.session
        s.set_field("k_flat", "43,00")
        s.set_field("k_steep", "44.50")
        s.set_field("axis_steep", 100)
        assert s.inputs.axis_flat == pytest.approx(10)
        assert s.display().measured_mag == "+1.50 D"
        assert s.display().badge == "WTR"
        assert not s.display().tk_visible

        s.show_posterior()
        for name, value in zip(POSTERIOR_FIELDS, ["6.40", "6.60", "5", "95"]):
            s.set_field(name, value)
        assert s.display().tk_net_mag == "+1.51 D"

        s.set_field("k_steep", "")
        assert s.display().measured_mag == "-- D"
        assert not s.display().tk_visible

    def test_hide_posterior_clears_fields(self):
        self.session.load_record(parse_biometry_response(make_payload()))
        self.session.hide_posterior()
        assert all(getattr(self.session.inputs, n) is None for n in POSTERIOR_FIELDS)
        assert self.session.results.tk is None
        assert self.session.results.has_data

    def test_reset(self):
        self.session.load_record(parse_biometry_response(make_payload()))
        results = self.session.reset()
        assert self.session.record is None
        assert self.session.selected_eye is None
        assert not self.session.posterior_visible
        assert not results.has_data

    def test_select_eye_without_record_keeps_inputs(self):
        self.session.set_field("k_flat", 43)
        self.session.select_eye("left")
        assert self.session.inputs.k_flat == 43
        with pytest.raises(ValueError):
            self.session.select_eye("middle")
