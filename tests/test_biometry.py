import copy
import pytest
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from biomcyl.errors import BiometryResponseError
from biomcyl.services.biometry import eye_inputs, extract_biom_pin, parse_biometry_response


def make_payload(with_pk=True, right_index=1.3375):
    payload = {
        "success": True,
        "biom_pin": "blue-river-123456",
        "data": {
            "patient": {"name": "DOE, JANE", "patient_id": 391611},
            "right_eye": {
                "keratometric_index": right_index,
                "K1_magnitude": 43.00, "K1_axis": 10,
                "K2_magnitude": 44.50, "K2_axis": 100,
            },
            "left_eye": {
                "keratometric_index": 1.3375,
                "K1_magnitude": "42,75", "K1_axis": "175",
                "K2_magnitude": "43,50", "K2_axis": "85",
            },
        },
        "extra_data": {},
    }
    if with_pk:
        payload["extra_data"]["posterior_keratometry"] = {
            "right_eye": {"PK1_magnitude": -6.40, "PK1_axis": 5, "PK2_magnitude": -6.60, "PK2_axis": 95},
            "left_eye": {"PK1_magnitude": -6.20, "PK1_axis": 170, "PK2_magnitude": -6.50, "PK2_axis": 80},
        }
    return payload


@pytest.mark.parametrize("text,expected", [
    ("blue-river-123456", "blue-river-123456"),
    ("  Blue-River-123456 ", "blue-river-123456"),
    ("https://biomapi.com/pin/green-leaf-654321", "green-leaf-654321"),
    ("https://example.org/?pin=red-sky-000001&x=1", "red-sky-000001"),
    ("blue-river-12345", None),
    ("", None),
    (None, None),
])
def test_extract_biom_pin(text, expected):
    assert extract_biom_pin(text) == expected


class TestParseResponse:

    def test_record_with_posterior(self):
        record = parse_biometry_response(make_payload())
        assert record.has_pk
        assert record.patient.patient_id == "391611"
        assert record.biom_pin == "blue-river-123456"
        assert record.left_eye.K1_magnitude == pytest.approx(42.75)
        assert record.pk_data["right_eye"].PK2_magnitude == pytest.approx(-6.60)

    def test_record_without_posterior(self):
        record = parse_biometry_response(make_payload(with_pk=False))
        assert not record.has_pk
        assert record.pk_data is None

    def test_posterior_for_one_eye_only_is_ignored(self):
        payload = make_payload()
        del payload["extra_data"]["posterior_keratometry"]["left_eye"]
        assert not parse_biometry_response(payload).has_pk

    def test_pin_from_upload_metadata(self):
        payload = make_payload()
        del payload["biom_pin"]
        payload["metadata"] = {"biompin": {"pin": "quiet-owl-777777"}}
        assert parse_biometry_response(payload).biom_pin == "quiet-owl-777777"

    def test_unsuccessful_response(self):
        with pytest.raises(BiometryResponseError, match="PIN not found"):
            parse_biometry_response({"success": False, "message": "PIN not found"})

    @pytest.mark.parametrize("missing", ["patient", "right_eye", "left_eye"])
    def test_missing_structure(self, missing):
        payload = copy.deepcopy(make_payload())
        del payload["data"][missing]
        with pytest.raises(BiometryResponseError):
            parse_biometry_response(payload)

    def test_not_a_dict(self):
        with pytest.raises(BiometryResponseError):
            parse_biometry_response(["success"])


class TestEyeInputs:

    def test_right_eye(self):
        inputs = eye_inputs(parse_biometry_response(make_payload()), "right")
        assert inputs.k_flat == pytest.approx(43.00)
        assert inputs.axis_steep == pytest.approx(100)
        assert inputs.pk_flat == pytest.approx(-6.40)
        assert inputs.p_axis_steep == pytest.approx(95)

    def test_left_eye_comma_decimals(self):
        inputs = eye_inputs(parse_biometry_response(make_payload()), "left")
        assert inputs.k_steep == pytest.approx(43.50)
        assert inputs.pk_steep == pytest.approx(-6.50)

    def test_other_keratometric_index_skips_anterior(self):
        record = parse_biometry_response(make_payload(right_index=1.332))
        inputs = eye_inputs(record, "right")
        assert inputs.k_flat is None and inputs.k_steep is None
        assert inputs.pk_flat == pytest.approx(-6.40)

    def test_no_posterior(self):
        inputs = eye_inputs(parse_biometry_response(make_payload(with_pk=False)), "right")
        assert inputs.pk_flat is None and inputs.p_axis_steep is None

    def test_bad_eye(self):
        with pytest.raises(ValueError):
            eye_inputs(parse_biometry_response(make_payload()), "both")
