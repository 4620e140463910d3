from typing import Optional

from pydantic import BaseModel, Field, field_validator

from biomcyl.utils import to_float


class Patient(BaseModel):
    name: Optional[str] = None
    patient_id: Optional[str] = None

    @field_validator("patient_id", mode="before")
    @classmethod
    def _as_str(cls, v):
        return None if v is None else str(v)


class EyeKeratometry(BaseModel):
    """Anterior keratometry of one eye as reported by the biometer."""
    keratometric_index: Optional[float] = None
    K1_magnitude: Optional[float] = Field(None, description="D, flat")
    K1_axis: Optional[float] = Field(None, description="degrees")
    K2_magnitude: Optional[float] = Field(None, description="D, steep")
    K2_axis: Optional[float] = Field(None, description="degrees")

    @field_validator(
        "keratometric_index", "K1_magnitude", "K1_axis", "K2_magnitude", "K2_axis",
        mode="before",
    )
    @classmethod
    def _lenient_float(cls, v):
        return to_float(v)


class PosteriorKeratometry(BaseModel):
    PK1_magnitude: Optional[float] = Field(None, description="D, flat")
    PK1_axis: Optional[float] = Field(None, description="degrees")
    PK2_magnitude: Optional[float] = Field(None, description="D, steep")
    PK2_axis: Optional[float] = Field(None, description="degrees")

    @field_validator("PK1_magnitude", "PK1_axis", "PK2_magnitude", "PK2_axis", mode="before")
    @classmethod
    def _lenient_float(cls, v):
        return to_float(v)


class BiometryRecord(BaseModel):
    """Both eyes of one biometry report, plus posterior data when the device had it."""
    patient: Patient = Field(default_factory=Patient)
    right_eye: EyeKeratometry
    left_eye: EyeKeratometry
    has_pk: bool = False
    pk_data: Optional[dict[str, PosteriorKeratometry]] = None
    biom_pin: Optional[str] = None
