from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from biomcyl.services.axis import AxisType, normalize_axis

Eye = Literal["right", "left"]

ANTERIOR_FIELDS = ("k_flat", "k_steep", "axis_flat", "axis_steep")
POSTERIOR_FIELDS = ("pk_flat", "pk_steep", "p_axis_flat", "p_axis_steep")

# edited field -> partner axis kept orthogonal to it
AXIS_PARTNERS = {
    "axis_flat": "axis_steep",
    "axis_steep": "axis_flat",
    "p_axis_flat": "p_axis_steep",
    "p_axis_steep": "p_axis_flat",
}


class ResultStatus(str, Enum):
    OK = "ok"
    NO_DATA = "no_data"
    NON_PHYSICAL = "non_physical"


class PosteriorVisibility(str, Enum):
    """Whether the posterior (PK) section takes part in recomputation."""
    HIDDEN = "hidden"
    VISIBLE = "visible"


class KeratometricReading(BaseModel):
    """A power (D) at an axis (degrees); the axis is kept in (0, 180]."""
    model_config = ConfigDict(frozen=True)

    magnitude: float = Field(description="D")
    axis: float = Field(description="degrees")

    @field_validator("axis")
    @classmethod
    def _normalize(cls, v: float) -> float:
        return normalize_axis(v)


class SurfacePair(BaseModel):
    """Flat and steep meridians of one corneal surface."""
    model_config = ConfigDict(frozen=True)

    flat: KeratometricReading
    steep: KeratometricReading

    @property
    def cylinder(self) -> float:
        return self.steep.magnitude - self.flat.magnitude


class CalculationInputs(BaseModel):
    """The eight form readings. Missing values are None."""
    k_flat: Optional[float] = Field(None, description="D")
    k_steep: Optional[float] = Field(None, description="D")
    axis_flat: Optional[float] = Field(None, description="degrees")
    axis_steep: Optional[float] = Field(None, description="degrees")
    pk_flat: Optional[float] = Field(None, description="D, sign ignored")
    pk_steep: Optional[float] = Field(None, description="D, sign ignored")
    p_axis_flat: Optional[float] = Field(None, description="degrees")
    p_axis_steep: Optional[float] = Field(None, description="degrees")


class TotalKeratometry(BaseModel):
    """TK meridians, the net TK cylinder and the raw PK readings it came from."""
    model_config = ConfigDict(frozen=True)

    flat: KeratometricReading
    steep: KeratometricReading
    net: KeratometricReading
    posterior: SurfacePair


class ResultSet(BaseModel):
    """
    Everything derived from one set of inputs.

    Replaced wholesale on every recomputation. When the anterior inputs are
    missing or unusable every result is None and `status` says why.
    """
    model_config = ConfigDict(frozen=True)

    status: ResultStatus = ResultStatus.NO_DATA
    anterior: Optional[SurfacePair] = None
    measured: Optional[KeratometricReading] = None
    ak: Optional[KeratometricReading] = None
    so: Optional[KeratometricReading] = None
    axis_type: Optional[AxisType] = None
    tk: Optional[TotalKeratometry] = None

    @classmethod
    def cleared(cls, status: ResultStatus = ResultStatus.NO_DATA) -> "ResultSet":
        return cls(status=status)

    @property
    def has_data(self) -> bool:
        return self.status == ResultStatus.OK


class DisplayResult(BaseModel):
    """Formatted strings for every output slot."""
    k1: str = "--"
    k1_axis: str = "--"
    k2: str = "--"
    k2_axis: str = "--"
    measured_mag: str = "-- D"
    measured_axis: str = "@ --°"
    so_mag: str = "-- D"
    so_axis: str = "@ --°"
    ak_mag: str = "-- D"
    ak_axis: str = "@ --°"
    badge: Optional[str] = None
    analysis_visible: bool = False
    pk_visible: bool = False
    pk1: str = "--"
    pk1_axis: str = "--"
    pk2: str = "--"
    pk2_axis: str = "--"
    tk_visible: bool = False
    tk1: str = "--"
    tk1_axis: str = "--"
    tk2: str = "--"
    tk2_axis: str = "--"
    tk_net_mag: str = "-- D"
    tk_net_axis: str = "@ --°"
