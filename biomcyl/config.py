import os
from pydantic import BaseModel, ConfigDict

from biomcyl.models.schema import Eye

class Settings(BaseModel):
    model_config = ConfigDict(validate_default=True)

    log_level: str = os.getenv("BIOMCYL_LOG_LEVEL", "INFO")
    default_eye: Eye = os.getenv("BIOMCYL_DEFAULT_EYE", "right")
    # match window for a record's keratometric index against 1.3375
    index_tolerance: float = float(os.getenv("BIOMCYL_INDEX_TOLERANCE", "1e-6"))

settings = Settings()
