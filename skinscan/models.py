# skinscan/models.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MALIGNANT = "MALIGNANT"
BENIGN = "BENIGN"


class Verdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Literal["MALIGNANT", "BENIGN"]
    confidence_percent: float = Field(ge=0.0, le=100.0)
    probability: float = Field(ge=0.0, le=1.0)  # sigmoid of the logit, i.e. P(malignant)
    threshold: float = Field(ge=0.0, le=1.0)
