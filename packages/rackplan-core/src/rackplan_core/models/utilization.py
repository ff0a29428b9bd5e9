from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

UtilizationStatus = Literal["low", "moderate", "warning", "critical"]


class UtilizationThresholds(BaseModel):
    """Percentage floors for each alert tier; a value at a floor takes that tier."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    critical: int = Field(default=90, ge=0, le=100)
    warning: int = Field(default=75, ge=0, le=100)
    moderate: int = Field(default=50, ge=0, le=100)

    @model_validator(mode="after")
    def _ordered(self):
        if not self.moderate <= self.warning <= self.critical:
            raise ValueError("utilization thresholds must satisfy moderate <= warning <= critical")
        return self


class UtilizationStats(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    occupied: int
    total: int
    available: int
    percentage: int
    status: UtilizationStatus
