# rackplan_core/models/rack_policy.py
from typing import Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from rackplan_core.models.device_type import DeviceTypeOverride, TypeRegistry
from rackplan_core.models.power import PowerPolicy
from rackplan_core.models.utilization import UtilizationThresholds


class RackPolicy(BaseModel):
    """Deployment-tunable conventions for layout, alerting and power sizing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: str | None = None
    default_height: int = Field(
        default=45,
        ge=1,
        validation_alias=AliasChoices("default_height", "default-height"),
    )
    utilization: UtilizationThresholds = Field(default_factory=UtilizationThresholds)

    # Accept both `device_types` and `device-types` in YAML
    device_types: Dict[str, DeviceTypeOverride] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("device_types", "device-types"),
    )
    power: PowerPolicy = Field(default_factory=PowerPolicy)

    def type_registry(self) -> TypeRegistry:
        return TypeRegistry.default().with_overrides(self.device_types)
