from .device import Device, PowerConnection, Rack, SiteInventory
from .device_type import DeviceKind, DeviceTypeSpec, TypeRegistry
from .power import PortAssignment, PortEntry, PowerPolicy, PowerTableRow, PowerTopology, SourceTopology
from .rack_policy import RackPolicy
from .unit_map import UnitMap, UnitOccupancy
from .utilization import UtilizationStats, UtilizationThresholds
from .validation_result import Finding, ValidationResult

__all__ = [
    "Device",
    "DeviceKind",
    "DeviceTypeSpec",
    "Finding",
    "PortAssignment",
    "PortEntry",
    "PowerConnection",
    "PowerPolicy",
    "PowerTableRow",
    "PowerTopology",
    "Rack",
    "RackPolicy",
    "SiteInventory",
    "SourceTopology",
    "TypeRegistry",
    "UnitMap",
    "UnitOccupancy",
    "UtilizationStats",
    "UtilizationThresholds",
    "ValidationResult",
]
