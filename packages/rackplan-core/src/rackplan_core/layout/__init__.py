from .positions import display_row, rack_unit_labels, to_bottom_up
from .unit_map import build_unit_map
from .utilization import compute_utilization, utilization_status

__all__ = [
    "build_unit_map",
    "compute_utilization",
    "display_row",
    "rack_unit_labels",
    "to_bottom_up",
    "utilization_status",
]
