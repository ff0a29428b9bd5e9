import math

from rackplan_core.codebase.debug import spy_trace
from rackplan_core.models.unit_map import UnitMap
from rackplan_core.models.utilization import UtilizationStats, UtilizationStatus, UtilizationThresholds

DEFAULT_THRESHOLDS = UtilizationThresholds()


def _round_half_up(value: float) -> int:
    # half up: 12.5 -> 13
    return int(math.floor(value + 0.5))


def utilization_status(percentage: int, thresholds: UtilizationThresholds = DEFAULT_THRESHOLDS) -> UtilizationStatus:
    if percentage >= thresholds.critical:
        return "critical"
    if percentage >= thresholds.warning:
        return "warning"
    if percentage >= thresholds.moderate:
        return "moderate"
    return "low"


@spy_trace
def compute_utilization(
    unit_map: UnitMap,
    rack_height: int,
    thresholds: UtilizationThresholds = DEFAULT_THRESHOLDS,
) -> UtilizationStats:
    """Occupied/available units and the alert tier for one rack."""
    total = max(0, rack_height)
    occupied = len([unit for unit in unit_map.units if 1 <= unit <= total])
    percentage = _round_half_up(occupied / total * 100) if total else 0
    return UtilizationStats(
        occupied=occupied,
        total=total,
        available=total - occupied,
        percentage=percentage,
        status=utilization_status(percentage, thresholds),
    )
