"""
Memoized entry points for callers that recompute on every render.

Keys are the frozen, hashable inputs themselves (a tuple of devices, the
height, the threshold/power policy), so an unchanged device set returns the
cached result. Unit maps are handed out with their own `units` dict; the
other results are frozen models shared between callers.
"""

from functools import lru_cache
from typing import Iterable

from rackplan_core.layout.unit_map import build_unit_map
from rackplan_core.layout.utilization import DEFAULT_THRESHOLDS, compute_utilization
from rackplan_core.models.device import Device, Rack
from rackplan_core.models.power import PowerPolicy, PowerTopology
from rackplan_core.models.unit_map import UnitMap
from rackplan_core.models.utilization import UtilizationStats, UtilizationThresholds
from rackplan_core.power.topology import DEFAULT_POWER_POLICY, resolve_power_topology

CACHE_SIZE = 256


@lru_cache(maxsize=CACHE_SIZE)
def _unit_map(devices: tuple[Device, ...], rack_height: int) -> UnitMap:
    return build_unit_map(devices, rack_height)


@lru_cache(maxsize=CACHE_SIZE)
def _utilization(devices: tuple[Device, ...], rack_height: int, thresholds: UtilizationThresholds) -> UtilizationStats:
    return compute_utilization(_unit_map(devices, rack_height), rack_height, thresholds)


@lru_cache(maxsize=CACHE_SIZE)
def _power_topology(devices: tuple[Device, ...], policy: PowerPolicy) -> PowerTopology:
    return resolve_power_topology(devices, policy)


def _detached(unit_map: UnitMap) -> UnitMap:
    return unit_map.model_copy(update={"units": dict(unit_map.units)})


def unit_map_for(devices: Iterable[Device], rack_height: int) -> UnitMap:
    return _detached(_unit_map(tuple(devices), rack_height))


def utilization_for(
    devices: Iterable[Device],
    rack_height: int,
    thresholds: UtilizationThresholds = DEFAULT_THRESHOLDS,
) -> UtilizationStats:
    return _utilization(tuple(devices), rack_height, thresholds)


def rack_unit_map(rack: Rack, default_height: int = 45) -> UnitMap:
    return _detached(_unit_map(rack.devices, rack.resolved_height(default_height)))


def power_topology_for(devices: Iterable[Device], policy: PowerPolicy = DEFAULT_POWER_POLICY) -> PowerTopology:
    topology = _power_topology(tuple(devices), policy)
    return topology.model_copy(update={"feeds": dict(topology.feeds)})


def clear_caches() -> None:
    _unit_map.cache_clear()
    _utilization.cache_clear()
    _power_topology.cache_clear()


def cache_info() -> dict:
    return {
        "unit_map": _unit_map.cache_info(),
        "utilization": _utilization.cache_info(),
        "power_topology": _power_topology.cache_info(),
    }
