import logging
from typing import Iterable

from rackplan_core.codebase.debug import spy_trace
from rackplan_core.layout.positions import parse_int, parse_span
from rackplan_core.models.device import Device
from rackplan_core.models.unit_map import UnitMap, UnitOccupancy

logger = logging.getLogger(__name__)


@spy_trace
def build_unit_map(devices: Iterable[Device], rack_height: int) -> UnitMap:
    """Assign every occupied unit of a rack to the device that claims it.

    Devices without a usable start unit (missing, non-numeric or below 1) or
    with a non-numeric span are skipped. Units outside [1, rack_height] are
    clipped. When ranges overlap the later device wins the unit, and every
    claimant is kept on the occupancy record so the overlap stays visible.
    """
    units: dict[int, UnitOccupancy] = {}

    for device in devices:
        start = parse_int(device.start_unit)
        if start is None or start < 1:
            logger.debug("skipping device %s: unusable start unit %r", device.id, device.start_unit)
            continue
        span = parse_span(device.unit_span)
        if span is None:
            logger.debug("skipping device %s: unusable unit span %r", device.id, device.unit_span)
            continue
        span = max(1, span)

        for offset in range(span):
            unit = start - offset
            if unit < 1 or unit > rack_height:
                continue
            previous = units.get(unit)
            claimants = (previous.claimants if previous else ()) + (device,)
            if previous is not None and previous.device.id != device.id:
                logger.debug("unit %d claimed by %s overwrites %s", unit, device.id, previous.device.id)
            units[unit] = UnitOccupancy(
                unit=unit,
                device=device,
                is_first=offset == 0,
                is_last=offset == span - 1,
                offset_from_start=offset,
                total_span=span,
                claimants=claimants,
            )

    return UnitMap(height=rack_height, units=units)
