"""
Rack-unit arithmetic shared by the builder, the validators and the renderers.

Units are numbered bottom (1) to top (height). A device is placed by its
topmost unit, `start_unit`, and spans downward: a 2U device at U40 occupies
U40 and U39. Renderers that draw top-down rows or need bottom-up ranges
convert here instead of re-deriving ranges on their own.
"""

import math
import re

from rackplan_core.models.device import Device

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value) -> int | None:
    """Parse a raw positional value the way hand-entered report data needs.

    Ints pass through, floats truncate, strings use their leading integer
    ("40", " 40U" -> 40). Anything else, including booleans and blanks, is None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_span(value) -> int | None:
    """Unit span with the missing-means-1 default; None when present but non-numeric."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 1
    return parse_int(value)


def device_units(start_unit: int, unit_span: int) -> list[int]:
    """Units a device covers, topmost first."""
    return [start_unit - offset for offset in range(max(1, unit_span))]


def bottom_unit(start_unit: int, unit_span: int) -> int:
    return start_unit - max(1, unit_span) + 1


def rack_unit_labels(height: int) -> list[int]:
    """Unit labels in display order, top of the rack first."""
    return list(range(height, 0, -1))


def display_row(start_unit: int, height: int) -> int:
    """1-based row of a unit when the rack is drawn top-down."""
    return height - start_unit + 1


def to_bottom_up(device: Device) -> tuple[int, int] | None:
    """(bottom unit, span) for renderers that lay devices out from the floor up."""
    start = parse_int(device.start_unit)
    span = parse_span(device.unit_span)
    if start is None or span is None:
        return None
    span = max(1, span)
    return bottom_unit(start, span), span


def position_label(device: Device) -> str:
    start = parse_int(device.start_unit)
    if start is None or start < 1:
        return ""
    return f"U{start}"


def range_label(device: Device) -> str:
    """Unit range label, e.g. U40 for a 1U device and U40-U39 for a 2U one."""
    start = parse_int(device.start_unit)
    span = parse_span(device.unit_span)
    if start is None or start < 1:
        return ""
    if span is None or span <= 1:
        return f"U{start}"
    return f"U{start}-U{bottom_unit(start, span)}"
