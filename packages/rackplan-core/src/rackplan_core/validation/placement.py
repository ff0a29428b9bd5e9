"""
Placement validation for rack devices.

Runs before an add/edit is committed. Every check contributes findings
instead of stopping at the first problem so a form can show them all at
once. Nothing here raises on bad device data.
"""

from __future__ import annotations

from rackplan_core.codebase.debug import spy_trace
from rackplan_core.layout.positions import bottom_unit, device_units, parse_int, parse_span
from rackplan_core.layout.unit_map import build_unit_map
from rackplan_core.models.device import Device, Rack
from rackplan_core.models.device_type import TypeRegistry
from rackplan_core.models.unit_map import UnitMap
from rackplan_core.models.validation_result import Finding, ValidationResult

MIN_UNIT = 1


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _occupiers(unit_map: UnitMap, unit: int, device_id: str) -> list[Device]:
    occupancy = unit_map.get(unit)
    if occupancy is None:
        return []
    occupiers: dict[str, Device] = {}
    for claimant in occupancy.claimants or (occupancy.device,):
        if claimant.id != device_id:
            occupiers.setdefault(claimant.id, claimant)
    return list(occupiers.values())


@spy_trace
def validate_placement(
    candidate: Device,
    unit_map: UnitMap,
    rack_height: int,
    registry: TypeRegistry | None = None,
) -> ValidationResult:
    """Check that `candidate` fits the rack and does not collide with other devices."""
    registry = registry or TypeRegistry.default()
    findings: list[Finding] = []
    context = {"device_id": candidate.id}

    start = parse_int(candidate.start_unit)
    if _is_blank(candidate.start_unit):
        findings.append(Finding(
            severity="FAIL",
            code="PLACEMENT_START_MISSING",
            message="Device must have a start unit",
            context=context,
        ))
    elif start is None:
        findings.append(Finding(
            severity="FAIL",
            code="PLACEMENT_START_INVALID",
            message=f"Start unit must be a number, got: {candidate.start_unit!r}",
            context={**context, "start_unit": candidate.start_unit},
        ))
    elif start < MIN_UNIT or start > rack_height:
        findings.append(Finding(
            severity="FAIL",
            code="PLACEMENT_START_OUT_OF_RANGE",
            message=f"Start unit must be between {MIN_UNIT} and {rack_height}",
            context={**context, "start_unit": start, "rack_height": rack_height},
        ))

    span = parse_span(candidate.unit_span)
    if span is None:
        findings.append(Finding(
            severity="FAIL",
            code="PLACEMENT_SPAN_INVALID",
            message=f"Unit span must be a whole number, got: {candidate.unit_span!r}",
            context={**context, "unit_span": candidate.unit_span},
        ))
    elif span < 1:
        findings.append(Finding(
            severity="FAIL",
            code="PLACEMENT_SPAN_INVALID",
            message="Unit span must be at least 1",
            context={**context, "unit_span": span},
        ))

    if start is not None and span is not None and span >= 1:
        bottom = bottom_unit(start, span)
        if bottom < MIN_UNIT:
            findings.append(Finding(
                severity="FAIL",
                code="PLACEMENT_BELOW_UNIT_1",
                message=f"Device extends below unit {MIN_UNIT}",
                context={**context, "start_unit": start, "unit_span": span, "bottom_unit": bottom},
            ))

        for unit in device_units(start, span):
            for occupier in _occupiers(unit_map, unit, candidate.id):
                findings.append(Finding(
                    severity="FAIL",
                    code="PLACEMENT_UNIT_OCCUPIED",
                    message=f"Unit {unit} is already occupied by {occupier.display_name}",
                    context={**context, "unit": unit, "occupied_by": occupier.id},
                ))

    spec = registry.lookup(candidate.type)
    if spec is not None and span is not None and span > spec.max_span:
        findings.append(Finding(
            severity="WARN",
            code="PLACEMENT_SPAN_EXCEEDS_TYPE",
            message=f"{candidate.type} devices typically don't exceed {spec.max_span}U",
            context={**context, "unit_span": span, "max_span": spec.max_span, "kind": spec.kind.value},
        ))

    return ValidationResult(findings=findings)


def find_conflicts(start_unit, unit_span, unit_map: UnitMap) -> list[tuple[int, Device]]:
    """Occupied units inside a prospective range, with whoever holds them."""
    start = parse_int(start_unit)
    span = parse_span(unit_span)
    if start is None or span is None or span < 1:
        return []
    conflicts = []
    for unit in device_units(start, span):
        occupancy = unit_map.get(unit)
        if occupancy is not None:
            conflicts.append((unit, occupancy.device))
    return conflicts


@spy_trace
def validate_rack(rack: Rack, registry: TypeRegistry | None = None, default_height: int = 45) -> ValidationResult:
    """Validate every device of a rack as if it were added in order.

    Each device is checked against the devices listed before it, so an
    overlap is reported once, on the device that would overwrite the unit.
    """
    registry = registry or TypeRegistry.default()
    height = rack.resolved_height(default_height)
    findings: list[Finding] = []
    placed: list[Device] = []
    seen_ids: set[str] = set()

    for device in rack.devices:
        if device.id in seen_ids:
            findings.append(Finding(
                severity="FAIL",
                code="PLACEMENT_DUPLICATE_ID",
                message=f"{device.display_name}: device id {device.id} is used more than once in rack {rack.display_name}",
                context={"rack_id": rack.id, "device_id": device.id},
            ))
        seen_ids.add(device.id)

        result = validate_placement(device, build_unit_map(placed, height), height, registry)
        for finding in result.findings:
            findings.append(finding.model_copy(update={
                "message": f"{device.display_name}: {finding.message}",
                "context": {**finding.context, "rack_id": rack.id},
            }))
        placed.append(device)

    return ValidationResult(findings=findings)
