from typing import Iterable

from rackplan_core.codebase.debug import spy_trace
from rackplan_core.layout.positions import parse_int
from rackplan_core.models.device import Device
from rackplan_core.models.power import PowerPolicy, PowerTopology
from rackplan_core.models.validation_result import Finding, ValidationResult
from rackplan_core.power.topology import DEFAULT_POWER_POLICY, resolve_power_topology


def _names(devices: list[Device]) -> dict[str, str]:
    names: dict[str, str] = {}
    for device in devices:
        names.setdefault(device.id, device.display_name)
    return names


def validate_connections(devices: list[Device], topology: PowerTopology) -> list[Finding]:
    """Per-connection checks: usable port, known source, within declared capacity."""
    findings = []
    names = _names(devices)

    for device in devices:
        for connection in device.power_connections:
            context = {"device_id": device.id, "source_id": connection.source_id, "port": connection.port}
            port = parse_int(connection.port)
            if port is None or port < 1:
                findings.append(Finding(
                    severity="FAIL",
                    code="POWER_PORT_INVALID",
                    message=f"{device.display_name}: power port must be a positive number, got: {connection.port!r}",
                    context=context,
                ))
                continue

            source = topology.source(connection.source_id)
            if source is None:
                if connection.source_id in names:
                    message = (
                        f"{device.display_name}: power source {names[connection.source_id]} "
                        "is not a PDU or UPS"
                    )
                else:
                    message = f"{device.display_name}: unknown power source {connection.source_id}"
                findings.append(Finding(
                    severity="FAIL",
                    code="POWER_UNKNOWN_SOURCE",
                    message=message,
                    context=context,
                ))
                continue

            if port > source.declared_ports:
                findings.append(Finding(
                    severity="FAIL",
                    code="POWER_PORT_OUT_OF_RANGE",
                    message=(
                        f"{device.display_name}: Port {port} is outside valid range "
                        f"(1-{source.declared_ports}) on {source.source_name}"
                    ),
                    context={**context, "declared_ports": source.declared_ports},
                ))

    return findings


def validate_port_uniqueness(devices: list[Device], topology: PowerTopology) -> list[Finding]:
    """An outlet feeds one device; flag every port claimed by more than one."""
    findings = []
    names = _names(devices)

    for source in topology.sources:
        for entry in source.port_table:
            claimant_ids = list(dict.fromkeys(entry.claimants))
            if len(claimant_ids) < 2:
                continue
            claimed_by = " and ".join(names.get(cid, cid) for cid in claimant_ids)
            findings.append(Finding(
                severity="FAIL",
                code="POWER_PORT_CONFLICT",
                message=f"Port {entry.port} on {source.source_name} is claimed by both {claimed_by}",
                context={"source_id": source.source_id, "port": entry.port, "claimants": claimant_ids},
            ))

    return findings


def validate_source_usage(topology: PowerTopology) -> list[Finding]:
    findings = []
    for source in topology.sources:
        if source.used_ports == 0:
            findings.append(Finding(
                severity="INFO",
                code="POWER_SOURCE_UNUSED",
                message=f"{source.source_name} has no connected devices",
                context={"source_id": source.source_id},
            ))
    return findings


@spy_trace
def validate_power(
    devices: Iterable[Device],
    topology: PowerTopology | None = None,
    policy: PowerPolicy = DEFAULT_POWER_POLICY,
) -> ValidationResult:
    """Validate power connections across all racks."""
    devices = list(devices)
    if topology is None:
        topology = resolve_power_topology(devices, policy)

    findings: list[Finding] = []
    findings.extend(validate_connections(devices, topology))
    findings.extend(validate_port_uniqueness(devices, topology))
    findings.extend(validate_source_usage(topology))
    return ValidationResult(findings=findings)
