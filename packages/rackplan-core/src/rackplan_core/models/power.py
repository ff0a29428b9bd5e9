from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rackplan_core.models.device_type import DeviceKind

CapacityBasis = Literal["declared", "heuristic", "fallback"]


class PowerPolicy(BaseModel):
    """Which kinds act as power sources and how their port counts are sized."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    source_kinds: tuple[DeviceKind, ...] = (DeviceKind.PDU, DeviceKind.UPS)
    fallback_ports: int = Field(default=8, ge=1)
    ups_port_multiple: int = Field(default=4, ge=1)
    ups_min_ports: int = Field(default=8, ge=1)
    pdu_port_sizes: tuple[int, ...] = (8, 16, 24, 48)

    @field_validator("source_kinds", mode="before")
    @classmethod
    def _lower_kinds(cls, v):
        return tuple(k.value if isinstance(k, DeviceKind) else str(k).strip().lower() for k in v)

    @field_validator("pdu_port_sizes")
    @classmethod
    def _sorted_sizes(cls, v):
        if not v or any(size < 1 for size in v):
            raise ValueError("pdu_port_sizes must be a non-empty list of positive integers")
        return tuple(sorted(set(v)))


class PortAssignment(BaseModel):
    """One (source, port) pair declared by a fed device."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    source_id: str
    port: int
    voltage: int | float | str | None = None


class PortEntry(BaseModel):
    """One outlet on a power source."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    port: int
    is_used: bool = False
    consumer_id: str | None = None
    consumer_name: str | None = None
    rack_name: str | None = None
    position: str | None = None
    voltage: int | float | str | None = None
    claimants: tuple[str, ...] = ()


class PowerTableRow(BaseModel):
    """Printable row shared by the terminal view, exports and reports."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    port: int
    connected_device_name: str = ""
    rack_name: str = ""
    position: str = ""


class SourceTopology(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    source_id: str
    source_name: str
    kind: DeviceKind
    rack_id: str | None = None
    total_ports: int
    declared_ports: int
    used_ports: int
    capacity_basis: CapacityBasis
    port_table: tuple[PortEntry, ...] = ()

    @property
    def free_ports(self) -> int:
        return self.total_ports - self.used_ports

    def entry(self, port: int) -> PortEntry | None:
        if 1 <= port <= len(self.port_table):
            return self.port_table[port - 1]
        return None


class PowerTopology(BaseModel):
    """Resolved source ports and the reverse map from fed devices to ports."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    sources: tuple[SourceTopology, ...] = ()
    feeds: dict[str, tuple[PortAssignment, ...]] = Field(default_factory=dict)

    def source(self, source_id: str) -> SourceTopology | None:
        return next((s for s in self.sources if s.source_id == str(source_id)), None)

    def feeds_for(self, device_id: str) -> tuple[PortAssignment, ...]:
        return self.feeds.get(str(device_id), ())
