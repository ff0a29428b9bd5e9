from pydantic import BaseModel, ConfigDict, Field

from rackplan_core.models.device import Device


class UnitOccupancy(BaseModel):
    """What sits in one rack unit.

    `device` is the last device written to the unit; `claimants` lists every
    device whose range covers it, in iteration order.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)
    unit: int
    device: Device
    is_first: bool
    is_last: bool
    offset_from_start: int
    total_span: int
    claimants: tuple[Device, ...] = ()

    @property
    def has_conflict(self) -> bool:
        return len({d.id for d in self.claimants}) > 1


class UnitMap(BaseModel):
    """Per-unit occupancy index for a single rack."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    height: int
    units: dict[int, UnitOccupancy] = Field(default_factory=dict)

    def get(self, unit: int) -> UnitOccupancy | None:
        return self.units.get(unit)

    def is_empty(self, unit: int) -> bool:
        return unit not in self.units

    def occupied_units(self) -> list[int]:
        return sorted(self.units, reverse=True)

    def conflicts(self) -> dict[int, tuple[Device, ...]]:
        """Units claimed by more than one distinct device."""
        return {unit: occ.claimants for unit, occ in sorted(self.units.items()) if occ.has_conflict}

    def devices(self) -> list[Device]:
        """Devices that won at least one unit, top-down, each listed once."""
        seen: dict[str, Device] = {}
        for unit in self.occupied_units():
            device = self.units[unit].device
            seen.setdefault(device.id, device)
        return list(seen.values())

    def __contains__(self, unit) -> bool:
        return unit in self.units

    def __len__(self) -> int:
        return len(self.units)
