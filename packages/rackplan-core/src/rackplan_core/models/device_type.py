from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DeviceKind(str, Enum):
    """Closed set of device kinds. Unknown tags resolve to OTHER."""

    SERVER = "server"
    SWITCH = "switch"
    ROUTER = "router"
    STORAGE = "storage"
    UPS = "ups"
    PDU = "pdu"
    FIREWALL = "firewall"
    MONITOR = "monitor"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag) -> "DeviceKind | None":
        """Case-insensitive match of a raw type tag; None when unrecognised."""
        if tag is None:
            return None
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            return None

    @classmethod
    def parse(cls, tag) -> "DeviceKind":
        return cls.from_tag(tag) or cls.OTHER


class DeviceTypeSpec(BaseModel):
    """Display and span conventions for one device kind."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    kind: DeviceKind
    label: str
    default_span: int = Field(default=1, ge=1)
    max_span: int = Field(default=1, ge=1)
    is_power_source: bool = False


class DeviceTypeOverride(BaseModel):
    """Partial spec used by policy files to retune a kind."""

    model_config = ConfigDict(extra="ignore")
    label: str | None = None
    default_span: int | None = Field(default=None, ge=1)
    max_span: int | None = Field(default=None, ge=1)


DEFAULT_DEVICE_TYPES: tuple[DeviceTypeSpec, ...] = (
    DeviceTypeSpec(kind=DeviceKind.SERVER, label="Server", default_span=1, max_span=4),
    DeviceTypeSpec(kind=DeviceKind.SWITCH, label="Switch", default_span=1, max_span=2),
    DeviceTypeSpec(kind=DeviceKind.ROUTER, label="Router", default_span=1, max_span=2),
    DeviceTypeSpec(kind=DeviceKind.STORAGE, label="Storage", default_span=2, max_span=6),
    DeviceTypeSpec(kind=DeviceKind.UPS, label="UPS", default_span=2, max_span=4, is_power_source=True),
    DeviceTypeSpec(kind=DeviceKind.PDU, label="PDU", default_span=1, max_span=2, is_power_source=True),
    DeviceTypeSpec(kind=DeviceKind.FIREWALL, label="Firewall", default_span=1, max_span=2),
    DeviceTypeSpec(kind=DeviceKind.MONITOR, label="Monitor", default_span=1, max_span=1),
    DeviceTypeSpec(kind=DeviceKind.OTHER, label="Other", default_span=1, max_span=8),
)


class TypeRegistry:
    """Lookup from a device type tag to its DeviceTypeSpec.

    `lookup` only answers for recognised tags, so callers can tell a known
    kind from a free-form one. `resolve` always answers, falling back to the
    OTHER spec.
    """

    def __init__(self, specs=DEFAULT_DEVICE_TYPES):
        self._specs: dict[DeviceKind, DeviceTypeSpec] = {spec.kind: spec for spec in specs}
        if DeviceKind.OTHER not in self._specs:
            raise ValueError("type registry must define a spec for 'other'")

    @classmethod
    def default(cls) -> "TypeRegistry":
        return cls()

    def with_overrides(self, overrides: dict[str, DeviceTypeOverride]) -> "TypeRegistry":
        """Return a new registry with policy overrides applied; unknown keys are ignored."""
        specs = dict(self._specs)
        for tag, override in overrides.items():
            kind = DeviceKind.from_tag(tag)
            if kind is None:
                continue
            changes = override.model_dump(exclude_none=True)
            specs[kind] = specs[kind].model_copy(update=changes)
        return TypeRegistry(specs.values())

    def lookup(self, tag) -> DeviceTypeSpec | None:
        kind = DeviceKind.from_tag(tag)
        return None if kind is None else self._specs.get(kind)

    def resolve(self, tag) -> DeviceTypeSpec:
        return self.lookup(tag) or self._specs[DeviceKind.OTHER]

    def is_known(self, tag) -> bool:
        return self.lookup(tag) is not None

    def __iter__(self):
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)
