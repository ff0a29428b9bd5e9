import warnings

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from rackplan_core.models.device_type import DeviceKind

# Raw positional values are kept as given; the layout helpers parse them so a
# malformed record degrades instead of failing to load.
RawNumber = int | float | str | None


def _to_hashable_raw(v):
    if v is None or isinstance(v, int | float | str):
        return v
    return str(v)


class PowerConnection(BaseModel):
    """One power cord: the source device id and the port it plugs into."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    source_id: str = Field(validation_alias=AliasChoices("source_id", "sourceId", "pduId"))
    # kept raw; unusable ports are skipped by the resolver and reported by validate_power
    port: RawNumber = Field(default=None, validation_alias=AliasChoices("port", "portNumber", "outlet"))
    voltage: int | float | str | None = None

    @field_validator("source_id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return str(v)

    @field_validator("port", "voltage", mode="before")
    @classmethod
    def _coerce_raw(cls, v):
        return _to_hashable_raw(v)


class Device(BaseModel):
    """A physical unit mounted in a rack."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    id: str
    name: str = ""
    type: str = DeviceKind.OTHER.value
    start_unit: RawNumber = Field(
        default=None,
        validation_alias=AliasChoices("start_unit", "startUnit", "startU", "position", "rackPosition", "uPosition"),
    )
    unit_span: RawNumber = Field(default=1, validation_alias=AliasChoices("unit_span", "unitSpan"))
    status: str | None = None
    power_connections: tuple[PowerConnection, ...] = Field(
        default=(),
        validation_alias=AliasChoices("power_connections", "powerConnections", "pduPorts"),
    )
    port_count: RawNumber = Field(default=None, validation_alias=AliasChoices("port_count", "portCount"))
    outlets: int | str | tuple[int | str, ...] | None = None
    ports: RawNumber = None
    rack_id: str | None = Field(default=None, validation_alias=AliasChoices("rack_id", "rackId"))
    rack_name: str | None = Field(default=None, validation_alias=AliasChoices("rack_name", "rackName"))
    model: str | None = None
    manufacturer: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_power(cls, data):
        # older reports carry a single `power: {sourceId, port}` object
        if isinstance(data, dict) and isinstance(data.get("power"), dict):
            if not any(k in data for k in ("power_connections", "powerConnections", "pduPorts")):
                warnings.warn(
                    "device field 'power' is deprecated, use 'powerConnections'",
                    category=DeprecationWarning,
                    stacklevel=2,
                )
                data = {**data, "power_connections": [data["power"]]}
        return data

    @field_validator("id", "rack_id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return None if v is None else str(v)

    @field_validator("name", "type", mode="before")
    @classmethod
    def _null_is_default(cls, v, info):
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("start_unit", "unit_span", "port_count", "ports", mode="before")
    @classmethod
    def _coerce_raw(cls, v):
        return _to_hashable_raw(v)

    @field_validator("outlets", mode="before")
    @classmethod
    def _coerce_outlets(cls, v):
        if isinstance(v, list | tuple):
            return tuple(_to_hashable_raw(o) for o in v)
        return _to_hashable_raw(v)

    @field_validator("power_connections", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return () if v is None else v

    @property
    def kind(self) -> DeviceKind:
        return DeviceKind.parse(self.type)

    @property
    def display_name(self) -> str:
        return self.name or self.id


class Rack(BaseModel):
    """A rack and the devices mounted in it."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    id: str
    name: str = ""
    height: int | None = Field(default=None, ge=1)
    devices: tuple[Device, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return str(v)

    @field_validator("height", mode="before")
    @classmethod
    def _blank_height(cls, v):
        return None if v == "" else v

    def resolved_height(self, default: int = 45) -> int:
        """Height in U, falling back to the policy default when unset."""
        return self.height or default

    @field_validator("devices", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return () if v is None else v

    @property
    def display_name(self) -> str:
        return self.name or self.id


class SiteInventory(BaseModel):
    """Racks recorded during one site visit."""

    model_config = ConfigDict(extra="ignore")
    name: str | None = None
    racks: list[Rack] = Field(default_factory=list)

    def get_rack(self, rack_id: str) -> Rack:
        for rack in self.racks:
            if rack.id == str(rack_id) or rack.name == str(rack_id):
                return rack
        raise KeyError(f"unknown rack {rack_id!r}")
