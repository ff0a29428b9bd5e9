from .topology import (
    flatten_racks,
    partition_devices,
    power_table_rows,
    resolve_port_capacity,
    resolve_power_topology,
)

__all__ = [
    "flatten_racks",
    "partition_devices",
    "power_table_rows",
    "resolve_port_capacity",
    "resolve_power_topology",
]
