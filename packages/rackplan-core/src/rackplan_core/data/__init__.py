from .inventory import load_racks, load_site_inventory
from .rack_policy import load_rack_policy

__all__ = [
    "load_racks",
    "load_rack_policy",
    "load_site_inventory",
]
