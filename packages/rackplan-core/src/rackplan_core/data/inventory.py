# rackplan_core/data/inventory.py
from pathlib import Path

from rackplan_core.data.loader import load_yaml_list, read_document, validate_typed
from rackplan_core.models.device import Rack, SiteInventory


def load_site_inventory(path: str | Path) -> SiteInventory:
    """Load a site inventory; a bare list of racks is accepted as well as `{racks: [...]}`."""
    data = read_document(path)
    if isinstance(data, list):
        data = {"racks": data}
    return validate_typed(data, path, model=SiteInventory)


def load_racks(path: str | Path) -> list[Rack]:
    return load_yaml_list(Path(path), Rack)
