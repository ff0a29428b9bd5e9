from .placement import find_conflicts, validate_placement, validate_rack
from .power import validate_power

__all__ = ["find_conflicts", "validate_placement", "validate_power", "validate_rack"]
