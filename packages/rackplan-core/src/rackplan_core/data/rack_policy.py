# rackplan_core/data/rack_policy.py
from __future__ import annotations

import logging
from pathlib import Path

from rackplan_core.data.loader import load_yaml_typed
from rackplan_core.models.rack_policy import RackPolicy

logger = logging.getLogger(__name__)


def load_rack_policy(path: str | Path | None = None) -> RackPolicy:
    """Strongly-typed policy loader; no path or a missing file yields the built-in defaults."""
    if path is None:
        return RackPolicy()
    p = Path(path)
    if not p.exists():
        logger.info("rack policy %s not found, using built-in defaults", p)
        return RackPolicy()
    return load_yaml_typed(p, model=RackPolicy)
