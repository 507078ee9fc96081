from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Optional

from .config import ToggleConfig
from .flags import FlagsToggleMap
from .json_map import load_path
from .mutable import MutableToggleMap
from .observed import ObservedToggleMap
from .prom_export import GLOBAL_PROM
from .toggle_map import ToggleMap, of
from .types import validate_id


_mutables_lock = threading.Lock()
_mutables: dict[str, MutableToggleMap] = {}


def mutable(library_name: str) -> MutableToggleMap:
    """The process-wide MutableToggleMap for `library_name`."""
    validate_id(library_name)
    with _mutables_lock:
        m = _mutables.get(library_name)
        if m is None:
            m = MutableToggleMap()
            _mutables[library_name] = m
        return m


def registered_libraries() -> list[str]:
    with _mutables_lock:
        return sorted(_mutables.keys())


def standard_toggle_map(
    library_name: str,
    stats: Any = None,
    config: Optional[ToggleConfig] = None,
) -> ToggleMap:
    """
    Flags overrides, then runtime mutations, then the library's JSON
    definitions, observed under `toggles/<library_name>`.
    """
    validate_id(library_name)
    cfg = config or ToggleConfig.from_env()
    sink = GLOBAL_PROM if stats is None else stats
    service = load_path(Path(cfg.resource_dir) / f"{library_name}.json")
    composed = of(FlagsToggleMap(), mutable(library_name), service)
    return ObservedToggleMap(composed, sink.scope("toggles", library_name))
