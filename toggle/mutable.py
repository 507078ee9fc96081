from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple, Optional

from .fractional import fractional
from .toggle import LiveToggle, Toggle
from .toggle_map import ToggleMap
from .types import Metadata, is_valid_fraction, is_valid_id


logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    fraction: float
    toggle: Toggle


class MutableToggleMap(ToggleMap):
    """
    Thread-safe, in-process registry of toggles that can change at runtime.

    Writers serialize on a lock and publish a fresh immutable mapping;
    readers (evaluation, enumeration) take the current mapping reference
    without locking, so they always see a complete per-id entry.
    """

    source = "mutable"

    def __init__(self) -> None:
        self._write_lock = threading.Lock()
        self._entries: Mapping[str, _Entry] = MappingProxyType({})

    def put(self, id: str, fraction: float) -> None:
        if not is_valid_id(id):
            logger.warning("ignoring invalid id=%r with fraction=%s", id, fraction)
            return
        if not is_valid_fraction(fraction):
            logger.warning("ignoring invalid fraction=%s for %s", fraction, id)
            return
        f = float(fraction)
        entry = _Entry(fraction=f, toggle=fractional(id, f))
        with self._write_lock:
            updated = dict(self._entries)
            updated[id] = entry
            self._entries = MappingProxyType(updated)
        logger.info("%s set to fraction=%s", id, f)

    def remove(self, id: str) -> None:
        with self._write_lock:
            if id not in self._entries:
                return
            updated = dict(self._entries)
            del updated[id]
            self._entries = MappingProxyType(updated)
        logger.info("%s removed", id)

    def fraction(self, id: str) -> Optional[float]:
        entry = self._entries.get(id)
        return None if entry is None else entry.fraction

    def _current(self, id: str) -> Optional[Toggle]:
        entry = self._entries.get(id)
        return None if entry is None else entry.toggle

    def __call__(self, id: str) -> Toggle:
        return LiveToggle(id, lambda: self._current(id))

    def __iter__(self) -> Iterator[Metadata]:
        snapshot = self._entries
        return iter(
            [
                Metadata(id=id, fraction=entry.fraction, source=self.source)
                for id, entry in snapshot.items()
            ]
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MutableToggleMap({len(self._entries)} toggles)"
