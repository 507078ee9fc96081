from __future__ import annotations

import struct
import zlib
from typing import Any, Iterator

from .toggle import Toggle
from .toggle_map import ToggleMap
from .types import Metadata


_MASK_32 = 0xFFFFFFFF


def _entry_hash(md: Metadata) -> int:
    blob = md.id.encode("utf-8") + b"|" + struct.pack(">d", float(md.fraction))
    return zlib.crc32(blob) & _MASK_32


def checksum(toggle_map: ToggleMap) -> float:
    """
    Order-insensitive summary of (id, fraction) pairs currently in `toggle_map`.

    0.0 for an empty map. crc32 is not a cryptographic hash; it only has to
    be stable within a process and move when a definition moves.
    """
    acc = 0
    for md in toggle_map:
        acc = (acc + _entry_hash(md)) & _MASK_32
    return float(acc)


class ObservedToggleMap(ToggleMap):
    """
    Delegates to `underlying` and exports a `checksum` gauge to `stats`.

    `stats` is anything with `add_gauge(name, fn)` (see `toggle.metrics` and
    `toggle.prom_export`).
    """

    def __init__(self, underlying: ToggleMap, stats: Any) -> None:
        self.underlying = underlying
        stats.add_gauge("checksum", lambda: checksum(self.underlying))

    def __call__(self, id: str) -> Toggle:
        return self.underlying(id)

    def __iter__(self) -> Iterator[Metadata]:
        return iter(self.underlying)

    def __repr__(self) -> str:
        return f"ObservedToggleMap({self.underlying!r})"
