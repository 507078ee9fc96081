from __future__ import annotations

from typing import Iterable, Iterator

from .fractional import fractional
from .toggle import Toggle
from .types import Metadata


class ToggleMap:
    """
    A lookup from toggle id to Toggle, enumerable as Metadata.

    Unknown ids yield `Toggle.undefined()`-like toggles; a lookup never raises.
    """

    def __call__(self, id: str) -> Toggle:
        raise NotImplementedError

    def __iter__(self) -> Iterator[Metadata]:
        raise NotImplementedError

    def or_else(self, other: "ToggleMap") -> "ToggleMap":
        if other is NullToggleMap:
            return self
        return OrElseToggleMap(self, other)


class _NullToggleMap(ToggleMap):
    def __call__(self, id: str) -> Toggle:
        return Toggle.undefined()

    def __iter__(self) -> Iterator[Metadata]:
        return iter(())

    def or_else(self, other: ToggleMap) -> ToggleMap:
        return other

    def __repr__(self) -> str:
        return "NullToggleMap"


NullToggleMap: ToggleMap = _NullToggleMap()


class ImmutableToggleMap(ToggleMap):
    def __init__(self, metadata: Iterable[Metadata]) -> None:
        self._metadata: tuple[Metadata, ...] = tuple(metadata)
        # Later duplicates win.
        self._toggles: dict[str, Toggle] = {
            md.id: fractional(md.id, md.fraction) for md in self._metadata
        }

    def __call__(self, id: str) -> Toggle:
        return self._toggles.get(id) or Toggle.undefined()

    def __iter__(self) -> Iterator[Metadata]:
        return iter(self._metadata)

    def __len__(self) -> int:
        return len(self._metadata)

    def __repr__(self) -> str:
        return f"ImmutableToggleMap({len(self._metadata)} toggles)"


class OrElseToggleMap(ToggleMap):
    """
    `first` takes precedence over `second`, per evaluated input.

    Both sides are held by reference and re-queried on every call.
    """

    def __init__(self, first: ToggleMap, second: ToggleMap) -> None:
        self.first = first
        self.second = second

    def __call__(self, id: str) -> Toggle:
        return self.first(id).or_else(self.second(id))

    def __iter__(self) -> Iterator[Metadata]:
        seen: set[str] = set()
        for md in self.first:
            seen.add(md.id)
            yield md
        for md in self.second:
            if md.id not in seen:
                seen.add(md.id)
                yield md

    def __repr__(self) -> str:
        return f"OrElseToggleMap({self.first!r}, {self.second!r})"


def of(*maps: ToggleMap) -> ToggleMap:
    """Chain `maps` left to right; the leftmost has the highest precedence."""
    result: ToggleMap = NullToggleMap
    for m in maps:
        result = result.or_else(m)
    return result
