from __future__ import annotations

import contextvars
from contextlib import contextmanager
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional, Union

from .fractional import fractional
from .toggle import LiveToggle, Toggle
from .toggle_map import ToggleMap
from .types import Metadata, is_valid_fraction, is_valid_id


_EMPTY: Mapping[str, float] = MappingProxyType({})


def _freeze(mapping: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType({str(k): v for k, v in mapping.items()})


class Overrides:
    """
    Scoped id -> fraction overrides.

    Scopes nest and are local to the current thread / asyncio task. Leaving
    a scope (normally or by exception) restores exactly the mapping that was
    visible before it. Outside of any scope the process-wide default from
    `set_global` applies.

        with overrides.let("com.example.fast_path", 1.0):
            ...
        with overrides.let_clear("com.example.fast_path"):
            ...
    """

    def __init__(self, name: str = "toggle.overrides") -> None:
        self._var: contextvars.ContextVar[Optional[Mapping[str, float]]] = (
            contextvars.ContextVar(name, default=None)
        )
        self._global: Mapping[str, float] = _EMPTY

    def snapshot(self) -> Mapping[str, float]:
        scoped = self._var.get()
        return self._global if scoped is None else scoped

    def set_global(self, mapping: Mapping[str, float]) -> None:
        self._global = _freeze(mapping)

    @contextmanager
    def _install(
        self, build: Callable[[Mapping[str, float]], Mapping[str, float]]
    ) -> Iterator[None]:
        # `build` sees the overrides visible when the scope is entered.
        token = self._var.set(_freeze(build(self.snapshot())))
        try:
            yield
        finally:
            self._var.reset(token)

    def let(
        self, mapping_or_id: Union[Mapping[str, float], str], fraction: Optional[float] = None
    ):
        """
        `let(mapping)` replaces the visible overrides for the scope;
        `let(id, fraction)` sets one id on top of the current overrides.
        """
        if isinstance(mapping_or_id, str):
            if fraction is None:
                raise TypeError("let(id, fraction) requires a fraction")
            id = mapping_or_id
            return self._install(lambda current: {**current, id: fraction})
        mapping = mapping_or_id
        return self._install(lambda _current: mapping)

    def let_clear(self, id: str):
        return self._install(
            lambda current: {k: v for k, v in current.items() if k != id}
        )


overrides = Overrides()


@lru_cache(maxsize=1024)
def _toggle_for(id: str, fraction: float) -> Toggle:
    return fractional(id, fraction)


def _valid(id: object, fraction: object) -> bool:
    return isinstance(id, str) and is_valid_id(id) and is_valid_fraction(fraction)


class FlagsToggleMap(ToggleMap):
    """
    Toggles read from the scoped `Overrides` store on every access.

    Entries with out-of-range fractions (or malformed ids) are silently
    skipped: they are not enumerated and their toggles are undefined.
    """

    source = "flags"

    def __init__(self, store: Optional[Overrides] = None) -> None:
        self._store = overrides if store is None else store

    def _current(self, id: str) -> Optional[Toggle]:
        fraction = self._store.snapshot().get(id)
        if fraction is None or not _valid(id, fraction):
            return None
        return _toggle_for(id, float(fraction))

    def __call__(self, id: str) -> Toggle:
        return LiveToggle(id, lambda: self._current(id))

    def __iter__(self) -> Iterator[Metadata]:
        snapshot = self._store.snapshot()
        return iter(
            [
                Metadata(id=id, fraction=float(fraction), source=self.source)
                for id, fraction in snapshot.items()
                if _valid(id, fraction)
            ]
        )

    def __repr__(self) -> str:
        return "FlagsToggleMap"
