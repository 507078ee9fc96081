from __future__ import annotations

from typing import Callable, Optional


class UndefinedToggleError(LookupError):
    pass


DefinedAt = Callable[[int], bool]
Decide = Callable[[int], bool]


class Toggle:
    """
    A partial predicate over integer inputs.

    `is_defined_at(x)` says whether the toggle has an opinion for `x`;
    calling the toggle returns that opinion. "Undefined" and "False" are
    distinct outcomes.

    Subclasses override `evaluate`, which answers both questions from a
    single read of whatever state backs the toggle. `__call__` and
    `apply_or_else` go through it, so a concurrent update can never split
    the defined check from the decision.
    """

    def __init__(self, id: str, *, defined_at: DefinedAt, decide: Decide) -> None:
        self.id = id
        self._defined_at = defined_at
        self._decide = decide

    def evaluate(self, x: int) -> Optional[bool]:
        """The decision for `x`, or None when undefined at `x`."""
        if not self._defined_at(x):
            return None
        return bool(self._decide(x))

    def is_defined_at(self, x: int) -> bool:
        return self.evaluate(x) is not None

    def __call__(self, x: int) -> bool:
        result = self.evaluate(x)
        if result is None:
            raise UndefinedToggleError(f"toggle {self.id!r} is not defined at {x}")
        return result

    def apply_or_else(self, x: int, default: bool) -> bool:
        result = self.evaluate(x)
        return default if result is None else result

    def or_else(self, other: "Toggle") -> "Toggle":
        """
        Per-input precedence: `self` decides wherever it is defined, `other`
        fills in the inputs `self` has no opinion on.
        """
        if other is _UNDEFINED:
            return self
        if self is _UNDEFINED:
            return other
        return OrElseToggle(self, other)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"

    @staticmethod
    def on(id: str) -> "Toggle":
        return Toggle(id, defined_at=_always, decide=_always)

    @staticmethod
    def off(id: str) -> "Toggle":
        return Toggle(id, defined_at=_always, decide=_never)

    @staticmethod
    def undefined() -> "Toggle":
        return _UNDEFINED


class OrElseToggle(Toggle):
    def __init__(self, first: Toggle, second: Toggle) -> None:
        self.first = first
        self.second = second
        self.id = first.id

    def evaluate(self, x: int) -> Optional[bool]:
        result = self.first.evaluate(x)
        return result if result is not None else self.second.evaluate(x)


class LiveToggle(Toggle):
    """
    Resolves the current toggle for `id` on every evaluation.

    `lookup` returns the toggle in force right now, or None when the id is
    currently absent.
    """

    def __init__(self, id: str, lookup: Callable[[], Optional[Toggle]]) -> None:
        self.id = id
        self._lookup = lookup

    def evaluate(self, x: int) -> Optional[bool]:
        current = self._lookup()
        return None if current is None else current.evaluate(x)


def _always(_x: int) -> bool:
    return True


def _never(_x: int) -> bool:
    return False


_UNDEFINED = Toggle("undefined", defined_at=_never, decide=_never)
