from __future__ import annotations

import hashlib

from .toggle import Toggle


_MANTISSA_BITS = 53
_SCALE = float(1 << _MANTISSA_BITS)


def bucket(id: str, x: int) -> float:
    """
    Deterministic position of input `x` for toggle `id`, uniform on [0.0, 1.0).

    The top 53 bits of a SHA-256 digest are used so the division is exact in
    a double and never rounds up to 1.0. sha256 is stable across processes
    (unlike `hash()`, which is salted by PYTHONHASHSEED).
    """
    seed = f"{id}|{int(x)}".encode("utf-8", errors="replace")
    h = int.from_bytes(hashlib.sha256(seed).digest()[:8], "big")
    return (h >> (64 - _MANTISSA_BITS)) / _SCALE


def fractional(id: str, fraction: float) -> Toggle:
    # Caller has already checked 0.0 <= fraction <= 1.0.
    f = float(fraction)
    if f <= 0.0:
        return Toggle.off(id)
    if f >= 1.0:
        return Toggle.on(id)

    def _decide(x: int) -> bool:
        return bucket(id, x) < f

    return Toggle(id, defined_at=_always, decide=_decide)


def _always(_x: int) -> bool:
    return True
