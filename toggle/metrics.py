from __future__ import annotations

import struct
import threading
from typing import Callable


Gauge = Callable[[], float]


def as_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", float(value)))[0]


def _join(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


class Metrics:
    """
    In-memory stats sink.

    Gauges are callables pulled on read, so the value always reflects the
    state of whatever registered them.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._gauges: dict[str, Gauge] = {}

    def add_gauge(self, name: str, fn: Gauge) -> None:
        with self._lock:
            self._gauges[name] = fn

    def remove_gauge(self, name: str) -> None:
        with self._lock:
            self._gauges.pop(name, None)

    def gauge(self, name: str) -> float:
        fn = self._gauges.get(name)
        if fn is None:
            raise KeyError(name)
        return as_float32(fn())

    def gauge_names(self) -> list[str]:
        return sorted(self._gauges.keys())

    def scope(self, *names: str) -> "ScopedMetrics":
        return ScopedMetrics(self, _join(*names))


class ScopedMetrics:
    """Write-through view of a sink that prefixes every name with `prefix/`."""

    def __init__(self, sink: "Metrics | ScopedMetrics", prefix: str) -> None:
        self._sink = sink
        self._prefix = prefix

    def _name(self, name: str) -> str:
        return _join(self._prefix, name)

    def add_gauge(self, name: str, fn: Gauge) -> None:
        self._sink.add_gauge(self._name(name), fn)

    def remove_gauge(self, name: str) -> None:
        self._sink.remove_gauge(self._name(name))

    def gauge(self, name: str) -> float:
        return self._sink.gauge(self._name(name))

    def scope(self, *names: str) -> "ScopedMetrics":
        return ScopedMetrics(self, _join(*names))
