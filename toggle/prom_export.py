from __future__ import annotations

import threading
from typing import Callable

from .metrics import _join, as_float32


def _prom_name(name: str) -> str:
    # Prometheus does not allow '.' or '/' in metric names.
    return (name or "").replace(".", "_").replace("/", "_")


class PromExporter:
    """
    Minimal Prometheus text exporter for pulled gauges.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._gauges: dict[str, Callable[[], float]] = {}

    def add_gauge(self, name: str, fn: Callable[[], float]) -> None:
        key = _prom_name(name)
        with self._lock:
            self._gauges[key] = fn

    def remove_gauge(self, name: str) -> None:
        with self._lock:
            self._gauges.pop(_prom_name(name), None)

    def scope(self, *names: str) -> "_PromScope":
        return _PromScope(self, _join(*names))

    def render(self) -> str:
        with self._lock:
            gauges = dict(self._gauges)

        lines: list[str] = []
        # Pulled outside the lock; a gauge may itself take locks.
        for name in sorted(gauges.keys()):
            lines.append(f"# TYPE {name} gauge")
            lines.append(f"{name} {as_float32(gauges[name]())!r}")

        return "\n".join(lines) + "\n"


class _PromScope:
    def __init__(self, exporter: PromExporter, prefix: str) -> None:
        self._exporter = exporter
        self._prefix = prefix

    def add_gauge(self, name: str, fn: Callable[[], float]) -> None:
        self._exporter.add_gauge(_join(self._prefix, name), fn)

    def remove_gauge(self, name: str) -> None:
        self._exporter.remove_gauge(_join(self._prefix, name))

    def scope(self, *names: str) -> "_PromScope":
        return _PromScope(self._exporter, _join(self._prefix, *names))


GLOBAL_PROM = PromExporter()
