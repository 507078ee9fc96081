from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from .flags import Overrides, overrides
from .types import is_valid_fraction, is_valid_id


logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _getenv_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw


def parse_overrides(raw: str) -> dict[str, float]:
    """
    Parse "id=fraction,id=fraction" pairs. Malformed pairs are skipped.
    """
    out: dict[str, float] = {}
    for part in (raw or "").split(","):
        part = part.strip()
        if not part or "=" not in part:
            continue
        id, _, value = part.partition("=")
        id = id.strip()
        try:
            fraction = float(value.strip())
        except ValueError:
            logger.warning("skipping malformed toggle override %r", part)
            continue
        if not is_valid_id(id) or not is_valid_fraction(fraction):
            logger.warning("skipping invalid toggle override %r", part)
            continue
        out[id] = fraction
    return out


@dataclass(frozen=True, slots=True)
class ToggleConfig:
    # Directory holding "<library_name>.json" service definitions.
    resource_dir: str = "toggles"
    # Process-wide overrides, "id=fraction,id=fraction".
    overrides: str = ""
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "ToggleConfig":
        log_level = _getenv_str("TOGGLE_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in _LOG_LEVELS:
            log_level = "INFO"
        return ToggleConfig(
            resource_dir=_getenv_str("TOGGLE_RESOURCE_DIR", "toggles").strip(),
            overrides=_getenv_str("TOGGLE_OVERRIDES", ""),
            log_level=log_level,
        )


def apply_overrides(config: ToggleConfig, store: Overrides = overrides) -> dict[str, float]:
    parsed = parse_overrides(config.overrides)
    store.set_global(parsed)
    return parsed


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="[%(asctime)s] %(levelname)s %(message)s",
    )
