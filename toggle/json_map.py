from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .toggle_map import ImmutableToggleMap
from .types import Metadata


class _JsonToggle(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    fraction: float
    description: Optional[str] = None


class _JsonToggles(BaseModel):
    model_config = ConfigDict(extra="forbid")
    toggles: list[_JsonToggle]


def parse_json(text: Union[str, bytes], source: Optional[str] = None) -> ImmutableToggleMap:
    """
    Parse toggle definitions of the form:

        {"toggles": [
            {"id": "com.example.fast_path", "fraction": 0.1,
             "description": "route 10% of requests to the fast path"}
        ]}

    Raises ValueError for malformed JSON, unknown keys, invalid ids or
    fractions, and duplicate ids.
    """
    try:
        parsed = _JsonToggles.model_validate_json(text)
    except ValidationError as e:
        raise ValueError(f"invalid toggle definitions: {e}") from e

    seen: set[str] = set()
    metadata: list[Metadata] = []
    for t in parsed.toggles:
        if t.id in seen:
            raise ValueError(f"duplicate toggle id: {t.id!r}")
        seen.add(t.id)
        description = (t.description or "").strip() or None
        try:
            metadata.append(
                Metadata(id=t.id, fraction=t.fraction, description=description, source=source)
            )
        except ValidationError as e:
            raise ValueError(f"invalid toggle {t.id!r}: {e}") from e
    return ImmutableToggleMap(metadata)


def load_path(path: Union[str, Path]) -> ImmutableToggleMap:
    p = Path(path)
    if not p.is_file():
        return ImmutableToggleMap(())
    return parse_json(p.read_bytes(), source=str(p))
