from __future__ import annotations

import math
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_ID_RE = re.compile(r"^[A-Za-z0-9_\-]+(\.[A-Za-z0-9_\-]+)*$")


def is_valid_fraction(fraction: float) -> bool:
    # Only real numbers; bools and numeric strings are rejected.
    if isinstance(fraction, bool) or not isinstance(fraction, (int, float)):
        return False
    f = float(fraction)
    if math.isnan(f):
        return False
    return 0.0 <= f <= 1.0


def is_valid_id(id: str) -> bool:
    return isinstance(id, str) and bool(_ID_RE.match(id))


def validate_id(id: str) -> str:
    """
    Ids are dot-separated segments of letters, digits, '_' and '-'.

    Example: "com.example.service.fast_path".
    """
    if not is_valid_id(id):
        raise ValueError(f"invalid toggle id: {id!r}")
    return id


class Metadata(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    id: str = Field(min_length=1)
    fraction: float = Field(ge=0.0, le=1.0)
    description: Optional[str] = None
    source: Optional[str] = None

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        return validate_id(v)
