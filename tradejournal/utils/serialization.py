"""JSON-safe conversion of analytics results."""

import math
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any


def safe_float(v: float | None) -> float | None:
    """Return None for inf/nan so JSON serialization doesn't blow up."""
    if v is None:
        return None
    if math.isinf(v) or math.isnan(v):
        return None
    return v


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses/enums and sanitize non-finite floats."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return safe_float(value)
    return value
