"""Field coercion helpers used by the record mappers.

Every helper accepts ``None`` and returns ``None`` for values it cannot
interpret, so a missing or malformed field always becomes a null cell.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional


def lookup(source: Optional[Mapping[str, Any]], *path: str) -> Any:
    """Return the value at ``path`` inside nested mappings, or ``None``."""

    current: Any = source
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return str(value)


def integer(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or not value.is_integer():
            return None
        return int(value)

    value_str = str(value).strip()
    if not value_str:
        return None
    try:
        return int(value_str)
    except ValueError:
        parsed = number(value_str)
        if parsed is not None and parsed.is_integer():
            return int(parsed)
        return None


def number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        try:
            parsed = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(parsed):
        return None
    return parsed


def flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"true", "1", "yes"}:
        return True
    if normalized in {"false", "0", "no"}:
        return False
    return None


def instant(value: Any) -> Any:
    """Pass a timestamp through untouched; blank values become ``None``."""

    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def joined(values: Iterable[Any], separator: str = ", ") -> Optional[str]:
    """Join the non-null values of ``values``; ``None`` when nothing remains."""

    parts = [str(value) for value in values if value is not None]
    if not parts:
        return None
    return separator.join(parts)


def as_list(value: Any) -> list:
    """Normalise a single mapping or a sequence of mappings into a list."""

    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    return list(value)
