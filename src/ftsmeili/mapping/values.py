"""
Coercion helpers for untrusted scalar values (request values, raw engine JSON).
"""

import re
from typing import Any, Iterable, List, Optional

_NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")

_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no")


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_scalar_values(values: Iterable[Any]) -> List[Any]:
    """Keep scalars, flattening one level of nested lists."""
    normalized = []
    for value in values:
        if is_scalar(value):
            normalized.append(value)
        elif isinstance(value, (list, tuple)):
            normalized.extend(entry for entry in value if is_scalar(entry))
    return normalized


def is_numeric(value: Any) -> bool:
    """Numbers and numeric strings; booleans are not numeric."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == value and value not in (float("inf"), float("-inf"))
    if isinstance(value, str):
        return _NUMERIC_PATTERN.match(value) is not None
    return False


def to_int(value: Any) -> Optional[int]:
    """Integer value of a numeric input (truncated), None otherwise."""
    if not is_numeric(value):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        return int(float(value))
    except OverflowError:
        return None


def first_int(values: Iterable[Any]) -> Optional[int]:
    for value in values:
        number = to_int(value)
        if number is not None:
            return number
    return None


def to_bool(value: Any) -> Optional[bool]:
    """Accepts booleans, 0/1 and true/false/yes/no strings; None for anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    return None
