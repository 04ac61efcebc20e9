from __future__ import annotations

import math
from typing import Any, Callable, Tuple

from adapters.filesystem.json_utils import dump_json_compact
from adapters.jq.errors import JqRuntimeError

_MAX_SAFE_INTEGER = 2**53


def type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    msg = f"Unsupported value of type {type(value).__name__}"
    raise JqRuntimeError(msg)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def truthy(value: Any) -> bool:
    return value is not None and value is not False


def normalize_number(value: float | int) -> float | int:
    if isinstance(value, float) and value.is_integer() and abs(value) < _MAX_SAFE_INTEGER:
        return int(value)
    return value


def order_key(value: Any) -> Tuple:
    """Sort key following jq's total order of JSON values."""
    if value is None:
        return (0,)
    if value is False:
        return (1,)
    if value is True:
        return (2,)
    if is_number(value):
        return (3, value)
    if isinstance(value, str):
        return (4, value)
    if isinstance(value, list):
        return (5, tuple(order_key(item) for item in value))
    keys = sorted(value)
    return (6, tuple(keys), tuple(order_key(value[key]) for key in keys))


def values_equal(left: Any, right: Any) -> bool:
    return order_key(left) == order_key(right)


def describe(value: Any) -> str:
    text = dump_json_compact(value)
    if len(text) > 11:
        text = f"{text[:10]}..."
    return f"{type_name(value)} ({text})"


def to_int_index(value: Any, rounding: Callable[[float], int] = math.floor) -> int:
    if isinstance(value, float) and not math.isfinite(value):
        msg = f"Cannot use {describe(value)} as an index"
        raise JqRuntimeError(msg)
    return int(rounding(value))
