from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Tuple

from adapters.filesystem.json_utils import dump_json_compact
from adapters.jq.errors import JqRuntimeError
from adapters.jq.values import describe, is_number, normalize_number, order_key, truthy, type_name

if TYPE_CHECKING:
    from adapters.jq.interpreter import Interpreter
    from adapters.jq.nodes import Node

Builtin = Callable[["Interpreter", Any, Tuple["Node", ...]], Iterator[Any]]

_ENTRY_KEYS = ("key", "k", "name", "Name", "Key", "K")
_ENTRY_VALUES = ("value", "v", "Value", "V")


def _empty(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    return iter(())


def _not(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    yield not truthy(value)


def _length(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if value is None:
        yield 0
    elif is_number(value):
        yield abs(value)
    elif isinstance(value, (str, list, dict)):
        yield len(value)
    else:
        msg = f"{describe(value)} has no length"
        raise JqRuntimeError(msg)


def _keys(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if isinstance(value, dict):
        yield sorted(value)
    elif isinstance(value, list):
        yield list(range(len(value)))
    else:
        msg = f"{describe(value)} has no keys"
        raise JqRuntimeError(msg)


def _values(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if value is not None:
        yield value


def _type(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    yield type_name(value)


def _add(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if isinstance(value, dict):
        items = list(value.values())
    elif isinstance(value, list):
        items = value
    elif value is None:
        items = []
    else:
        msg = f"Cannot iterate over {describe(value)}"
        raise JqRuntimeError(msg)
    total: Any = None
    for item in items:
        total = interp.apply_binary("+", total, item)
    yield total


def _tostring(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    yield value if isinstance(value, str) else dump_json_compact(value)


def _tojson(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    yield dump_json_compact(value)


def _tonumber(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if is_number(value):
        yield value
        return
    if isinstance(value, str):
        try:
            yield normalize_number(float(value)) if any(c in value for c in ".eE") else int(value)
            return
        except ValueError:
            pass
    msg = f"{describe(value)} cannot be parsed as a number"
    raise JqRuntimeError(msg)


def _sort(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if not isinstance(value, list):
        msg = f"{describe(value)} cannot be sorted, as it is not an array"
        raise JqRuntimeError(msg)
    yield sorted(value, key=order_key)


def _reverse(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if value is None:
        yield []
    elif isinstance(value, (str, list)):
        yield value[::-1]
    else:
        msg = f"Cannot reverse {describe(value)}"
        raise JqRuntimeError(msg)


def _first(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    yield interp.index_value(value, 0)


def _last(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    yield interp.index_value(value, -1)


def _to_entries(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if not isinstance(value, dict):
        msg = f"{describe(value)} has no keys"
        raise JqRuntimeError(msg)
    yield [{"key": key, "value": item} for key, item in value.items()]


def _entry_field(entry: Dict[str, Any], names: Tuple[str, ...]) -> Any:
    for name in names:
        if name in entry:
            return entry[name]
    return None


def _from_entries(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    if not isinstance(value, list):
        msg = f"Cannot iterate over {describe(value)}"
        raise JqRuntimeError(msg)
    result: Dict[str, Any] = {}
    for entry in value:
        if not isinstance(entry, dict):
            msg = f"Cannot index {type_name(entry)} with \"key\""
            raise JqRuntimeError(msg)
        key = _entry_field(entry, _ENTRY_KEYS)
        if isinstance(key, bool) or is_number(key):
            key = dump_json_compact(key)
        if not isinstance(key, str):
            msg = f"Object keys must be strings, got {describe(key)}"
            raise JqRuntimeError(msg)
        result[key] = _entry_field(entry, _ENTRY_VALUES)
    yield result


def _map(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    mapped = []
    for item in interp.iterate_value(value):
        mapped.extend(interp.evaluate(args[0], item))
    yield mapped


def _select(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    for condition in interp.evaluate(args[0], value):
        if truthy(condition):
            yield value


def _has(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    for key in interp.evaluate(args[0], value):
        if isinstance(value, dict) and isinstance(key, str):
            yield key in value
        elif isinstance(value, list) and is_number(key):
            yield 0 <= key < len(value)
        else:
            msg = f"Cannot check whether {type_name(value)} has a {type_name(key)} key"
            raise JqRuntimeError(msg)


def _range(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    bounds = [list(interp.evaluate(arg, value)) for arg in args]
    starts, stops = ([0], bounds[0]) if len(bounds) == 1 else (bounds[0], bounds[1])
    for start in starts:
        for stop in stops:
            if not is_number(start) or not is_number(stop):
                msg = "Range bounds must be numeric"
                raise JqRuntimeError(msg)
            current = start
            while current < stop:
                yield current
                current += 1


def _error(interp: Interpreter, value: Any, args: Tuple[Node, ...]) -> Iterator[Any]:
    messages = interp.evaluate(args[0], value) if args else iter((value,))
    for message in messages:
        if not isinstance(message, str):
            message = f"{dump_json_compact(message)} (not a string)"
        raise JqRuntimeError(message)
    return iter(())


BUILTINS: Dict[Tuple[str, int], Builtin] = {
    ("empty", 0): _empty,
    ("not", 0): _not,
    ("length", 0): _length,
    ("keys", 0): _keys,
    ("values", 0): _values,
    ("type", 0): _type,
    ("add", 0): _add,
    ("tostring", 0): _tostring,
    ("tojson", 0): _tojson,
    ("tonumber", 0): _tonumber,
    ("sort", 0): _sort,
    ("reverse", 0): _reverse,
    ("first", 0): _first,
    ("last", 0): _last,
    ("to_entries", 0): _to_entries,
    ("from_entries", 0): _from_entries,
    ("map", 1): _map,
    ("select", 1): _select,
    ("has", 1): _has,
    ("range", 1): _range,
    ("range", 2): _range,
    ("error", 0): _error,
    ("error", 1): _error,
}
