from __future__ import annotations

import math
from itertools import product
from typing import Any, Callable, Dict, Iterator, List

from adapters.jq import nodes
from adapters.jq.builtins import BUILTINS
from adapters.jq.errors import JqRuntimeError
from adapters.jq.values import (
    describe,
    is_number,
    normalize_number,
    order_key,
    to_int_index,
    truthy,
    type_name,
    values_equal,
)

Handler = Callable[[Any, Any], Iterator[Any]]

_MAX_REPEAT_LENGTH = 2**28


class Interpreter:
    """Evaluates parsed jq programs as generators of JSON values."""

    def __init__(self) -> None:
        self._handlers: Dict[type, Handler] = {
            nodes.Identity: self._eval_identity,
            nodes.Recurse: self._eval_recurse,
            nodes.Literal: self._eval_literal,
            nodes.Field: self._eval_field,
            nodes.Index: self._eval_index,
            nodes.Slice: self._eval_slice,
            nodes.Iterate: self._eval_iterate,
            nodes.Try: self._eval_try,
            nodes.Group: self._eval_group,
            nodes.Pipe: self._eval_pipe,
            nodes.Comma: self._eval_comma,
            nodes.Alternative: self._eval_alternative,
            nodes.BoolOp: self._eval_bool_op,
            nodes.BinaryOp: self._eval_binary_op,
            nodes.Negate: self._eval_negate,
            nodes.ArrayCons: self._eval_array,
            nodes.ObjectCons: self._eval_object,
            nodes.If: self._eval_if,
            nodes.FuncCall: self._eval_call,
        }

    def evaluate(self, node: nodes.Node, value: Any) -> Iterator[Any]:
        return self._handlers[type(node)](node, value)

    def index_value(self, value: Any, key: Any) -> Any:
        if value is None and (isinstance(key, str) or is_number(key)):
            return None
        if isinstance(value, dict) and isinstance(key, str):
            return value.get(key)
        if isinstance(value, list) and is_number(key):
            position = to_int_index(key)
            if position < 0:
                position += len(value)
            return value[position] if 0 <= position < len(value) else None
        if isinstance(key, str):
            msg = f'Cannot index {type_name(value)} with "{key}"'
        else:
            msg = f"Cannot index {type_name(value)} with {type_name(key)}"
        raise JqRuntimeError(msg)

    def iterate_value(self, value: Any) -> Iterator[Any]:
        if isinstance(value, list):
            return iter(value)
        if isinstance(value, dict):
            return iter(value.values())
        msg = f"Cannot iterate over {describe(value)}"
        raise JqRuntimeError(msg)

    def apply_binary(self, op: str, left: Any, right: Any) -> Any:
        try:
            return self._apply_binary(op, left, right)
        except OverflowError as exc:
            msg = f"{describe(left)} and {describe(right)} overflow with {op}"
            raise JqRuntimeError(msg) from exc

    def _apply_binary(self, op: str, left: Any, right: Any) -> Any:
        if op == "==":
            return values_equal(left, right)
        if op == "!=":
            return not values_equal(left, right)
        if op in ("<", "<=", ">", ">="):
            return _compare(op, order_key(left), order_key(right))
        if op == "+":
            return _add(left, right)
        if op == "-":
            return _subtract(left, right)
        if op == "*":
            return _multiply(left, right)
        if op == "/":
            return _divide(left, right)
        if op == "%":
            return _modulo(left, right)
        msg = f"Unknown operator {op}"
        raise JqRuntimeError(msg)

    def _eval_identity(self, node: nodes.Identity, value: Any) -> Iterator[Any]:
        yield value

    def _eval_recurse(self, node: nodes.Recurse, value: Any) -> Iterator[Any]:
        stack: List[Any] = [value]
        while stack:
            current = stack.pop()
            yield current
            if isinstance(current, list):
                stack.extend(reversed(current))
            elif isinstance(current, dict):
                stack.extend(reversed(list(current.values())))

    def _eval_literal(self, node: nodes.Literal, value: Any) -> Iterator[Any]:
        yield node.value

    def _eval_field(self, node: nodes.Field, value: Any) -> Iterator[Any]:
        for target in self.evaluate(node.target, value):
            yield self.index_value(target, node.name)

    def _eval_index(self, node: nodes.Index, value: Any) -> Iterator[Any]:
        for target in self.evaluate(node.target, value):
            for key in self.evaluate(node.index, value):
                yield self.index_value(target, key)

    def _eval_slice(self, node: nodes.Slice, value: Any) -> Iterator[Any]:
        starts = list(self.evaluate(node.start, value)) if node.start else [None]
        stops = list(self.evaluate(node.stop, value)) if node.stop else [None]
        for target in self.evaluate(node.target, value):
            for stop in stops:
                for start in starts:
                    yield _slice(target, start, stop)

    def _eval_iterate(self, node: nodes.Iterate, value: Any) -> Iterator[Any]:
        for target in self.evaluate(node.target, value):
            yield from self.iterate_value(target)

    def _eval_try(self, node: nodes.Try, value: Any) -> Iterator[Any]:
        try:
            yield from self.evaluate(node.body, value)
        except JqRuntimeError:
            return

    def _eval_group(self, node: nodes.Group, value: Any) -> Iterator[Any]:
        return self.evaluate(node.body, value)

    def _eval_pipe(self, node: nodes.Pipe, value: Any) -> Iterator[Any]:
        for intermediate in self.evaluate(node.left, value):
            yield from self.evaluate(node.right, intermediate)

    def _eval_comma(self, node: nodes.Comma, value: Any) -> Iterator[Any]:
        yield from self.evaluate(node.left, value)
        yield from self.evaluate(node.right, value)

    def _eval_alternative(self, node: nodes.Alternative, value: Any) -> Iterator[Any]:
        found = False
        try:
            for item in self.evaluate(node.left, value):
                if truthy(item):
                    found = True
                    yield item
        except JqRuntimeError:
            pass
        if not found:
            yield from self.evaluate(node.right, value)

    def _eval_bool_op(self, node: nodes.BoolOp, value: Any) -> Iterator[Any]:
        for left in self.evaluate(node.left, value):
            if node.op == "and" and not truthy(left):
                yield False
                continue
            if node.op == "or" and truthy(left):
                yield True
                continue
            for right in self.evaluate(node.right, value):
                yield truthy(right)

    def _eval_binary_op(self, node: nodes.BinaryOp, value: Any) -> Iterator[Any]:
        rights = list(self.evaluate(node.right, value))
        lefts = list(self.evaluate(node.left, value))
        for right in rights:
            for left in lefts:
                yield self.apply_binary(node.op, left, right)

    def _eval_negate(self, node: nodes.Negate, value: Any) -> Iterator[Any]:
        for item in self.evaluate(node.body, value):
            if not is_number(item):
                msg = f"{describe(item)} cannot be negated"
                raise JqRuntimeError(msg)
            yield -item

    def _eval_array(self, node: nodes.ArrayCons, value: Any) -> Iterator[Any]:
        yield list(self.evaluate(node.body, value)) if node.body else []

    def _eval_object(self, node: nodes.ObjectCons, value: Any) -> Iterator[Any]:
        choices: List[List[tuple]] = []
        for entry in node.entries:
            if isinstance(entry.key, str):
                keys = [entry.key]
            else:
                keys = list(self.evaluate(entry.key, value))
            for key in keys:
                if not isinstance(key, str):
                    msg = f"Object keys must be strings, got {describe(key)}"
                    raise JqRuntimeError(msg)
            values = list(self.evaluate(entry.value, value))
            choices.append([(key, item) for key in keys for item in values])
        for combination in product(*choices):
            yield dict(combination)

    def _eval_if(self, node: nodes.If, value: Any) -> Iterator[Any]:
        for condition in self.evaluate(node.condition, value):
            if truthy(condition):
                yield from self.evaluate(node.then_branch, value)
            elif node.elif_branches:
                (elif_condition, elif_branch), *rest = node.elif_branches
                nested = nodes.If(
                    node.span, elif_condition, elif_branch, tuple(rest), node.else_branch
                )
                yield from self.evaluate(nested, value)
            elif node.else_branch is not None:
                yield from self.evaluate(node.else_branch, value)
            else:
                yield value

    def _eval_call(self, node: nodes.FuncCall, value: Any) -> Iterator[Any]:
        builtin = BUILTINS[(node.name, len(node.args))]
        yield from builtin(self, value, node.args)


def _compare(op: str, left: tuple, right: tuple) -> bool:
    if op == "<":
        return left < right
    if op == "<=":
        return left <= right
    if op == ">":
        return left > right
    return left >= right


def _binary_error(left: Any, right: Any, verb: str) -> JqRuntimeError:
    return JqRuntimeError(f"{describe(left)} and {describe(right)} cannot be {verb}")


def _zero_division_error(left: Any, right: Any) -> JqRuntimeError:
    return JqRuntimeError(
        f"{describe(left)} and {describe(right)} cannot be divided because the divisor is zero"
    )


def _add(left: Any, right: Any) -> Any:
    if left is None:
        return right
    if right is None:
        return left
    if is_number(left) and is_number(right):
        return normalize_number(left + right)
    if isinstance(left, str) and isinstance(right, str):
        return left + right
    if isinstance(left, list) and isinstance(right, list):
        return left + right
    if isinstance(left, dict) and isinstance(right, dict):
        return {**left, **right}
    raise _binary_error(left, right, "added")


def _subtract(left: Any, right: Any) -> Any:
    if is_number(left) and is_number(right):
        return normalize_number(left - right)
    if isinstance(left, list) and isinstance(right, list):
        return [item for item in left if not any(values_equal(item, other) for other in right)]
    raise _binary_error(left, right, "subtracted")


def _deep_merge(left: Dict[str, Any], right: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(left)
    for key, item in right.items():
        if isinstance(merged.get(key), dict) and isinstance(item, dict):
            merged[key] = _deep_merge(merged[key], item)
        else:
            merged[key] = item
    return merged


def _multiply(left: Any, right: Any) -> Any:
    if is_number(left) and is_number(right):
        return normalize_number(left * right)
    if isinstance(left, dict) and isinstance(right, dict):
        return _deep_merge(left, right)
    if isinstance(left, str) and is_number(right):
        return _repeat(left, right)
    raise _binary_error(left, right, "multiplied")


def _repeat(text: str, count: float | int) -> Any:
    if math.isnan(count) or count <= 0:
        return None
    if math.isinf(count) or len(text) * count > _MAX_REPEAT_LENGTH:
        msg = "Repeat string result too long"
        raise JqRuntimeError(msg)
    return text * int(count)


def _divide(left: Any, right: Any) -> Any:
    if is_number(left) and is_number(right):
        if right == 0:
            raise _zero_division_error(left, right)
        return normalize_number(left / right)
    if isinstance(left, str) and isinstance(right, str):
        return left.split(right) if right else list(left)
    raise _binary_error(left, right, "divided")


def _modulo(left: Any, right: Any) -> Any:
    if is_number(left) and is_number(right):
        if not (math.isfinite(left) and math.isfinite(right)):
            raise _binary_error(left, right, "divided")
        divisor = int(right)
        if divisor == 0:
            raise _zero_division_error(left, right)
        return int(math.fmod(int(left), divisor))
    raise _binary_error(left, right, "divided")


def _slice(target: Any, start: Any, stop: Any) -> Any:
    if target is None:
        return None
    if not isinstance(target, (list, str)):
        msg = f"Cannot index {type_name(target)} with object"
        raise JqRuntimeError(msg)
    for bound in (start, stop):
        if bound is not None and not is_number(bound):
            msg = "Start and end indices of an array slice must be numbers"
            raise JqRuntimeError(msg)
    lower = None if start is None else to_int_index(start)
    upper = None if stop is None else to_int_index(stop, math.ceil)
    return target[lower:upper]
