from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

Span = Tuple[int, int]


@dataclass(frozen=True)
class Identity:
    span: Span


@dataclass(frozen=True)
class Recurse:
    span: Span


@dataclass(frozen=True)
class Literal:
    span: Span
    value: Any


@dataclass(frozen=True)
class Field:
    span: Span
    target: Node
    name: str


@dataclass(frozen=True)
class Index:
    span: Span
    target: Node
    index: Node


@dataclass(frozen=True)
class Slice:
    span: Span
    target: Node
    start: Optional[Node]
    stop: Optional[Node]


@dataclass(frozen=True)
class Iterate:
    span: Span
    target: Node


@dataclass(frozen=True)
class Try:
    span: Span
    body: Node


@dataclass(frozen=True)
class Group:
    span: Span
    body: Node


@dataclass(frozen=True)
class Pipe:
    span: Span
    left: Node
    right: Node


@dataclass(frozen=True)
class Comma:
    span: Span
    left: Node
    right: Node


@dataclass(frozen=True)
class Alternative:
    span: Span
    left: Node
    right: Node


@dataclass(frozen=True)
class BoolOp:
    span: Span
    op: str  # "and" or "or"
    left: Node
    right: Node


@dataclass(frozen=True)
class BinaryOp:
    span: Span
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Negate:
    span: Span
    body: Node


@dataclass(frozen=True)
class ArrayCons:
    span: Span
    body: Optional[Node]


@dataclass(frozen=True)
class ObjectEntry:
    key: Union[str, Node]
    value: Node


@dataclass(frozen=True)
class ObjectCons:
    span: Span
    entries: Tuple[ObjectEntry, ...]


@dataclass(frozen=True)
class If:
    span: Span
    condition: Node
    then_branch: Node
    elif_branches: Tuple[Tuple[Node, Node], ...]
    else_branch: Optional[Node]


@dataclass(frozen=True)
class FuncCall:
    span: Span
    name: str
    args: Tuple[Node, ...]


Node = Union[
    Identity,
    Recurse,
    Literal,
    Field,
    Index,
    Slice,
    Iterate,
    Try,
    Group,
    Pipe,
    Comma,
    Alternative,
    BoolOp,
    BinaryOp,
    Negate,
    ArrayCons,
    ObjectCons,
    If,
    FuncCall,
]
