from __future__ import annotations

from typing import List, Optional, Tuple

from adapters.jq import nodes
from adapters.jq.builtins import BUILTINS
from adapters.jq.errors import JqSyntaxError
from adapters.jq.lexer import (
    DOT,
    EOF,
    FIELD,
    IDENT,
    NUMBER,
    OP,
    RECURSE,
    STRING,
    VAR,
    Token,
    tokenize,
)

COMPARISON_OPS = {"==", "!=", "<", "<=", ">", ">="}
KEYWORDS = {"if", "then", "elif", "else", "end", "and", "or"}


class Parser:
    """Recursive-descent parser for the supported jq subset.

    Precedence from loosest to tightest: ``|``, ``,``, ``//``, ``or``,
    ``and``, comparisons, ``+ -``, ``* / %``, postfix suffixes.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens = tokenize(source)
        self.pos = 0

    def parse(self) -> nodes.Node:
        if self._peek().kind == EOF:
            return nodes.Identity((0, 0))
        node = self._parse_pipe()
        token = self._peek()
        if token.kind != EOF:
            raise self._error(token)
        return node

    def text_of(self, node: nodes.Node) -> str:
        start, end = node.span
        return self.source[start:end].strip()

    def _peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def _advance(self) -> Token:
        token = self._peek()
        self.pos += 1
        return token

    def _match(self, kind: str, value: Optional[str] = None) -> Optional[Token]:
        token = self._peek()
        if token.kind == kind and (value is None or token.value == value):
            return self._advance()
        return None

    def _expect(self, kind: str, value: Optional[str] = None) -> Token:
        token = self._match(kind, value)
        if token is None:
            raise self._error(self._peek(), expected=value or kind)
        return token

    def _error(self, token: Token, expected: Optional[str] = None) -> JqSyntaxError:
        if token.kind == EOF:
            found = "end of program"
        else:
            found = repr(self.source[token.start : token.end])
        msg = f"syntax error: unexpected {found} at position {token.start}"
        if expected:
            msg = f"{msg}, expected {expected!r}"
        return JqSyntaxError(msg)

    def _parse_pipe(self) -> nodes.Node:
        left = self._parse_comma()
        if self._match(OP, "|"):
            right = self._parse_pipe()
            return nodes.Pipe((left.span[0], right.span[1]), left, right)
        return left

    def _parse_comma(self) -> nodes.Node:
        left = self._parse_alternative()
        while self._match(OP, ","):
            right = self._parse_alternative()
            left = nodes.Comma((left.span[0], right.span[1]), left, right)
        return left

    def _parse_alternative(self) -> nodes.Node:
        left = self._parse_or()
        if self._match(OP, "//"):
            right = self._parse_alternative()
            return nodes.Alternative((left.span[0], right.span[1]), left, right)
        return left

    def _parse_or(self) -> nodes.Node:
        left = self._parse_and()
        while self._match(IDENT, "or"):
            right = self._parse_and()
            left = nodes.BoolOp((left.span[0], right.span[1]), "or", left, right)
        return left

    def _parse_and(self) -> nodes.Node:
        left = self._parse_comparison()
        while self._match(IDENT, "and"):
            right = self._parse_comparison()
            left = nodes.BoolOp((left.span[0], right.span[1]), "and", left, right)
        return left

    def _parse_comparison(self) -> nodes.Node:
        left = self._parse_additive()
        token = self._peek()
        if token.kind == OP and token.value in COMPARISON_OPS:
            self._advance()
            right = self._parse_additive()
            return nodes.BinaryOp((left.span[0], right.span[1]), token.value, left, right)
        return left

    def _parse_additive(self) -> nodes.Node:
        left = self._parse_multiplicative()
        while self._peek().kind == OP and self._peek().value in ("+", "-"):
            op = self._advance().value
            right = self._parse_multiplicative()
            left = nodes.BinaryOp((left.span[0], right.span[1]), op, left, right)
        return left

    def _parse_multiplicative(self) -> nodes.Node:
        left = self._parse_postfix()
        while self._peek().kind == OP and self._peek().value in ("*", "/", "%"):
            op = self._advance().value
            right = self._parse_postfix()
            left = nodes.BinaryOp((left.span[0], right.span[1]), op, left, right)
        return left

    def _parse_postfix(self) -> nodes.Node:
        node = self._parse_primary()
        while True:
            token = self._peek()
            start = node.span[0]
            if token.kind == FIELD:
                self._advance()
                node = nodes.Field((start, token.end), node, token.value)
            elif token.kind == DOT and self._peek(1).kind == STRING:
                self._advance()
                name = self._advance()
                node = nodes.Field((start, name.end), node, name.value)
            elif token.kind == DOT and self._peek(1).kind == OP and self._peek(1).value == "[":
                self._advance()
            elif token.kind == OP and token.value == "[":
                self._advance()
                node = self._parse_bracket_suffix(node)
            elif token.kind == OP and token.value == "?":
                self._advance()
                node = nodes.Try((start, token.end), node)
            else:
                return node

    def _parse_bracket_suffix(self, target: nodes.Node) -> nodes.Node:
        start = target.span[0]
        closing = self._match(OP, "]")
        if closing:
            return nodes.Iterate((start, closing.end), target)
        if self._match(OP, ":"):
            stop = self._parse_pipe()
            closing = self._expect(OP, "]")
            return nodes.Slice((start, closing.end), target, None, stop)
        index = self._parse_pipe()
        if self._match(OP, ":"):
            stop: Optional[nodes.Node] = None
            if self._peek().kind != OP or self._peek().value != "]":
                stop = self._parse_pipe()
            closing = self._expect(OP, "]")
            return nodes.Slice((start, closing.end), target, index, stop)
        closing = self._expect(OP, "]")
        return nodes.Index((start, closing.end), target, index)

    def _parse_primary(self) -> nodes.Node:
        token = self._advance()
        span = (token.start, token.end)
        if token.kind == NUMBER or token.kind == STRING:
            return nodes.Literal(span, token.value)
        if token.kind == FIELD:
            return nodes.Field(span, nodes.Identity((token.start, token.start + 1)), token.value)
        if token.kind == DOT:
            if self._peek().kind == STRING:
                name = self._advance()
                return nodes.Field((token.start, name.end), nodes.Identity(span), name.value)
            return nodes.Identity(span)
        if token.kind == RECURSE:
            return nodes.Recurse(span)
        if token.kind == VAR:
            msg = f"${token.value} is not defined"
            raise JqSyntaxError(msg)
        if token.kind == OP:
            return self._parse_op_primary(token)
        if token.kind == IDENT:
            return self._parse_ident_primary(token)
        raise self._error(token)

    def _parse_op_primary(self, token: Token) -> nodes.Node:
        if token.value == "(":
            body = self._parse_pipe()
            closing = self._expect(OP, ")")
            return nodes.Group((token.start, closing.end), body)
        if token.value == "[":
            closing = self._match(OP, "]")
            if closing:
                return nodes.ArrayCons((token.start, closing.end), None)
            body = self._parse_pipe()
            closing = self._expect(OP, "]")
            return nodes.ArrayCons((token.start, closing.end), body)
        if token.value == "{":
            return self._parse_object(token)
        if token.value == "-":
            body = self._parse_postfix()
            return nodes.Negate((token.start, body.span[1]), body)
        raise self._error(token)

    def _parse_ident_primary(self, token: Token) -> nodes.Node:
        span = (token.start, token.end)
        name = token.value
        if name in ("true", "false", "null"):
            return nodes.Literal(span, {"true": True, "false": False, "null": None}[name])
        if name == "if":
            return self._parse_if(token)
        if name in KEYWORDS:
            raise self._error(token)
        args: List[nodes.Node] = []
        end = token.end
        if self._match(OP, "("):
            args.append(self._parse_pipe())
            while self._match(OP, ";"):
                args.append(self._parse_pipe())
            end = self._expect(OP, ")").end
        if (name, len(args)) not in BUILTINS:
            msg = f"{name}/{len(args)} is not defined"
            raise JqSyntaxError(msg)
        return nodes.FuncCall((token.start, end), name, tuple(args))

    def _parse_if(self, token: Token) -> nodes.Node:
        condition = self._parse_pipe()
        self._expect(IDENT, "then")
        then_branch = self._parse_pipe()
        elif_branches: List[Tuple[nodes.Node, nodes.Node]] = []
        while self._match(IDENT, "elif"):
            elif_condition = self._parse_pipe()
            self._expect(IDENT, "then")
            elif_branches.append((elif_condition, self._parse_pipe()))
        else_branch: Optional[nodes.Node] = None
        if self._match(IDENT, "else"):
            else_branch = self._parse_pipe()
        end = self._expect(IDENT, "end")
        return nodes.If(
            (token.start, end.end), condition, then_branch, tuple(elif_branches), else_branch
        )

    def _parse_object(self, opening: Token) -> nodes.Node:
        entries: List[nodes.ObjectEntry] = []
        closing = self._match(OP, "}")
        while closing is None:
            entries.append(self._parse_object_entry())
            if self._match(OP, ","):
                continue
            closing = self._expect(OP, "}")
        return nodes.ObjectCons((opening.start, closing.end), tuple(entries))

    def _parse_object_entry(self) -> nodes.ObjectEntry:
        token = self._advance()
        key: str | nodes.Node
        if token.kind in (IDENT, STRING):
            key = token.value
        elif token.kind == OP and token.value == "(":
            key = self._parse_pipe()
            self._expect(OP, ")")
        else:
            raise self._error(token, expected="object key")
        if self._match(OP, ":"):
            return nodes.ObjectEntry(key, self._parse_alternative())
        if not isinstance(key, str):
            raise self._error(self._peek(), expected=":")
        identity = nodes.Identity((token.start, token.start))
        shorthand = nodes.Field((token.start, token.end), identity, key)
        return nodes.ObjectEntry(key, shorthand)


def parse_program(source: str) -> nodes.Node:
    return Parser(source).parse()
