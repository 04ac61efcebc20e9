from __future__ import annotations

import re
from typing import Any, List, NamedTuple

from adapters.jq.errors import JqSyntaxError

NUMBER = "NUMBER"
STRING = "STRING"
IDENT = "IDENT"
FIELD = "FIELD"
VAR = "VAR"
DOT = "DOT"
RECURSE = "RECURSE"
OP = "OP"
EOF = "EOF"

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+|\#[^\n]*)
    |(?P<number>\d+(?:\.\d*)?(?:[eE][+-]?\d+)?)
    |(?P<string>")
    |(?P<recurse>\.\.)
    |(?P<field>\.[A-Za-z_][A-Za-z0-9_]*)
    |(?P<dot>\.)
    |(?P<var>\$[A-Za-z_][A-Za-z0-9_]*)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>==|!=|<=|>=|//|[|,+\-*/%<>()\[\]{}:;?])
    """,
    re.VERBOSE,
)

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class Token(NamedTuple):
    kind: str
    value: Any
    start: int
    end: int


def _read_string(source: str, start: int) -> Token:
    chars: List[str] = []
    pos = start + 1
    while pos < len(source):
        char = source[pos]
        if char == '"':
            return Token(STRING, "".join(chars), start, pos + 1)
        if char != "\\":
            chars.append(char)
            pos += 1
            continue
        escape = source[pos + 1 : pos + 2]
        if escape in _ESCAPES:
            chars.append(_ESCAPES[escape])
            pos += 2
        elif escape == "u":
            digits = source[pos + 2 : pos + 6]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                msg = f"syntax error: invalid \\u escape at position {pos}"
                raise JqSyntaxError(msg)
            chars.append(chr(int(digits, 16)))
            pos += 6
        elif escape == "(":
            msg = f"syntax error: string interpolation is not supported (position {pos})"
            raise JqSyntaxError(msg)
        else:
            msg = f"syntax error: invalid escape at position {pos}"
            raise JqSyntaxError(msg)
    msg = f"syntax error: unterminated string starting at position {start}"
    raise JqSyntaxError(msg)


def _number(text: str) -> int | float:
    if any(c in text for c in ".eE"):
        value = float(text)
        return int(value) if value.is_integer() and abs(value) < 2**53 else value
    return int(text)


def tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            msg = f"syntax error: unexpected character {source[pos]!r} at position {pos}"
            raise JqSyntaxError(msg)
        kind = match.lastgroup
        text = match.group()
        if kind == "string":
            token = _read_string(source, pos)
            tokens.append(token)
            pos = token.end
            continue
        if kind == "number":
            tokens.append(Token(NUMBER, _number(text), pos, match.end()))
        elif kind == "recurse":
            tokens.append(Token(RECURSE, text, pos, match.end()))
        elif kind == "field":
            tokens.append(Token(FIELD, text[1:], pos, match.end()))
        elif kind == "dot":
            tokens.append(Token(DOT, text, pos, match.end()))
        elif kind == "var":
            tokens.append(Token(VAR, text[1:], pos, match.end()))
        elif kind == "ident":
            tokens.append(Token(IDENT, text, pos, match.end()))
        elif kind == "op":
            tokens.append(Token(OP, text, pos, match.end()))
        pos = match.end()
    tokens.append(Token(EOF, None, len(source), len(source)))
    return tokens
