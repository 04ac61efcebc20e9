from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pygments.lexers.data import JsonLexer
from pygments.token import Keyword, Name, Number, String, _TokenType
from rich.markup import escape


class TokenCategory(Enum):
    STRING = "string"
    NUMBER = "number"
    LITERAL = "literal"
    ATTRIBUTE_KEY = "attribute_key"
    OTHER = "other"


CATEGORY_STYLES: Dict[TokenCategory, Optional[str]] = {
    TokenCategory.STRING: "green",
    TokenCategory.NUMBER: "yellow",
    TokenCategory.LITERAL: "cyan",
    TokenCategory.ATTRIBUTE_KEY: "blue",
    TokenCategory.OTHER: None,
}

_LEXER = JsonLexer()


def classify(token_type: _TokenType) -> TokenCategory:
    # Name.Tag must be checked before String: JSON keys are quoted strings.
    if token_type in Name.Tag:
        return TokenCategory.ATTRIBUTE_KEY
    if token_type in String:
        return TokenCategory.STRING
    if token_type in Number:
        return TokenCategory.NUMBER
    if token_type in Keyword.Constant:
        return TokenCategory.LITERAL
    return TokenCategory.OTHER


def markup_token(category: TokenCategory, value: str) -> str:
    escaped = escape(value)
    style = CATEGORY_STYLES[category]
    if style is None or not value:
        return escaped
    return f"[{style}]{escaped}[/{style}]"


def highlight_json(text: str) -> str:
    """Color pretty-printed JSON with Rich console markup.

    The result renders back to exactly ``text``; no line breaks are added or
    removed.
    """
    parts: List[str] = []
    for _index, token_type, value in _LEXER.get_tokens_unprocessed(text):
        parts.append(markup_token(classify(token_type), value))
    return "".join(parts)
