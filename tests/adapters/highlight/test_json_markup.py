from __future__ import annotations

import pytest
from pygments.token import Keyword, Name, Number, Punctuation, String, Whitespace
from rich.text import Text

from adapters.filesystem.json_utils import pretty_print
from adapters.highlight.json_markup import (
    CATEGORY_STYLES,
    TokenCategory,
    classify,
    highlight_json,
    markup_token,
)


@pytest.mark.parametrize(
    ("token_type", "expected"),
    [
        (Name.Tag, TokenCategory.ATTRIBUTE_KEY),
        (String.Double, TokenCategory.STRING),
        (Number.Integer, TokenCategory.NUMBER),
        (Number.Float, TokenCategory.NUMBER),
        (Keyword.Constant, TokenCategory.LITERAL),
        (Punctuation, TokenCategory.OTHER),
        (Whitespace, TokenCategory.OTHER),
    ],
)
def test_classify_maps_every_category(token_type, expected) -> None:
    assert classify(token_type) is expected


def test_every_category_has_a_style_entry() -> None:
    assert set(CATEGORY_STYLES) == set(TokenCategory)


def test_other_tokens_are_left_unstyled() -> None:
    assert markup_token(TokenCategory.OTHER, "{") == "{"
    assert markup_token(TokenCategory.NUMBER, "3") == "[yellow]3[/yellow]"


def test_highlight_colours_each_kind() -> None:
    markup = highlight_json(pretty_print({"name": "jq", "n": 1.5, "ok": False, "none": None}))

    assert '[blue]"name"[/blue]' in markup
    assert '[green]"jq"[/green]' in markup
    assert "[yellow]1.5[/yellow]" in markup
    assert "[cyan]false[/cyan]" in markup
    assert "[cyan]null[/cyan]" in markup


def test_markup_renders_back_to_source_text() -> None:
    source = pretty_print({"list": [1, "two", [True]], "nested": {"x": None}})

    rendered = Text.from_markup(highlight_json(source))

    assert rendered.plain == source
    assert rendered.plain.count("\n") == source.count("\n")


def test_square_brackets_in_strings_are_escaped() -> None:
    source = pretty_print(["[bold]not markup[/bold]"])

    rendered = Text.from_markup(highlight_json(source))

    assert rendered.plain == source
