from __future__ import annotations

import math
from dataclasses import dataclass

from rich.cells import cell_len

WIDTH_PADDING = 3
BORDER_ROWS = 2
WRAP_WIDTH = 50


@dataclass(frozen=True)
class ContentMetrics:
    width: int
    height: int


def line_columns(line: str) -> int:
    columns = 0
    for char in line:
        columns += 1 if char == " " else cell_len(char)
    return columns


def content_width(text: str, padding: int = WIDTH_PADDING) -> int:
    widest = max((line_columns(line) for line in str(text).split("\n")), default=0)
    return widest + padding


def content_height(text: str, wrap_width: int = WRAP_WIDTH, border_rows: int = BORDER_ROWS) -> int:
    # Wrapping uses a fixed nominal width, not the resolved column width.
    rows = 0
    for line in str(text).split("\n"):
        rows += max(1, math.ceil(len(line) / wrap_width))
    return rows + border_rows


def measure_content(
    text: str,
    wrap_width: int = WRAP_WIDTH,
    padding: int = WIDTH_PADDING,
    border_rows: int = BORDER_ROWS,
) -> ContentMetrics:
    return ContentMetrics(
        width=content_width(text, padding=padding),
        height=content_height(text, wrap_width=wrap_width, border_rows=border_rows),
    )
