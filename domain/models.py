from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True, eq=False)
class TraceNode:
    """One step of a filter run.

    Nodes compare by identity: two steps with the same output and label are
    still distinct panels.
    """

    output: Any
    label: Optional[str] = None
    children: Tuple[TraceNode, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Size:
    width: int
    height: int


@dataclass(frozen=True)
class PanelPlacement:
    node_id: int
    depth: int
    origin: Point
    size: Size
    label: str
    text: str


@dataclass(frozen=True)
class TraceLayoutPlan:
    panels: List[PanelPlacement]
    level_widths: List[int]
    level_offsets: List[int]
    heights: List[int]
    tops: List[int]
    depths: List[int]
    levels: List[List[int]]

    @property
    def node_count(self) -> int:
        return len(self.depths)


@dataclass
class SessionState:
    filter_text: str
    input_text: str
    filter_changed: bool = False
    input_changed: bool = False
    last_error: Optional[str] = None

    def edit_filter(self, text: str) -> None:
        self.filter_text = text
        self.filter_changed = True

    def edit_input(self, text: str) -> None:
        self.input_text = text
        self.input_changed = True


@dataclass(frozen=True)
class RenderedPanel:
    placement: PanelPlacement
    markup: str


@dataclass(frozen=True)
class TraceRender:
    plan: Optional[TraceLayoutPlan]
    panels: List[RenderedPanel]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
