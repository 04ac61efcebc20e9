from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from domain.errors import LayoutError
from domain.models import PanelPlacement, Point, Size, TraceLayoutPlan, TraceNode
from domain.ports.layout import TraceLayoutEngine
from domain.services.trace_arena import TraceArena, build_trace_arena
from domain.services.trace_metrics import ContentMetrics, measure_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceLayoutConfig:
    wrap_width: int = 50
    spacing: int = 1
    gutter: int = 4
    width_padding: int = 3
    border_rows: int = 2
    label_margin: int = 4

    def __post_init__(self) -> None:
        if self.wrap_width < 1:
            msg = f"wrap_width must be positive, got {self.wrap_width}"
            raise LayoutError(msg)
        for name in ("spacing", "gutter", "width_padding", "border_rows", "label_margin"):
            if getattr(self, name) < 0:
                msg = f"{name} must not be negative, got {getattr(self, name)}"
                raise LayoutError(msg)


class TraceTreeLayoutEngine(TraceLayoutEngine):
    """Column-per-depth layout for trace trees.

    Every depth shares one column width, each node is as tall as its own
    content or its stacked children (whichever is larger), and siblings are
    stacked top to bottom in evaluation order.
    """

    def __init__(self, config: TraceLayoutConfig | None = None) -> None:
        self.config = config or TraceLayoutConfig()

    def build_plan(
        self,
        root: TraceNode,
        pretty_print: Callable[[object], str],
        fallback_label: Optional[str] = None,
    ) -> TraceLayoutPlan:
        arena = build_trace_arena(root)
        texts = [pretty_print(node.output) for node in arena.nodes]
        metrics = [
            measure_content(
                text,
                wrap_width=self.config.wrap_width,
                padding=self.config.width_padding,
                border_rows=self.config.border_rows,
            )
            for text in texts
        ]

        level_widths = self._resolve_level_widths(arena, metrics)
        heights = self._resolve_heights(arena, metrics)
        tops = self._assign_tops(arena, heights)
        level_offsets = self._resolve_level_offsets(level_widths)

        panels: List[PanelPlacement] = []
        for depth, level in enumerate(arena.levels):
            if depth == 0:
                continue
            width = level_widths[depth]
            for node_id in level:
                node = arena.nodes[node_id]
                panels.append(
                    PanelPlacement(
                        node_id=node_id,
                        depth=depth,
                        origin=Point(level_offsets[depth], tops[node_id]),
                        size=Size(width, heights[node_id]),
                        label=self._panel_label(node, fallback_label, width),
                        text=texts[node_id],
                    )
                )

        logger.debug(
            "Laid out %d trace nodes over %d levels (%d panels)",
            len(arena),
            len(arena.levels),
            len(panels),
        )
        return TraceLayoutPlan(
            panels=panels,
            level_widths=level_widths,
            level_offsets=level_offsets,
            heights=heights,
            tops=tops,
            depths=list(arena.depths),
            levels=[list(level) for level in arena.levels],
        )

    def _resolve_level_widths(self, arena: TraceArena, metrics: List[ContentMetrics]) -> List[int]:
        widths = [0] * len(arena.levels)
        for node_id, depth in enumerate(arena.depths):
            widths[depth] = max(widths[depth], metrics[node_id].width)
        return widths

    def _resolve_heights(self, arena: TraceArena, metrics: List[ContentMetrics]) -> List[int]:
        spacing = self.config.spacing
        heights = [0] * len(arena)
        # Children always have larger ids than their parent.
        for node_id in reversed(range(len(arena))):
            own_height = metrics[node_id].height
            child_ids = arena.children[node_id]
            if not child_ids:
                heights[node_id] = own_height
                continue
            stacked = sum(heights[child_id] + spacing for child_id in child_ids) - spacing
            heights[node_id] = max(own_height, stacked)
        return heights

    def _assign_tops(self, arena: TraceArena, heights: List[int]) -> List[int]:
        spacing = self.config.spacing
        tops = [0] * len(arena)
        for node_id in range(len(arena)):
            cursor = tops[node_id]
            for child_id in arena.children[node_id]:
                tops[child_id] = cursor
                cursor += heights[child_id] + spacing
        return tops

    def _resolve_level_offsets(self, level_widths: List[int]) -> List[int]:
        offsets: List[int] = []
        x_offset = 0
        for width in level_widths:
            offsets.append(x_offset)
            x_offset += width + self.config.gutter
        return offsets

    def _panel_label(self, node: TraceNode, fallback_label: Optional[str], width: int) -> str:
        label = node.label if node.label is not None else (fallback_label or "")
        return label[: max(0, width - self.config.label_margin)]
