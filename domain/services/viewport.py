from __future__ import annotations

from dataclasses import dataclass

from domain.models import Point, TraceLayoutPlan


@dataclass
class PanelViewport:
    """Pan offsets for the step outputs area, never negative."""

    step_x: int = 5
    step_y: int = 1
    offset_x: int = 0
    offset_y: int = 0

    def pan(self, columns: int = 0, rows: int = 0) -> None:
        self.offset_x = max(0, self.offset_x + columns * self.step_x)
        self.offset_y = max(0, self.offset_y + rows * self.step_y)

    def reset_for(self, plan: TraceLayoutPlan | None) -> None:
        # The root column stays empty; start at the first rendered depth.
        if plan is not None and len(plan.level_offsets) > 1:
            self.offset_x = plan.level_offsets[1]
        else:
            self.offset_x = 0
        self.offset_y = 0

    def to_screen(self, origin: Point) -> Point:
        return Point(origin.x - self.offset_x, origin.y - self.offset_y)
