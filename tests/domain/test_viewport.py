from __future__ import annotations

from domain.models import Point, TraceLayoutPlan
from domain.services.viewport import PanelViewport


def _plan(level_offsets: list[int]) -> TraceLayoutPlan:
    return TraceLayoutPlan(
        panels=[],
        level_widths=[],
        level_offsets=level_offsets,
        heights=[],
        tops=[],
        depths=[],
        levels=[],
    )


def test_pan_moves_in_steps_and_clamps_at_zero() -> None:
    viewport = PanelViewport(step_x=5, step_y=1)

    viewport.pan(columns=2, rows=3)
    assert (viewport.offset_x, viewport.offset_y) == (10, 3)

    viewport.pan(columns=-5, rows=-1)
    assert (viewport.offset_x, viewport.offset_y) == (0, 2)


def test_to_screen_subtracts_offsets() -> None:
    viewport = PanelViewport(offset_x=7, offset_y=2)

    assert viewport.to_screen(Point(10, 5)) == Point(3, 3)


def test_reset_skips_empty_root_column() -> None:
    viewport = PanelViewport(offset_x=40, offset_y=9)

    viewport.reset_for(_plan([0, 11, 30]))
    assert (viewport.offset_x, viewport.offset_y) == (11, 0)

    viewport.reset_for(_plan([0]))
    assert viewport.offset_x == 0

    viewport.reset_for(None)
    assert viewport.offset_x == 0
