from __future__ import annotations

import asyncio

from textual.widgets import Input

from adapters.textual.panel_host import StepOutputs, TracePanel
from app.config import AppSettings
from app.tui import JqvApp
from app.wiring import build_render_service
from domain.models import SessionState
from domain.services.session import RecomputeState


def _app(settings: AppSettings, filter_text: str, input_text: str) -> JqvApp:
    session = SessionState(filter_text=filter_text, input_text=input_text)
    return JqvApp(session, build_render_service(settings), settings)


def test_initial_render_mounts_one_panel_per_step(app_settings: AppSettings) -> None:
    async def scenario() -> None:
        app = _app(app_settings, ".a | .b", '{"a": {"b": 5}}')
        async with app.run_test() as pilot:
            await pilot.pause()
            outputs = app.query_one(StepOutputs)
            panels = outputs.panels
            assert [panel.placement.depth for panel in panels] == [1, 2]
            assert panels[1].content_markup == "[yellow]5[/yellow]"
            assert app.session.last_error is None
            assert not app.session.filter_changed

    asyncio.run(scenario())


def test_evaluation_error_clears_panels(app_settings: AppSettings) -> None:
    async def scenario() -> None:
        app = _app(app_settings, ".", '{"a": ')
        async with app.run_test() as pilot:
            await pilot.pause()
            assert list(app.query(TracePanel)) == []
            assert app.last_render is not None
            assert not app.last_render.ok
            assert "Invalid JSON input" in (app.session.last_error or "")

    asyncio.run(scenario())


def test_filter_edit_recomputes_trace(app_settings: AppSettings) -> None:
    async def scenario() -> None:
        app = _app(app_settings, ".", "[1, 2, 3]")
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one("#filter", Input).value = ".[] | select(. > 1)"
            await pilot.pause(0.2)
            panels = app.query_one(StepOutputs).panels
            assert [panel.placement.text for panel in panels] == ["1", "2", "3", "2", "3"]
            assert app.session.filter_changed
            assert app.session.filter_text == ".[] | select(. > 1)"

    asyncio.run(scenario())


def test_arrow_keys_pan_the_step_outputs(app_settings: AppSettings) -> None:
    async def scenario() -> None:
        app = _app(app_settings, ".[]", "[1, 2]")
        async with app.run_test() as pilot:
            await pilot.pause()
            outputs = app.query_one(StepOutputs)
            outputs.focus()
            await pilot.pause()
            start = app.viewport.offset_x
            await pilot.press("right", "right", "down")
            assert app.viewport.offset_x == start + 10
            assert app.viewport.offset_y == 1
            first = outputs.panels[0]
            assert first.styles.offset.x.value == first.placement.origin.x - start - 10

    asyncio.run(scenario())


def test_overlapping_refreshes_leave_only_the_latest_panels(app_settings: AppSettings) -> None:
    async def scenario() -> None:
        app = _app(app_settings, ".a | .b", '{"a": {"b": 5}}')
        async with app.run_test() as pilot:
            await pilot.pause()
            first = app.scheduler.edit()
            app.scheduler.debounce_elapsed(first)
            running = asyncio.create_task(app.refresh_trace(first))
            await asyncio.sleep(0)
            second = app.scheduler.edit()
            assert app.scheduler.debounce_elapsed(second)
            await asyncio.gather(running, app.refresh_trace(second))
            await pilot.pause()
            assert len(app.query_one(StepOutputs).panels) == 2
            assert app.scheduler.state is RecomputeState.IDLE

    asyncio.run(scenario())


def test_refresh_for_a_superseded_edit_is_skipped(app_settings: AppSettings) -> None:
    async def scenario() -> None:
        app = _app(app_settings, ".", "[1]")
        async with app.run_test() as pilot:
            await pilot.pause()
            rendered = app.last_render
            stale = app.scheduler.edit()
            app.scheduler.debounce_elapsed(stale)
            app.scheduler.edit()
            app.session.edit_filter(".[0]")
            await app.refresh_trace(stale)
            assert app.last_render is rendered
            assert [panel.placement.text for panel in app.query_one(StepOutputs).panels] == [
                "[\n  1\n]"
            ]

    asyncio.run(scenario())
