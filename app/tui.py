from __future__ import annotations

import asyncio
import logging
from functools import partial

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Input, Static, TextArea

from adapters.textual.panel_host import StepOutputs
from app.config import AppSettings
from domain.models import SessionState, TraceRender
from domain.ports.rendering import PanelHost
from domain.services.render_trace import TraceRenderService
from domain.services.session import RecomputeScheduler
from domain.services.viewport import PanelViewport

logger = logging.getLogger(__name__)


class JqvApp(App[None]):
    TITLE = "jqv"

    CSS = """
    Screen { layout: horizontal; }
    #json-input { width: 20%; height: 100%; border: solid $secondary; }
    #right { width: 80%; height: 100%; }
    #filter { height: 3; border: solid $secondary; }
    #step-outputs { height: 1fr; border: solid $primary; }
    #error-output { height: 5; border: solid $error; }
    """

    BINDINGS = [
        Binding("1", "focus_widget('filter')", "Filter", show=False),
        Binding("2", "focus_widget('json-input')", "JSON Input", show=False),
        Binding("3", "focus_widget('step-outputs')", "Step Outputs", show=False),
        Binding("ctrl+s", "submit_input", "Run input", priority=True),
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        session: SessionState,
        renderer: TraceRenderService,
        settings: AppSettings | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or AppSettings()
        self.session = session
        self.renderer = renderer
        self.scheduler = RecomputeScheduler()
        self.viewport = PanelViewport(step_x=self.settings.session.pan_step)
        self.last_render: TraceRender | None = None
        self._refresh_lock = asyncio.Lock()

    def compose(self) -> ComposeResult:
        json_input = TextArea(self.session.input_text, id="json-input", soft_wrap=False)
        json_input.border_title = "JSON Input [2]"
        yield json_input
        with Vertical(id="right"):
            filter_input = Input(value=self.session.filter_text, id="filter")
            filter_input.border_title = "Filter [1]"
            yield filter_input
            outputs = StepOutputs(self.viewport, id="step-outputs")
            outputs.border_title = "Step Outputs [3]"
            yield outputs
            errors = Static("", id="error-output")
            errors.border_title = "Error Output"
            yield errors

    async def on_mount(self) -> None:
        self.query_one("#filter", Input).focus()
        token = self.scheduler.edit()
        await self._debounce_elapsed(token)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.value == self.session.filter_text:
            return
        self.session.edit_filter(event.value)
        self.schedule_recompute()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.session.edit_filter(event.value)
        self.schedule_recompute()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text == self.session.input_text:
            return
        self.session.edit_input(text)
        self.schedule_recompute()

    def action_submit_input(self) -> None:
        self.session.edit_input(self.query_one("#json-input", TextArea).text)
        self.schedule_recompute()

    def action_focus_widget(self, widget_id: str) -> None:
        self.query_one(f"#{widget_id}").focus()

    def schedule_recompute(self) -> int:
        token = self.scheduler.edit()
        delay = self.settings.session.debounce_seconds
        self.set_timer(delay, partial(self._debounce_elapsed, token))
        return token

    async def _debounce_elapsed(self, token: int) -> None:
        if not self.scheduler.debounce_elapsed(token):
            return
        await self.refresh_trace(token)

    async def refresh_trace(self, token: int) -> None:
        # One refresh at a time; runs superseded while waiting are dropped.
        async with self._refresh_lock:
            if self.scheduler.is_stale(token):
                return
            result = self.renderer.render(self.session.filter_text, self.session.input_text)
            outputs: PanelHost = self.query_one(StepOutputs)
            self.session.last_error = result.error
            self.query_one("#error-output", Static).update(Text(result.error or ""))
            self.viewport.reset_for(result.plan)
            if result.ok:
                await outputs.replace_panels(result.panels)
            else:
                await outputs.clear_panels()
            if self.scheduler.render_complete(token):
                self.last_render = result
                logger.debug("Rendered %d panels", len(result.panels))
