from __future__ import annotations

from typing import List, Sequence

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.widgets import Static

from domain.models import PanelPlacement, RenderedPanel
from domain.services.viewport import PanelViewport


class TracePanel(VerticalScroll):
    DEFAULT_CSS = """
    TracePanel {
        position: absolute;
        border: solid $primary;
        padding: 0;
        scrollbar-size: 1 1;
    }
    TracePanel > Static {
        width: 100%;
    }
    """

    def __init__(self, panel: RenderedPanel) -> None:
        super().__init__()
        self.placement: PanelPlacement = panel.placement
        self.content_markup = panel.markup
        self.border_title = escape(panel.placement.label)
        self.styles.width = panel.placement.size.width
        self.styles.height = panel.placement.size.height

    def compose(self) -> ComposeResult:
        yield Static(Text.from_markup(self.content_markup))


class StepOutputs(Container, can_focus=True):
    """Scrollable area holding one panel per trace step."""

    BINDINGS = [
        Binding("left", "pan(-1, 0)", "Scroll left", show=False),
        Binding("right", "pan(1, 0)", "Scroll right", show=False),
        Binding("up", "pan(0, -1)", "Scroll up", show=False),
        Binding("down", "pan(0, 1)", "Scroll down", show=False),
    ]

    DEFAULT_CSS = """
    StepOutputs {
        overflow: hidden hidden;
    }
    """

    def __init__(self, viewport: PanelViewport | None = None, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.viewport = viewport or PanelViewport()

    @property
    def panels(self) -> List[TracePanel]:
        return list(self.query(TracePanel))

    async def replace_panels(self, panels: Sequence[RenderedPanel]) -> None:
        await self.remove_children()
        widgets = [TracePanel(panel) for panel in panels]
        for widget in widgets:
            self._place(widget)
        if widgets:
            await self.mount_all(widgets)

    async def clear_panels(self) -> None:
        await self.remove_children()

    def action_pan(self, columns: int, rows: int) -> None:
        self.viewport.pan(columns=columns, rows=rows)
        for widget in self.panels:
            self._place(widget)

    def _place(self, widget: TracePanel) -> None:
        origin = self.viewport.to_screen(widget.placement.origin)
        widget.styles.offset = (origin.x, origin.y)
