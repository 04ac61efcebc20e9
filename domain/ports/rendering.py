from __future__ import annotations

from typing import Protocol, Sequence

from domain.models import RenderedPanel


class Highlighter(Protocol):
    def __call__(self, text: str) -> str: ...


class PanelHost(Protocol):
    async def replace_panels(self, panels: Sequence[RenderedPanel]) -> None: ...

    async def clear_panels(self) -> None: ...
