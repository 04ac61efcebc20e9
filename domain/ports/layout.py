from __future__ import annotations

from typing import Callable, Optional, Protocol

from domain.models import TraceLayoutPlan, TraceNode


class TraceLayoutEngine(Protocol):
    def build_plan(
        self,
        root: TraceNode,
        pretty_print: Callable[[object], str],
        fallback_label: Optional[str] = None,
    ) -> TraceLayoutPlan:
        ...
