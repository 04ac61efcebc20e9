from __future__ import annotations

import logging

from domain.errors import EvaluationError
from domain.models import RenderedPanel, TraceRender
from domain.ports.evaluator import PrettyPrinter, TraceEvaluator
from domain.ports.layout import TraceLayoutEngine
from domain.ports.rendering import Highlighter

logger = logging.getLogger(__name__)


class TraceRenderService:
    """Evaluate, lay out and highlight one filter run.

    Evaluation failures come back as ``TraceRender.error`` with no panels; the
    layout engine is never called for a failed run.
    """

    def __init__(
        self,
        evaluator: TraceEvaluator,
        layout: TraceLayoutEngine,
        pretty_print: PrettyPrinter,
        highlight: Highlighter,
    ) -> None:
        self.evaluator = evaluator
        self.layout = layout
        self.pretty_print = pretty_print
        self.highlight = highlight

    def render(self, program: str, input_text: str) -> TraceRender:
        try:
            root = self.evaluator.trace(program, input_text)
        except EvaluationError as exc:
            logger.debug("Evaluation failed: %s", exc)
            return TraceRender(plan=None, panels=[], error=str(exc))

        plan = self.layout.build_plan(root, self.pretty_print, fallback_label=program)
        panels = [
            RenderedPanel(placement=placement, markup=self.highlight(placement.text))
            for placement in plan.panels
        ]
        return TraceRender(plan=plan, panels=panels)
