from __future__ import annotations

from typing import Any, Callable, List, Optional

from adapters.filesystem.json_utils import pretty_print
from adapters.highlight.json_markup import highlight_json
from adapters.jq.trace_evaluator import JqTraceEvaluator
from adapters.layout.trace_tree import TraceTreeLayoutEngine
from domain.errors import EvaluationError
from domain.models import TraceLayoutPlan, TraceNode
from domain.services.render_trace import TraceRenderService


class _FailingEvaluator:
    def trace(self, program: str, input_text: str) -> TraceNode:
        raise EvaluationError("boom")

    def run(self, program: str, input_text: str) -> List[Any]:
        raise EvaluationError("boom")


class _ExplodingLayout:
    def build_plan(
        self,
        root: TraceNode,
        pretty_print: Callable[[object], str],
        fallback_label: Optional[str] = None,
    ) -> TraceLayoutPlan:
        raise AssertionError("layout must not run after a failed evaluation")


def _service() -> TraceRenderService:
    return TraceRenderService(
        evaluator=JqTraceEvaluator(),
        layout=TraceTreeLayoutEngine(),
        pretty_print=pretty_print,
        highlight=highlight_json,
    )


def test_sequential_steps_render_at_increasing_depth() -> None:
    result = _service().render(".a | .b", '{"a": {"b": 5}}')

    assert result.ok
    assert [panel.placement.depth for panel in result.panels] == [1, 2]
    first, second = result.panels
    assert first.placement.label == ".a"
    assert second.placement.text == "5"
    assert second.markup == "[yellow]5[/yellow]"
    assert second.placement.origin.x > first.placement.origin.x


def test_malformed_input_renders_no_panels() -> None:
    result = _service().render(".", '{"a": ')

    assert not result.ok
    assert result.plan is None
    assert result.panels == []
    assert "Invalid JSON input" in (result.error or "")


def test_failed_evaluation_skips_layout() -> None:
    service = TraceRenderService(
        evaluator=_FailingEvaluator(),
        layout=_ExplodingLayout(),
        pretty_print=pretty_print,
        highlight=highlight_json,
    )

    result = service.render(".", "{}")

    assert result.error == "boom"
    assert result.panels == []


def test_each_panel_carries_highlighted_content() -> None:
    result = _service().render(".[]", '[{"k": true}, "s"]')

    assert [panel.placement.text for panel in result.panels] == ['{\n  "k": true\n}', '"s"']
    assert "[blue]" in result.panels[0].markup
    assert "[cyan]true[/cyan]" in result.panels[0].markup
    assert result.panels[1].markup == '[green]"s"[/green]'


def test_non_finite_arithmetic_is_reported_not_raised() -> None:
    result = _service().render(".[] | . % 2", "[1e308]")

    assert result.ok

    result = _service().render("(1e308 * 10) % 2", "null")

    assert not result.ok
    assert "cannot be divided" in (result.error or "")
    assert result.panels == []
