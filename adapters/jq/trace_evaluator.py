from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple

from adapters.filesystem.json_utils import parse_json_text
from adapters.jq import nodes
from adapters.jq.interpreter import Interpreter
from adapters.jq.parser import Parser
from domain.models import TraceNode
from domain.ports.evaluator import TraceEvaluator

logger = logging.getLogger(__name__)


def split_pipeline(node: nodes.Node) -> List[nodes.Node]:
    if isinstance(node, nodes.Pipe):
        return split_pipeline(node.left) + split_pipeline(node.right)
    return [node]


class JqTraceEvaluator(TraceEvaluator):
    """Runs a jq program and records every top-level pipe stage.

    The root holds the parsed input. Each output of a stage becomes a child
    node labelled with the stage's source text, and the remaining stages are
    traced below it. A stage that produces nothing ends its branch.
    """

    def __init__(self) -> None:
        self.interpreter = Interpreter()

    def trace(self, program: str, input_text: str) -> TraceNode:
        parser = Parser(program)
        ast = parser.parse()
        value = parse_json_text(input_text)
        stages = [(parser.text_of(stage) or None, stage) for stage in split_pipeline(ast)]
        root = TraceNode(output=value, label=None, children=self._trace_stages(stages, value))
        logger.debug("Traced %d pipeline stages", len(stages))
        return root

    def run(self, program: str, input_text: str) -> List[Any]:
        ast = Parser(program).parse()
        value = parse_json_text(input_text)
        return list(self.interpreter.evaluate(ast, value))

    def _trace_stages(
        self, stages: Sequence[Tuple[str | None, nodes.Node]], value: Any
    ) -> Tuple[TraceNode, ...]:
        if not stages:
            return ()
        (label, stage), rest = stages[0], stages[1:]
        return tuple(
            TraceNode(output=output, label=label, children=self._trace_stages(rest, output))
            for output in self.interpreter.evaluate(stage, value)
        )
