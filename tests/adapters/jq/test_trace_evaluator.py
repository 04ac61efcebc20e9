from __future__ import annotations

import pytest

from adapters.jq.errors import JqRuntimeError, JqSyntaxError
from adapters.jq.parser import parse_program
from adapters.jq.trace_evaluator import JqTraceEvaluator, split_pipeline
from domain.errors import EvaluationError


def test_split_pipeline_flattens_top_level_pipes_only() -> None:
    stages = split_pipeline(parse_program(".a | (.b | .c) | map(.d)"))

    assert len(stages) == 3


def test_sequential_steps_nest_one_level_each() -> None:
    root = JqTraceEvaluator().trace(".a | .b", '{"a": {"b": 5}}')

    assert root.label is None
    assert root.output == {"a": {"b": 5}}
    (first,) = root.children
    assert first.label == ".a"
    assert first.output == {"b": 5}
    (second,) = first.children
    assert second.label == ".b"
    assert second.output == 5
    assert second.is_leaf


def test_each_output_branches_the_trace() -> None:
    root = JqTraceEvaluator().trace(".[] | . * 2", "[1, 2]")

    assert [child.output for child in root.children] == [1, 2]
    assert [child.children[0].output for child in root.children] == [2, 4]
    assert {child.children[0].label for child in root.children} == {". * 2"}


def test_empty_stage_ends_its_branch() -> None:
    root = JqTraceEvaluator().trace(".[] | select(. > 1) | . + 1", "[1, 2]")

    low, high = root.children
    assert low.is_leaf
    assert high.children[0].children[0].output == 3


def test_empty_program_traces_identity() -> None:
    root = JqTraceEvaluator().trace("", "3")

    (child,) = root.children
    assert child.output == 3
    assert child.label is None


def test_grouped_pipes_stay_in_one_stage() -> None:
    root = JqTraceEvaluator().trace("(.a | .b)", '{"a": {"b": 1}}')

    (child,) = root.children
    assert child.label == "(.a | .b)"
    assert child.output == 1


def test_run_collects_every_result() -> None:
    assert JqTraceEvaluator().run(".[] | .x", '[{"x": 1}, {"x": 2}]') == [1, 2]


@pytest.mark.parametrize(
    ("program", "input_text", "error_type"),
    [
        (".", '{"a": ', EvaluationError),
        (".a |", "{}", JqSyntaxError),
        (".a | .[]", '{"a": 1}', JqRuntimeError),
    ],
)
def test_failures_surface_as_evaluation_errors(
    program: str, input_text: str, error_type: type
) -> None:
    with pytest.raises(error_type) as excinfo:
        JqTraceEvaluator().trace(program, input_text)

    assert isinstance(excinfo.value, EvaluationError)
