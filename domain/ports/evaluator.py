from __future__ import annotations

from typing import Any, List, Protocol

from domain.models import TraceNode


class TraceEvaluator(Protocol):
    def trace(self, program: str, input_text: str) -> TraceNode: ...

    def run(self, program: str, input_text: str) -> List[Any]: ...


class PrettyPrinter(Protocol):
    def __call__(self, value: Any) -> str: ...
