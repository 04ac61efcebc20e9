from __future__ import annotations

from domain.errors import EvaluationError


class JqSyntaxError(EvaluationError):
    pass


class JqRuntimeError(EvaluationError):
    pass
