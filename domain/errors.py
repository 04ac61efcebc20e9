from __future__ import annotations


class JqvError(Exception):
    """Base class for errors raised by jqv."""


class EvaluationError(JqvError):
    """The filter failed to parse or run, or the input is not valid JSON."""


class LayoutError(JqvError):
    pass


class PersistenceError(JqvError):
    pass


class SchedulerStateError(JqvError):
    pass


class InvocationError(JqvError):
    pass
