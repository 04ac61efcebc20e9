from __future__ import annotations

from enum import Enum

from domain.errors import SchedulerStateError


class RecomputeState(Enum):
    IDLE = "idle"
    PENDING_RECOMPUTE = "pending_recompute"
    RENDERING = "rendering"


class RecomputeScheduler:
    """Debounce edits into layout runs and drop stale ones.

    Every edit bumps the generation and returns it as a token. Only the
    newest token may start rendering or complete it; older tokens are stale
    and their timers or results are ignored.
    """

    def __init__(self) -> None:
        self.state = RecomputeState.IDLE
        self.generation = 0

    def edit(self) -> int:
        self.generation += 1
        self.state = RecomputeState.PENDING_RECOMPUTE
        return self.generation

    def is_stale(self, token: int) -> bool:
        return token != self.generation

    def debounce_elapsed(self, token: int) -> bool:
        if self.is_stale(token):
            return False
        if self.state is not RecomputeState.PENDING_RECOMPUTE:
            msg = f"Debounce elapsed while {self.state.value}"
            raise SchedulerStateError(msg)
        self.state = RecomputeState.RENDERING
        return True

    def render_complete(self, token: int) -> bool:
        if self.is_stale(token):
            return False
        if self.state is not RecomputeState.RENDERING:
            msg = f"Render completed while {self.state.value}"
            raise SchedulerStateError(msg)
        self.state = RecomputeState.IDLE
        return True
