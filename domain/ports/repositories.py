from __future__ import annotations

from pathlib import Path
from typing import List, Protocol

from domain.models import SessionState


class SessionRepository(Protocol):
    def save_edits(
        self, session: SessionState, filter_path: Path, input_path: Path
    ) -> List[Path]: ...
