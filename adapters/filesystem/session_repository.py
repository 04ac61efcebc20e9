from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from adapters.filesystem.json_utils import write_text_atomic
from domain.errors import PersistenceError
from domain.models import SessionState
from domain.ports.repositories import SessionRepository

logger = logging.getLogger(__name__)


class FileSystemSessionRepository(SessionRepository):
    def save_edits(self, session: SessionState, filter_path: Path, input_path: Path) -> List[Path]:
        edits = (
            (session.filter_changed, filter_path, session.filter_text),
            (session.input_changed, input_path, session.input_text),
        )
        written: List[Path] = []
        for changed, path, text in edits:
            if not changed:
                continue
            try:
                self.save(path, text)
            except PersistenceError as exc:
                logger.exception("%s", exc)
                continue
            written.append(path)
        return written

    def save(self, path: Path, text: str) -> None:
        try:
            write_text_atomic(path, text)
        except OSError as exc:
            msg = f"Error writing file {path}: {exc}"
            raise PersistenceError(msg) from exc
