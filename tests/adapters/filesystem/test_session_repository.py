from __future__ import annotations

import logging
from pathlib import Path

import pytest

from adapters.filesystem.session_repository import FileSystemSessionRepository
from domain.errors import PersistenceError
from domain.models import SessionState


def test_only_edited_texts_are_written(tmp_path: Path) -> None:
    session = SessionState(filter_text=".", input_text="{}")
    session.edit_input('{"a": 1}')
    filter_path = tmp_path / "newFilter.jq"
    input_path = tmp_path / "newInput.json"

    written = FileSystemSessionRepository().save_edits(session, filter_path, input_path)

    assert written == [input_path]
    assert not filter_path.exists()
    assert input_path.read_text(encoding="utf-8") == '{"a": 1}'


def test_untouched_session_writes_nothing(tmp_path: Path) -> None:
    session = SessionState(filter_text=".", input_text="{}")

    written = FileSystemSessionRepository().save_edits(
        session, tmp_path / "f.jq", tmp_path / "i.json"
    )

    assert written == []
    assert list(tmp_path.iterdir()) == []


def test_write_failure_is_logged_and_other_file_still_saved(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    session = SessionState(filter_text=".", input_text="{}")
    session.edit_filter(".a")
    session.edit_input("[]")
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    input_path = tmp_path / "newInput.json"

    with caplog.at_level(logging.ERROR):
        written = FileSystemSessionRepository().save_edits(session, blocked, input_path)

    assert written == [input_path]
    assert f"Error writing file {blocked}" in caplog.text
    assert not (tmp_path / "blocked.tmp").exists()
    assert input_path.read_text(encoding="utf-8") == "[]"


def test_save_raises_persistence_error(tmp_path: Path) -> None:
    blocked = tmp_path / "blocked"
    blocked.mkdir()

    with pytest.raises(PersistenceError, match="Error writing file"):
        FileSystemSessionRepository().save(blocked, "text")


def test_logged_failure_carries_the_persistence_error(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    session = SessionState(filter_text=".", input_text="{}")
    session.edit_filter(".a")
    blocked = tmp_path / "blocked"
    blocked.mkdir()

    with caplog.at_level(logging.ERROR):
        FileSystemSessionRepository().save_edits(session, blocked, tmp_path / "in.json")

    (record,) = caplog.records
    assert record.exc_info is not None
    assert record.exc_info[0] is PersistenceError
