from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, LayoutSettings, SessionSettings


def _clear_jqv_env() -> None:
    for key in list(os.environ):
        if key.startswith("JQV_"):
            os.environ.pop(key, None)


_clear_jqv_env()


@pytest.fixture(autouse=True)
def clear_jqv_env() -> Generator[None, None, None]:
    _clear_jqv_env()
    yield
    _clear_jqv_env()


@pytest.fixture
def session_settings(tmp_path: Path) -> SessionSettings:
    return SessionSettings(
        debounce_ms=0,
        filter_save_path=tmp_path / "newFilter.jq",
        input_save_path=tmp_path / "newInput.json",
        pan_step=5,
    )


@pytest.fixture
def app_settings(session_settings: SessionSettings) -> AppSettings:
    return AppSettings(layout=LayoutSettings(), session=session_settings)


@pytest.fixture
def app_settings_factory(
    session_settings: SessionSettings,
) -> Callable[..., AppSettings]:
    def _factory(**layout_overrides: object) -> AppSettings:
        return AppSettings(
            layout=LayoutSettings().model_copy(update=layout_overrides),
            session=session_settings,
        )

    return _factory
