from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.trace_tree import TraceLayoutConfig

DEFAULT_CONFIG_PATH = Path("config/jqv.yaml")


class LayoutSettings(BaseModel):
    wrap_width: int = Field(50, ge=1)
    spacing: int = Field(1, ge=0)
    gutter: int = Field(4, ge=0)
    width_padding: int = Field(3, ge=0)
    border_rows: int = Field(2, ge=0)
    label_margin: int = Field(4, ge=0)

    def to_layout_config(self) -> TraceLayoutConfig:
        return TraceLayoutConfig(
            wrap_width=self.wrap_width,
            spacing=self.spacing,
            gutter=self.gutter,
            width_padding=self.width_padding,
            border_rows=self.border_rows,
            label_margin=self.label_margin,
        )


class SessionSettings(BaseModel):
    debounce_ms: int = Field(50, ge=0)
    filter_save_path: Path = Path("newFilter.jq")
    input_save_path: Path = Path("newInput.json")
    pan_step: int = Field(5, ge=1)

    @field_validator("filter_save_path", "input_save_path", mode="before")
    @classmethod
    def reject_empty_path(cls, value: object) -> object:
        if value is None or str(value).strip() == "":
            msg = "save paths must not be empty"
            raise ValueError(msg)
        return value

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="JQV_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    session: SessionSettings = SessionSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("JQV_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
