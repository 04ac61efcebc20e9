from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import orjson

from domain.errors import EvaluationError


def parse_json_text(text: str) -> Any:
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON input: {exc}"
        raise EvaluationError(msg) from exc


def dump_json_bytes(payload: Any) -> bytes:
    try:
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2)
    except TypeError:
        return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")


def pretty_print(value: Any) -> str:
    return dump_json_bytes(value).decode("utf-8")


def write_text_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_text(text, encoding="utf-8")
    try:
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def dump_json_compact(payload: Any) -> str:
    try:
        return orjson.dumps(payload).decode("utf-8")
    except TypeError:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
