from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Sequence

from domain.errors import InvocationError

DEFAULT_PROGRAM = "."


@dataclass(frozen=True)
class Invocation:
    program: str
    input_text: str
    args: Dict[str, str] = field(default_factory=dict)
    filter_path: Optional[Path] = None
    input_path: Optional[Path] = None


def inject_args(program: str, args: Mapping[str, str]) -> str:
    """Replace each ``$NAME`` with the JSON string literal of its value."""
    result = program
    for name, value in args.items():
        literal = json.dumps(value, ensure_ascii=False)
        pattern = re.compile(rf"\${re.escape(name)}\b")
        result = pattern.sub(lambda _match: literal, result)
    return result


def _read_utf8(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def parse_invocation(
    tokens: Sequence[str],
    stdin_text: str = "",
    read_text: Callable[[Path], str] = _read_utf8,
) -> Invocation:
    """Interpret jqv's positional arguments.

    The first bare argument is the filter unless ``--from-file`` supplied one;
    any later bare argument names the JSON input file.
    """
    program = DEFAULT_PROGRAM
    input_text = stdin_text
    args: Dict[str, str] = {}
    filter_path: Optional[Path] = None
    input_path: Optional[Path] = None
    have_filter = False

    position = 0
    while position < len(tokens):
        token = tokens[position]
        if token == "--arg":
            if position + 2 >= len(tokens):
                msg = "--arg takes two parameters (e.g. --arg varname value)"
                raise InvocationError(msg)
            args[tokens[position + 1]] = tokens[position + 2]
            position += 3
            continue
        if token == "--from-file":
            if position + 1 >= len(tokens):
                msg = "--from-file takes a file path"
                raise InvocationError(msg)
            filter_path = Path(tokens[position + 1])
            program = _read(read_text, filter_path)
            have_filter = True
            position += 2
            continue
        if not have_filter:
            program = token
            have_filter = True
        else:
            input_path = Path(token)
            input_text = _read(read_text, input_path)
        position += 1

    if args:
        program = inject_args(program, args)
    return Invocation(
        program=program,
        input_text=input_text,
        args=args,
        filter_path=filter_path,
        input_path=input_path,
    )


def _read(read_text: Callable[[Path], str], path: Path) -> str:
    try:
        return read_text(path)
    except OSError as exc:
        msg = f"Could not read {path}: {exc}"
        raise InvocationError(msg) from exc
