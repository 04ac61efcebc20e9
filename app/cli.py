from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.filesystem.json_utils import parse_json_text, pretty_print
from adapters.jq.trace_evaluator import JqTraceEvaluator
from app.config import AppSettings, load_settings
from app.tui import JqvApp
from app.wiring import build_render_service, build_session_repository
from domain.errors import EvaluationError, InvocationError
from domain.models import SessionState
from domain.ports.evaluator import TraceEvaluator
from domain.ports.repositories import SessionRepository
from domain.services.cli_args import Invocation, parse_invocation

app = typer.Typer(add_completion=False)
console = Console(stderr=True)
logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def format_input(text: str) -> str:
    try:
        return pretty_print(parse_json_text(text))
    except EvaluationError:
        return text


def start_session(invocation: Invocation) -> SessionState:
    return SessionState(
        filter_text=invocation.program,
        input_text=format_input(invocation.input_text),
    )


def finish_session(
    session: SessionState,
    settings: AppSettings,
    repository: SessionRepository,
    evaluator: TraceEvaluator,
) -> Optional[str]:
    """Save edited texts, then return the final results as pretty JSON."""
    repository.save_edits(
        session,
        filter_path=settings.session.filter_save_path,
        input_path=settings.session.input_save_path,
    )
    try:
        results = evaluator.run(session.filter_text, session.input_text)
    except EvaluationError as exc:
        logger.debug("Final evaluation failed: %s", exc)
        return None
    return pretty_print(results)


def _read_piped_stdin() -> str:
    text = sys.stdin.read()
    tty_fd = os.open("/dev/tty", os.O_RDONLY)
    try:
        os.dup2(tty_fd, sys.stdin.fileno())
    finally:
        os.close(tty_fd)
    return text


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    help="Step through a jq filter one pipeline stage at a time. "
    "Usage: jqv [FILTER] [INPUT_FILE] [--arg NAME VALUE] [--from-file PATH]",
)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    configure_logging(log_level)
    try:
        settings = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc

    stdin_text = ""
    if not sys.stdin.isatty():
        try:
            stdin_text = _read_piped_stdin()
        except OSError as exc:
            console.print(f"[red]Failed to get standard input:[/] {exc}")
            raise typer.Exit(code=1) from exc

    try:
        invocation = parse_invocation(list(ctx.args), stdin_text=stdin_text)
    except InvocationError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=2) from exc

    session = start_session(invocation)
    JqvApp(session, build_render_service(settings), settings).run()

    output = finish_session(
        session, settings, build_session_repository(settings), JqTraceEvaluator()
    )
    if output is not None:
        typer.echo(output)


if __name__ == "__main__":
    app()
