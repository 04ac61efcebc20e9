from __future__ import annotations

from adapters.filesystem.json_utils import pretty_print
from adapters.filesystem.session_repository import FileSystemSessionRepository
from adapters.highlight.json_markup import highlight_json
from adapters.jq.trace_evaluator import JqTraceEvaluator
from adapters.layout.trace_tree import TraceTreeLayoutEngine
from app.config import AppSettings
from domain.ports.repositories import SessionRepository
from domain.services.render_trace import TraceRenderService


def build_render_service(settings: AppSettings) -> TraceRenderService:
    return TraceRenderService(
        evaluator=JqTraceEvaluator(),
        layout=TraceTreeLayoutEngine(settings.layout.to_layout_config()),
        pretty_print=pretty_print,
        highlight=highlight_json,
    )


def build_session_repository(settings: AppSettings) -> SessionRepository:
    return FileSystemSessionRepository()
