"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, resolve environment overrides,
translate them into core calls, and return JSON-serializable dicts.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from tracemind.core.analyzer import analyze
from tracemind.core.code import CallGraph, CallGraphConfig, build_call_graph
from tracemind.core.languages import score_languages
from tracemind.core.log_service import extract_errors
from tracemind.core.models import GenericLog, GenericLogEntry, InputFormat, Language, StackTrace
from tracemind.core.structured import FIELD_MAPS
from tracemind.core.traces import parse_trace
from tracemind.tools.schemas import (
    AnalysisReport,
    CallGraphOut,
    CallNodeOut,
    FrameOut,
    LangScoreOut,
    LogEntryOut,
    LogOut,
    TraceOut,
)

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000
DEFAULT_MAX_INPUT_BYTES = 5 * 1024 * 1024

BASE_DIR_ENV = "TRACEMIND_BASE_DIR"
INCLUDE_STDLIB_ENV = "TRACEMIND_INCLUDE_STDLIB"
MAX_INPUT_BYTES_ENV = "TRACEMIND_MAX_INPUT_BYTES"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _base_dir() -> Path:
    """Return the resolved base directory for input files and repositories."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _resolve_include_stdlib(include_stdlib: bool | None) -> bool:
    if include_stdlib is not None:
        return include_stdlib
    raw = os.getenv(INCLUDE_STDLIB_ENV, "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{INCLUDE_STDLIB_ENV} must be a boolean (true/false)")


def _resolve_max_input_bytes() -> int:
    env = os.getenv(MAX_INPUT_BYTES_ENV)
    if not env:
        return DEFAULT_MAX_INPUT_BYTES
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{MAX_INPUT_BYTES_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{MAX_INPUT_BYTES_ENV} must be >= 1")
    return value


def _parse_format_hint(value: str | None) -> InputFormat:
    if not value:
        return InputFormat.AUTO
    try:
        return InputFormat(value.strip().lower())
    except ValueError as e:
        valid = ", ".join(f.value for f in InputFormat)
        raise ValueError(f"Unknown format '{value}'. Valid values: {valid}.") from e


def _parse_language(value: str | None) -> Language:
    if not value:
        return Language.UNKNOWN
    name = value.strip().lower()
    if name in ("nodejs", "node.js", "javascript", "js", "typescript", "ts"):
        name = Language.NODE.value
    try:
        return Language(name)
    except ValueError as e:
        raise ValueError(f"Unknown language '{value}'. Valid values: python, go, node.") from e


def _load_input(text: str | None, path: str | None) -> str:
    """Return tool input from inline text or a file under the base dir."""
    if (text is None) == (path is None):
        raise ValueError("Provide exactly one of text or path.")

    max_bytes = _resolve_max_input_bytes()
    if path is not None:
        p = _safe_resolve(path)
        if not p.is_file():
            raise FileNotFoundError(f"File not found: {p}")
        if p.stat().st_size > max_bytes:
            raise ValueError(f"Input exceeds {max_bytes} bytes: {p}")
        return p.read_bytes().decode("utf-8", errors="replace")

    if len(text.encode("utf-8")) > max_bytes:
        raise ValueError(f"Input exceeds {max_bytes} bytes")
    return text


def _trace_out(trace: StackTrace) -> TraceOut:
    return TraceOut(
        language=trace.language.value,
        language_name=trace.language.display_name,
        error_type=trace.error_type,
        error_message=trace.error_message,
        frame_count=trace.frame_count,
        frames=[
            FrameOut(
                function=f.function,
                file=f.file,
                line=f.line,
                column=f.column,
                module=f.module,
                context=f.context,
                is_stdlib=f.is_stdlib,
                is_third_party=f.is_third_party,
            )
            for f in trace.frames
        ],
        language_scores=[
            LangScoreOut(language=s.language.value, score=s.score)
            for s in score_languages(trace.raw_trace)
        ],
    )


def _entry_out(entry: GenericLogEntry, *, include_raw: bool) -> LogEntryOut:
    return LogEntryOut(
        line_number=entry.line_number,
        timestamp=entry.timestamp,
        severity=entry.severity,
        source=entry.source,
        message=entry.message,
        relevance_score=entry.relevance_score,
        is_error=entry.is_error,
        is_anomaly=entry.is_anomaly,
        raw_line=entry.raw_line if include_raw else None,
        metadata=entry.metadata,
    )


def _log_out(log: GenericLog, *, limit: int, include_raw: bool) -> LogOut:
    return LogOut(
        format=log.detected_format.value,
        format_description=log.format_description,
        entry_count=log.entry_count,
        total_errors=log.total_errors,
        total_warnings=log.total_warnings,
        total_info=log.total_info,
        time_range_start=log.time_range_start,
        time_range_end=log.time_range_end,
        error_signatures=log.error_signatures,
        entries=[_entry_out(e, include_raw=include_raw) for e in log.entries[:limit]],
    )


def _graph_out(graph: CallGraph) -> CallGraphOut:
    index = {id(n): i for i, n in enumerate(graph.nodes)}
    return CallGraphOut(
        node_count=graph.node_count,
        edge_count=graph.edge_count,
        entry_point=index[id(graph.entry_point)] if graph.entry_point is not None else None,
        nodes=[
            CallNodeOut(
                name=n.name,
                qualified_name=n.qualified_name,
                file=n.file,
                start_line=n.start_line,
                end_line=n.end_line,
                signature=n.signature,
                complexity=n.complexity,
                frame_line=n.frame_line,
                callers=[index[id(c)] for c in n.callers],
                callees=[index[id(c)] for c in n.callees],
            )
            for n in graph.nodes
        ],
    )


def analyze_input_impl(
    *,
    text: str | None = None,
    path: str | None = None,
    format_hint: str | None = None,
    provider: str = "gcp",
    repo_root: str | None = None,
    errors_only: bool = False,
    limit: int | None = None,
    include_raw: bool = False,
    include_stdlib: bool | None = None,
    include_tests: bool = True,
) -> dict[str, Any]:
    """Implementation for the `analyze_input` MCP tool.

    Notes
    -----
    - Stack traces get a call graph rooted at ``repo_root`` (default: base dir).
    - Logs are returned with relevance scores; ``errors_only`` keeps only
      error/anomalous entries.
    """
    content = _load_input(text, path)
    fmt = _parse_format_hint(format_hint)
    try:
        fields = FIELD_MAPS[provider.strip().lower()]
    except KeyError as e:
        raise ValueError(f"Unknown provider '{provider}'. Valid values: gcp, aws.") from e

    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    root = _safe_resolve(repo_root) if repo_root else _base_dir()
    config = CallGraphConfig(
        include_stdlib=_resolve_include_stdlib(include_stdlib),
        include_tests=include_tests,
    )

    result = analyze(content, repo_root=root, format_hint=fmt, fields=fields, config=config)

    log = result.parsed.log
    if log is not None and errors_only:
        log = extract_errors(log)

    report = AnalysisReport(
        mode=result.mode.value,
        trace=_trace_out(result.parsed.trace) if result.parsed.trace is not None else None,
        log=_log_out(log, limit=limit, include_raw=include_raw) if log is not None else None,
        call_graph=_graph_out(result.call_graph) if result.call_graph is not None else None,
        repo_root=str(result.repo_root) if result.repo_root is not None else None,
        analysis_time_ms=result.analysis_time_ms,
    )
    return report.model_dump()


def parse_trace_impl(*, text: str, language: str | None = None) -> dict[str, Any]:
    """Implementation for the `parse_stack_trace` MCP tool."""
    content = _load_input(text, None)
    trace = parse_trace(content, _parse_language(language))
    return _trace_out(trace).model_dump()


def call_graph_impl(
    *,
    text: str,
    repo_root: str | None = None,
    include_stdlib: bool | None = None,
    include_tests: bool = True,
) -> dict[str, Any]:
    """Implementation for the `build_call_graph` MCP tool."""
    content = _load_input(text, None)
    trace = parse_trace(content)
    root = _safe_resolve(repo_root) if repo_root else _base_dir()
    config = CallGraphConfig(
        include_stdlib=_resolve_include_stdlib(include_stdlib),
        include_tests=include_tests,
    )
    graph = build_call_graph(trace, root, config=config)
    return {
        "repo_root": str(root),
        "trace": _trace_out(trace).model_dump(),
        "call_graph": _graph_out(graph).model_dump(),
    }
