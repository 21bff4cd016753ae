"""Stack-trace extraction from structured log exports.

Supports NDJSON and JSON arrays (GCP/AWS field conventions, with a
``sourceLocation`` fallback) and CSV/TSV exports.
"""

from __future__ import annotations

import logging

from ..input_format import detect_input_format
from ..models import ExtractedTrace, InputFormat
from .delimited import extract_from_delimited, split_delimited
from .fields import AWS_LOG_FIELDS, FIELD_MAPS, GCP_LOG_FIELDS, LogFieldMap, lookup, lookup_text
from .heuristics import has_stack_trace_patterns, looks_like_stack_trace
from .records import extract_from_json_array, extract_from_json_lines, extract_trace_from_record
from .synthetic import build_synthetic_trace

logger = logging.getLogger(__name__)


def extract_traces(
    content: str,
    format_hint: InputFormat = InputFormat.AUTO,
    fields: LogFieldMap = GCP_LOG_FIELDS,
) -> list[ExtractedTrace]:
    """Return every trace found in structured content (empty for raw text)."""
    fmt = format_hint
    if fmt == InputFormat.AUTO:
        fmt = detect_input_format(content)

    if fmt in (InputFormat.JSON, InputFormat.JSON_ARRAY):
        if content.lstrip().startswith("["):
            return extract_from_json_array(content, fields)
        return extract_from_json_lines(content, fields)
    if fmt == InputFormat.CSV:
        return extract_from_delimited(content, ",")
    if fmt == InputFormat.TSV:
        return extract_from_delimited(content, "\t")
    return []


def join_traces(traces: list[ExtractedTrace]) -> str:
    """Concatenate traces with ``--- Entry N (timestamp) ---`` separators."""
    parts: list[str] = []
    for idx, trace in enumerate(traces, start=1):
        if idx > 1:
            stamp = f" ({trace.timestamp})" if trace.timestamp else ""
            parts.append(f"\n\n--- Entry {idx}{stamp} ---\n\n")
        parts.append(trace.text)
    return "".join(parts)


def extract_stack_traces(
    content: str,
    format_hint: InputFormat = InputFormat.AUTO,
    fields: LogFieldMap = GCP_LOG_FIELDS,
) -> str:
    """Return trace text ready for the stack-trace parsers.

    Raw input is returned unchanged. Structured input without any trace also
    falls back to the raw content.
    """
    fmt = format_hint
    if fmt == InputFormat.AUTO:
        fmt = detect_input_format(content)
    if fmt == InputFormat.RAW:
        return content

    traces = extract_traces(content, fmt, fields)
    if not traces:
        logger.warning("No stack traces found in structured log, using raw content")
        return content

    logger.info("Extracted %d stack traces from %s input", len(traces), fmt.value)
    return join_traces(traces)


__all__ = [
    "AWS_LOG_FIELDS",
    "FIELD_MAPS",
    "GCP_LOG_FIELDS",
    "LogFieldMap",
    "build_synthetic_trace",
    "extract_from_delimited",
    "extract_from_json_array",
    "extract_from_json_lines",
    "extract_stack_traces",
    "extract_trace_from_record",
    "extract_traces",
    "has_stack_trace_patterns",
    "join_traces",
    "looks_like_stack_trace",
    "lookup",
    "lookup_text",
    "split_delimited",
]
