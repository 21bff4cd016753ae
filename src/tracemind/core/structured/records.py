"""Trace extraction from JSON log records (NDJSON or a JSON array)."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from ..models import ExtractedTrace
from .fields import GCP_LOG_FIELDS, LogFieldMap, lookup_text
from .heuristics import looks_like_stack_trace
from .synthetic import build_synthetic_trace

logger = logging.getLogger(__name__)

TRACE_FIELDS = ("exception", "traceback", "stacktrace", "stack_trace", "error.stack", "err.stack")


def _trace_field_names(fields: LogFieldMap) -> list[str]:
    names = list(TRACE_FIELDS)
    for extra in (fields.exception, fields.traceback):
        if extra and extra not in names:
            names.append(extra)
    return names


def extract_trace_from_record(
    record: Mapping[str, Any], fields: LogFieldMap = GCP_LOG_FIELDS
) -> str | None:
    """Return the first trace-bearing value of a record, in priority order.

    Order: text payload, explicit stack_trace (accepted as-is), common trace
    fields, ``<json_payload>.message`` then ``message``, then ``error``.
    """
    text = lookup_text(record, fields.text_payload)
    if text and looks_like_stack_trace(text):
        return text

    text = lookup_text(record, fields.stack_trace)
    if text:
        return text

    candidates = _trace_field_names(fields)
    if fields.json_payload:
        candidates.append(f"{fields.json_payload}.{fields.message or 'message'}")
    if fields.message:
        candidates.append(fields.message)
    if fields.error:
        candidates.append(fields.error)

    for path in candidates:
        text = lookup_text(record, path)
        if text and looks_like_stack_trace(text):
            return text
    return None


def _extract(records: list[Mapping[str, Any]], fields: LogFieldMap) -> list[ExtractedTrace]:
    out: list[ExtractedTrace] = []
    for record in records:
        text = extract_trace_from_record(record, fields)
        if text is None:
            continue
        out.append(
            ExtractedTrace(
                text=text,
                timestamp=lookup_text(record, fields.timestamp),
                severity=lookup_text(record, fields.severity),
            )
        )

    if not out:
        logger.debug("No trace fields in %d records, trying sourceLocation", len(records))
        synthetic = build_synthetic_trace(records)
        if synthetic is not None:
            out.append(ExtractedTrace(text=synthetic, severity="ERROR", source="synthetic"))
    return out


def iter_json_lines(content: str) -> Iterator[Mapping[str, Any]]:
    """Yield JSON objects from NDJSON content, skipping lines that do not parse."""
    for line_no, line in enumerate(content.split("\n"), start=1):
        s = line.strip()
        if not s:
            continue
        try:
            obj = json.loads(s)
        except json.JSONDecodeError:
            logger.debug("Skipping non-JSON line %d", line_no)
            continue
        if isinstance(obj, dict):
            yield obj


def extract_from_json_lines(
    content: str, fields: LogFieldMap = GCP_LOG_FIELDS
) -> list[ExtractedTrace]:
    """Extract traces from newline-delimited JSON records."""
    records = list(iter_json_lines(content))
    if not records:
        # A single pretty-printed object spans several lines.
        try:
            obj = json.loads(content)
        except json.JSONDecodeError:
            return []
        if isinstance(obj, dict):
            records = [obj]
    return _extract(records, fields)


def extract_from_json_array(
    content: str, fields: LogFieldMap = GCP_LOG_FIELDS
) -> list[ExtractedTrace]:
    """Extract traces from a top-level JSON array of records."""
    try:
        root = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse JSON array: %s", exc)
        return []
    if not isinstance(root, list):
        return []
    return _extract([r for r in root if isinstance(r, dict)], fields)
