"""Rebuild a Go-style trace from GCP ``sourceLocation`` metadata."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .fields import lookup

logger = logging.getLogger(__name__)

MAX_SYNTHETIC_FRAMES = 50

_ERROR_SEVERITIES = frozenset({"ERROR", "CRITICAL", "FATAL"})
_ERROR_HINTS = ("error", "Error", "fail", "Fail")


def gcp_message(record: Mapping[str, Any]) -> str | None:
    """Best-effort human message of a GCP log record."""
    for path in ("jsonPayload.message.message", "jsonPayload.message", "jsonPayload.msg"):
        value = lookup(record, path)
        if isinstance(value, str):
            return value
    for key in ("textPayload", "message"):
        value = record.get(key)
        if isinstance(value, str):
            return value
    return None


def _error_preamble(records: Sequence[Mapping[str, Any]]) -> str | None:
    for record in records:
        severity = record.get("severity")
        if not isinstance(severity, str) or severity.upper() not in _ERROR_SEVERITIES:
            continue
        out = ""
        msg = gcp_message(record)
        if msg is not None:
            out += f"Error: {msg}\n\n"
        cause = lookup(record, "jsonPayload.message.variables.err")
        if isinstance(cause, str):
            out += f"Cause: {cause}\n\n"
        return out

    for record in records:
        msg = gcp_message(record)
        if msg is not None and any(h in msg for h in _ERROR_HINTS):
            return f"Error: {msg}\n\n"
    return None


def _frame_lines(records: Sequence[Mapping[str, Any]]) -> list[str]:
    lines: list[str] = []
    for record in records:
        loc = record.get("sourceLocation")
        if not isinstance(loc, Mapping):
            continue
        function, file = loc.get("function"), loc.get("file")
        if not isinstance(function, str) or not isinstance(file, str):
            continue
        line = loc.get("line")
        if isinstance(line, bool) or not isinstance(line, (str, int)):
            line = "0"
        lines.append(f"{function}(...)\n\t{file}:{line} +0x0\n")
        if len(lines) >= MAX_SYNTHETIC_FRAMES:
            break
    return lines


def build_synthetic_trace(records: Sequence[Mapping[str, Any]]) -> str | None:
    """Build a trace from record metadata, or None if there is nothing to show."""
    preamble = _error_preamble(records)
    frames = _frame_lines(records)
    if not frames and preamble is None:
        return None
    logger.debug("Built synthetic trace with %d frames", len(frames))
    return (preamble or "") + "goroutine 1 [running]:\n" + "".join(frames)
