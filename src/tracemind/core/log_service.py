"""Generic log parsing, error-only views and summaries.

Every non-blank input line becomes exactly one entry; lines the family parser
does not recognize are kept as raw entries.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Any

from .errors import InvalidArgumentError
from .formats import LineParser, detect_log_format, parser_for_format
from .models import GenericLog, GenericLogEntry, LogFormat

logger = logging.getLogger(__name__)


def _raw_entry(line_no: int, line: str) -> GenericLogEntry:
    return GenericLogEntry(line_number=line_no, message=line, raw_line=line)


def parse_generic_log(
    content: str | None,
    format_hint: LogFormat = LogFormat.UNKNOWN,
    *,
    parser: LineParser | None = None,
) -> GenericLog:
    """Parse log text line by line into a GenericLog.

    ``format_hint`` UNKNOWN means detect the family; ``parser`` overrides the
    family's line parser.
    """
    if not content:
        raise InvalidArgumentError("log content is empty")

    fmt = format_hint
    if fmt == LogFormat.UNKNOWN:
        fmt = detect_log_format(content)
    parser = parser or parser_for_format(fmt)

    log = GenericLog(detected_format=fmt)
    for line_no, line in enumerate(content.split("\n"), start=1):
        line = line.removesuffix("\r")
        if not line.strip():
            continue
        entry = parser.parse(line_no, line)
        log.add_entry(entry if entry is not None else _raw_entry(line_no, line))

    logger.debug(
        "Parsed %d log entries (format=%s, errors=%d)",
        log.entry_count,
        fmt.value,
        log.total_errors,
    )
    return log


def extract_errors(log: GenericLog) -> GenericLog:
    """Return a new log holding only error or anomalous entries, in order."""
    out = GenericLog(detected_format=log.detected_format)
    for entry in log.entries:
        if entry.is_error or entry.is_anomaly:
            out.add_entry(replace(entry))
    out.error_signatures = list(log.error_signatures)
    return out


def summarize_log(log: GenericLog, *, top: int = 5) -> dict[str, Any]:
    """Severity histogram and leading error signatures of a parsed log."""
    severities = Counter((e.severity or "UNKNOWN").upper() for e in log.entries)
    anomalies = sum(1 for e in log.entries if e.is_anomaly)
    return {
        "format": log.detected_format.value,
        "entries": log.entry_count,
        "errors": log.total_errors,
        "warnings": log.total_warnings,
        "info": log.total_info,
        "anomalies": anomalies,
        "severities": dict(severities.most_common()),
        "time_range": [log.time_range_start, log.time_range_end],
        "top_signatures": log.error_signatures[:top],
    }
