"""Single entry point that picks stack-trace or generic-log parsing."""

from __future__ import annotations

import logging

from .errors import InvalidArgumentError, ParseFailure
from .log_service import parse_generic_log
from .models import AnalysisMode, InputFormat, LogFormat, ParseResult
from .scoring import score_entry_relevance
from .structured import GCP_LOG_FIELDS, LogFieldMap, extract_stack_traces, has_stack_trace_patterns
from .traces import parse_stack_trace

logger = logging.getLogger(__name__)

NO_FORMAT_MESSAGE = "could not parse input as any recognized stack trace or log format"


def decode_input(content: str | bytes | None) -> str:
    """Return input as text (bytes are decoded as UTF-8 with replacement)."""
    if content is None:
        return ""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def unified_parse(
    content: str | bytes | None,
    format_hint: InputFormat = InputFormat.AUTO,
    *,
    fields: LogFieldMap = GCP_LOG_FIELDS,
) -> ParseResult:
    """Parse input as a stack trace when it carries one, else as a generic log.

    A trace that yields no frames falls back to log mode. The mode in the
    result is the one actually used.
    """
    text = decode_input(content)
    if not text:
        raise InvalidArgumentError("input is empty")

    if has_stack_trace_patterns(text):
        trace_text = extract_stack_traces(text, format_hint, fields)
        trace = parse_stack_trace(trace_text)
        if trace is not None:
            logger.info(
                "Parsed %s stack trace with %d frames",
                trace.language.display_name,
                trace.frame_count,
            )
            return ParseResult(mode=AnalysisMode.TRACE, trace=trace)
        logger.info("Stack trace patterns found but no frames parsed; using log mode")

    log = parse_generic_log(text, LogFormat.UNKNOWN) if text.strip() else None
    if log is None or not log.entries:
        raise ParseFailure(NO_FORMAT_MESSAGE)

    score_entry_relevance(log)
    logger.info("Parsed generic log with %d entries (%s)", log.entry_count, log.detected_format.value)
    return ParseResult(mode=AnalysisMode.LOG, log=log)
