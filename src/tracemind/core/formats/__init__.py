"""Generic log formats: family detection and per-family line parsers."""

from __future__ import annotations

from ..models import LogFormat
from .base import LineParser
from .detect import detect_analysis_mode, detect_log_format, sample_lines
from .jsonl import JsonStructuredParser
from .plain import PlainLineParser
from .syslog import SyslogLineParser

_PARSERS: dict[LogFormat, LineParser] = {
    LogFormat.JSON_STRUCTURED: JsonStructuredParser(),
    LogFormat.SYSLOG: SyslogLineParser(),
}
_DEFAULT_PARSER: LineParser = PlainLineParser()


def parser_for_format(fmt: LogFormat) -> LineParser:
    """Line parser for a format family (plain parser for everything else)."""
    return _PARSERS.get(fmt, _DEFAULT_PARSER)


__all__ = [
    "JsonStructuredParser",
    "LineParser",
    "PlainLineParser",
    "SyslogLineParser",
    "detect_analysis_mode",
    "detect_log_format",
    "parser_for_format",
    "sample_lines",
]
