"""Format-family detection for generic logs."""

from __future__ import annotations

import logging

from ..models import AnalysisMode, LogFormat
from ..structured.heuristics import has_stack_trace_patterns

logger = logging.getLogger(__name__)

SAMPLE_LINES = 20
KUBERNETES_MARKERS = ("kube-", "pod/", "namespace=", "kubernetes")


def _is_json(line: str) -> bool:
    return line.startswith("{") and len(line) > 2


def _is_nginx(line: str) -> bool:
    if len(line) <= 20:
        return False
    bracket = line.find("[")
    quote = line.find('"')
    return 0 <= bracket < quote and "." in line[:bracket]


def _is_syslog(line: str) -> bool:
    if len(line) <= 15:
        return False
    if not (line.startswith("<") or (line[:3].isalpha() and line[3] == " ")):
        return False
    return ": " in line


def _is_docker(line: str) -> bool:
    if len(line) <= 30:
        return False
    return line[23:31] in (" stdout ", " stderr ") or "docker" in line or "container" in line


def sample_lines(content: str, limit: int = SAMPLE_LINES) -> list[str]:
    """Return up to ``limit`` non-empty lines from the start of the content."""
    out: list[str] = []
    for line in content.split("\n"):
        line = line.rstrip("\r")
        if not line:
            continue
        out.append(line)
        if len(out) >= limit:
            break
    return out


def detect_log_format(content: str | None) -> LogFormat:
    """Classify a log by majority vote over sampled lines.

    Stack-trace patterns anywhere in the content win over sampling.
    """
    if not content:
        return LogFormat.UNKNOWN
    if has_stack_trace_patterns(content):
        return LogFormat.STACK_TRACE

    lines = sample_lines(content)
    n = len(lines)
    if n:
        if sum(map(_is_json, lines)) * 2 > n:
            return LogFormat.JSON_STRUCTURED
        if sum(map(_is_nginx, lines)) * 2 > n:
            return LogFormat.NGINX
        if sum(map(_is_syslog, lines)) * 2 > n:
            return LogFormat.SYSLOG
        if sum(map(_is_docker, lines)) * 3 >= n:
            return LogFormat.DOCKER

    if any(m in content for m in KUBERNETES_MARKERS):
        return LogFormat.KUBERNETES
    return LogFormat.CUSTOM


def detect_analysis_mode(content: str | None) -> AnalysisMode:
    """TRACE when the content carries a stack trace, else LOG."""
    if detect_log_format(content) == LogFormat.STACK_TRACE:
        return AnalysisMode.TRACE
    return AnalysisMode.LOG
