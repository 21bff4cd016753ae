"""Core data models for trace and log analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Language(str, Enum):
    """Languages with a stack-trace grammar."""

    PYTHON = "python"
    GO = "go"
    NODE = "node"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Language.PYTHON: "Python",
    Language.GO: "Go",
    Language.NODE: "Node.js",
    Language.UNKNOWN: "Unknown",
}


class InputFormat(str, Enum):
    """Container format of the raw input."""

    AUTO = "auto"
    RAW = "raw"
    JSON = "json"
    JSON_ARRAY = "json-array"
    CSV = "csv"
    TSV = "tsv"


class LogFormat(str, Enum):
    """Format family of a log stream, used to pick a line parser."""

    UNKNOWN = "unknown"
    STACK_TRACE = "stack-trace"
    NGINX = "nginx"
    SYSLOG = "syslog"
    DOCKER = "docker"
    KUBERNETES = "kubernetes"
    JSON_STRUCTURED = "json-structured"
    CUSTOM = "custom"

    @property
    def description(self) -> str:
        return _FORMAT_DESCRIPTIONS[self]


_FORMAT_DESCRIPTIONS = {
    LogFormat.UNKNOWN: "Unknown format",
    LogFormat.STACK_TRACE: "Stack trace",
    LogFormat.NGINX: "Nginx/Apache access log",
    LogFormat.SYSLOG: "Syslog",
    LogFormat.DOCKER: "Docker container log",
    LogFormat.KUBERNETES: "Kubernetes log",
    LogFormat.JSON_STRUCTURED: "JSON structured log",
    LogFormat.CUSTOM: "Custom/generic log",
}


class AnalysisMode(str, Enum):
    """Which model the unified parser produced."""

    AUTO = "auto"
    TRACE = "trace"
    LOG = "log"


@dataclass(frozen=True, slots=True)
class StackFrame:
    """One frame of a stack trace."""

    function: str | None
    file: str | None
    line: int = 0
    column: int = 0
    module: str | None = None  # Go package path
    context: str | None = None  # source line printed under a Python frame
    is_stdlib: bool = False
    is_third_party: bool = False


@dataclass(frozen=True, slots=True)
class StackTrace:
    """Parsed stack trace; frames are innermost-call-first as emitted."""

    language: Language
    error_type: str | None
    error_message: str | None
    frames: tuple[StackFrame, ...]
    raw_trace: str

    @property
    def frame_count(self) -> int:
        return len(self.frames)


@dataclass(frozen=True, slots=True)
class LangScore:
    """Heuristic confidence (0..100) that text belongs to a language."""

    language: Language
    score: int


@dataclass(frozen=True, slots=True)
class ExtractedTrace:
    """Trace text pulled out of one structured log record."""

    text: str
    timestamp: str | None = None
    severity: str | None = None
    source: str | None = None


_ERROR_SEVERITIES = frozenset({"ERROR", "FATAL", "CRITICAL", "EMERG", "ALERT"})
_WARNING_SEVERITIES = frozenset({"WARN", "WARNING"})
_INFO_SEVERITIES = frozenset({"INFO"})


@dataclass(slots=True)
class GenericLogEntry:
    """Normalized line of a log that is not a stack trace.

    Timestamp and severity are kept verbatim; only the counters in
    ``GenericLog`` interpret them.
    """

    line_number: int
    message: str
    raw_line: str
    timestamp: str | None = None
    severity: str | None = None
    source: str | None = None
    metadata: dict[str, Any] | None = None
    relevance_score: float = 0.0
    is_error: bool = False
    is_anomaly: bool = False


@dataclass(slots=True)
class GenericLog:
    """Entries of one log in input order, plus aggregate counters."""

    detected_format: LogFormat = LogFormat.UNKNOWN
    entries: list[GenericLogEntry] = field(default_factory=list)
    total_errors: int = 0
    total_warnings: int = 0
    total_info: int = 0
    time_range_start: str | None = None
    time_range_end: str | None = None
    error_signatures: list[str] = field(default_factory=list)

    @property
    def format_description(self) -> str:
        return self.detected_format.description

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    def add_entry(self, entry: GenericLogEntry) -> GenericLogEntry:
        """Append an entry, updating severity counters and the time range."""
        if entry.severity:
            sev = entry.severity.upper()
            if sev in _ERROR_SEVERITIES:
                entry.is_error = True
                self.total_errors += 1
            elif sev in _WARNING_SEVERITIES:
                self.total_warnings += 1
            elif sev in _INFO_SEVERITIES:
                self.total_info += 1

        if entry.timestamp:
            if self.time_range_start is None:
                self.time_range_start = entry.timestamp
            self.time_range_end = entry.timestamp

        self.entries.append(entry)
        return entry


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of the unified parser: exactly one of trace/log is set."""

    mode: AnalysisMode
    trace: StackTrace | None = None
    log: GenericLog | None = None

    def __post_init__(self) -> None:
        if (self.trace is None) == (self.log is None):
            raise ValueError("ParseResult needs exactly one of trace or log")
