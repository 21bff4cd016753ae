from __future__ import annotations

import pytest

from tracemind.core.formats import (
    JsonStructuredParser,
    PlainLineParser,
    SyslogLineParser,
    detect_analysis_mode,
    detect_log_format,
    parser_for_format,
    sample_lines,
)
from tracemind.core.models import AnalysisMode, LogFormat


def test_plain_parser_timestamp_and_bracket_level() -> None:
    parser = PlainLineParser()
    entry = parser.parse(1, "2024-01-15T10:30:00.123Z [ERROR] Database connection failed")
    assert entry is not None
    assert entry.line_number == 1
    assert entry.timestamp == "2024-01-15T10:30:00"
    assert entry.severity == "ERROR"
    assert entry.message == "Database connection failed"
    assert entry.raw_line.startswith("2024-01-15")


@pytest.mark.parametrize(
    ("line", "severity", "message"),
    [
        ("WARNING: disk almost full", "WARNING", "disk almost full"),
        ("warn low memory", "WARN", "low memory"),
        ("2024-01-15 10:30:00,555 info  ready", "INFO", "ready"),
        ("ERRORS everywhere", None, "ERRORS everywhere"),
    ],
)
def test_plain_parser_levels(line: str, severity: str | None, message: str) -> None:
    entry = PlainLineParser().parse(7, line)
    assert entry is not None
    assert entry.severity == severity
    assert entry.message == message


@pytest.mark.parametrize(
    "line",
    [
        "2024-01-15T10:30:00 ready",
        "2024-01-15T10:30:00Z ready",
        "2024-01-15 10:30:00,555 ready",
        "2024-01-15T10:30:00.123456+02:00 ready",
        "2024-01-15T10:30:00-0500 ready",
    ],
)
def test_plain_parser_keeps_second_precision_timestamp(line: str) -> None:
    entry = PlainLineParser().parse(1, line)
    assert entry is not None
    assert entry.timestamp is not None
    assert entry.timestamp[:10] == "2024-01-15"
    assert len(entry.timestamp) == 19
    assert entry.message == "ready"


def test_plain_parser_needs_a_message() -> None:
    parser = PlainLineParser()
    assert parser.parse(1, "2024-01-15 10:30:00") is None
    assert parser.parse(1, "ab") is None


def test_syslog_parser_with_priority() -> None:
    entry = SyslogLineParser().parse(3, "<11>Jan 15 10:30:00 myhost sshd[123]: Failed password")
    assert entry is not None
    assert entry.severity == "ERROR"
    assert entry.message == "Failed password"
    # Only the first token is taken as the timestamp.
    assert entry.timestamp == "Jan"
    assert entry.source == "15 10:30:00 myhost sshd[123]"
    assert entry.metadata == {"syslog": {"pri": 11}}


def test_syslog_parser_without_priority() -> None:
    entry = SyslogLineParser().parse(1, "2024-01-15T10:30:00Z web-1 nginx: started")
    assert entry is not None
    assert entry.timestamp == "2024-01-15T10:30:00Z"
    assert entry.source == "web-1 nginx"
    assert entry.message == "started"
    assert entry.severity is None
    assert entry.metadata is None


def test_syslog_parser_rejects_lines_without_separator() -> None:
    assert SyslogLineParser().parse(1, "<3>no separator here") is None
    assert SyslogLineParser.severity_from_pri(14) == "INFO"


def test_json_parser_aliases() -> None:
    line = '{"time":"t1","level":"error","msg":"boom","service":"api","id":3}'
    entry = JsonStructuredParser().parse(1, line)
    assert entry is not None
    assert entry.timestamp == "t1"
    assert entry.severity == "error"
    assert entry.source == "api"
    assert entry.message == "boom"
    assert entry.metadata is not None and entry.metadata["id"] == 3


def test_json_parser_without_message_uses_compact_object() -> None:
    entry = JsonStructuredParser().parse(1, '{"code": 5, "ok": false}')
    assert entry is not None
    assert entry.message == '{"code":5,"ok":false}'
    assert JsonStructuredParser().parse(1, "[1]") is None
    assert JsonStructuredParser().parse(1, "{bad") is None


def test_parser_for_format() -> None:
    assert isinstance(parser_for_format(LogFormat.JSON_STRUCTURED), JsonStructuredParser)
    assert isinstance(parser_for_format(LogFormat.SYSLOG), SyslogLineParser)
    assert isinstance(parser_for_format(LogFormat.NGINX), PlainLineParser)
    assert isinstance(parser_for_format(LogFormat.CUSTOM), PlainLineParser)


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ('{"a":1}\n{"a":2}\nplain', LogFormat.JSON_STRUCTURED),
        (
            '127.0.0.1 - - [10/Oct/2000:13:55:36 -0700] "GET / HTTP/1.0" 200 2326\n'
            '10.0.0.2 - - [10/Oct/2000:13:55:37 -0700] "GET /a HTTP/1.0" 404 12',
            LogFormat.NGINX,
        ),
        (
            "Jan 15 10:30:00 host sshd[1]: Accepted key\nJan 15 10:30:01 host cron[2]: tick",
            LogFormat.SYSLOG,
        ),
        (
            "container web-1 started listening on 8080\nplain line without anything\nsome other line",
            LogFormat.DOCKER,
        ),
        ("pod/web-1 restarted\nall quiet", LogFormat.KUBERNETES),
        ("hello world\nbye", LogFormat.CUSTOM),
        ("", LogFormat.UNKNOWN),
    ],
)
def test_detect_log_format(content: str, expected: LogFormat) -> None:
    assert detect_log_format(content) == expected


def test_stack_trace_patterns_win_over_sampling(python_trace: str) -> None:
    content = '{"a":1}\n{"a":2}\n' + python_trace
    assert detect_log_format(content) == LogFormat.STACK_TRACE
    assert detect_analysis_mode(content) == AnalysisMode.TRACE
    assert detect_analysis_mode("just a log line") == AnalysisMode.LOG


def test_sample_lines_skips_blanks_and_limits() -> None:
    content = "\r\n".join(["a", "", "b"] + [f"line {i}" for i in range(30)])
    lines = sample_lines(content)
    assert lines[:2] == ["a", "b"]
    assert len(lines) == 20
    assert all(not line.endswith("\r") for line in lines)
