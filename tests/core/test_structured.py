from __future__ import annotations

import json

from tracemind.core.models import ExtractedTrace, InputFormat
from tracemind.core.structured import (
    AWS_LOG_FIELDS,
    build_synthetic_trace,
    extract_from_json_lines,
    extract_stack_traces,
    extract_trace_from_record,
    extract_traces,
    join_traces,
    looks_like_stack_trace,
    lookup,
    lookup_text,
    split_delimited,
)
from tracemind.core.traces import parse_stack_trace


def _ndjson(*records: dict) -> str:
    return "\n".join(json.dumps(r) for r in records)


def test_gcp_text_payload_records(python_trace: str) -> None:
    content = _ndjson(
        {"timestamp": "2024-05-01T10:00:00Z", "severity": "INFO", "textPayload": "started"},
        {"timestamp": "2024-05-01T10:00:05Z", "severity": "ERROR", "textPayload": python_trace},
    )
    traces = extract_traces(content)
    assert traces == [
        ExtractedTrace(text=python_trace, timestamp="2024-05-01T10:00:05Z", severity="ERROR")
    ]


def test_json_payload_message_is_searched(node_trace: str) -> None:
    record = {"jsonPayload": {"message": node_trace}, "severity": "ERROR"}
    assert extract_trace_from_record(record) == node_trace


def test_explicit_stack_trace_field_is_taken_as_is() -> None:
    content = json.dumps([{"stack_trace": "opaque blob", "severity": "ERROR"}, {"message": "ok"}])
    traces = extract_traces(content)
    assert [t.text for t in traces] == ["opaque blob"]


def test_aws_lambda_stack_list_is_joined() -> None:
    record = {
        "@timestamp": "2024-05-01T10:00:00Z",
        "errorMessage": "boom",
        "stackTrace": ["Error: boom", "    at handler (/var/task/index.js:5:11)"],
    }
    traces = extract_from_json_lines(json.dumps(record), AWS_LOG_FIELDS)
    assert len(traces) == 1
    assert traces[0].text == "Error: boom\n    at handler (/var/task/index.js:5:11)"
    assert traces[0].timestamp == "2024-05-01T10:00:00Z"


def test_json_lines_skip_garbage_and_accept_pretty_object(go_trace: str) -> None:
    content = "not json\n" + _ndjson({"exception": go_trace}) + "\n[1, 2]"
    assert [t.text for t in extract_from_json_lines(content)] == [go_trace]

    pretty = json.dumps({"traceback": go_trace}, indent=2)
    assert [t.text for t in extract_from_json_lines(pretty)] == [go_trace]


def test_synthetic_trace_from_source_location() -> None:
    records = [
        {
            "severity": "ERROR",
            "jsonPayload": {
                "message": {"message": "db write failed", "variables": {"err": "conn reset"}}
            },
            "sourceLocation": {"function": "main.save", "file": "/app/store.go", "line": "42"},
        },
        {
            "severity": "INFO",
            "textPayload": "retrying",
            "sourceLocation": {"function": "main.retry", "file": "/app/retry.go", "line": 7},
        },
    ]
    text = build_synthetic_trace(records)
    assert text == (
        "Error: db write failed\n\n"
        "Cause: conn reset\n\n"
        "goroutine 1 [running]:\n"
        "main.save(...)\n\t/app/store.go:42 +0x0\n"
        "main.retry(...)\n\t/app/retry.go:7 +0x0\n"
    )

    traces = extract_traces(_ndjson(*records), InputFormat.JSON)
    assert len(traces) == 1
    assert traces[0].source == "synthetic"
    assert traces[0].severity == "ERROR"

    parsed = parse_stack_trace(traces[0].text)
    assert parsed is not None
    assert [f.function for f in parsed.frames] == ["main.save", "main.retry"]
    assert [f.line for f in parsed.frames] == [42, 7]


def test_synthetic_trace_is_capped_and_optional() -> None:
    records = [
        {"sourceLocation": {"function": f"main.f{i}", "file": "/app/x.go", "line": i}}
        for i in range(80)
    ]
    text = build_synthetic_trace(records)
    assert text is not None
    assert text.count("+0x0") == 50
    assert build_synthetic_trace([{"message": "all good"}]) is None


def test_split_delimited_handles_quotes() -> None:
    rows = split_delimited('x,"a,b""c",z\n\n"multi\nline",2,3')
    assert rows == [["x", 'a,b"c', "z"], ["multi\nline", "2", "3"]]


def test_csv_export_rows_with_traces() -> None:
    trace = 'Traceback (most recent call last):\n  File "/app/a.py", line 1, in f\nValueError: x'
    quoted = trace.replace('"', '""')
    content = (
        "timestamp,severity,textPayload\n"
        "2024-05-01,INFO,hello\n"
        f'2024-05-02,ERROR,"{quoted}"\n'
    )
    traces = extract_traces(content)
    assert traces == [ExtractedTrace(text=trace, timestamp="2024-05-02", severity="ERROR")]


def test_tsv_without_text_column_yields_nothing() -> None:
    content = "timestamp\tseverity\tcode\n2024\tERROR\t500\n"
    assert extract_traces(content, InputFormat.TSV) == []


def test_join_traces_separators() -> None:
    joined = join_traces([ExtractedTrace(text="A"), ExtractedTrace(text="B", timestamp="t2")])
    assert joined == "A\n\n--- Entry 2 (t2) ---\n\nB"
    assert join_traces([ExtractedTrace(text="A"), ExtractedTrace(text="B")]) == (
        "A\n\n--- Entry 2 ---\n\nB"
    )


def test_extract_stack_traces_fallbacks(python_trace: str) -> None:
    assert extract_stack_traces(python_trace) == python_trace

    no_traces = _ndjson({"message": "fine"}, {"message": "still fine"})
    assert extract_stack_traces(no_traces) == no_traces


def test_looks_like_stack_trace() -> None:
    assert looks_like_stack_trace("panic: oops")
    assert looks_like_stack_trace("Exception in main\n\tat com.acme.App.run(App.java:10)")
    assert looks_like_stack_trace("Error: boom\n    at f (/a.js:1:1)")
    assert not looks_like_stack_trace("Error: boom")
    assert not looks_like_stack_trace("")
    assert not looks_like_stack_trace(None)


def test_lookup_helpers() -> None:
    obj = {"a": {"b": {"c": 3}}, "flag": True, "lines": ["x", "y"], "mixed": ["x", 1]}
    assert lookup(obj, "a.b.c") == 3
    assert lookup(obj, "a.missing.c") is None
    assert lookup_text(obj, "a.b.c") == "3"
    assert lookup_text(obj, "flag") is None
    assert lookup_text(obj, "lines") == "x\ny"
    assert lookup_text(obj, "mixed") is None
    assert lookup_text(obj, None) is None
