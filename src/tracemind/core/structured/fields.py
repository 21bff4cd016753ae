"""Field-name conventions of cloud log exports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class LogFieldMap:
    """Where a log provider puts each piece of a record (None = not used)."""

    text_payload: str | None = None
    json_payload: str | None = None
    message: str | None = None
    stack_trace: str | None = None
    timestamp: str | None = None
    severity: str | None = None
    log_events: str | None = None
    error: str | None = None
    exception: str | None = None
    traceback: str | None = None


GCP_LOG_FIELDS = LogFieldMap(
    text_payload="textPayload",
    json_payload="jsonPayload",
    message="message",
    stack_trace="stack_trace",
    timestamp="timestamp",
    severity="severity",
    error="error",
    exception="exception",
    traceback="traceback",
)

AWS_LOG_FIELDS = LogFieldMap(
    message="@message",
    timestamp="@timestamp",
    log_events="logEvents",
    error="errorMessage",
    exception="exception",
    traceback="stackTrace",
)

FIELD_MAPS: dict[str, LogFieldMap] = {"gcp": GCP_LOG_FIELDS, "aws": AWS_LOG_FIELDS}


def lookup(obj: Any, path: str) -> Any:
    """Follow a dotted path through nested objects; None when any step is missing."""
    current = obj
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def lookup_text(obj: Any, path: str | None) -> str | None:
    """Dotted lookup that only yields text.

    A list of strings (AWS Lambda ``stackTrace``) is joined with newlines and
    numbers are rendered; anything else is treated as missing.
    """
    if not path:
        return None
    value = lookup(obj, path)
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
        return "\n".join(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None
