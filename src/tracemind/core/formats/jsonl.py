"""JSON structured log lines."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..models import GenericLogEntry


def _first_string(obj: Mapping[str, Any], keys: Sequence[str]) -> str | None:
    for k in keys:
        v = obj.get(k)
        if isinstance(v, str):
            return v
    return None


@dataclass(frozen=True, slots=True)
class JsonStructuredParser:
    """Parse one JSON object per line, keeping the object as metadata."""

    time_keys: Sequence[str] = ("timestamp", "time", "@timestamp", "ts", "datetime", "date")
    level_keys: Sequence[str] = ("level", "severity", "loglevel", "log_level", "lvl")
    msg_keys: Sequence[str] = ("message", "msg", "@message", "text", "log")
    source_keys: Sequence[str] = ("source", "logger", "service", "component", "name")

    def parse(self, line_no: int, line: str) -> GenericLogEntry | None:
        """Parse a JSON object line; the compact object is the message if none is named."""
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            return None
        if not isinstance(obj, dict):
            return None

        msg = _first_string(obj, self.msg_keys)
        if msg is None:
            msg = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)

        return GenericLogEntry(
            line_number=line_no,
            message=msg,
            raw_line=line,
            timestamp=_first_string(obj, self.time_keys),
            severity=_first_string(obj, self.level_keys),
            source=_first_string(obj, self.source_keys),
            metadata=obj,
        )
