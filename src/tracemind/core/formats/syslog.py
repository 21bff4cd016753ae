"""Syslog-style lines."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import GenericLogEntry

SYSLOG_SEVERITIES = ("EMERG", "ALERT", "CRITICAL", "ERROR", "WARNING", "NOTICE", "INFO", "DEBUG")
MAX_TIMESTAMP_LEN = 30


@dataclass(frozen=True, slots=True)
class SyslogLineParser:
    """Parse ``[<pri>]timestamp source: message`` lines.

    The timestamp is the first space-delimited token after the optional
    priority; whatever sits between it and the first ``": "`` is the source.
    """

    _pri = re.compile(r"^<(\d{1,3})>")

    @staticmethod
    def severity_from_pri(pri: int) -> str:
        """Map a syslog PRI value to its severity name."""
        return SYSLOG_SEVERITIES[pri & 0x7]

    def parse(self, line_no: int, line: str) -> GenericLogEntry | None:
        """Parse a syslog line into a GenericLogEntry."""
        if len(line) < 10:
            return None

        rest = line
        severity = None
        m = self._pri.match(line)
        if m:
            severity = self.severity_from_pri(int(m.group(1)))
            rest = line[m.end():]

        colon = rest.find(": ")
        if colon < 0:
            return None

        timestamp = source = None
        space = rest.find(" ", 0, colon)
        if space >= 0:
            timestamp = rest[:min(space, MAX_TIMESTAMP_LEN)]
            source = rest[space + 1:colon]

        return GenericLogEntry(
            line_number=line_no,
            message=rest[colon + 2:],
            raw_line=line,
            timestamp=timestamp,
            severity=severity,
            source=source,
            metadata={"syslog": {"pri": int(m.group(1))}} if m else None,
        )
