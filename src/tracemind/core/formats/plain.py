"""Fallback parser for timestamp/level/message lines."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import GenericLogEntry

LEVEL_KEYWORDS = ("ERROR", "WARN", "WARNING", "INFO", "DEBUG", "FATAL", "CRITICAL", "TRACE", "NOTICE")
# Longer names first so WARNING is not read as WARN.
_LEVEL_ALT = "|".join(sorted(LEVEL_KEYWORDS, key=len, reverse=True))


@dataclass(frozen=True, slots=True)
class PlainLineParser:
    """Parse ``[ISO timestamp] [LEVEL] message`` style lines.

    Only the first 19 characters of the timestamp (date and time to the
    second) are kept; fraction and zone are consumed. Both prefixes are
    optional; the line only fails when nothing is left for the message.
    """

    _ts = re.compile(
        r"^(\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})(?:[.,]\d+)?(?:Z|[+-]\d{2}:?\d{2})?\s*"
    )
    _level = re.compile(
        rf"^(?:\[(?P<b>{_LEVEL_ALT})\]\s*|(?P<c>{_LEVEL_ALT})(?::\s*|[ \t]+))",
        re.IGNORECASE,
    )

    def parse(self, line_no: int, line: str) -> GenericLogEntry | None:
        """Parse a generic line into a GenericLogEntry."""
        if len(line) < 3:
            return None

        rest = line
        timestamp = None
        m = self._ts.match(rest)
        if m:
            timestamp = m.group(1)
            rest = rest[m.end():]

        severity = None
        m = self._level.match(rest)
        if m:
            severity = (m.group("b") or m.group("c")).upper()
            rest = rest[m.end():]

        if not rest:
            return None

        return GenericLogEntry(
            line_number=line_no,
            message=rest,
            raw_line=line,
            timestamp=timestamp,
            severity=severity,
        )
