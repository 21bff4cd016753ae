"""Line parser interface for generic (non-trace) logs."""

from __future__ import annotations

from typing import Protocol

from ..models import GenericLogEntry


class LineParser(Protocol):
    """Parser interface: return an entry if the line matches, else None."""

    def parse(self, line_no: int, line: str) -> GenericLogEntry | None:
        """Parse a log line into a GenericLogEntry if recognized."""
        ...
