"""Go panic parser."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import Language, StackFrame, StackTrace
from .base import finish_trace, make_frame


def go_package(function: str) -> str | None:
    """Return the package path of a qualified Go function name."""
    head, _, tail = function.rpartition("/")
    pkg, dot, _ = tail.partition(".")
    if not dot:
        return None
    return f"{head}/{pkg}" if head else pkg


@dataclass(frozen=True, slots=True)
class GoTraceParser:
    """Parse ``panic:`` output with function/location line pairs.

    Scans lines with two states: waiting for a function line, then waiting for
    its ``file.go:N`` location. A new function line replaces a pending one and
    unrelated lines leave the state alone.
    """

    language: Language = Language.GO

    _header = re.compile(r"^(panic|Error|error): (.*)$", re.MULTILINE)
    _function = re.compile(r"^([^\s(]+)\(")
    _location = re.compile(r"^\s+([^:]+\.go):(\d+)")

    def parse(self, text: str) -> StackTrace | None:
        """Parse a Go panic into frames and the first error header."""
        frames: list[StackFrame] = []
        pending: str | None = None

        for line in text.splitlines():
            m = self._function.match(line)
            if m:
                pending = m.group(1)
                continue
            if pending is None:
                continue
            m = self._location.match(line)
            if m:
                frames.append(
                    make_frame(
                        self.language,
                        function=pending,
                        file=m.group(1),
                        line=int(m.group(2)),
                        module=go_package(pending),
                    )
                )
                pending = None

        error_type = error_message = None
        m = self._header.search(text)
        if m:
            error_type = m.group(1)
            error_message = m.group(0).rstrip("\r")

        return finish_trace(
            self.language, text, frames, error_type=error_type, error_message=error_message
        )
