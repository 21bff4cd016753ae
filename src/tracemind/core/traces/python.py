"""Python traceback parser."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import Language, StackFrame, StackTrace
from .base import finish_trace, make_frame


@dataclass(frozen=True, slots=True)
class PythonTraceParser:
    """Parse ``Traceback (most recent call last)`` output.

    The error header is taken from the last matching line, so with chained
    exceptions the final one wins.
    """

    language: Language = Language.PYTHON

    _frame = re.compile(r'File "([^"]+)", line (\d+)(?:, in (\S+))?')
    _error = re.compile(r"^((?:[A-Za-z_][\w.]*)?(?:Error|Exception|Warning)): (.*)$", re.MULTILINE)

    def _context_line(self, lines: list[str], idx: int) -> str | None:
        """Return the source line printed under a frame, if any."""
        if idx + 1 >= len(lines):
            return None
        nxt = lines[idx + 1]
        if not nxt[:1].isspace() or self._frame.search(nxt):
            return None
        code = nxt.strip()
        if not code or set(code) <= {"^", "~"}:
            return None
        return code

    def parse(self, text: str) -> StackTrace | None:
        """Parse a Python traceback into frames and the final exception."""
        lines = text.splitlines()
        frames: list[StackFrame] = []
        for idx, line in enumerate(lines):
            m = self._frame.search(line)
            if not m:
                continue
            frames.append(
                make_frame(
                    self.language,
                    function=m.group(3) or "<module>",
                    file=m.group(1),
                    line=int(m.group(2)),
                    context=self._context_line(lines, idx),
                )
            )

        error_type = error_message = None
        for m in self._error.finditer(text):
            error_type = m.group(1)
            error_message = m.group(0).rstrip("\r")

        return finish_trace(
            self.language, text, frames, error_type=error_type, error_message=error_message
        )
