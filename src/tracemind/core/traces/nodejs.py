"""Node.js stack parser."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import Language, StackFrame, StackTrace
from .base import finish_trace, make_frame


@dataclass(frozen=True, slots=True)
class NodeTraceParser:
    """Parse V8-style ``Error: msg`` + ``at fn (file:line:col)`` stacks."""

    language: Language = Language.NODE

    _header = re.compile(r"^((?:[A-Za-z_$][\w$]*)?(?:Error|Exception)): (.*)$", re.MULTILINE)
    _frame = re.compile(r"^\s*at (?:new |async )?(\S+) \((.+?):(\d+):(\d+)\)")
    _bare = re.compile(r"^\s*at (?:async )?(\S+?):(\d+):(\d+)\s*$")

    def parse(self, text: str) -> StackTrace | None:
        """Parse a Node.js stack into frames and the first error header."""
        frames: list[StackFrame] = []
        for line in text.splitlines():
            m = self._frame.match(line)
            if m:
                function, file, lno, col = m.groups()
            else:
                m = self._bare.match(line)
                if not m:
                    continue
                function = "<anonymous>"
                file, lno, col = m.groups()
            frames.append(
                make_frame(
                    self.language,
                    function=function,
                    file=file,
                    line=int(lno),
                    column=int(col),
                )
            )

        error_type = error_message = None
        m = self._header.search(text)
        if m:
            error_type = m.group(1)
            error_message = m.group(0).rstrip("\r")

        return finish_trace(
            self.language, text, frames, error_type=error_type, error_message=error_message
        )
