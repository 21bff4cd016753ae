"""Trace parser interface and shared helpers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from ..languages import is_stdlib_path, is_third_party_path
from ..models import Language, StackFrame, StackTrace

logger = logging.getLogger(__name__)


class TraceParser(Protocol):
    """Parser interface: return a StackTrace if frames were found, else None."""

    language: Language

    def parse(self, text: str) -> StackTrace | None:
        """Parse raw trace text."""
        ...


def make_frame(
    language: Language,
    *,
    function: str | None,
    file: str | None,
    line: int,
    column: int = 0,
    module: str | None = None,
    context: str | None = None,
) -> StackFrame:
    """Build a frame with stdlib/third-party flags filled in from its path."""
    return StackFrame(
        function=function,
        file=file,
        line=line,
        column=column,
        module=module,
        context=context,
        is_stdlib=is_stdlib_path(file, language),
        is_third_party=is_third_party_path(file, language),
    )


def finish_trace(
    language: Language,
    text: str,
    frames: Sequence[StackFrame],
    *,
    error_type: str | None,
    error_message: str | None,
) -> StackTrace | None:
    """Wrap parsed pieces into a StackTrace; zero frames is a miss."""
    if not frames:
        logger.warning("No %s frames found in %d chars of input", language.display_name, len(text))
        return None
    logger.debug("Parsed %d %s frames", len(frames), language.display_name)
    return StackTrace(
        language=language,
        error_type=error_type,
        error_message=error_message,
        frames=tuple(frames),
        raw_trace=text,
    )
