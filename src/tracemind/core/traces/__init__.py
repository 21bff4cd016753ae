"""Stack trace parsers (Python, Go, Node.js).

``parse_trace`` is the strict entry point; ``parse_stack_trace`` returns None
instead of raising, for callers that fall back to log parsing.
"""

from __future__ import annotations

import logging

from ..errors import InvalidArgumentError, ParseFailure, TraceMindError, UnsupportedLanguageError
from ..languages import detect_language
from ..models import Language, StackTrace
from .base import TraceParser
from .go import GoTraceParser, go_package
from .nodejs import NodeTraceParser
from .python import PythonTraceParser

logger = logging.getLogger(__name__)

_PARSERS: dict[Language, TraceParser] = {
    Language.PYTHON: PythonTraceParser(),
    Language.GO: GoTraceParser(),
    Language.NODE: NodeTraceParser(),
}


def parser_for(language: Language) -> TraceParser:
    """Return the trace parser for a language."""
    try:
        return _PARSERS[language]
    except KeyError as exc:
        raise UnsupportedLanguageError(f"No trace parser for language: {language.value}") from exc


def detect_trace_language(text: str | None) -> Language:
    """Detect the language of trace text (UNKNOWN for empty input)."""
    if not text or not text.strip():
        return Language.UNKNOWN
    return detect_language(text)


def parse_trace(text: str | None, language: Language = Language.UNKNOWN) -> StackTrace:
    """Parse trace text, detecting the language unless one is given.

    Raises InvalidArgumentError on empty input, UnsupportedLanguageError when
    the language cannot be determined, and ParseFailure when no frames match.
    """
    if not text or not text.strip():
        raise InvalidArgumentError("trace text is empty")

    if language == Language.UNKNOWN:
        language = detect_trace_language(text)
    parser = parser_for(language)

    trace = parser.parse(text)
    if trace is None:
        raise ParseFailure(f"no {language.display_name} frames found in trace")
    return trace


def parse_stack_trace(text: str | None) -> StackTrace | None:
    """Lenient variant of parse_trace: None when nothing usable was found."""
    try:
        return parse_trace(text)
    except TraceMindError as exc:
        logger.debug("Stack trace parse failed: %s", exc)
        return None


__all__ = [
    "GoTraceParser",
    "NodeTraceParser",
    "PythonTraceParser",
    "TraceParser",
    "detect_trace_language",
    "go_package",
    "parse_stack_trace",
    "parse_trace",
    "parser_for",
]
