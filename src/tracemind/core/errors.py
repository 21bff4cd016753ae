"""Exception types raised by the analysis core.

Each error also derives from the builtin a caller would naturally catch, so
``except ValueError`` around a parse keeps working.
"""

from __future__ import annotations


class TraceMindError(Exception):
    """Base class for all core errors."""


class InvalidArgumentError(TraceMindError, ValueError):
    """Empty or missing input passed to an entry point."""


class SourceReadError(TraceMindError, OSError):
    """A source file could not be read."""


class UnsupportedLanguageError(TraceMindError):
    """No parser or grammar is available for the language."""


class ParseFailure(TraceMindError, ValueError):
    """A parser produced zero usable units."""


class FunctionNotFoundError(TraceMindError, LookupError):
    """A function lookup by name or line missed."""
