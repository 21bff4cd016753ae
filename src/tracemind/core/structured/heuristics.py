"""Cheap substring checks for stack-trace text."""

from __future__ import annotations


def looks_like_stack_trace(text: str | None) -> bool:
    """True if a single field value looks like a stack trace."""
    if not text:
        return False

    if "Traceback (most recent call last)" in text:
        return True
    if 'File "' in text and ", line " in text:
        return True

    if "panic:" in text or "goroutine " in text:
        return True
    if ".go:" in text and "+0x" in text:
        return True

    if "    at " in text and (".js:" in text or ".ts:" in text):
        return True

    if "at " in text and ".java:" in text:
        return True
    if "Exception" in text and "\n\tat " in text:
        return True

    # Error header followed by an indented continuation line.
    if "Error:" in text or "Exception:" in text:
        return "\n\t" in text or "\n    at " in text
    return False


def has_stack_trace_patterns(content: str | None) -> bool:
    """True if a stack trace appears anywhere in a whole input."""
    if not content:
        return False
    return (
        "Traceback (most recent call last)" in content
        or ('File "' in content and ", line " in content)
        or "panic:" in content
        or ("goroutine " in content and ".go:" in content)
        or ("    at " in content and (".js:" in content or ".ts:" in content))
        or ("\n\tat " in content and ".java:" in content)
        or "Exception in thread" in content
    )
