"""Container format detection (raw text, JSON lines, JSON array, CSV, TSV)."""

from __future__ import annotations

from .models import InputFormat

HEADER_KEYWORDS = ("timestamp", "severity", "message", "textpayload")


def _as_text(content: str | bytes | None) -> str:
    if content is None:
        return ""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def detect_input_format(content: str | bytes | None) -> InputFormat:
    """Classify input by its first non-whitespace character and first line.

    Delimited formats need both delimiter density and a known header keyword,
    so ordinary prose with commas stays RAW.
    """
    text = _as_text(content).lstrip()
    if not text:
        return InputFormat.RAW
    if text[0] == "[":
        return InputFormat.JSON_ARRAY
    if text[0] == "{":
        return InputFormat.JSON

    first = text.split("\n", 1)[0]
    tabs = first.count("\t")
    commas = first.count(",")
    lowered = first.lower()
    has_header = any(k in lowered for k in HEADER_KEYWORDS)

    if (tabs >= 2 or (tabs > 0 and tabs >= commas)) and has_header:
        return InputFormat.TSV
    if commas >= 2 and has_header:
        return InputFormat.CSV
    return InputFormat.RAW


def is_structured_log(content: str | bytes | None) -> bool:
    """True when the input is anything other than raw text."""
    return detect_input_format(content) != InputFormat.RAW
