"""CSV/TSV exports of log records."""

from __future__ import annotations

import csv
import io
import logging

from ..models import ExtractedTrace
from .heuristics import looks_like_stack_trace

logger = logging.getLogger(__name__)

TEXT_COLUMNS = ("textPayload", "message", "text", "log")
TIMESTAMP_COLUMN = "timestamp"
SEVERITY_COLUMN = "severity"


def split_delimited(content: str, delimiter: str = ",") -> list[list[str]]:
    """Split RFC4180-style content into rows.

    Quoted fields may contain the delimiter, newlines and doubled quotes.
    """
    reader = csv.reader(io.StringIO(content), delimiter=delimiter)
    return [row for row in reader if row]


def _find_column(headers: list[str], name: str) -> int | None:
    wanted = name.lower()
    for idx, header in enumerate(headers):
        if header.strip().lower() == wanted:
            return idx
    return None


def _cell(row: list[str], idx: int | None) -> str | None:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def extract_from_delimited(content: str, delimiter: str = ",") -> list[ExtractedTrace]:
    """Keep rows whose text column looks like a stack trace."""
    rows = split_delimited(content, delimiter)
    if not rows:
        return []
    headers, data = rows[0], rows[1:]

    text_col = None
    for name in TEXT_COLUMNS:
        text_col = _find_column(headers, name)
        if text_col is not None:
            break
    if text_col is None:
        logger.warning("No text/message column found in delimited input")
        return []

    ts_col = _find_column(headers, TIMESTAMP_COLUMN)
    sev_col = _find_column(headers, SEVERITY_COLUMN)

    out: list[ExtractedTrace] = []
    for row in data:
        text = _cell(row, text_col)
        if not looks_like_stack_trace(text):
            continue
        out.append(
            ExtractedTrace(text=text, timestamp=_cell(row, ts_col), severity=_cell(row, sev_col))
        )
    return out
