"""Relevance scoring for generic log entries."""

from __future__ import annotations

from .models import GenericLog, GenericLogEntry
from .signatures import error_signature

ERROR_BASE = 0.4
WARNING_BASE = 0.15
ANOMALY_THRESHOLD = 0.5

# Case-insensitive substrings of the message and their additive weights.
KEYWORD_WEIGHTS: tuple[tuple[str, float], ...] = (
    ("error", 0.3),
    ("exception", 0.4),
    ("failed", 0.3),
    ("failure", 0.3),
    ("timeout", 0.25),
    ("refused", 0.25),
    ("denied", 0.2),
    ("crash", 0.5),
    ("panic", 0.5),
    ("fatal", 0.5),
    ("critical", 0.4),
    ("segfault", 0.5),
    ("oom", 0.4),
    ("out of memory", 0.4),
    ("connection reset", 0.3),
    ("502", 0.35),
    ("503", 0.35),
    ("500", 0.3),
)


def relevance_score(entry: GenericLogEntry) -> float:
    """Score one entry in [0, 1]."""
    score = 0.0
    if entry.is_error:
        score += ERROR_BASE
    elif entry.severity and entry.severity.upper() in ("WARN", "WARNING"):
        score += WARNING_BASE

    msg = entry.message.lower()
    score += sum(w for kw, w in KEYWORD_WEIGHTS if kw in msg)
    return min(round(score, 4), 1.0)


def score_entry_relevance(log: GenericLog) -> GenericLog:
    """Score every entry, flag anomalies and collect error signatures."""
    seen: set[str] = set()
    signatures: list[str] = []
    for entry in log.entries:
        entry.relevance_score = relevance_score(entry)
        if entry.relevance_score >= ANOMALY_THRESHOLD:
            entry.is_anomaly = True
        if entry.is_error or entry.is_anomaly:
            sig = error_signature(entry.message)
            if sig and sig not in seen:
                seen.add(sig)
                signatures.append(sig)
    log.error_signatures = signatures
    return log
