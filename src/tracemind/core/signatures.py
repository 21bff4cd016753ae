"""Normalize log messages into error signatures.

Variable parts (ids, numbers, addresses, quoted values) are replaced with
placeholders so repeated failures collapse to one signature.
"""

from __future__ import annotations

import re

_UUID_RE = re.compile(r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b")
_EMAIL_RE = re.compile(r"(?i)\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b")
_IPV4_RE = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}(?::\d+)?\b")
_HEX_RE = re.compile(r"\b0x[0-9a-fA-F]+\b|\b[0-9a-fA-F]{12,}\b")
_QUOTED_RE = re.compile(r"\"[^\"]*\"|'[^']*'")
_NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?\b")
_SPACE_RE = re.compile(r"\s+")

MAX_SIGNATURE_LEN = 200


def error_signature(message: str) -> str:
    """Return the normalized signature of a message."""
    text = _UUID_RE.sub("<uuid>", message)
    text = _EMAIL_RE.sub("<email>", text)
    text = _IPV4_RE.sub("<ip>", text)
    text = _HEX_RE.sub("<hex>", text)
    text = _QUOTED_RE.sub("<str>", text)
    text = _NUMBER_RE.sub("<n>", text)
    text = _SPACE_RE.sub(" ", text).strip()
    return text[:MAX_SIGNATURE_LEN]
