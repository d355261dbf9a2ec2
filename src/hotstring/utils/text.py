"""Text transforms applied to replacement output."""

from __future__ import annotations

import re

_CARET_LEFT_RE = re.compile(r"\{Left (\d+)\}", re.IGNORECASE)

SEND_KEYS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\{Enter\}", re.IGNORECASE), "\n"),
    (re.compile(r"\{Tab\}", re.IGNORECASE), "\t"),
    (re.compile(r"\{Space\}", re.IGNORECASE), " "),
)


def conform_case(typed: str, replacement: str) -> str:
    """Adapt ``replacement`` to the capitalisation of ``typed``.

    "BTW" -> "BY THE WAY", "Btw" -> "By the way", anything else unchanged.
    """
    if typed == typed.upper() and typed != typed.lower():
        return replacement.upper()
    if typed and typed[0] == typed[0].upper() and typed[1:] == typed[1:].lower():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def expand_send_keys(text: str) -> str:
    for pattern, value in SEND_KEYS:
        text = pattern.sub(value, text)
    return text


def extract_caret_offset(text: str) -> tuple[str, int]:
    """Strip the first ``{Left n}`` marker, returning the text and ``n`` (0 if absent)."""
    match = _CARET_LEFT_RE.search(text)
    if not match:
        return text, 0
    return text[: match.start()] + text[match.end() :], int(match.group(1))
