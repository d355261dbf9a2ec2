"""Translate backtick escape sequences used in hotstring scripts."""

from __future__ import annotations

import re

ESCAPE_MARKER = "`"

ESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    ";": ";",
    ",": ",",
    "%": "%",
    "`": "`",
    '"': '"',
    "'": "'",
}

# "." does not match a newline, so a marker at end of line stays literal.
_ESCAPE_RE = re.compile(re.escape(ESCAPE_MARKER) + ".")


def translate_escapes(text: str) -> str:
    """
    Replace two-character escape tokens with the characters they stand for.

    Examples:
        "Line1`nLine2" -> "Line1\\nLine2"
        "a``b" -> "a`b"
        "`q" -> "q"
        "C:\\path" -> "C:\\path"  (backslashes are not escapes)

    Unknown escapes drop the marker and keep the following character.
    """
    if not text:
        return ""
    return _ESCAPE_RE.sub(lambda match: ESCAPES.get(match.group(0)[1], match.group(0)[1]), text)
