"""Percent-escaping as used by Assuan arguments and data lines."""

import re
from urllib.parse import unquote

# A '%' that is not followed by two hex digits.
_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode(text: str) -> str:
    """Decode UTF-8 percent-escapes in ``text``.

    On any failure (a malformed escape or bytes that are not UTF-8) the
    original text is returned unchanged.
    """
    if "%" not in text:
        return text
    if _BROKEN_ESCAPE.search(text):
        return text
    try:
        return unquote(text, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        return text


def encode_data(data: str) -> str:
    """Escape the characters Assuan forbids inside a ``D`` line."""
    return data.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
