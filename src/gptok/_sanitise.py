"""
Utilities for turning tokens into displayable strings for logs and errors.
"""

import unicodedata

from .byte_map import unicode_to_bytes


def _escape_ctrl_chars(s: str) -> str:
    """Replace Unicode control characters with their escape sequences."""
    # control category codes vary (Cc, Cf, Cn, ...) so check the first letter
    return "".join(
        f"\\u{ord(c):04x}" if unicodedata.category(c)[0] == "C" else c for c in s
    )


def _render_bytes(b: bytes) -> str:
    """
    Decode bytes as UTF-8 and escape control characters.

    Partial UTF-8 sequences, common for sub-tokens of multi-byte characters,
    show up as the Unicode replacement character.
    """
    return _escape_ctrl_chars(b.decode("utf-8", errors="replace"))


def _render_token(token: str) -> str:
    """
    Render a byte-mapped vocabulary token as the text it stands for.

    Characters outside the byte table are kept as they are.
    """
    table = unicode_to_bytes()
    if all(c in table for c in token):
        return _render_bytes(bytes(table[c] for c in token))
    return _escape_ctrl_chars(token)
