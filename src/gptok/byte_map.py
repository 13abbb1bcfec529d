"""
Reversible mapping between raw bytes and printable unicode characters.

Byte-level BPE vocabularies store their tokens as strings, not bytes. To make
every byte representable (including control characters and whitespace, which
would otherwise collide with the pretokenizer's own splitting), each byte is
swapped for a single visible character before merging.
"""

from functools import cache
from types import MappingProxyType

from .errors import VocabularyError
from .types import ByteTable

# inclusive byte ranges that already render as visible characters
_PRINTABLE_RANGES: tuple[tuple[int, int], ...] = (
    (ord("!"), ord("~")),
    (ord("¡"), ord("¬")),
    (ord("®"), ord("ÿ")),
)


@cache
def bytes_to_unicode() -> ByteTable:
    """
    Build the byte -> character table.

    Printable bytes map to themselves. The remaining bytes are shifted, in
    increasing byte order, onto code points starting at 256.
    """
    bs: list[int] = []
    for lo, hi in _PRINTABLE_RANGES:
        bs.extend(range(lo, hi + 1))
    cs = bs[:]

    n = 0
    for b in range(2**8):
        if b not in bs:
            bs.append(b)
            cs.append(2**8 + n)
            n += 1

    return MappingProxyType({b: chr(c) for b, c in zip(bs, cs)})


@cache
def unicode_to_bytes() -> MappingProxyType[str, int]:
    """Build the inverse character -> byte table."""
    return MappingProxyType({c: b for b, c in bytes_to_unicode().items()})


def encode_bytes(data: bytes) -> str:
    """Map every byte of ``data`` to its printable character."""
    table = bytes_to_unicode()
    return "".join(table[b] for b in data)


def decode_chars(chars: str) -> bytes:
    """
    Map printable characters back to the bytes they stand for.

    :raises VocabularyError: If a character is not part of the byte table.
    """
    table = unicode_to_bytes()
    try:
        return bytes(table[c] for c in chars)
    except KeyError as e:
        raise VocabularyError("character outside byte table", invalid_tok=e.args[0]) from e
