# src/c4id/ids.py
from __future__ import annotations

"""
SMPTE ST 2114:2017 C4 identifiers: 64-byte SHA-512 digest <-> 90-char base58 ID.

An ID is the literal prefix "c4" followed by the digest's big-endian integer
value written in base 58, most significant symbol first, left-padded with the
zero symbol "1" to 88 symbols. 58**88 > 2**512, so every digest fits.
"""

from .errors import IntegerOverflow, InvalidSymbol, MalformedDigest, MalformedIdentifier

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE = 58
PREFIX = "c4"
DIGEST_SIZE = 64
ID_LENGTH = 90
_SUFFIX_LENGTH = ID_LENGTH - len(PREFIX)
_MAX_VALUE = (1 << (8 * DIGEST_SIZE)) - 1

# (first code point, last code point, offset): symbol index = ord(ch) - offset.
# The gaps are the confusable characters 0, I, O and l.
_RANGES: tuple[tuple[int, int, int], ...] = (
    (0x31, 0x39, 0x31),  # 1-9
    (0x41, 0x48, 0x38),  # A-H
    (0x4A, 0x4E, 0x39),  # J-N
    (0x50, 0x5A, 0x3A),  # P-Z
    (0x61, 0x6B, 0x40),  # a-k
    (0x6D, 0x7A, 0x41),  # m-z
)


def symbol_index(ch: str) -> int:
    """Alphabet index of `ch`, or -1 when it is not a C4 symbol."""
    x = ord(ch)
    for lo, hi, off in _RANGES:
        if x < lo:
            break
        if x <= hi:
            return x - off
    return -1


def _b58(n: int) -> str:
    """Fixed-width (88 symbol) base58, zero-padded on the left."""
    out = [ALPHABET[0]] * _SUFFIX_LENGTH
    i = _SUFFIX_LENGTH - 1
    while n:
        n, r = divmod(n, BASE)
        out[i] = ALPHABET[r]
        i -= 1
    return "".join(out)


def encode(digest: bytes) -> str:
    """
    Encode a 64-byte digest as a C4 ID. Total over all 64-byte inputs;
    the all-zero digest gives "c4" followed by 88 "1".
    """
    if not isinstance(digest, (bytes, bytearray, memoryview)):
        raise MalformedDigest(f"digest must be bytes, got {type(digest).__name__}")
    raw = bytes(digest)
    if len(raw) != DIGEST_SIZE:
        raise MalformedDigest(f"digest must be {DIGEST_SIZE} bytes, got {len(raw)}")
    return PREFIX + _b58(int.from_bytes(raw, "big"))


def decode(identifier: str) -> bytes:
    """
    Decode a C4 ID back into its 64-byte digest.

    Raises MalformedIdentifier (length/prefix), InvalidSymbol (character
    outside the alphabet) or IntegerOverflow (value wider than 512 bits).
    """
    if not isinstance(identifier, str):
        raise MalformedIdentifier(f"identifier must be str, got {type(identifier).__name__}")
    if len(identifier) != ID_LENGTH:
        raise MalformedIdentifier(f"identifier must be {ID_LENGTH} characters, got {len(identifier)}")
    if not identifier.startswith(PREFIX):
        raise MalformedIdentifier(f"identifier must start with {PREFIX!r}, got {identifier[:2]!r}")

    value = 0
    for pos in range(len(PREFIX), ID_LENGTH):
        ch = identifier[pos]
        d = symbol_index(ch)
        if d < 0:
            raise InvalidSymbol(ch, pos)
        value = value * BASE + d
    if value > _MAX_VALUE:
        raise IntegerOverflow(f"identifier value needs {value.bit_length()} bits (max {8 * DIGEST_SIZE})")
    return value.to_bytes(DIGEST_SIZE, "big")


def is_valid(identifier: str) -> bool:
    try:
        decode(identifier)
    except (MalformedIdentifier, InvalidSymbol, IntegerOverflow):
        return False
    return True


__all__ = [
    "ALPHABET",
    "BASE",
    "PREFIX",
    "DIGEST_SIZE",
    "ID_LENGTH",
    "symbol_index",
    "encode",
    "decode",
    "is_valid",
]
