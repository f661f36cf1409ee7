# src/c4id/digest.py
from __future__ import annotations

import hashlib
import os
from typing import BinaryIO, Optional

from .errors import MalformedDigest
from .ids import DIGEST_SIZE, decode, encode


def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


def compare_digests(a: bytes, b: bytes) -> int:
    """
    Canonical pair ordering used before two digests are concatenated.

    This is a canonicalization rule, not an arithmetic comparison that callers
    may swap out: scan byte 0 -> 63 and decide at the first differing byte.
    It is the ordering that reproduces the ST 2114 worked example.
    Returns -1, 0 or 1.
    """
    if len(a) != DIGEST_SIZE or len(b) != DIGEST_SIZE:
        raise MalformedDigest(f"digests must be {DIGEST_SIZE} bytes, got {len(a)} and {len(b)}")
    for i in range(DIGEST_SIZE):
        if a[i] != b[i]:
            return 1 if a[i] > b[i] else -1
    return 0


def combine_digests(a: bytes, b: bytes) -> bytes:
    """SHA-512 over the canonically ordered 128-byte concatenation."""
    if compare_digests(a, b) > 0:
        a, b = b, a
    return sha512(bytes(a) + bytes(b))


def combine(a: str, b: str) -> str:
    """Hash of hashes for one pair of IDs; symmetric in its arguments."""
    return encode(combine_digests(decode(a), decode(b)))


def _default_chunk_size() -> int:
    return max(1, int(os.environ.get("C4_CHUNK_SIZE", "65536")))


class C4Hash:
    """
    Incremental SHA-512 that reports its result as a C4 ID.

        h = C4Hash().update(b"al").update(b"fa")
        h.id()  # -> "c43zYcLn..."
    """
    __slots__ = ("_h",)

    def __init__(self, data: Optional[bytes] = None) -> None:
        self._h = hashlib.sha512()
        if data:
            self._h.update(data)

    def update(self, chunk: bytes) -> "C4Hash":
        self._h.update(chunk)
        return self

    def digest(self) -> bytes:
        return self._h.digest()

    def id(self) -> str:
        return encode(self._h.digest())

    def copy(self) -> "C4Hash":
        n = C4Hash()
        n._h = self._h.copy()
        return n

    def reset(self) -> None:
        self._h = hashlib.sha512()

    def __repr__(self) -> str:
        return f"<C4Hash {self.id()[:12]}...>"


def id_of(data: bytes) -> str:
    """C4 ID of a byte string."""
    return encode(sha512(data))


def id_of_stream(fp: BinaryIO, *, chunk_size: Optional[int] = None) -> str:
    """C4 ID of everything left in a binary file object, read in chunks."""
    size = chunk_size or _default_chunk_size()
    h = C4Hash()
    while True:
        chunk = fp.read(size)
        if not chunk:
            break
        h.update(chunk)
    return h.id()


__all__ = [
    "sha512",
    "compare_digests",
    "combine_digests",
    "combine",
    "C4Hash",
    "id_of",
    "id_of_stream",
]
