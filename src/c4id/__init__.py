# src/c4id/__init__.py
"""SMPTE ST 2114:2017 C4 content identifiers and ID-set reduction."""
from __future__ import annotations

__version__ = "0.1.0"

from .errors import (
    C4Error,
    EmptyInput,
    IntegerOverflow,
    InvalidSymbol,
    MalformedDigest,
    MalformedIdentifier,
)
from .ids import decode, encode, is_valid
from .digest import C4Hash, combine, compare_digests, id_of, id_of_stream, sha512
from .tree import reduce, reduce_digests

__all__ = [
    "__version__",
    "C4Error",
    "EmptyInput",
    "IntegerOverflow",
    "InvalidSymbol",
    "MalformedDigest",
    "MalformedIdentifier",
    "encode",
    "decode",
    "is_valid",
    "C4Hash",
    "combine",
    "compare_digests",
    "id_of",
    "id_of_stream",
    "sha512",
    "reduce",
    "reduce_digests",
]
