# src/c4id/errors.py
from __future__ import annotations


class C4Error(ValueError):
    """Base class for every structurally invalid input."""


class MalformedIdentifier(C4Error):
    """Identifier has the wrong length, type or prefix."""


class MalformedDigest(C4Error):
    """Digest is not exactly 64 bytes."""


class InvalidSymbol(C4Error):
    """A suffix character is outside the C4 alphabet."""

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(f"invalid symbol {char!r} at position {position}")


class IntegerOverflow(C4Error):
    """Decoded value does not fit in 512 bits."""


class EmptyInput(C4Error):
    """reduce() was given no identifiers."""


__all__ = [
    "C4Error",
    "MalformedIdentifier",
    "MalformedDigest",
    "InvalidSymbol",
    "IntegerOverflow",
    "EmptyInput",
]
