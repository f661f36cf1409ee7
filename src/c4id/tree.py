# src/c4id/tree.py
from __future__ import annotations

"""
ST 2114 "hash of hashes": fold a set of C4 IDs into one ID.

    ids = sorted(set(ids))
    while len(ids) > 1:
        hold = ids.pop() if len(ids) % 2 else None
        ids = [combine(ids[i], ids[i + 1]) for i in range(0, len(ids), 2)]
        if hold: ids.append(hold)

The held (odd, last) element is appended after the round's outputs and is
never re-sorted. Pairing is positional after the initial sort.
"""

import os
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from .digest import combine_digests
from .errors import EmptyInput, MalformedIdentifier
from .ids import decode, encode
from .io import emit_trace, emit_warn


def resolve_workers(workers: Optional[int]) -> int:
    """Explicit value wins, then C4_WORKERS, then 1 (sequential)."""
    if workers is None:
        raw = os.environ.get("C4_WORKERS", "").strip()
        try:
            workers = int(raw) if raw else 1
        except ValueError:
            emit_warn(f"c4: ignoring C4_WORKERS={raw!r} (not an integer), using 1")
            workers = 1
    return max(1, workers)


def _pair(p: Tuple[bytes, bytes]) -> bytes:
    return combine_digests(p[0], p[1])


def _round(digests: List[bytes], pool: Optional[Executor]) -> List[bytes]:
    hold: Optional[bytes] = None
    if len(digests) % 2 == 1:
        hold = digests.pop()
    pairs = [(digests[i], digests[i + 1]) for i in range(0, len(digests), 2)]
    if pool is not None and len(pairs) > 1:
        out = list(pool.map(_pair, pairs))
    else:
        out = [_pair(p) for p in pairs]
    if hold is not None:
        out.append(hold)
    return out


def reduce(identifiers: Iterable[str], *, workers: Optional[int] = None) -> str:
    """
    Reduce C4 IDs to a single ID.

    Input order and duplicates do not matter. Every ID is decoded (validated)
    before any hashing, so a bad ID fails the whole call. One distinct ID is
    returned as is; no IDs raises EmptyInput.
    """
    items = list(identifiers)
    for s in items:
        if not isinstance(s, str):
            raise MalformedIdentifier(f"identifier must be str, got {type(s).__name__}")
    ids = sorted(set(items))
    if not ids:
        raise EmptyInput("reduce() needs at least one identifier")
    digests = [decode(s) for s in ids]
    if len(ids) == 1:
        return ids[0]

    n = resolve_workers(workers)
    pool: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(max_workers=n) if n > 1 else None
    try:
        rnd = 0
        while len(digests) > 1:
            rnd += 1
            emit_trace(f"c4 reduce: round {rnd}, {len(digests)} ids")
            digests = _round(digests, pool)
    finally:
        if pool is not None:
            pool.shutdown(wait=True)
    return encode(digests[0])


def reduce_digests(digests: Sequence[bytes], *, workers: Optional[int] = None) -> str:
    """Same as reduce() for raw 64-byte digests."""
    return reduce((encode(d) for d in digests), workers=workers)


__all__ = ["reduce", "reduce_digests", "resolve_workers"]
