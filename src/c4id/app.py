# src/c4id/app.py
from __future__ import annotations
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
import typer

from . import __version__
from .digest import id_of_stream
from .errors import C4Error
from .ids import decode, encode
from .io import (
    configure,
    emit_err,
    emit_json,
    emit_payload,
    emit_success,
    emit_verbose,
    emit_warn,
    json_mode,
    progress,
)
from .tree import reduce

app = typer.Typer(add_completion=False, no_args_is_help=True, help="c4: SMPTE ST 2114 C4 content IDs")


# ------------- helpers ----------------

@contextmanager
def _guard() -> Iterator[None]:
    """Map bad input to exit code 2 with a message on stderr."""
    try:
        yield
    except C4Error as e:
        emit_err(f"c4: {e}")
        raise typer.Exit(code=2)
    except ValueError as e:
        emit_err(f"c4: invalid input: {e}")
        raise typer.Exit(code=2)
    except OSError as e:
        emit_err(f"c4: {e.filename or ''}: {e.strerror or e}")
        raise typer.Exit(code=2)

def _id_of_path(p: str) -> str:
    if p == "-":
        return id_of_stream(typer.get_binary_stream("stdin"))
    with open(p, "rb") as fp:
        return id_of_stream(fp)

def _read_ids(ids: List[str]) -> List[str]:
    if ids:
        return ids
    return [ln.strip() for ln in sys.stdin.read().splitlines() if ln.strip()]

# ------------- global options -------------

def _version_cb(value: bool):
    if value:
        typer.echo(f"c4 {__version__}")
        raise typer.Exit()

@app.callback(invoke_without_command=True)
def _entrypoint(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_cb,
        is_eager=True,
    ),
    json_out: bool = typer.Option(False, "--json", envvar="C4_JSON", help="Machine-readable output on stdout"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v verbose, -vv trace"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results"),
):
    if quiet:
        level = "quiet"
    elif verbose:
        level = "trace" if verbose > 1 else "verbose"
    else:
        level = "normal"
    configure(verbosity=level, json_mode=json_out)

# ------------- commands -------------

@app.command("id", help="Print the C4 ID of files (or stdin)")
def id_cmd(
    paths: Optional[List[str]] = typer.Argument(None, help="Files; '-' or nothing reads stdin"),
    total: bool = typer.Option(False, "--sum", help="Also print the reduced ID of all inputs"),
):
    targets = paths or ["-"]
    rows: List[Tuple[str, str]] = []
    with _guard():
        with progress(len(targets), "hashing") as bar:
            for p in targets:
                if p != "-" and Path(p).is_dir():
                    emit_warn(f"c4: {p}: is a directory, skipped")
                    bar.update()
                    continue
                rows.append((p, _id_of_path(p)))
                bar.update()
        summed = reduce(cid for _, cid in rows) if total and rows else None

    if json_mode():
        payload = {"ids": [{"path": p, "id": cid} for p, cid in rows]}
        if summed is not None:
            payload["sum"] = summed
        emit_json(payload)
        return
    for p, cid in rows:
        emit_payload(f"{cid}  {p}")
    if summed is not None:
        emit_payload(summed)

@app.command("encode", help="Encode a SHA-512 digest (128 hex digits) as a C4 ID")
def encode_cmd(digest: str = typer.Argument(..., help="Hex digest")):
    with _guard():
        cid = encode(bytes.fromhex(digest.strip()))
    if json_mode():
        emit_json({"digest": digest.strip().lower(), "id": cid})
    else:
        emit_payload(cid)

@app.command("decode", help="Print the hex SHA-512 digest behind a C4 ID")
def decode_cmd(identifier: str = typer.Argument(..., help="C4 ID")):
    with _guard():
        raw = decode(identifier.strip())
    if json_mode():
        emit_json({"id": identifier.strip(), "digest": raw})
    else:
        emit_payload(raw.hex())

@app.command("reduce", help="Reduce C4 IDs (args or one per line on stdin) to one ID")
def reduce_cmd(
    ids: Optional[List[str]] = typer.Argument(None, help="C4 IDs; read from stdin when omitted"),
    workers: Optional[int] = typer.Option(None, "--workers", "-j", help="Threads per round (default: C4_WORKERS or 1)"),
):
    with _guard():
        items = _read_ids(ids or [])
        emit_verbose(f"c4 reduce: {len(items)} ids ({len(set(items))} distinct)")
        cid = reduce(items, workers=workers)
    if json_mode():
        emit_json({"count": len(set(items)), "id": cid})
    else:
        emit_payload(cid)

@app.command("verify", help="Check that content hashes to the given C4 ID (exit 1 on mismatch)")
def verify_cmd(
    identifier: str = typer.Argument(..., help="Expected C4 ID"),
    path: str = typer.Argument("-", help="File, or '-' for stdin"),
):
    with _guard():
        expected = identifier.strip()
        decode(expected)
        actual = _id_of_path(path)
    ok = actual == expected
    if json_mode():
        emit_json({"ok": ok, "expected": expected, "actual": actual, "path": path})
    elif ok:
        emit_success(f"{path}: OK")
    else:
        emit_err(f"{path}: FAILED (got {actual})")
    if not ok:
        raise typer.Exit(code=1)


def main() -> None:
    app()
