# src/c4id/io.py
from __future__ import annotations

import datetime as _dt
import io
import json
import os
import sys
import threading
import time
from contextlib import contextmanager
from typing import Any, Literal, Optional

# ──────────────────────────────────────────────────────────────────────────────
# Global state & configuration
# ──────────────────────────────────────────────────────────────────────────────

Verbosity = Literal["quiet", "normal", "verbose", "trace"]
ColorMode = Literal["auto", "always", "never"]

def env_flag(name: str) -> bool:
    """Lenient boolean env var: 1/true/yes/on (any case) is set, anything else is not."""
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")

class _State:
    __slots__ = (
        "verbosity",
        "color_mode",
        "json_mode",
        "timestamps",
        "_color_enabled_cached",
        "_lock",
    )
    def __init__(self) -> None:
        self.verbosity: Verbosity = "normal"
        self.color_mode: ColorMode = os.environ.get("C4_COLOR", "auto")  # auto|always|never
        self.json_mode: bool = env_flag("C4_JSON")
        self.timestamps: bool = env_flag("C4_TIMESTAMPS")
        self._color_enabled_cached: Optional[bool] = None
        self._lock = threading.RLock()

_STATE = _State()

# ──────────────────────────────────────────────────────────────────────────────
# Color
# ──────────────────────────────────────────────────────────────────────────────

_SGR = {
    "reset": "\x1b[0m",
    "dim": "\x1b[2m",
    "fg": {
        "red": "\x1b[31m",
        "green": "\x1b[32m",
        "yellow": "\x1b[33m",
        "blue": "\x1b[34m",
        "magenta": "\x1b[35m",
        "cyan": "\x1b[36m",
    },
}

def is_tty_stderr() -> bool:
    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False

def _color_enabled() -> bool:
    if _STATE._color_enabled_cached is not None:
        return _STATE._color_enabled_cached
    if _STATE.color_mode == "never" or "NO_COLOR" in os.environ:
        _STATE._color_enabled_cached = False
    elif _STATE.color_mode == "always":
        _STATE._color_enabled_cached = True
    else:
        _STATE._color_enabled_cached = is_tty_stderr()
    return _STATE._color_enabled_cached

def style(text: str, *, fg: Optional[str] = None, dim: bool = False) -> str:
    if not _color_enabled():
        return text
    out = []
    if dim:
        out.append(_SGR["dim"])
    if fg:
        out.append(_SGR["fg"].get(fg, ""))
    out.append(text)
    out.append(_SGR["reset"])
    return "".join(out)

# ──────────────────────────────────────────────────────────────────────────────
# Configuration API
# ──────────────────────────────────────────────────────────────────────────────

def configure(
    *,
    verbosity: Optional[Verbosity] = None,
    color: Optional[ColorMode] = None,
    json_mode: Optional[bool] = None,
    timestamps: Optional[bool] = None,
) -> None:
    """Configure output behavior globally. Safe to call multiple times."""
    with _STATE._lock:
        if verbosity is not None:
            _STATE.verbosity = verbosity
        if color is not None:
            _STATE.color_mode = color
            _STATE._color_enabled_cached = None  # recompute
        if json_mode is not None:
            _STATE.json_mode = bool(json_mode)
        if timestamps is not None:
            _STATE.timestamps = bool(timestamps)

def json_mode() -> bool:
    return _STATE.json_mode

# ──────────────────────────────────────────────────────────────────────────────
# Serialization
# ──────────────────────────────────────────────────────────────────────────────

def _json_default(o: Any) -> Any:
    if isinstance(o, (bytes, bytearray)):
        return bytes(o).hex()
    return str(o)

def dumps_json(obj: Any) -> str:
    return json.dumps(obj, default=_json_default, sort_keys=True)

# ──────────────────────────────────────────────────────────────────────────────
# Emitters: human messages → stderr; payloads → stdout
# ──────────────────────────────────────────────────────────────────────────────

def _ts_prefix() -> str:
    if not _STATE.timestamps:
        return ""
    now = _dt.datetime.now().strftime("%H:%M:%S")
    return style(f"[{now}] ", fg="blue", dim=True)

def _emit(stream: io.TextIOBase, s: str) -> None:
    try:
        stream.write(s)
        if not s.endswith("\n"):
            stream.write("\n")
        stream.flush()
    except BrokenPipeError:
        # Reader went away (e.g. `c4 id * | head`); nothing left to report to.
        pass

def emit_payload(line: str) -> None:
    """Plain result line on stdout (IDs, hex digests)."""
    _emit(sys.stdout, line)

def emit_json(obj: Any) -> None:
    _emit(sys.stdout, dumps_json(obj))

def emit_success(msg: str) -> None:
    if _STATE.verbosity == "quiet" or _STATE.json_mode:
        return
    _emit(sys.stderr, _ts_prefix() + style(msg, fg="green"))

def emit_warn(msg: str) -> None:
    if _STATE.json_mode:
        return
    _emit(sys.stderr, _ts_prefix() + style(msg, fg="yellow"))

def emit_err(msg: str) -> None:
    # Always allowed (even in json_mode) because it's diagnostic
    _emit(sys.stderr, _ts_prefix() + style(msg, fg="red"))

def emit_verbose(msg: str) -> None:
    if _STATE.json_mode:
        return
    if _STATE.verbosity in ("verbose", "trace"):
        _emit(sys.stderr, _ts_prefix() + style(msg, fg="cyan"))

def emit_trace(msg: str) -> None:
    if _STATE.json_mode:
        return
    if _STATE.verbosity == "trace":
        _emit(sys.stderr, _ts_prefix() + style(msg, fg="magenta", dim=True))

# ──────────────────────────────────────────────────────────────────────────────
# Progress (TTY only; silent in JSON/non-TTY)
# ──────────────────────────────────────────────────────────────────────────────

class ProgressBar:
    def __init__(self, total: int, label: str = "", width: int = 40) -> None:
        self.total = max(1, int(total))
        self.label = label
        self.width = width
        self.count = 0
        self._last_draw = 0.0

    def update(self, inc: int = 1) -> None:
        self.count = min(self.total, self.count + inc)
        self._draw()

    def _draw(self) -> None:
        if _STATE.json_mode or _STATE.verbosity == "quiet" or not is_tty_stderr():
            return
        now = time.time()
        if now - self._last_draw < 0.03 and self.count < self.total:
            return
        self._last_draw = now
        filled = int(self.width * (self.count / self.total))
        bar = "[" + "#" * filled + "-" * (self.width - filled) + "]"
        pct = int(100 * self.count / self.total)
        label = f" {self.label}" if self.label else ""
        sys.stderr.write(f"\r{bar} {pct:3d}%{label}")
        sys.stderr.flush()
        if self.count >= self.total:
            sys.stderr.write("\n")
            sys.stderr.flush()

    def done(self) -> None:
        self.count = self.total
        self._draw()

@contextmanager
def progress(total: int, label: str = ""):
    p = ProgressBar(total, label)
    try:
        yield p
    finally:
        p.done()
