"""
Colour console logging for crawl sessions.

Each line carries a timestamp, a level symbol and the name of the
component that emitted it, followed by optional ``key=value`` data.
When WRITE_TO_FILE is ``true`` the same lines, minus colours, are
also appended to a per-crawl file under ``.logs/``.

Timers and the open log file live in ``contextvars.ContextVar`` so
that sessions crawling in separate tasks keep their own.
"""

from __future__ import annotations

import contextvars
import io
import os
import pathlib
import re
import sys
import time
from datetime import UTC, datetime

_timers_var: contextvars.ContextVar[dict[str, tuple[float, str]]] = contextvars.ContextVar("domcrawl_timers")
_log_file_var: contextvars.ContextVar[io.TextIOWrapper | None] = contextvars.ContextVar("domcrawl_log_file", default=None)

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_GRAY = "\033[90m"

# level -> (colour, symbol)
_LEVELS = {
    "info": ("\033[36m", "ℹ"),
    "warn": ("\033[33m", "⚠"),
    "error": ("\033[31m", "✗"),
    "debug": (_GRAY, "•"),
    "timing": ("\033[35m", "⏱"),
}

_MAX_VALUE_LEN = 200


def _timers() -> dict[str, tuple[float, str]]:
    try:
        return _timers_var.get()
    except LookupError:
        timers: dict[str, tuple[float, str]] = {}
        _timers_var.set(timers)
        return timers


def _clock() -> str:
    """Current UTC time as HH:MM:SS.mmm."""
    now = datetime.now(UTC)
    return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"


def _elapsed(ms: float) -> str:
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60_000:
        return f"{ms / 1000:.2f}s"
    return f"{int(ms // 60_000)}m {(ms % 60_000) / 1000:.1f}s"


def _render(value: object) -> str:
    """Colour a data value; collections are summarised by size."""
    if isinstance(value, str):
        if len(value) > _MAX_VALUE_LEN:
            value = value[: _MAX_VALUE_LEN - 3] + "..."
        return f'\033[32m"{value}"{_RESET}'
    if isinstance(value, bool) or value is None:
        return f"{_DIM}{value}{_RESET}"
    if isinstance(value, (int, float)):
        return f"\033[33m{value}{_RESET}"
    if isinstance(value, (list, tuple, dict)):
        unit = "keys" if isinstance(value, dict) else "items"
        return f"\033[36m[{len(value)} {unit}]{_RESET}"
    return str(value)


# ============================================================================
# Crawl Log Files
# ============================================================================


def start_log_file(label: str, logs_dir: pathlib.Path | None = None) -> pathlib.Path | None:
    """Open a log file for one crawl, named after *label* (usually the URL).

    Returns the file path, or ``None`` when WRITE_TO_FILE is off or the
    file could not be opened.
    """
    if os.environ.get("WRITE_TO_FILE", "").lower() != "true":
        return None

    end_log_file()

    logs_dir = logs_dir or pathlib.Path.cwd() / ".logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    started = datetime.now(UTC)
    slug = re.sub(r"[^A-Za-z0-9.\-]", "_", label)[:50]
    path = logs_dir / f"{slug}_{started:%Y-%m-%d_%H-%M-%S}.log"

    try:
        stream = open(path, "a", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        print(f"\033[31m✗ [Logger] Cannot open crawl log {path}: {exc}{_RESET}", file=sys.stderr)
        return None

    _log_file_var.set(stream)
    stream.write(f"# Crawl Log - {label}\n# Started: {started.isoformat()}\n")
    return path


def end_log_file() -> None:
    """Close the current crawl log file, if one is open."""
    stream = _log_file_var.get()
    if stream is None:
        return
    _log_file_var.set(None)
    try:
        stream.close()
    except OSError:
        print(f"\033[33m⚠ [Logger] Crawl log did not close cleanly{_RESET}", file=sys.stderr)


# ============================================================================
# Logger
# ============================================================================


class Logger:
    """Logger bound to one component name, with named timers."""

    def __init__(self, context: str = "DomCrawl") -> None:
        self._context = context

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        colour, symbol = _LEVELS[level]
        parts = [
            f"{_GRAY}[{_clock()}]{_RESET}",
            f"{colour}{symbol}{_RESET}",
            f"{_BOLD}[{self._context}]{_RESET}",
            message,
        ]
        if data:
            parts.extend(f"{_DIM}{key}={_RESET}{_render(value)}" for key, value in data.items())
        line = " ".join(parts)

        print(line, file=sys.stderr)
        stream = _log_file_var.get()
        if stream is not None:
            stream.write(_ANSI_RE.sub("", line) + "\n")
            stream.flush()

    def info(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("info", message, data)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("warn", message, data)

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("error", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        _timers()[f"{self._context}:{label}"] = (time.monotonic(), _clock())
        self._log("timing", f"Starting: {label}")

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop the timer *label* and log how long it ran.

        Returns the elapsed milliseconds, or ``0.0`` (with a warning)
        when the timer was never started.
        """
        entry = _timers().pop(f"{self._context}:{label}", None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0

        started, started_at = entry
        elapsed_ms = (time.monotonic() - started) * 1000
        self._log(
            "timing",
            f"{message or f'Completed: {label}'} {_DIM}took{_RESET} "
            f"\033[35m{_elapsed(elapsed_ms)}{_RESET} {_DIM}(started {started_at}){_RESET}",
        )
        return elapsed_ms


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
