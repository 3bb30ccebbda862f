"""
TeeLogger — the emission and routing core.

Owns the three pieces of logging state: the level table, the sink
registry (the "Tee") and the optional prefix provider. A message is
formatted once and then written to every active sink whose threshold
is at or below the message level:

    provider() + level prefix + formatted text + terminator

Each write is flushed immediately. Delivery order across sinks is not
part of the contract; order within one sink is.

The whole fan-out of a single emission, and every mutation, happens
under one re-entrant lock, so a TeeLogger may be shared between threads.
The lock is re-entrant because the registry and the level table report
their own problems back through the emitter.

Usage::

    tee = TeeLogger()
    tee.add_sink(sys.stderr, INFO)
    tee.add_sink_path("app.log", WARNING)
    tee.set_prefix_callback(epoch_prefix)
    tee.info("{}, {}!\\n", "Hello", "World")
    try:
        os.unlink("/")
    except OSError:
        tee.perror("unlink")
    tee.fatal("giving up\\n")   # never returns
"""

import os
import sys
import threading
from typing import Any, Callable, NoReturn, Optional, TextIO

from .errors import (
    AllocationFailure, InvalidConfiguration, InvalidPrefix, SinkUnavailable,
    describe_error, report_failure,
)
from .levels import DEBUG, ERROR, FATAL, INFO, WARNING, LevelTable
from .sinks import SinkEntry, SinkRegistry, open_sink_path


LINE_MAX = 2048
EXIT_FAILURE = 1

# Appended to the message by the p*() variants, perror()-style
ERRNO_SUFFIX = ": {strerror}\n"

PrefixProvider = Callable[[], str]


def _describe_handle(stream) -> str:
    if stream is None:
        return "-"
    try:
        return str(stream.fileno())
    except (OSError, ValueError):
        return "-"


class TeeLogger:
    """Fans leveled messages out to independently thresholded sinks.

    With no active sink every emission returns before formatting, so a
    freshly constructed or reset logger costs next to nothing.

    Args:
        line_max: Capacity of the formatted line, terminator slot included.
            Longer text is cut to ``line_max - 1`` characters.
        terminator: Appended after the formatted text on every write.
            Empty by default: lines end as the message gives them.
    """

    def __init__(self, line_max: int = LINE_MAX, terminator: str = ""):
        if int(line_max) < 2:
            raise InvalidConfiguration(f"line_max must be at least 2, got {line_max}")
        self.line_max = int(line_max)
        self.terminator = terminator
        self._levels = LevelTable()
        self._sinks = SinkRegistry()
        self._prefix_callback: Optional[PrefixProvider] = None
        self._line: Optional[str] = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------
    def emit(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        """Deliver a message to every sink whose threshold is <= level.

        Args:
            level: Message level (higher = more urgent)
            message: Format string (str.format with args/kwargs); taken
                literally when no arguments are given
            *args: Positional values for the placeholders
            **kwargs: Named values for the placeholders
        """
        with self._lock:
            self._levels.initialize()
            if self._line is None:
                self._line = ""

            if not self._sinks.has_active():
                return

            text = self._format(message, args, kwargs)
            self._line = text
            prefix = self._levels.lookup(level) or ""

            for entry in self._sinks.active():
                if not entry.accepts(level):
                    continue
                self._write(entry, f"{self._lead()}{prefix}{text}{self.terminator}")

    def _format(self, message, args, kwargs) -> str:
        message = str(message)
        if args or kwargs:
            try:
                text = message.format(*args, **kwargs)
            except (IndexError, KeyError, ValueError) as exc:
                report_failure("emit", "format", exc)
                text = message
        else:
            text = message
        return text[:self.line_max - 1]

    def _lead(self) -> str:
        if self._prefix_callback is None:
            return ""
        try:
            return str(self._prefix_callback())
        except Exception as exc:
            report_failure("emit", "prefix callback", exc)
            return ""

    @staticmethod
    def _write(entry: SinkEntry, line: str) -> None:
        try:
            entry.stream.write(line)
            entry.stream.flush()
        except (OSError, ValueError) as exc:
            report_failure("emit", "write", exc)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.emit(DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.emit(INFO, message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.emit(WARNING, message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.emit(ERROR, message, *args, **kwargs)

    def fatal(self, message: str, *args: Any, **kwargs: Any) -> NoReturn:
        """Emit at FATAL, then terminate with EXIT_FAILURE. Never returns."""
        self.emit(FATAL, message, *args, **kwargs)
        self._terminate()

    def _terminate(self) -> NoReturn:
        if threading.current_thread() is threading.main_thread():
            sys.exit(EXIT_FAILURE)
        # SystemExit would only end this thread
        self.close()
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.flush()
            except (AttributeError, OSError, ValueError):
                pass
        os._exit(EXIT_FAILURE)

    # OS-error-aware variants ------------------------------------------
    @staticmethod
    def _with_errno(message, args, kwargs, err):
        message = str(message)
        if not args and not kwargs:
            message = message.replace("{", "{{").replace("}", "}}")
        kwargs = dict(kwargs, strerror=describe_error(err))
        return message + ERRNO_SUFFIX, kwargs

    def pemit(self, level: int, message: str, *args: Any,
              err=None, **kwargs: Any) -> None:
        """emit() with ``: <OS error description>\\n`` appended.

        ``err`` may be an errno or an exception; by default the exception
        currently being handled is described.
        """
        if err is None:
            err = sys.exc_info()[1]
        message, kwargs = self._with_errno(message, args, kwargs, err)
        self.emit(level, message, *args, **kwargs)

    def pdebug(self, message: str, *args: Any, err=None, **kwargs: Any) -> None:
        self.pemit(DEBUG, message, *args, err=err, **kwargs)

    def pinfo(self, message: str, *args: Any, err=None, **kwargs: Any) -> None:
        self.pemit(INFO, message, *args, err=err, **kwargs)

    def pwarning(self, message: str, *args: Any, err=None, **kwargs: Any) -> None:
        self.pemit(WARNING, message, *args, err=err, **kwargs)

    def perror(self, message: str, *args: Any, err=None, **kwargs: Any) -> None:
        self.pemit(ERROR, message, *args, err=err, **kwargs)

    def pfatal(self, message: str, *args: Any, err=None, **kwargs: Any) -> NoReturn:
        self.pemit(FATAL, message, *args, err=err, **kwargs)
        self._terminate()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def add_sink(self, stream: Optional[TextIO], threshold: int = INFO) -> Optional[SinkEntry]:
        """Add stream to the Tee. None is silently ignored."""
        with self._lock:
            try:
                return self._sinks.add(stream, threshold, warn=self.warning)
            except InvalidConfiguration as exc:
                self.warning("add_sink: {}.\n", exc)
                return None
            except AllocationFailure as exc:
                self.error("add_sink: malloc: {}.\n", describe_error(exc.__cause__))
                return None

    def add_sink_path(self, path: Optional[str], threshold: int = INFO) -> Optional[SinkEntry]:
        """Add a sink by path: None is stderr, "-" is stdout, else append to file."""
        with self._lock:
            try:
                stream = open_sink_path(path)
            except SinkUnavailable as exc:
                self.warning("add_sink_path: {}.\n", exc)
                return None
            entry = self.add_sink(stream, threshold)
            if entry is None and stream is not sys.stdout and stream is not sys.stderr:
                stream.close()
            return entry

    def add_level(self, level: int, prefix: str) -> None:
        """Register a display prefix for level. Last registration wins."""
        with self._lock:
            try:
                self._levels.add(level, prefix)
            except InvalidPrefix:
                self.warning("add_level: invalid prefix.\n")
            except InvalidConfiguration as exc:
                self.warning("add_level: {}.\n", exc)
            except AllocationFailure as exc:
                report_failure("add_level", "realloc", exc.__cause__)

    def set_prefix_callback(self, fn: Optional[PrefixProvider]) -> None:
        """Install a prefix provider. None keeps the current one."""
        if fn is None:
            return
        with self._lock:
            if not callable(fn):
                self.warning("set_prefix_callback: {!r} is not callable.\n", fn)
                return
            self._prefix_callback = fn

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Back to a clean slate: no sinks, no provider, built-in levels.

        Owned sink streams are closed; stdout/stderr are only detached.
        """
        with self._lock:
            self._sinks.remove_all()
            self._prefix_callback = None
            self._levels.reset()

    def close(self) -> None:
        """Close every owned sink stream, as done at interpreter exit."""
        with self._lock:
            self._sinks.close_owned()

    def enabled_for(self, level: int) -> bool:
        """True if at least one active sink would receive level.

        Lets callers skip building expensive messages.
        """
        with self._lock:
            return any(e.accepts(level) for e in self._sinks.active())

    def dump(self, file: Optional[TextIO] = None) -> None:
        """Print internal state to stderr. For debugging logtee itself."""
        out = file if file is not None else sys.stderr
        with self._lock:
            lines = [f"pid: {os.getpid()} ppid: {os.getppid()} "
                     f"levels: {len(self._levels)} sinks: {len(self._sinks)}"]
            for i, entry in enumerate(self._sinks.slots):
                lines.append(f"  [{i}] fd: {_describe_handle(entry.stream)} "
                             f"level: {entry.threshold}")
        out.write("\n".join(lines) + "\n")
        out.flush()

    @property
    def levels(self) -> LevelTable:
        return self._levels

    @property
    def sinks(self) -> SinkRegistry:
        return self._sinks

    @property
    def prefix_callback(self) -> Optional[PrefixProvider]:
        return self._prefix_callback

    @property
    def last_line(self) -> Optional[str]:
        """Most recently formatted text, None before the first emission."""
        return self._line


# =============================================================================
# Module-level singleton
# =============================================================================

_tee: Optional[TeeLogger] = None


def init_tee(line_max: int = LINE_MAX, terminator: str = "") -> TeeLogger:
    """Install a fresh process-wide TeeLogger.

    A previously installed logger is reset first so its files are closed.

    Returns:
        The new TeeLogger instance
    """
    global _tee
    if _tee is not None:
        _tee.reset()
    _tee = TeeLogger(line_max=line_max, terminator=terminator)
    return _tee


def get_tee() -> TeeLogger:
    """Get the process-wide TeeLogger, creating a default one if needed."""
    global _tee
    if _tee is None:
        _tee = TeeLogger()
    return _tee
