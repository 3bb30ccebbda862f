"""
Sink registry — the "Tee".

A sink is any writable text stream paired with a minimum level. Every
active sink independently receives each message whose level is at or
above its threshold; registering the same stream twice means it gets
two copies.

Slots are never freed: remove_all() only empties them, and the next
add() refills the first empty slot before growing the list.

Sink spec syntax (CLI and config files):
    PATH[:LEVEL]

    Examples:
        app.log             # level 0
        app.log:2           # errors and above
        -:1                 # stdout, warnings and above
        :-1                 # stderr, everything down to debug
        C:\\logs\\app.log:2   # Windows path, trailing level still parsed
"""

import atexit
import os
import sys
import weakref
from dataclasses import dataclass
from typing import Callable, List, Optional, TextIO

from .errors import (
    AllocationFailure, InvalidConfiguration, SinkUnavailable, describe_error,
    report_failure,
)


WarnFn = Callable[[str], None]


def is_standard_stream(stream) -> bool:
    """True for the process's standard output/error streams.

    Those are only ever detached from the Tee, never closed.
    """
    if stream is None:
        return False
    if any(stream is s for s in (sys.stdout, sys.stderr,
                                 sys.__stdout__, sys.__stderr__)):
        return True
    try:
        return stream.fileno() in (1, 2)
    except (OSError, ValueError):
        return False


@dataclass
class SinkEntry:
    """One slot in the registry. ``stream is None`` means the slot is empty."""
    stream: Optional[TextIO] = None
    threshold: int = 0
    owned: bool = False

    @property
    def active(self) -> bool:
        return self.stream is not None

    def accepts(self, level: int) -> bool:
        return self.stream is not None and self.threshold <= level

    def clear(self) -> None:
        self.stream = None
        self.threshold = 0
        self.owned = False


@dataclass
class SinkSpec:
    """Parsed PATH[:LEVEL] spec. ``path`` None means stderr, "-" stdout."""
    path: Optional[str] = None
    level: int = 0


def parse_sink_spec(spec: str) -> SinkSpec:
    """Parse a sink spec string into a SinkSpec.

    The level is taken from the text after the last colon only when that
    text is an integer, so Windows drive letters survive untouched.

    Args:
        spec: Sink spec like "app.log:2", "-", or "C:\\logs\\app.log"

    Returns:
        SinkSpec with parsed values
    """
    path, level = spec, 0
    head, sep, tail = spec.rpartition(':')
    if sep:
        try:
            level = int(tail)
        except ValueError:
            pass
        else:
            path = head
    return SinkSpec(path=path or None, level=level)


def open_sink_path(path: Optional[str]) -> TextIO:
    """Resolve a sink path to a stream.

    None maps to stderr, "-" to stdout; anything else is opened for
    appending (created if absent), line-buffered.

    Raises:
        SinkUnavailable: the file could not be opened
    """
    if path is None:
        return sys.stderr
    if path == '-':
        return sys.stdout
    try:
        return open(path, 'a', encoding='utf-8', buffering=1)
    except OSError as exc:
        raise SinkUnavailable(path, exc) from exc


def _prepare_stream(stream, warn: Optional[WarnFn]) -> None:
    """Seek a new sink to its end and keep its descriptor out of children."""
    try:
        stream.seek(0, os.SEEK_END)
    except (OSError, ValueError) as exc:
        if warn:
            warn(f"add_sink: seek: {describe_error(exc)}.\n")

    try:
        fd = stream.fileno()
    except (OSError, ValueError):
        return  # in-memory stream, no descriptor to mark
    try:
        os.set_inheritable(fd, False)
    except OSError as exc:
        if warn:
            warn(f"add_sink: cloexec: {describe_error(exc)}.\n")


def _close_at_exit(ref) -> None:
    registry = ref()
    if registry is not None:
        registry.close_owned()


class SinkRegistry:
    """Growable list of SinkEntry slots.

    Starts with a single empty slot. Not thread-safe on its own; the
    TeeLogger serializes access.
    """

    def __init__(self):
        self._slots: List[SinkEntry] = [SinkEntry()]
        self._exit_hook_registered = False

    def add(self, stream, threshold: int, warn: Optional[WarnFn] = None) -> Optional[SinkEntry]:
        """Register stream at threshold. A None stream is ignored.

        Seek/cloexec failures are passed to ``warn`` and do not prevent
        registration.

        Raises:
            InvalidConfiguration: threshold is not an integer
            AllocationFailure: a new slot could not be allocated
        """
        if stream is None:
            return None
        try:
            threshold = int(threshold)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"invalid threshold {threshold!r}") from exc

        owned = not is_standard_stream(stream)
        if owned:
            _prepare_stream(stream, warn)

        for slot in self._slots:
            if not slot.active:
                entry = slot
                break
        else:
            try:
                entry = SinkEntry()
                self._slots.append(entry)
            except MemoryError as exc:
                raise AllocationFailure("cannot grow sink registry") from exc

        entry.stream = stream
        entry.threshold = threshold
        entry.owned = owned
        self._register_exit_hook()
        return entry

    def _register_exit_hook(self) -> None:
        if not self._exit_hook_registered:
            atexit.register(_close_at_exit, weakref.ref(self))
            self._exit_hook_registered = True

    def _close_entry(self, entry: SinkEntry) -> None:
        if entry.owned and entry.stream is not None:
            try:
                entry.stream.close()
            except OSError as exc:
                report_failure("remove_all", "close", exc)

    def remove_all(self) -> None:
        """Close owned streams and empty every slot; slots are kept."""
        for entry in self._slots:
            if entry.active:
                self._close_entry(entry)
            entry.clear()

    def close_owned(self) -> None:
        """Exit-time teardown: close and detach every owned stream."""
        for entry in self._slots:
            if entry.active and entry.owned:
                self._close_entry(entry)
                entry.clear()

    def active(self) -> List[SinkEntry]:
        return [e for e in self._slots if e.active]

    def has_active(self) -> bool:
        return any(e.active for e in self._slots)

    @property
    def slots(self) -> List[SinkEntry]:
        """All slots, empty ones included (copy)."""
        return list(self._slots)

    def __len__(self) -> int:
        return len(self._slots)
